"""End-to-end wiring over a real WebSocket: discovery, connect, enable, round trip."""

from __future__ import annotations

import json
import threading
from typing import Any

import pytest
from websockets.exceptions import ConnectionClosed
from websockets.sync.server import ServerConnection, serve

from mcp_servers.cdp_bridge import tools
from mcp_servers.cdp_bridge.config import BridgeConfig
from mcp_servers.cdp_bridge.discovery import TabDiscovery
from mcp_servers.cdp_bridge.session import SessionManager

from conftest import DevToolsServer


class DebuggerSocket:
    """WebSocket endpoint answering every command, recording method names."""

    def __init__(self) -> None:
        self.methods: list[str] = []
        self.paths: list[str] = []
        self._server = serve(self._handle, "127.0.0.1", 0)
        self.port = int(self._server.socket.getsockname()[1])
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()

    def _handle(self, ws: ServerConnection) -> None:
        self.paths.append(ws.request.path if ws.request is not None else "")
        try:
            for raw in ws:
                message = json.loads(raw)
                self.methods.append(message["method"])
                ws.send(json.dumps({"id": message["id"], "result": self._result(message)}))
        except ConnectionClosed:
            return

    @staticmethod
    def _result(message: dict[str, Any]) -> dict[str, Any]:
        if message["method"] == "Runtime.evaluate":
            return {"result": {"type": "object", "value": {"title": "Live", "url": "about:blank", "readyState": "complete"}}}
        return {}


@pytest.fixture
def debugger():
    socket = DebuggerSocket()
    yield socket
    socket.stop()


@pytest.fixture
def live_devtools(debugger: DebuggerSocket):
    server = DevToolsServer(ws_base=f"ws://127.0.0.1:{debugger.port}/devtools/page").start()
    server.add_target("ABC", url="about:blank", title="Live")
    yield server
    server.stop()


def test_discovery_reports_socket_url(live_devtools: DevToolsServer, debugger: DebuggerSocket) -> None:
    (target,) = TabDiscovery("127.0.0.1", live_devtools.port).list_targets()
    assert target.id == "ABC"
    assert target.ws_url == f"ws://127.0.0.1:{debugger.port}/devtools/page/ABC"


def test_manager_connects_enables_and_round_trips(
    config: BridgeConfig, live_devtools: DevToolsServer, debugger: DebuggerSocket
) -> None:
    config.cdp_port = live_devtools.port
    manager = SessionManager(config)
    try:
        session, failure = manager.ensure_session()
        assert failure is None and session is not None
        assert session.connected

        info = tools.get_page_info(session)
        assert info["success"] is True
        assert info["title"] == "Live"
        assert info["targetId"] == "ABC"

        assert debugger.paths == ["/devtools/page/ABC"]
        assert debugger.methods[:3] == ["Page.enable", "Runtime.enable", "Input.enable"]
        assert debugger.methods[-1] == "Runtime.evaluate"
    finally:
        manager.shutdown()
    assert manager.session is None
