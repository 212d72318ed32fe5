from __future__ import annotations

import json
import socket
import threading
import urllib.parse
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any

import pytest

from mcp_servers.cdp_bridge.config import BridgeConfig
from mcp_servers.cdp_bridge.session_cdp import CdpSession

# Handler result meaning "never answer this command".
NO_REPLY = object()


class FakeApp:
    """In-process stand-in for ``websocket.WebSocketApp`` driven by a FakeBrowser."""

    def __init__(
        self,
        url: str,
        *,
        browser: FakeBrowser,
        on_open: Callable[..., Any] | None = None,
        on_message: Callable[..., Any] | None = None,
        on_error: Callable[..., Any] | None = None,
        on_close: Callable[..., Any] | None = None,
    ) -> None:
        self.url = url
        self.browser = browser
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        self._closed = threading.Event()

    def run_forever(self, **kwargs: Any) -> None:
        if self.browser.refuse_connections:
            return
        if self.on_open:
            self.on_open(self)
        self._closed.wait()

    def send(self, frame: str) -> None:
        if self.browser.break_sends:
            raise OSError("broken pipe")
        self.browser.receive(self, json.loads(frame))

    def close(self) -> None:
        self._closed.set()

    def push(self, message: dict[str, Any] | str) -> None:
        raw = message if isinstance(message, str) else json.dumps(message)
        if self.on_message:
            self.on_message(self, raw)

    def drop(self) -> None:
        """Simulate the peer closing the socket."""
        if self.on_close:
            self.on_close(self, 1006, "gone")
        self._closed.set()


class FakeBrowser:
    """Scriptable debugging endpoint.

    ``on(method, reply)`` registers a reply: a result dict, a callable taking
    the command params, ``NO_REPLY`` or ``{"__error__": {...}}``. Unregistered
    methods answer ``{}``. Events queued with ``emit_after_reply`` are pushed
    right after the current reply.
    """

    def __init__(self) -> None:
        self.refuse_connections = False
        self.break_sends = False
        self.apps: list[FakeApp] = []
        self.commands: list[dict[str, Any]] = []
        self._replies: dict[str, Any] = {}
        self._queued: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self.window = {"left": 10, "top": 20, "width": 800, "height": 600, "windowState": "normal"}
        self._install_window()

    def app_factory(self, url: str, **callbacks: Any) -> FakeApp:
        app = FakeApp(url, browser=self, **callbacks)
        self.apps.append(app)
        return app

    @property
    def app(self) -> FakeApp:
        return self.apps[-1]

    def on(self, method: str, reply: Any) -> None:
        self._replies[method] = reply

    def emit_after_reply(self, event: dict[str, Any]) -> None:
        self._queued.append(event)

    def methods(self) -> list[str]:
        with self._lock:
            return [c["method"] for c in self.commands]

    def calls(self, method: str) -> list[dict[str, Any]]:
        with self._lock:
            return [c["params"] for c in self.commands if c["method"] == method]

    def receive(self, app: FakeApp, message: dict[str, Any]) -> None:
        with self._lock:
            self.commands.append(message)
        reply = self._replies.get(message["method"], {})
        if callable(reply):
            reply = reply(message.get("params") or {})
        if reply is NO_REPLY:
            return
        if isinstance(reply, dict) and "__error__" in reply:
            app.push({"id": message["id"], "error": reply["__error__"]})
        else:
            app.push({"id": message["id"], "result": reply})
        queued, self._queued = self._queued, []
        for event in queued:
            app.push(event)

    def _install_window(self) -> None:
        def get_window(params: dict[str, Any]) -> dict[str, Any]:
            return {"windowId": 1, "bounds": dict(self.window)}

        def set_window(params: dict[str, Any]) -> dict[str, Any]:
            self.window.update(params.get("bounds") or {})
            return {}

        self.on("Browser.getWindowForTarget", get_window)
        self.on("Browser.setWindowBounds", set_window)


def remote_value(value: Any) -> dict[str, Any]:
    """Runtime.evaluate result carrying ``value`` by value."""
    return {"result": {"type": "object" if isinstance(value, (dict, list)) else type(value).__name__, "value": value}}


def script_reply(responder: Callable[[str], Any]) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Runtime.evaluate handler: ``responder(expression)`` returns the page-side value."""

    def reply(params: dict[str, Any]) -> dict[str, Any]:
        return remote_value(responder(params.get("expression", "")))

    return reply


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(
        connect_timeout=2.0,
        command_timeout=0.5,
        navigate_timeout=0.5,
        load_timeout=0.3,
        scroll_settle=0.0,
        response_cache_ttl=30.0,
    )


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def session(config: BridgeConfig, browser: FakeBrowser):
    s = CdpSession(config, app_factory=browser.app_factory)
    assert s.connect("ws://127.0.0.1:9222/devtools/page/ABC", "ABC")
    yield s
    s.disconnect()


# ─────────────────────────────────────────────────────────────────────────────
# Discovery endpoint
# ─────────────────────────────────────────────────────────────────────────────


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


class DevToolsServer:
    """Minimal ``/json/*`` endpoint backed by an in-memory target list."""

    def __init__(self, ws_base: str = "ws://127.0.0.1:9222/devtools/page") -> None:
        self.ws_base = ws_base
        self.targets: list[dict[str, Any]] = []
        self.requests: list[tuple[str, str]] = []
        self.activated: list[str] = []
        self._counter = 0
        self._httpd = HTTPServer(("127.0.0.1", 0), self._handler_class())
        self.port = int(self._httpd.server_address[1])
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    def add_target(self, target_id: str, url: str = "about:blank", type: str = "page", title: str = "") -> None:
        self.targets.append(
            {
                "id": target_id,
                "title": title or target_id,
                "url": url,
                "type": type,
                "webSocketDebuggerUrl": f"{self.ws_base}/{target_id}",
            }
        )

    def start(self) -> DevToolsServer:
        self._thread.start()
        return self

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()

    def _handler_class(self) -> type[BaseHTTPRequestHandler]:
        server = self

        class Handler(BaseHTTPRequestHandler):
            def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
                return

            def _reply(self, status: int, body: Any) -> None:
                data = (body if isinstance(body, str) else json.dumps(body)).encode()
                self.send_response(status)
                self.send_header("Content-Length", str(len(data)))
                self.end_headers()
                self.wfile.write(data)

            def _route(self) -> None:
                parsed = urllib.parse.urlsplit(self.path)
                server.requests.append((self.command, parsed.path))
                ids = [t["id"] for t in server.targets]
                if parsed.path == "/json/list" and self.command == "GET":
                    self._reply(200, server.targets)
                elif parsed.path == "/json/new":
                    if self.command != "PUT":
                        self._reply(405, "Using unsafe HTTP verb GET to invoke /json/new.")
                        return
                    server._counter += 1
                    new_id = f"NEW{server._counter}"
                    server.add_target(new_id, url=urllib.parse.unquote(parsed.query) or "about:blank")
                    self._reply(200, server.targets[-1])
                elif parsed.path.startswith("/json/close/"):
                    target_id = parsed.path.rsplit("/", 1)[-1]
                    if target_id not in ids:
                        self._reply(404, f"No such target id: {target_id}")
                        return
                    server.targets = [t for t in server.targets if t["id"] != target_id]
                    self._reply(200, "Target is closing")
                elif parsed.path.startswith("/json/activate/"):
                    target_id = parsed.path.rsplit("/", 1)[-1]
                    if target_id not in ids:
                        self._reply(404, f"No such target id: {target_id}")
                        return
                    server.activated.append(target_id)
                    self._reply(200, "Target activated")
                else:
                    self._reply(404, "Unknown path")

            def do_GET(self) -> None:  # noqa: N802
                self._route()

            def do_PUT(self) -> None:  # noqa: N802
                self._route()

        return Handler


@pytest.fixture
def devtools():
    server = DevToolsServer().start()
    yield server
    server.stop()
