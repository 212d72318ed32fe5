"""
MCP server bridging tool calls to a Chrome tab over the DevTools Protocol.

This module provides the entry point and line-delimited JSON-RPC handling.
Tool dispatch is handled via the registry in server/registry.py.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .config import BridgeConfig
from .http_client import HttpClientError
from .server.contract import (
    DEFAULT_PROTOCOL_VERSION,
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    initialize_result,
    select_protocol,
    tools_list,
)
from .server.registry import create_default_registry
from .server.streaming import StreamingProxy
from .server.types import ToolResult
from .session import SessionManager
from .tools.base import SmartToolError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("mcp.cdp_bridge")

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601

__all__ = [
    "SUPPORTED_PROTOCOL_VERSIONS",
    "LATEST_PROTOCOL_VERSION",
    "DEFAULT_PROTOCOL_VERSION",
    "McpServer",
    "main",
]


def _write_message(payload: dict[str, Any]) -> None:
    """Write one JSON-RPC message to stdout."""
    data = json.dumps(payload, ensure_ascii=False)
    sys.stdout.buffer.write((data + "\n").encode())
    sys.stdout.buffer.flush()


def _read_message() -> dict[str, Any] | None:
    """Read one JSON-RPC message from stdin.

    Returns None at end of input and ``{}`` for a blank line.

    Raises:
        ValueError: the line is not a JSON object
    """
    line = sys.stdin.buffer.readline()
    if not line:
        return None
    line = line.strip()
    if not line:
        return {}
    if os.environ.get("MCP_TRACE"):
        logger.info("recv %s", line.decode(errors="replace"))
    msg = json.loads(line.decode())
    if not isinstance(msg, dict):
        raise ValueError("JSON-RPC message must be an object")
    return msg


class McpServer:
    """MCP server with registry-based tool dispatch."""

    def __init__(self, config: BridgeConfig | None = None, manager: SessionManager | None = None) -> None:
        self.config = config or BridgeConfig.from_env()
        self.manager = manager or SessionManager(self.config)
        self.registry = create_default_registry()
        self.streaming = StreamingProxy(self.config)

    def handle_initialize(self, request_id: Any, params: dict[str, Any] | None = None) -> None:
        requested = (params or {}).get("protocolVersion") if isinstance(params, dict) else None
        protocol = select_protocol(requested)
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": initialize_result(protocol)})

    def handle_list_tools(self, request_id: Any) -> None:
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": {"tools": tools_list(self.config)}})

    def handle_call_tool(self, request_id: Any, name: str, arguments: dict[str, Any]) -> None:
        """Run one tool; every failure becomes an error result, never a crash."""
        logger.info("tool=%s args=%s", name, sorted(arguments))

        try:
            if not name:
                result = ToolResult.error("Missing tool name")
            elif not self.registry.has(name):
                result = ToolResult.error(f"Unknown tool: {name}", tool=name)
            else:
                result = self.registry.dispatch(name, self.manager, arguments)
        except SmartToolError as e:
            logger.info("tool_error tool=%s action=%s reason=%s", e.tool, e.action, e.reason)
            result = ToolResult.error(e.reason, tool=e.tool, suggestion=e.suggestion, details=e.details)
        except HttpClientError as e:
            logger.info("http_error %s", str(e))
            result = ToolResult.error(str(e), tool=name)
        except Exception as exc:
            logger.exception("tool_call_failed")
            result = ToolResult.error(str(exc), tool=name)

        if result.is_error:
            logger.info("tool=%s failed: %s", name, (result.data or {}).get("error"))

        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {"content": result.to_content_list(), "isError": result.is_error},
            }
        )

    def handle_parse_error(self, exc: Exception) -> None:
        logger.warning("unparseable message: %s", exc)
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": None,
                "error": {"code": PARSE_ERROR, "message": f"Parse error: {exc}"},
            }
        )

    def dispatch(self, message: dict[str, Any]) -> None:
        """Dispatch an incoming JSON-RPC message to the appropriate handler."""
        if not message:
            return

        method = message.get("method")
        request_id = message.get("id")
        params = message.get("params") or {}

        if method == "initialize":
            self.handle_initialize(request_id, params)
        elif method in ("notifications/initialized", "initialized"):
            return
        elif method == "tools/list":
            self.handle_list_tools(request_id)
        elif method == "tools/call":
            name = params.get("name")
            arguments = params.get("arguments") or {}
            self.handle_call_tool(request_id, name or "", arguments if isinstance(arguments, dict) else {})
        elif method == "streaming/http":
            _write_message(self.streaming.handle_rpc(request_id, params))
        elif method == "ping":
            _write_message({"jsonrpc": "2.0", "id": request_id, "result": {}})
        elif request_id is None:
            logger.debug("ignoring notification %s", method)
        else:
            _write_message(
                {
                    "jsonrpc": "2.0",
                    "id": request_id,
                    "error": {"code": METHOD_NOT_FOUND, "message": f"Method {method} not found"},
                }
            )

    def serve(self) -> None:
        """Process stdin until end of input, then release the browser session."""
        try:
            while True:
                try:
                    message = _read_message()
                except ValueError as exc:
                    self.handle_parse_error(exc)
                    continue
                if message is None:
                    break
                self.dispatch(message)
        finally:
            self.manager.shutdown()


def main() -> None:
    """Main entry point for the MCP server."""
    server = McpServer()
    logger.info(
        "cdp-bridge starting (host=%s port=%s)",
        server.config.cdp_host,
        server.config.cdp_port or "auto",
    )
    server.serve()


if __name__ == "__main__":
    main()
