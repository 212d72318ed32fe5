"""
Streaming HTTP tool handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...http_client import HttpClientError
from ..arguments import require_str
from ..streaming import StreamingProxy
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_streaming_http_request(
    manager: SessionManager, session: CdpSession | None, args: dict[str, Any]
) -> ToolResult:
    url = require_str(args, "url", "streaming_http_request")
    proxy = StreamingProxy(manager.config)
    try:
        result = proxy.request(
            url,
            method=str(args.get("method") or "GET"),
            headers=args.get("headers") if isinstance(args.get("headers"), dict) else None,
            body=args.get("body"),
        )
    except HttpClientError as exc:
        return ToolResult.error(f"HTTP request failed: {exc}", tool="streaming_http_request")
    return ToolResult.json(result)


NETWORK_HANDLERS: dict[str, tuple] = {
    "streaming_http_request": (handle_streaming_http_request, False),
}
