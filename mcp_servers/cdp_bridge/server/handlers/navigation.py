"""
Navigation tool handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools
from ..arguments import flag, require_str
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_navigate(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    url = require_str(args, "url", "navigate")
    return ToolResult.from_outcome(tools.navigate(session, url))


def handle_go_back(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.go_back(session))


def handle_go_forward(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.go_forward(session))


def handle_reload(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.reload_page(session, ignore_cache=flag(args, "ignore_cache")))


def handle_get_page_info(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.get_page_info(session))


def handle_get_page_content(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.get_page_content(session))


NAVIGATION_HANDLERS: dict[str, tuple] = {
    "navigate": (handle_navigate, True),
    "go_back": (handle_go_back, True),
    "go_forward": (handle_go_forward, True),
    "reload": (handle_reload, True),
    "get_page_info": (handle_get_page_info, True),
    "get_page_content": (handle_get_page_content, True),
}
