"""
Window geometry tool handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools
from ..arguments import optional_int
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_get_window_bounds(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.get_window_bounds(session))


def handle_resize_window(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    result = tools.resize_window(
        session,
        width=optional_int(args, "width", "resize_window"),
        height=optional_int(args, "height", "resize_window"),
    )
    return ToolResult.from_outcome(result)


def handle_move_window(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    result = tools.move_window(
        session,
        left=optional_int(args, "left", "move_window"),
        top=optional_int(args, "top", "move_window"),
    )
    return ToolResult.from_outcome(result)


def handle_maximize_window(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.maximize_window(session))


def handle_minimize_window(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.minimize_window(session))


def handle_restore_window(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.restore_window(session))


WINDOW_HANDLERS: dict[str, tuple] = {
    "get_window_bounds": (handle_get_window_bounds, True),
    "resize_window": (handle_resize_window, True),
    "move_window": (handle_move_window, True),
    "maximize_window": (handle_maximize_window, True),
    "minimize_window": (handle_minimize_window, True),
    "restore_window": (handle_restore_window, True),
}
