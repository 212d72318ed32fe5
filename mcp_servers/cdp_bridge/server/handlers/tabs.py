"""
Tab management tool handlers.

These talk to the discovery endpoint through the manager and do not need an
attached session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..arguments import require_str
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_list_tabs(manager: SessionManager, session: CdpSession | None, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(manager.list_tabs())


def handle_new_tab(manager: SessionManager, session: CdpSession | None, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(manager.new_tab(str(args.get("url") or "about:blank")))


def handle_close_tab(manager: SessionManager, session: CdpSession | None, args: dict[str, Any]) -> ToolResult:
    tab_id = args.get("tab_id")
    return ToolResult.from_outcome(manager.close_tab(str(tab_id) if tab_id else None))


def handle_switch_tab(manager: SessionManager, session: CdpSession | None, args: dict[str, Any]) -> ToolResult:
    tab_id = require_str(args, "tab_id", "switch_tab")
    return ToolResult.from_outcome(manager.switch_tab(tab_id))


TAB_HANDLERS: dict[str, tuple] = {
    "list_tabs": (handle_list_tabs, False),
    "new_tab": (handle_new_tab, False),
    "close_tab": (handle_close_tab, False),
    "switch_tab": (handle_switch_tab, False),
}
