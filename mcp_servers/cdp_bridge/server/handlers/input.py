"""
Mouse, keyboard and scroll tool handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools
from ..arguments import optional_int, optional_number, require_number, require_str
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_click_at(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    result = tools.click_at(
        session,
        require_number(args, "x", "click_at"),
        require_number(args, "y", "click_at"),
        button=str(args.get("button") or "left"),
        click_count=optional_int(args, "click_count", "click_at", 1) or 1,
    )
    return ToolResult.from_outcome(result)


def handle_type_text(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    text = args.get("text")
    if not isinstance(text, str):
        text = require_str(args, "text", "type_text")
    return ToolResult.from_outcome(tools.type_text(session, text))


def handle_press_key(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    key = require_str(args, "key", "press_key")
    return ToolResult.from_outcome(tools.press_key(session, key))


def handle_key_combination(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    keys = require_str(args, "keys", "key_combination")
    return ToolResult.from_outcome(tools.key_combination(session, keys))


def handle_scroll_page(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    result = tools.scroll_page(
        session,
        optional_number(args, "delta_x", "scroll_page", 0) or 0,
        optional_number(args, "delta_y", "scroll_page", 0) or 0,
    )
    return ToolResult.from_outcome(result)


def handle_smooth_scroll(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    result = tools.smooth_scroll(
        session,
        optional_number(args, "delta_x", "smooth_scroll", 0) or 0,
        optional_number(args, "delta_y", "smooth_scroll", 0) or 0,
        duration_ms=optional_int(args, "duration_ms", "smooth_scroll", 400) or 0,
    )
    return ToolResult.from_outcome(result)


def handle_scroll_to_element(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "scroll_to_element")
    return ToolResult.from_outcome(tools.scroll_to_element(session, selector))


INPUT_HANDLERS: dict[str, tuple] = {
    "click_at": (handle_click_at, True),
    "type_text": (handle_type_text, True),
    "press_key": (handle_press_key, True),
    "key_combination": (handle_key_combination, True),
    "scroll_page": (handle_scroll_page, True),
    "smooth_scroll": (handle_smooth_scroll, True),
    "scroll_to_element": (handle_scroll_to_element, True),
}
