"""
Form tool handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools
from ..arguments import flag, require_str
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def _value(args: dict[str, Any], tool: str) -> str:
    value = args.get("value")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value
    return require_str(args, "value", tool)


def handle_fill_form_field(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "fill_form_field")
    return ToolResult.from_outcome(tools.fill_form_field(session, selector, _value(args, "fill_form_field")))


def handle_focus_element(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "focus_element")
    return ToolResult.from_outcome(tools.focus_element(session, selector))


def handle_clear_input(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "clear_input")
    return ToolResult.from_outcome(tools.clear_input(session, selector))


def handle_select_option(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "select_option")
    return ToolResult.from_outcome(tools.select_option(session, selector, _value(args, "select_option")))


def handle_check_checkbox(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "check_checkbox")
    return ToolResult.from_outcome(tools.check_checkbox(session, selector, checked=flag(args, "checked", True)))


FORM_HANDLERS: dict[str, tuple] = {
    "fill_form_field": (handle_fill_form_field, True),
    "focus_element": (handle_focus_element, True),
    "clear_input": (handle_clear_input, True),
    "select_option": (handle_select_option, True),
    "check_checkbox": (handle_check_checkbox, True),
}
