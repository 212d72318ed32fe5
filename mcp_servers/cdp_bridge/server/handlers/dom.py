"""
DOM tool handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools
from ..arguments import flag, optional_int, require_str
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_screenshot(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    result = tools.screenshot(
        session,
        format=str(args.get("format") or "png"),
        quality=optional_int(args, "quality", "screenshot", 80) or 0,
    )
    if not result.get("success"):
        return ToolResult.from_outcome(result)
    return ToolResult.image(result["data"], result["mimeType"])


def handle_evaluate_js(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    expression = require_str(args, "expression", "evaluate_js")
    result = tools.evaluate_script(
        session,
        expression,
        return_by_value=flag(args, "return_by_value", True),
        await_promise=flag(args, "await_promise"),
    )
    return ToolResult.from_outcome(result)


def handle_find_element(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "find_element")
    return ToolResult.from_outcome(tools.find_element(session, selector))


def handle_click_element(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    selector = require_str(args, "selector", "click_element")
    return ToolResult.from_outcome(tools.click_element(session, selector))


def handle_get_interactive_elements(
    manager: SessionManager, session: CdpSession, args: dict[str, Any]
) -> ToolResult:
    return ToolResult.from_outcome(tools.get_interactive_elements(session))


DOM_HANDLERS: dict[str, tuple] = {
    "screenshot": (handle_screenshot, True),
    "evaluate_js": (handle_evaluate_js, True),
    "find_element": (handle_find_element, True),
    "click_element": (handle_click_element, True),
    "get_interactive_elements": (handle_get_interactive_elements, True),
}
