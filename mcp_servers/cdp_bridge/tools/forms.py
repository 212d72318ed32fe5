"""
Form interaction operations.

Provides:
- focus_element: Focus an element
- clear_input: Clear an input, textarea or contentEditable value
- fill_form_field: focus -> clear -> type, stopping at the first failure
- select_option: Select a <select> option by value or visible text
- check_checkbox: Set a checkbox/radio to a checked state
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import is_ok, run_script, script_outcome
from .input.keyboard import type_text
from .js_helpers import CHECK_CHECKBOX_JS, CLEAR_ELEMENT_JS, FOCUS_ELEMENT_JS, SELECT_OPTION_JS

if TYPE_CHECKING:
    from ..session_cdp import CdpSession


def _element_call(session: CdpSession, template: str, selector: str, **params: Any) -> dict[str, Any]:
    value, failure = run_script(session, template, selector=selector, **params)
    if failure is not None:
        return {**failure, "selector": selector}
    return script_outcome(value, selector=selector)


def focus_element(session: CdpSession, selector: str) -> dict[str, Any]:
    return _element_call(session, FOCUS_ELEMENT_JS, selector)


def clear_input(session: CdpSession, selector: str) -> dict[str, Any]:
    """Empty the field through its native value setter and fire ``input``."""
    return _element_call(session, CLEAR_ELEMENT_JS, selector)


def fill_form_field(session: CdpSession, selector: str, value: str) -> dict[str, Any]:
    """Focus, clear, then type ``value`` character by character.

    The first failing step's result is returned unchanged; later steps are not attempted.
    """
    focused = focus_element(session, selector)
    if not is_ok(focused):
        return focused
    cleared = clear_input(session, selector)
    if not is_ok(cleared):
        return cleared
    typed = type_text(session, value)
    if not is_ok(typed):
        return {**typed, "selector": selector}
    return {"success": True, "selector": selector, "value": value, "length": len(value)}


def select_option(session: CdpSession, selector: str, value: str) -> dict[str, Any]:
    """Select the option whose value (or, failing that, trimmed text) equals ``value``.

    Reasons: element_not_found, wrong_element_type, option_not_found.
    """
    return _element_call(session, SELECT_OPTION_JS, selector, value=str(value))


def check_checkbox(session: CdpSession, selector: str, checked: bool = True) -> dict[str, Any]:
    return _element_call(session, CHECK_CHECKBOX_JS, selector, checked=bool(checked))
