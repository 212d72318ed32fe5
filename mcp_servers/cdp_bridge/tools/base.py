"""
Base utilities for automation operations.

Provides:
- Failure reason strings and the ok()/fail() result shapes
- SmartToolError: structured error for invalid tool arguments
- evaluate()/run_script(): Runtime.evaluate with failure mapping
- send_input(): ordered input-event batches
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .js_helpers import render_script

if TYPE_CHECKING:
    from ..session_cdp import CdpSession

# Failure reasons (machine-readable, stable).
NOT_CONNECTED = "not_connected"
TIMEOUT = "timeout"
PROTOCOL_ERROR = "protocol_error"
SCRIPT_EXCEPTION = "script_exception"
EVALUATION_FAILED = "evaluation_failed"
ELEMENT_NOT_FOUND = "element_not_found"
ELEMENT_NOT_VISIBLE = "element_not_visible"
INVALID_SELECTOR = "invalid_selector"
WRONG_ELEMENT_TYPE = "wrong_element_type"
OPTION_NOT_FOUND = "option_not_found"
NOT_TEXT_INPUT = "not_text_input"
NAVIGATION_FAILED = "navigation_failed"
LOAD_TIMEOUT = "load_timeout"
NO_HISTORY = "no_history"
TAB_NOT_FOUND = "tab_not_found"
CONNECT_FAILED = "connect_failed"
CLOSE_FAILED = "close_failed"
CREATE_FAILED = "create_failed"
WINDOW_UNAVAILABLE = "window_unavailable"
INVALID_ARGUMENT = "invalid_argument"


def ok(**data: Any) -> dict[str, Any]:
    return {"success": True, **data}


def fail(reason: str, **details: Any) -> dict[str, Any]:
    return {"success": False, "error": reason, **{k: v for k, v in details.items() if v is not None}}


def is_ok(result: dict[str, Any]) -> bool:
    return bool(result.get("success"))


@dataclass
class SmartToolError(Exception):
    """Structured error for a tool call that cannot be attempted (bad arguments)."""

    tool: str
    action: str
    reason: str
    suggestion: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.tool}] {self.action} failed: {self.reason}. Suggestion: {self.suggestion}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": True,
            "tool": self.tool,
            "action": self.action,
            "reason": self.reason,
            "suggestion": self.suggestion,
            "details": self.details,
        }


def no_reply(session: CdpSession, **details: Any) -> dict[str, Any]:
    """Failure for a command that got no reply: timeout if still connected."""
    return fail(TIMEOUT if session.connected else NOT_CONNECTED, **details)


def protocol_failure(response: dict[str, Any], **details: Any) -> dict[str, Any]:
    error = response.get("error")
    if isinstance(error, dict):
        return fail(PROTOCOL_ERROR, message=str(error.get("message") or error), code=error.get("code"), **details)
    return fail(PROTOCOL_ERROR, message=str(error), **details)


def command(
    session: CdpSession,
    method: str,
    params: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> tuple[dict[str, Any], dict[str, Any] | None]:
    """Send and wait; returns (result, None) or ({}, failure)."""
    if not session.connected:
        return {}, fail(NOT_CONNECTED)
    response = session.send_and_wait(method, params, timeout)
    if response is None:
        return {}, no_reply(session, method=method)
    if "error" in response:
        return {}, protocol_failure(response, method=method)
    result = response.get("result")
    return (result if isinstance(result, dict) else {}), None


def exception_descriptor(details: dict[str, Any]) -> dict[str, Any]:
    exc = details.get("exception") if isinstance(details.get("exception"), dict) else {}
    message = exc.get("description") or details.get("text") or "Script threw an exception"
    return {
        "message": str(message),
        "line": details.get("lineNumber"),
        "column": details.get("columnNumber"),
    }


def evaluate(
    session: CdpSession,
    expression: str,
    *,
    return_by_value: bool = True,
    await_promise: bool = False,
    timeout: float | None = None,
) -> tuple[dict[str, Any], dict[str, Any] | None]:
    """Runtime.evaluate; returns the raw ``result`` payload (value + exceptionDetails) or a failure."""
    params: dict[str, Any] = {"expression": expression, "returnByValue": return_by_value}
    if await_promise:
        params["awaitPromise"] = True
    return command(session, "Runtime.evaluate", params, timeout)


def run_script(
    session: CdpSession,
    template: str,
    *,
    await_promise: bool = False,
    timeout: float | None = None,
    **params: Any,
) -> tuple[Any, dict[str, Any] | None]:
    """Render ``template`` with escaped ``params``, evaluate by value, map exceptions to failures."""
    expression = render_script(template, **params)
    payload, failure = evaluate(session, expression, await_promise=await_promise, timeout=timeout)
    if failure is not None:
        return None, failure
    details = payload.get("exceptionDetails")
    if isinstance(details, dict):
        return None, fail(SCRIPT_EXCEPTION, **exception_descriptor(details))
    remote = payload.get("result") if isinstance(payload.get("result"), dict) else {}
    return remote.get("value"), None


def script_outcome(value: Any, **context: Any) -> dict[str, Any]:
    """Translate a page-side ``{ok, reason, ...}`` object into ok()/fail()."""
    if not isinstance(value, dict):
        return fail(EVALUATION_FAILED, **context)
    data = {k: v for k, v in value.items() if k not in {"ok", "reason"}}
    merged = {**data, **context}
    if value.get("ok"):
        return ok(**merged)
    return fail(str(value.get("reason") or EVALUATION_FAILED), **merged)


def send_input(session: CdpSession, method: str, events: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Dispatch input events in order; only the last one is awaited.

    The browser answers commands in order, so one reply covers the batch.
    Returns None on success, a failure otherwise.
    """
    if not events:
        return None
    if not session.connected:
        return fail(NOT_CONNECTED)
    for params in events[:-1]:
        if session.send(method, params) is None:
            return fail(NOT_CONNECTED)
    _, failure = command(session, method, events[-1])
    return failure
