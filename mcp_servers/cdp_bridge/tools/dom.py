"""
DOM operations: screenshots, script evaluation, element lookup and clicking.

Provides:
- screenshot: Capture the viewport (base64 image payload)
- evaluate_script: Run an arbitrary expression
- find_element: Resolve a selector to its centre point
- click_element: Resolve a selector and click its centre
- get_interactive_elements: Visible clickable/typeable elements in the viewport
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import (
    EVALUATION_FAILED,
    INVALID_ARGUMENT,
    command,
    evaluate,
    exception_descriptor,
    fail,
    is_ok,
    ok,
    run_script,
    script_outcome,
)
from .input.mouse import click_at
from .js_helpers import ELEMENT_CENTER_JS, INTERACTIVE_ELEMENTS_JS

if TYPE_CHECKING:
    from ..session_cdp import CdpSession

IMAGE_FORMATS = ("png", "jpeg", "webp")


def screenshot(session: CdpSession, format: str = "png", quality: int = 80) -> dict[str, Any]:
    """Capture the visible viewport.

    Returns ``{"success": True, "data": <base64>, "format": ...}``; ``quality``
    only applies to lossy formats.
    """
    fmt = (format or "png").lower()
    if fmt == "jpg":
        fmt = "jpeg"
    if fmt not in IMAGE_FORMATS:
        return fail(INVALID_ARGUMENT, message=f"Unsupported image format: {format}")
    params: dict[str, Any] = {"format": fmt, "captureBeyondViewport": False}
    if fmt != "png":
        params["quality"] = max(0, min(100, int(quality)))
    result, failure = command(session, "Page.captureScreenshot", params)
    if failure is not None:
        return failure
    data = result.get("data")
    if not data:
        return fail(EVALUATION_FAILED, message="Browser returned no image data")
    return ok(data=data, format=fmt, mimeType=f"image/{fmt}")


def evaluate_script(
    session: CdpSession,
    expression: str,
    return_by_value: bool = True,
    await_promise: bool = False,
) -> dict[str, Any]:
    """Evaluate ``expression`` in the page.

    A script that throws is still a successful evaluation: the result carries
    ``exception`` with message/line/column alongside ``value`` (None).
    """
    payload, failure = evaluate(
        session,
        expression,
        return_by_value=return_by_value,
        await_promise=await_promise,
    )
    if failure is not None:
        return failure
    remote = payload.get("result") if isinstance(payload.get("result"), dict) else {}
    details = payload.get("exceptionDetails")
    return ok(
        value=remote.get("value"),
        type=remote.get("type"),
        subtype=remote.get("subtype"),
        description=remote.get("description"),
        objectId=remote.get("objectId"),
        exception=exception_descriptor(details) if isinstance(details, dict) else None,
    )


def find_element(session: CdpSession, selector: str) -> dict[str, Any]:
    """Resolve ``selector`` (``:contains(text)`` allowed) to the centre of its box.

    Failure reasons: element_not_found, element_not_visible, invalid_selector.
    """
    value, failure = run_script(session, ELEMENT_CENTER_JS, selector=selector)
    if failure is not None:
        return {**failure, "selector": selector}
    return script_outcome(value, selector=selector)


def click_element(session: CdpSession, selector: str) -> dict[str, Any]:
    """Click the centre of the element matching ``selector``."""
    found = find_element(session, selector)
    if not is_ok(found):
        return found
    clicked = click_at(session, found["x"], found["y"])
    if not is_ok(clicked):
        return {**clicked, "selector": selector}
    return found


def get_interactive_elements(session: CdpSession) -> dict[str, Any]:
    value, failure = run_script(session, INTERACTIVE_ELEMENTS_JS)
    if failure is not None:
        return failure
    elements = value if isinstance(value, list) else []
    return ok(elements=elements, count=len(elements))
