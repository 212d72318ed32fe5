"""
Scrolling operations.

Provides:
- scroll_page: instant wheel scroll at a viewport point
- smooth_scroll: animated page-side scroll, awaited until it finishes
- scroll_to_element: bring an element into view and report whether it fits
"""
from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from ..base import INVALID_ARGUMENT, fail, ok, run_script, script_outcome, send_input
from ..js_helpers import MEASURE_ELEMENT_JS, SCROLL_INTO_VIEW_JS, SMOOTH_SCROLL_JS

if TYPE_CHECKING:
    from ...session_cdp import CdpSession

# Wheel events need a point inside the page; the top-left content area is always there.
WHEEL_ORIGIN = (100, 100)


def scroll_page(session: CdpSession, delta_x: float = 0, delta_y: float = 0) -> dict[str, Any]:
    """Scroll by (delta_x, delta_y) pixels with a single mouse-wheel event."""
    x, y = WHEEL_ORIGIN
    event = {"type": "mouseWheel", "x": x, "y": y, "deltaX": delta_x, "deltaY": delta_y}
    failure = send_input(session, "Input.dispatchMouseEvent", [event])
    if failure is not None:
        return failure
    return ok(deltaX=delta_x, deltaY=delta_y)


def smooth_scroll(session: CdpSession, delta_x: float = 0, delta_y: float = 0, duration_ms: int = 400) -> dict[str, Any]:
    if duration_ms < 0:
        return fail(INVALID_ARGUMENT, message="duration_ms must be >= 0")
    # The reply only arrives once the animation promise resolves.
    timeout = session.config.command_timeout + duration_ms / 1000.0
    value, failure = run_script(
        session,
        SMOOTH_SCROLL_JS,
        await_promise=True,
        timeout=timeout,
        dx=delta_x,
        dy=delta_y,
        duration=duration_ms,
    )
    if failure is not None:
        return failure
    return script_outcome(value, deltaX=delta_x, deltaY=delta_y, durationMs=duration_ms)


def scroll_to_element(session: CdpSession, selector: str) -> dict[str, Any]:
    """Smooth-scroll ``selector`` to the viewport centre, settle, then re-measure it."""
    value, failure = run_script(session, SCROLL_INTO_VIEW_JS, selector=selector)
    if failure is not None:
        return {**failure, "selector": selector}
    started = script_outcome(value, selector=selector)
    if not started["success"]:
        return started

    time.sleep(session.config.scroll_settle)

    value, failure = run_script(session, MEASURE_ELEMENT_JS, selector=selector)
    if failure is not None:
        return {**failure, "selector": selector}
    return script_outcome(value, selector=selector)
