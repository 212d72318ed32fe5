"""
Mouse input operations.

Provides coordinate clicks built from press/release pairs.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..base import ok, send_input

if TYPE_CHECKING:
    from ...session_cdp import CdpSession


def mouse_events(x: float, y: float, button: str = "left", click_count: int = 1) -> list[dict[str, Any]]:
    return [
        {"type": event_type, "x": x, "y": y, "button": button, "clickCount": click_count}
        for event_type in ("mousePressed", "mouseReleased")
    ]


def click_at(session: CdpSession, x: float, y: float, button: str = "left", click_count: int = 1) -> dict[str, Any]:
    """Press and release ``button`` at viewport coordinates (x, y)."""
    failure = send_input(session, "Input.dispatchMouseEvent", mouse_events(x, y, button, click_count))
    if failure is not None:
        return failure
    return ok(x=x, y=y, button=button, clickCount=click_count)
