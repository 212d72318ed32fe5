"""
Browser window geometry.

Provides:
- get_window_bounds: Current position, size and state
- resize_window / move_window: Change size or position, keeping the rest
- maximize_window / minimize_window / restore_window: Change window state

Bounds are always read and written as a unit: partial updates re-read the
current bounds first so the untouched dimension is preserved.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from .base import INVALID_ARGUMENT, WINDOW_UNAVAILABLE, command, fail, ok

if TYPE_CHECKING:
    from ..session_cdp import CdpSession

WINDOW_STATES = ("normal", "minimized", "maximized", "fullscreen")


@dataclass
class WindowBounds:
    left: int
    top: int
    width: int
    height: int
    state: str = "normal"

    @classmethod
    def from_cdp(cls, bounds: dict[str, Any]) -> WindowBounds:
        return cls(
            left=int(bounds.get("left", 0)),
            top=int(bounds.get("top", 0)),
            width=int(bounds.get("width", 0)),
            height=int(bounds.get("height", 0)),
            state=str(bounds.get("windowState") or "normal"),
        )

    def geometry(self) -> dict[str, int]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _window_for_target(session: CdpSession) -> tuple[int, WindowBounds] | dict[str, Any]:
    """(window id, current bounds) for the session's target, or a failure."""
    params = {"targetId": session.target_id} if session.target_id else {}
    result, failure = command(session, "Browser.getWindowForTarget", params)
    if failure is not None:
        return failure
    window_id = result.get("windowId")
    bounds = result.get("bounds")
    if window_id is None or not isinstance(bounds, dict):
        return fail(WINDOW_UNAVAILABLE, message="Browser did not report a window for this target")
    return int(window_id), WindowBounds.from_cdp(bounds)


def _set_bounds(session: CdpSession, window_id: int, bounds: dict[str, Any]) -> dict[str, Any] | None:
    _, failure = command(session, "Browser.setWindowBounds", {"windowId": window_id, "bounds": bounds})
    return failure


def get_window_bounds(session: CdpSession) -> dict[str, Any]:
    found = _window_for_target(session)
    if isinstance(found, dict):
        return found
    window_id, bounds = found
    return ok(windowId=window_id, **bounds.to_dict())


def set_window_bounds(
    session: CdpSession,
    *,
    left: int | None = None,
    top: int | None = None,
    width: int | None = None,
    height: int | None = None,
) -> dict[str, Any]:
    """Apply a geometry change on top of the window's current bounds.

    A maximized/minimized window is restored to ``normal`` first; the browser
    refuses geometry changes in any other state.
    """
    for name, value in (("width", width), ("height", height)):
        if value is not None and value <= 0:
            return fail(INVALID_ARGUMENT, message=f"{name} must be positive")

    found = _window_for_target(session)
    if isinstance(found, dict):
        return found
    window_id, current = found

    if current.state != "normal":
        failure = _set_bounds(session, window_id, {"windowState": "normal"})
        if failure is not None:
            return failure

    wanted = WindowBounds(
        left=current.left if left is None else int(left),
        top=current.top if top is None else int(top),
        width=current.width if width is None else int(width),
        height=current.height if height is None else int(height),
    )
    failure = _set_bounds(session, window_id, wanted.geometry())
    if failure is not None:
        return failure
    return ok(windowId=window_id, **wanted.to_dict())


def resize_window(session: CdpSession, width: int | None = None, height: int | None = None) -> dict[str, Any]:
    if width is None and height is None:
        return fail(INVALID_ARGUMENT, message="width or height is required")
    return set_window_bounds(session, width=width, height=height)


def move_window(session: CdpSession, left: int | None = None, top: int | None = None) -> dict[str, Any]:
    if left is None and top is None:
        return fail(INVALID_ARGUMENT, message="left or top is required")
    return set_window_bounds(session, left=left, top=top)


def set_window_state(session: CdpSession, state: str) -> dict[str, Any]:
    if state not in WINDOW_STATES:
        return fail(INVALID_ARGUMENT, message=f"Unknown window state: {state}")
    found = _window_for_target(session)
    if isinstance(found, dict):
        return found
    window_id, _ = found
    failure = _set_bounds(session, window_id, {"windowState": state})
    if failure is not None:
        return failure
    return ok(windowId=window_id, state=state)


def maximize_window(session: CdpSession) -> dict[str, Any]:
    return set_window_state(session, "maximized")


def minimize_window(session: CdpSession) -> dict[str, Any]:
    return set_window_state(session, "minimized")


def restore_window(session: CdpSession) -> dict[str, Any]:
    return set_window_state(session, "normal")
