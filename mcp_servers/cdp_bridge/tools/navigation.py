"""
Navigation operations.

Provides:
- navigate: Load a URL and wait for the page-load event
- go_back / go_forward: Step through the navigation history
- reload_page: Reload the current page
- get_page_info / get_page_content: Title, URL, ready state / full HTML
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import (
    EVALUATION_FAILED,
    INVALID_ARGUMENT,
    LOAD_TIMEOUT,
    NAVIGATION_FAILED,
    NO_HISTORY,
    NOT_CONNECTED,
    command,
    fail,
    ok,
    run_script,
)
from ..session_cdp import LOAD_EVENT
from .js_helpers import PAGE_CONTENT_JS, PAGE_INFO_JS

if TYPE_CHECKING:
    from ..session_cdp import CdpSession


def _navigate_and_wait(
    session: CdpSession,
    method: str,
    params: dict[str, Any],
    **context: Any,
) -> dict[str, Any]:
    """Issue a navigation command, then wait for the load event it triggers.

    The load waiter is registered before the command is sent so a fast load
    cannot slip between the reply and the wait.
    """
    if not session.connected:
        return fail(NOT_CONNECTED, **context)
    config = session.config
    waiter = session.expect_event(LOAD_EVENT)
    result, failure = command(session, method, params, config.navigate_timeout)
    if failure is not None:
        waiter.cancel()
        return {**failure, **context}
    error_text = result.get("errorText")
    if error_text:
        waiter.cancel()
        return fail(NAVIGATION_FAILED, message=str(error_text), **context)
    if waiter.wait(config.load_timeout) is None:
        return fail(LOAD_TIMEOUT if session.connected else NOT_CONNECTED, **context)
    return ok(frameId=result.get("frameId"), loaderId=result.get("loaderId"), **context)


def navigate(session: CdpSession, url: str) -> dict[str, Any]:
    """Navigate to ``url``; success only if the browser accepts it and the page loads in time.

    Not retried on failure.
    """
    if not url:
        return fail(INVALID_ARGUMENT, message="url is required")
    return _navigate_and_wait(session, "Page.navigate", {"url": url}, url=url)


def _history_step(session: CdpSession, step: int) -> dict[str, Any]:
    history, failure = command(session, "Page.getNavigationHistory")
    if failure is not None:
        return failure
    entries = history.get("entries") if isinstance(history.get("entries"), list) else []
    index = int(history.get("currentIndex", -1)) + step
    if index < 0 or index >= len(entries):
        return fail(NO_HISTORY, message="Already at the " + ("start" if step < 0 else "end") + " of history")
    entry = entries[index]
    return _navigate_and_wait(
        session,
        "Page.navigateToHistoryEntry",
        {"entryId": entry.get("id")},
        url=entry.get("url"),
    )


def go_back(session: CdpSession) -> dict[str, Any]:
    return _history_step(session, -1)


def go_forward(session: CdpSession) -> dict[str, Any]:
    return _history_step(session, 1)


def reload_page(session: CdpSession, ignore_cache: bool = False) -> dict[str, Any]:
    return _navigate_and_wait(session, "Page.reload", {"ignoreCache": bool(ignore_cache)}, ignoreCache=bool(ignore_cache))


def get_page_info(session: CdpSession) -> dict[str, Any]:
    value, failure = run_script(session, PAGE_INFO_JS)
    if failure is not None:
        return failure
    if not isinstance(value, dict):
        return fail(EVALUATION_FAILED)
    return ok(
        title=value.get("title", ""),
        url=value.get("url", ""),
        readyState=value.get("readyState"),
        targetId=session.target_id,
    )


def get_page_content(session: CdpSession) -> dict[str, Any]:
    """Return ``document.documentElement.outerHTML``."""
    value, failure = run_script(session, PAGE_CONTENT_JS)
    if failure is not None:
        return failure
    if not isinstance(value, str):
        return fail(EVALUATION_FAILED)
    return ok(content=value, length=len(value))
