"""
Script injection.

An injected script runs on every future document load of the target and is
also evaluated once against the current page. The returned identifier is the
only handle for removing it again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import EVALUATION_FAILED, INVALID_ARGUMENT, command, evaluate, exception_descriptor, fail, ok

if TYPE_CHECKING:
    from ..session_cdp import CdpSession


def inject_script(session: CdpSession, source: str) -> dict[str, Any]:
    if not source:
        return fail(INVALID_ARGUMENT, message="script source is required")
    result, failure = command(session, "Page.addScriptToEvaluateOnNewDocument", {"source": source})
    if failure is not None:
        return failure
    identifier = result.get("identifier")
    if not identifier:
        return fail(EVALUATION_FAILED, message="Browser returned no script identifier")

    # Registration already succeeded; a failing immediate run is reported, not fatal.
    payload, failure = evaluate(session, source)
    current: dict[str, Any]
    if failure is not None:
        current = {"evaluated": False, "error": failure.get("error")}
    else:
        details = payload.get("exceptionDetails")
        current = {"evaluated": True}
        if isinstance(details, dict):
            current["exception"] = exception_descriptor(details)
    return ok(identifier=str(identifier), currentPage=current)


def remove_injected_script(session: CdpSession, identifier: str) -> dict[str, Any]:
    if not identifier:
        return fail(INVALID_ARGUMENT, message="identifier is required")
    _, failure = command(session, "Page.removeScriptToEvaluateOnNewDocument", {"identifier": identifier})
    if failure is not None:
        return failure
    return ok(identifier=identifier, removed=True)
