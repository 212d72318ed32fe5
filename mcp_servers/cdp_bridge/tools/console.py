"""
Console capture controls for the current session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import ok

if TYPE_CHECKING:
    from ..session_cdp import CdpSession


def enable_console_logging(session: CdpSession) -> dict[str, Any]:
    """Start (or restart with an empty buffer) capturing console output."""
    session.console.enable()
    return ok(enabled=True, maxEntries=session.console.max_entries or None)


def disable_console_logging(session: CdpSession) -> dict[str, Any]:
    session.console.disable()
    return ok(enabled=False)


def get_console_logs(session: CdpSession, clear: bool = False) -> dict[str, Any]:
    return ok(**session.console.drain(clear_after=clear))
