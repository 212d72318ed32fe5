"""
Script injection and console capture tool handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools
from ..arguments import flag, require_str
from ..types import ToolResult

if TYPE_CHECKING:
    from ...session import SessionManager
    from ...session_cdp import CdpSession


def handle_inject_script(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    source = require_str(args, "script", "inject_script")
    return ToolResult.from_outcome(tools.inject_script(session, source))


def handle_remove_injected_script(
    manager: SessionManager, session: CdpSession, args: dict[str, Any]
) -> ToolResult:
    identifier = require_str(args, "identifier", "remove_injected_script")
    return ToolResult.from_outcome(tools.remove_injected_script(session, identifier))


def handle_enable_console_logging(
    manager: SessionManager, session: CdpSession, args: dict[str, Any]
) -> ToolResult:
    return ToolResult.from_outcome(tools.enable_console_logging(session))


def handle_disable_console_logging(
    manager: SessionManager, session: CdpSession, args: dict[str, Any]
) -> ToolResult:
    return ToolResult.from_outcome(tools.disable_console_logging(session))


def handle_get_console_logs(manager: SessionManager, session: CdpSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.from_outcome(tools.get_console_logs(session, clear=flag(args, "clear")))


SCRIPT_HANDLERS: dict[str, tuple] = {
    "inject_script": (handle_inject_script, True),
    "remove_injected_script": (handle_remove_injected_script, True),
    "enable_console_logging": (handle_enable_console_logging, True),
    "disable_console_logging": (handle_disable_console_logging, True),
    "get_console_logs": (handle_get_console_logs, True),
}
