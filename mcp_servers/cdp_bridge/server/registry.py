"""
Tool registry with dispatch table.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .types import HandlerFunc, ToolResult

if TYPE_CHECKING:
    from ..session import SessionManager

logger = logging.getLogger("mcp.cdp_bridge.registry")


class ToolRegistry:
    """Registry for tool handlers; attaches the browser session lazily."""

    def __init__(self) -> None:
        # name -> (handler, requires_session)
        self._handlers: dict[str, tuple[HandlerFunc, bool]] = {}

    def register_many(self, handlers: dict[str, tuple[HandlerFunc, bool]]) -> None:
        self._handlers.update(handlers)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def dispatch(self, name: str, manager: SessionManager, arguments: dict[str, Any]) -> ToolResult:
        """
        Dispatch a tool call to its handler.

        Handlers that need the browser get the live session, connecting on
        first use; a connection failure is returned as the tool's error result.

        Raises:
            KeyError: If tool not found
        """
        handler_info = self._handlers.get(name)
        if handler_info is None:
            raise KeyError(f"Unknown tool: {name}")

        handler, requires_session = handler_info
        session = None
        if requires_session:
            session, failure = manager.ensure_session()
            if failure is not None:
                logger.info("tool=%s no session: %s", name, failure.get("message") or failure.get("error"))
                return ToolResult.from_outcome(failure)

        return handler(manager, session, arguments)

    def __len__(self) -> int:
        return len(self._handlers)


def create_default_registry() -> ToolRegistry:
    """Create registry with all default handlers."""
    from .handlers import ALL_HANDLERS

    registry = ToolRegistry()
    registry.register_many(ALL_HANDLERS)
    logger.info("Registered %d tool handlers", len(registry))
    return registry
