"""Protocol and tool contract definitions.

Single source of truth for:
- supported protocol versions
- server identity
- capabilities advertised by initialize
- the tool list
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .definitions import STREAMING_TOOL_DEFINITION, TOOL_DEFINITIONS

if TYPE_CHECKING:
    from ..config import BridgeConfig

SERVER_INFO: dict[str, str] = {"name": "cdp-bridge", "version": "0.1.0"}

SUPPORTED_PROTOCOL_VERSIONS = ["2025-06-18", "2024-11-05"]
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]
DEFAULT_PROTOCOL_VERSION = LATEST_PROTOCOL_VERSION

CAPABILITIES: dict[str, Any] = {
    "tools": {"listChanged": False},
}

INSTRUCTIONS = (
    "Drives one tab of a locally running Chrome started with --remote-debugging-port. "
    "The first tool call attaches to the first open page; use list_tabs/switch_tab to move. "
    "Selectors are CSS, optionally ending in :contains(text). "
    "Failures come back with isError and a machine-readable reason such as "
    "element_not_found, timeout or not_connected."
)


def select_protocol(requested: Any) -> str:
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return DEFAULT_PROTOCOL_VERSION


def initialize_result(protocol: str) -> dict[str, Any]:
    return {
        "protocolVersion": protocol,
        "serverInfo": SERVER_INFO,
        "capabilities": CAPABILITIES,
        "instructions": INSTRUCTIONS,
    }


def tools_list(config: BridgeConfig) -> list[dict[str, Any]]:
    """Tool catalog; the streaming tool only appears when an endpoint is configured."""
    if config.streaming_endpoint:
        return [*TOOL_DEFINITIONS, STREAMING_TOOL_DEFINITION]
    return list(TOOL_DEFINITIONS)
