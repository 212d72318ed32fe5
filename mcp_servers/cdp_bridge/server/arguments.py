"""
Argument coercion for tool handlers.

Missing or mistyped arguments raise ``SmartToolError``; the server turns that
into an error result without touching the browser.
"""

from __future__ import annotations

from typing import Any

from ..tools.base import SmartToolError


def require_str(args: dict[str, Any], name: str, tool: str) -> str:
    value = args.get(name)
    if not isinstance(value, str) or not value:
        raise SmartToolError(
            tool=tool,
            action="validate",
            reason=f"Missing required argument: {name}",
            suggestion=f"Pass '{name}' as a non-empty string",
        )
    return value


def optional_number(args: dict[str, Any], name: str, tool: str, default: float | None = None) -> float | None:
    value = args.get(name, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise SmartToolError(
                tool=tool,
                action="validate",
                reason=f"Argument {name} must be a number",
                suggestion=f"Pass '{name}' as a number",
                details={name: value},
            ) from exc
    return value


def require_number(args: dict[str, Any], name: str, tool: str) -> float:
    value = optional_number(args, name, tool)
    if value is None:
        raise SmartToolError(
            tool=tool,
            action="validate",
            reason=f"Missing required argument: {name}",
            suggestion=f"Pass '{name}' as a number",
        )
    return value


def optional_int(args: dict[str, Any], name: str, tool: str, default: int | None = None) -> int | None:
    value = optional_number(args, name, tool, default)
    return None if value is None else int(value)


def flag(args: dict[str, Any], name: str, default: bool = False) -> bool:
    value = args.get(name, default)
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
