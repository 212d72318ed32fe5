"""
Type definitions for tool results and handlers.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..session import SessionManager
    from ..session_cdp import CdpSession


@dataclass(slots=True)
class ToolContent:
    """Single content item in tool response."""

    type: str  # "text" or "image"
    text: str | None = None
    data: str | None = None  # base64 for images
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.type == "image":
            return {"type": "image", "data": self.data, "mimeType": self.mime_type}
        return {"type": "text", "text": self.text}


@dataclass(slots=True)
class ToolResult:
    """Result of a tool execution."""

    content: list[ToolContent] = field(default_factory=list)
    is_error: bool = False
    # Raw payload for tests and in-process callers; not part of the wire format.
    data: Any | None = None

    @classmethod
    def json(cls, data: Any) -> ToolResult:
        return cls(content=[ToolContent(type="text", text=_dumps(data))], data=data)

    @classmethod
    def error(
        cls,
        message: str,
        *,
        tool: str | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ToolResult:
        payload: dict[str, Any] = {"success": False, "error": message}
        if tool:
            payload["tool"] = tool
        if suggestion:
            payload["suggestion"] = suggestion
        if details:
            payload["details"] = details
        return cls(content=[ToolContent(type="text", text=_dumps(payload))], is_error=True, data=payload)

    @classmethod
    def image(cls, data_b64: str, mime_type: str = "image/png") -> ToolResult:
        """Single image content; an empty payload becomes an error."""
        if not data_b64:
            return cls.error("evaluation_failed", details={"message": "Screenshot data is empty"})
        return cls(content=[ToolContent(type="image", data=data_b64, mime_type=mime_type)])

    @classmethod
    def from_outcome(cls, outcome: dict[str, Any]) -> ToolResult:
        """Wrap an operation's success/failure dict; failures keep their reason string."""
        return cls(
            content=[ToolContent(type="text", text=_dumps(outcome))],
            is_error=not outcome.get("success"),
            data=outcome,
        )

    def to_content_list(self) -> list[dict[str, Any]]:
        return [c.to_dict() for c in self.content]


def _dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2, default=str)


# (manager, session or None, arguments) -> result
HandlerFunc = Callable[["SessionManager", "CdpSession | None", dict[str, Any]], ToolResult]
