"""Opt-in buffer of console messages and uncaught exceptions seen on the event stream."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any

logger = logging.getLogger("mcp.cdp_bridge.console")

CONSOLE_EVENT = "Runtime.consoleAPICalled"
EXCEPTION_EVENT = "Runtime.exceptionThrown"
CAPTURED_EVENTS = frozenset({CONSOLE_EVENT, EXCEPTION_EVENT})


@dataclass(slots=True)
class ConsoleLogEntry:
    level: str
    text: str
    timestamp: int  # ms since epoch
    source: str  # "console" | "exception"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _remote_object_text(obj: Any) -> str:
    if not isinstance(obj, dict):
        return str(obj)
    if "value" in obj:
        value = obj["value"]
        return value if isinstance(value, str) else str(value)
    if "unserializableValue" in obj:
        return str(obj["unserializableValue"])
    if obj.get("description"):
        return str(obj["description"])
    return str(obj.get("type") or "")


def _timestamp_ms(raw: Any) -> int:
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return int(time.time() * 1000)


def entry_from_event(event: dict[str, Any]) -> ConsoleLogEntry | None:
    """Translate a console/exception event into an entry (None for other events)."""
    method = event.get("method")
    params = event.get("params") if isinstance(event.get("params"), dict) else {}
    if method == CONSOLE_EVENT:
        args = params.get("args") if isinstance(params.get("args"), list) else []
        return ConsoleLogEntry(
            level=str(params.get("type") or "log"),
            text=" ".join(_remote_object_text(a) for a in args),
            timestamp=_timestamp_ms(params.get("timestamp")),
            source="console",
        )
    if method == EXCEPTION_EVENT:
        details = params.get("exceptionDetails") if isinstance(params.get("exceptionDetails"), dict) else {}
        exc = details.get("exception") if isinstance(details.get("exception"), dict) else {}
        text = exc.get("description") or details.get("text") or "Uncaught exception"
        return ConsoleLogEntry(
            level="error",
            text=str(text),
            timestamp=_timestamp_ms(params.get("timestamp")),
            source="exception",
        )
    return None


class ConsoleCapture:
    """Thread-safe capture buffer.

    ``max_entries`` bounds memory (oldest entries are dropped); 0 disables the
    bound, in which case callers must drain regularly.
    """

    def __init__(self, max_entries: int = 1000) -> None:
        self.max_entries = max(0, int(max_entries))
        self._lock = threading.Lock()
        self._entries: deque[ConsoleLogEntry] | None = None
        self._dropped = 0

    @property
    def enabled(self) -> bool:
        return self._entries is not None

    def enable(self) -> None:
        with self._lock:
            self._entries = deque(maxlen=self.max_entries or None)
            self._dropped = 0

    def disable(self) -> None:
        with self._lock:
            self._entries = None
            self._dropped = 0

    def record(self, event: dict[str, Any]) -> bool:
        """Append the entry for ``event`` if capture is on; returns True when stored."""
        if self._entries is None:
            return False
        entry = entry_from_event(event)
        if entry is None:
            return False
        with self._lock:
            entries = self._entries
            if entries is None:
                return False
            if entries.maxlen is not None and len(entries) == entries.maxlen:
                self._dropped += 1
            entries.append(entry)
        return True

    def drain(self, clear_after: bool = False) -> dict[str, Any]:
        with self._lock:
            entries = self._entries
            if entries is None:
                return {"enabled": False, "logs": [], "count": 0, "dropped": 0}
            logs = [e.to_dict() for e in entries]
            dropped = self._dropped
            if clear_after:
                entries.clear()
                self._dropped = 0
        return {"enabled": True, "logs": logs, "count": len(logs), "dropped": dropped}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries) if self._entries is not None else 0
