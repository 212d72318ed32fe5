from __future__ import annotations

from mcp_servers.cdp_bridge.console import (
    CONSOLE_EVENT,
    EXCEPTION_EVENT,
    ConsoleCapture,
    entry_from_event,
)


def _console(kind: str, *values: object, ts: float = 1700000000000.0) -> dict:
    return {
        "method": CONSOLE_EVENT,
        "params": {"type": kind, "args": [{"type": "string", "value": v} for v in values], "timestamp": ts},
    }


def test_console_event_becomes_entry() -> None:
    entry = entry_from_event(_console("warn", "disk", 95))
    assert entry is not None
    assert entry.level == "warn"
    assert entry.text == "disk 95"
    assert entry.timestamp == 1700000000000
    assert entry.source == "console"


def test_exception_event_becomes_error_entry() -> None:
    entry = entry_from_event(
        {
            "method": EXCEPTION_EVENT,
            "params": {
                "timestamp": 5.0,
                "exceptionDetails": {"text": "Uncaught", "exception": {"description": "TypeError: x is undefined"}},
            },
        }
    )
    assert entry is not None
    assert (entry.level, entry.source) == ("error", "exception")
    assert entry.text == "TypeError: x is undefined"


def test_other_events_are_ignored() -> None:
    assert entry_from_event({"method": "Page.loadEventFired", "params": {}}) is None


def test_capture_records_only_while_enabled() -> None:
    capture = ConsoleCapture()
    assert capture.record(_console("log", "early")) is False

    capture.enable()
    assert capture.record(_console("log", "kept")) is True
    drained = capture.drain()
    assert drained["enabled"] is True
    assert [e["text"] for e in drained["logs"]] == ["kept"]

    capture.disable()
    assert capture.drain() == {"enabled": False, "logs": [], "count": 0, "dropped": 0}


def test_drain_clear_after_empties_buffer() -> None:
    capture = ConsoleCapture()
    capture.enable()
    capture.record(_console("log", "a"))
    assert capture.drain(clear_after=True)["count"] == 1
    assert capture.drain()["count"] == 0


def test_enable_restarts_with_empty_buffer() -> None:
    capture = ConsoleCapture()
    capture.enable()
    capture.record(_console("log", "a"))
    capture.enable()
    assert len(capture) == 0


def test_bound_drops_oldest_and_counts() -> None:
    capture = ConsoleCapture(max_entries=2)
    capture.enable()
    for text in ("one", "two", "three"):
        capture.record(_console("log", text))
    drained = capture.drain()
    assert [e["text"] for e in drained["logs"]] == ["two", "three"]
    assert drained["dropped"] == 1


def test_zero_bound_is_unbounded() -> None:
    capture = ConsoleCapture(max_entries=0)
    capture.enable()
    for i in range(2500):
        capture.record(_console("log", str(i)))
    assert len(capture) == 2500
