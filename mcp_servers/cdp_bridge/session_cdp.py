"""Debugging-protocol session layer.

One ``CdpSession`` owns exactly one WebSocket to one target. A reader thread
(``websocket.WebSocketApp.run_forever``) is the only writer of the correlation
tables; callers block on their own single-use slot:

- command replies carry ``id`` and are matched to a ``PendingResponse``
  (replies nobody waits for are cached briefly for a late ``wait_for_response``)
- events carry ``method`` and no ``id`` and fulfil every ``EventWaiter``
  registered for that name at arrival time (no replay for late waiters)

Waiters never poll: each slot is a ``threading.Event`` with a deadline.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import websocket

from .config import BridgeConfig
from .console import CAPTURED_EVENTS, ConsoleCapture

logger = logging.getLogger("mcp.cdp_bridge.session")

# Fire-and-forget on open: page lifecycle, script runtime, input.
ENABLE_COMMANDS: tuple[str, ...] = ("Page.enable", "Runtime.enable", "Input.enable")
LOAD_EVENT = "Page.loadEventFired"
MAX_CACHED_RESPONSES = 1000

AppFactory = Callable[..., Any]


class _Slot:
    """Single-use rendezvous: set once (message or abandon reason), read once."""

    __slots__ = ("key", "message", "reason", "_ready")

    def __init__(self, key: Any) -> None:
        self.key = key
        self.message: dict[str, Any] | None = None
        self.reason: str | None = None
        self._ready = threading.Event()

    def fulfill(self, message: dict[str, Any]) -> bool:
        # Callers hold the owning table's lock, so check-then-set is atomic.
        if self._ready.is_set():
            return False
        self.message = message
        self._ready.set()
        return True

    def abandon(self, reason: str) -> None:
        if self._ready.is_set():
            return
        self.reason = reason
        self._ready.set()

    def _block(self, timeout: float) -> dict[str, Any] | None:
        self._ready.wait(max(0.0, float(timeout)))
        return self.message


class PendingResponse(_Slot):
    """Slot for the reply to one command id."""


class EventWaiter(_Slot):
    """Slot for the next occurrence of one event name.

    Deregisters itself after ``wait`` returns, whatever the outcome.
    """

    __slots__ = ("_owner",)

    def __init__(self, event_name: str, owner: CdpSession) -> None:
        super().__init__(event_name)
        self._owner = owner

    @property
    def event_name(self) -> str:
        return str(self.key)

    def wait(self, timeout: float) -> dict[str, Any] | None:
        try:
            return self._block(timeout)
        finally:
            self._owner._remove_waiter(self)

    def cancel(self) -> None:
        self._owner._remove_waiter(self)


class CdpSession:
    """Live connection state for one target: socket, id counter, correlation tables."""

    def __init__(
        self,
        config: BridgeConfig | None = None,
        *,
        console: ConsoleCapture | None = None,
        app_factory: AppFactory | None = None,
    ) -> None:
        self.config = config or BridgeConfig()
        self.console = console if console is not None else ConsoleCapture(self.config.console_max_entries)
        self.ws_url = ""
        self.target_id: str | None = None
        self.connected = False
        self.closed_reason: str | None = None

        self._app_factory: AppFactory = app_factory or websocket.WebSocketApp
        self._app: Any = None
        self._thread: threading.Thread | None = None
        self._opened = threading.Event()

        # Serialises id allocation with the socket write so ids hit the wire in order.
        self._send_lock = threading.Lock()
        self._last_id = 0

        self._pending_lock = threading.Lock()
        self._pending: dict[int, PendingResponse] = {}
        self._responses: dict[int, tuple[float, dict[str, Any]]] = {}

        self._waiters_lock = threading.Lock()
        self._waiters: dict[str, list[EventWaiter]] = {}

    def __enter__(self) -> CdpSession:
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()

    # ─────────────────────────────────────────────────────────────────────────
    # Connection lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def connect(self, ws_url: str, target_id: str | None = None) -> bool:
        """Open the socket and wait (bounded) for the open signal."""
        if not ws_url:
            return False
        if self._app is not None:
            self.disconnect(reason="superseded")

        self.ws_url = ws_url
        self.target_id = target_id
        self.closed_reason = None
        self._opened.clear()

        app = self._app_factory(
            ws_url,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )
        self._app = app
        self._thread = threading.Thread(target=self._run, args=(app,), name="cdp-session-reader", daemon=True)
        self._thread.start()

        if not self._opened.wait(self.config.connect_timeout) or not self.connected:
            logger.warning("could not open %s within %.1fs", ws_url, self.config.connect_timeout)
            self.disconnect(reason="connect_failed")
            return False
        return True

    def disconnect(self, reason: str = "disconnected") -> None:
        """Close the socket and wake every outstanding waiter. Idempotent."""
        app = self._app
        self._app = None
        was_connected = self.connected
        self.connected = False
        if self.closed_reason is None or was_connected:
            self.closed_reason = reason
        if app is not None:
            try:
                app.close()
            except (websocket.WebSocketException, OSError) as exc:
                logger.debug("socket close failed: %s", exc)
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        self._abandon_all(reason)
        if was_connected:
            logger.info("session %s closed (%s)", self.target_id or self.ws_url, reason)

    def _run(self, app: Any) -> None:
        try:
            app.run_forever(suppress_origin=True)
        except Exception:  # noqa: BLE001
            logger.exception("reader loop crashed")
        finally:
            if app is self._app:
                self._mark_closed("closed")

    def _on_open(self, ws: Any) -> None:
        if ws is not self._app:
            return
        self.connected = True
        logger.info("connected to %s", self.ws_url)
        for method in ENABLE_COMMANDS:
            self.send(method)
        self._opened.set()

    def _on_message(self, ws: Any, message: str | bytes) -> None:
        if ws is not self._app:
            return
        self.dispatch(message)

    def _on_error(self, ws: Any, error: Exception) -> None:
        if ws is not self._app:
            return
        logger.warning("transport error on %s: %s", self.ws_url, error)
        self.connected = False

    def _on_close(self, ws: Any, status_code: int | None = None, reason: str | None = None) -> None:
        if ws is not self._app:
            return
        logger.info("socket closed by peer (code=%s reason=%s)", status_code, reason)
        self._mark_closed("closed")

    def _mark_closed(self, reason: str) -> None:
        self.connected = False
        if self.closed_reason is None:
            self.closed_reason = reason
        self._opened.set()
        self._abandon_all(reason)

    # ─────────────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def last_command_id(self) -> int:
        return self._last_id

    def send(self, method: str, params: dict[str, Any] | None = None) -> int | None:
        """Write one command frame without waiting. None when not connected."""
        sent = self._write(method, params, expect_reply=False)
        return sent[0] if sent else None

    def send_and_wait(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any] | None:
        """Send a command and block for its correlated reply; None on timeout."""
        sent = self._write(method, params, expect_reply=True)
        if sent is None or sent[1] is None:
            return None
        slot = sent[1]
        return self._await_response(slot, self.config.command_timeout if timeout is None else timeout)

    def wait_for_response(self, command_id: int, timeout: float | None = None) -> dict[str, Any] | None:
        """Wait for the reply to a command issued earlier with ``send``.

        A reply that already arrived is served from the short-lived cache.
        """
        with self._pending_lock:
            cached = self._responses.pop(command_id, None)
            if cached is not None:
                return cached[1]
            if not self.connected or command_id in self._pending or command_id > self._last_id:
                return None
            slot = PendingResponse(command_id)
            self._pending[command_id] = slot
        return self._await_response(slot, self.config.command_timeout if timeout is None else timeout)

    def _write(
        self, method: str, params: dict[str, Any] | None, *, expect_reply: bool
    ) -> tuple[int, PendingResponse | None] | None:
        send_failed = False
        with self._send_lock:
            app = self._app
            if not self.connected or app is None:
                logger.debug("not connected, dropping %s", method)
                return None
            self._last_id += 1
            command_id = self._last_id
            slot: PendingResponse | None = None
            if expect_reply:
                # Registered before the write so a fast reply cannot be missed.
                slot = PendingResponse(command_id)
                with self._pending_lock:
                    self._pending[command_id] = slot
            frame = json.dumps({"id": command_id, "method": method, "params": params or {}})
            try:
                app.send(frame)
            except (websocket.WebSocketException, OSError) as exc:
                logger.warning("send %s failed: %s", method, exc)
                with self._pending_lock:
                    self._pending.pop(command_id, None)
                self.connected = False
                send_failed = True
        if send_failed:
            # Abandon slots outside the send lock.
            self._mark_closed("closed")
            return None
        return command_id, slot

    def _await_response(self, slot: PendingResponse, timeout: float) -> dict[str, Any] | None:
        try:
            message = slot._block(timeout)
        finally:
            with self._pending_lock:
                self._pending.pop(slot.key, None)
                self._responses.pop(slot.key, None)
        if message is None:
            logger.info("command %s: no reply (%s)", slot.key, slot.reason or "timeout")
        return message

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def expect_event(self, event_name: str) -> EventWaiter:
        """Register a waiter now; only events arriving after this call fulfil it."""
        waiter = EventWaiter(event_name, self)
        with self._waiters_lock:
            self._waiters.setdefault(event_name, []).append(waiter)
        return waiter

    def wait_for_event(self, event_name: str, timeout: float | None = None) -> dict[str, Any] | None:
        """Block for the next ``event_name`` event; None on timeout or when not connected."""
        if not self.connected:
            return None
        waiter = self.expect_event(event_name)
        return waiter.wait(self.config.command_timeout if timeout is None else timeout)

    def waiter_count(self, event_name: str | None = None) -> int:
        with self._waiters_lock:
            if event_name is not None:
                return len(self._waiters.get(event_name, ()))
            return sum(len(v) for v in self._waiters.values())

    def _remove_waiter(self, waiter: EventWaiter) -> None:
        with self._waiters_lock:
            waiters = self._waiters.get(waiter.event_name)
            if not waiters:
                return
            if waiter in waiters:
                waiters.remove(waiter)
            if not waiters:
                del self._waiters[waiter.event_name]

    # ─────────────────────────────────────────────────────────────────────────
    # Inbound dispatch
    # ─────────────────────────────────────────────────────────────────────────

    def dispatch(self, raw: str | bytes) -> None:
        """Route one inbound frame. Malformed frames are logged and dropped."""
        try:
            message = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("dropping malformed frame (%s): %.200r", exc, raw)
            return
        if not isinstance(message, dict):
            logger.warning("dropping non-object frame: %.200r", raw)
            return
        if "id" in message:
            self._deliver_response(message)
        else:
            self._deliver_event(message)

    def _deliver_response(self, message: dict[str, Any]) -> None:
        command_id = message.get("id")
        if isinstance(command_id, bool) or not isinstance(command_id, int):
            logger.warning("dropping reply with non-integer id: %r", command_id)
            return
        now = time.monotonic()
        with self._pending_lock:
            slot = self._pending.pop(command_id, None)
            if slot is not None and slot.fulfill(message):
                return
            self._responses[command_id] = (now, message)
            self._purge_responses(now)

    def _purge_responses(self, now: float) -> None:
        ttl = self.config.response_cache_ttl
        expired = [cid for cid, (ts, _) in self._responses.items() if now - ts > ttl]
        for cid in expired:
            del self._responses[cid]
        overflow = len(self._responses) - MAX_CACHED_RESPONSES
        if overflow > 0:
            for cid in list(self._responses)[:overflow]:
                del self._responses[cid]

    def _deliver_event(self, message: dict[str, Any]) -> None:
        method = message.get("method")
        if not isinstance(method, str) or not method:
            logger.warning("dropping frame with neither id nor method")
            return
        with self._waiters_lock:
            for waiter in self._waiters.get(method, ()):
                waiter.fulfill(message)
        if method in CAPTURED_EVENTS:
            self.console.record(message)
        elif method == LOAD_EVENT:
            logger.debug("page loaded (%s)", self.target_id or self.ws_url)

    def _abandon_all(self, reason: str) -> None:
        with self._pending_lock:
            slots = list(self._pending.values())
            self._pending.clear()
            self._responses.clear()
            for slot in slots:
                slot.abandon(reason)
        with self._waiters_lock:
            waiters = [w for group in self._waiters.values() for w in group]
            self._waiters.clear()
            for waiter in waiters:
                waiter.abandon(reason)


__all__ = ["CdpSession", "EventWaiter", "PendingResponse", "ENABLE_COMMANDS", "LOAD_EVENT"]
