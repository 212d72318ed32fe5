"""
Tab management and ownership of the single live session.

Architecture:
- SessionManager: owns the config, the discovery client and at most one
  CdpSession; lists, creates, closes and switches targets
- Tool handlers obtain the session through ``ensure_session()``, which
  connects lazily to the first page target on first use

Switching targets fully tears down the previous session (its waiters are
woken with a "superseded" reason) before the next one connects.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from .config import BridgeConfig
from .discovery import TabDiscovery, Target, detect_cdp_port
from .http_client import HttpClientError
from .session_cdp import CdpSession
from .tools.base import CLOSE_FAILED, CONNECT_FAILED, CREATE_FAILED, NOT_CONNECTED, TAB_NOT_FOUND, fail, ok

logger = logging.getLogger("mcp.cdp_bridge.tabs")

SessionFactory = Callable[[BridgeConfig], CdpSession]


class SessionManager:
    """Single owner of the live ``CdpSession``. Thread-safe."""

    def __init__(
        self,
        config: BridgeConfig | None = None,
        *,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self.config = config or BridgeConfig.from_env()
        self._session_factory: SessionFactory = session_factory or CdpSession
        self._lock = threading.RLock()
        self._session: CdpSession | None = None
        self._discovery: TabDiscovery | None = None
        # Last successfully attached target; survives transport loss, cleared when that tab is closed.
        self._attached_id: str | None = None

    @property
    def session(self) -> CdpSession | None:
        return self._session

    @property
    def current_target_id(self) -> str | None:
        session = self._session
        return session.target_id if session is not None and session.connected else None

    # ─────────────────────────────────────────────────────────────────────────
    # Discovery
    # ─────────────────────────────────────────────────────────────────────────

    def discovery(self) -> TabDiscovery | None:
        """Discovery client for the configured (or autodetected) port; None if no browser answers."""
        with self._lock:
            if self._discovery is not None:
                return self._discovery
            port = self.config.cdp_port
            if not port:
                port = detect_cdp_port(
                    self.config.cdp_host,
                    self.config.candidate_ports,
                    timeout=self.config.discovery_timeout,
                )
                if port is None:
                    return None
            self._discovery = TabDiscovery(self.config.cdp_host, port, timeout=self.config.discovery_timeout)
            return self._discovery

    def _no_browser(self) -> dict[str, Any]:
        ports = [self.config.cdp_port] if self.config.cdp_port else self.config.candidate_ports
        return fail(
            CONNECT_FAILED,
            message=f"No debugging endpoint on {self.config.cdp_host} (ports {', '.join(map(str, ports))})",
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Session lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def ensure_session(self) -> tuple[CdpSession | None, dict[str, Any] | None]:
        """Return the live session, connecting if there is none.

        After a lost connection the same tab is re-attached; if that tab is
        gone the call fails with not_connected instead of moving to another
        tab. Only a manager that never attached (or whose tab was closed
        through ``close_tab``) picks the first page target.
        """
        with self._lock:
            session = self._session
            if session is not None and session.connected:
                return session, None
            discovery = self.discovery()
            if discovery is None:
                return None, self._no_browser()
            previous = self._attached_id
            if previous is not None:
                target = discovery.find(previous)
                if target is None:
                    return None, fail(
                        NOT_CONNECTED,
                        message=f"Tab {previous} is no longer available; use list_tabs and switch_tab",
                        targetId=previous,
                    )
                logger.info("re-attaching to %s after connection loss", previous)
            else:
                targets = discovery.list_targets()
                if not targets:
                    return None, fail(CONNECT_FAILED, message="Browser has no page targets")
                target = targets[0]
            result = self._connect(target)
            if not result["success"]:
                return None, result
            return self._session, None

    def _connect(self, target: Target) -> dict[str, Any]:
        self._drop_session("superseded")
        if not target.ws_url:
            return fail(CONNECT_FAILED, message="Target has no debugging socket", targetId=target.id)
        session = self._session_factory(self.config)
        if not session.connect(target.ws_url, target.id):
            return fail(CONNECT_FAILED, message=f"Could not open {target.ws_url}", targetId=target.id)
        self._session = session
        self._attached_id = target.id
        logger.info("session attached to %s (%s)", target.id, target.url)
        return ok(targetId=target.id, url=target.url, title=target.title)

    def _drop_session(self, reason: str) -> None:
        session = self._session
        self._session = None
        if session is not None:
            session.disconnect(reason=reason)

    def shutdown(self) -> None:
        with self._lock:
            self._drop_session("disconnected")

    # ─────────────────────────────────────────────────────────────────────────
    # Tabs
    # ─────────────────────────────────────────────────────────────────────────

    def list_tabs(self) -> dict[str, Any]:
        discovery = self.discovery()
        if discovery is None:
            return self._no_browser()
        current = self.current_target_id
        tabs = [{**t.to_dict(), "current": t.id == current} for t in discovery.list_targets()]
        return ok(tabs=tabs, count=len(tabs))

    def new_tab(self, url: str = "about:blank") -> dict[str, Any]:
        """Open a page target and switch the session to it."""
        discovery = self.discovery()
        if discovery is None:
            return self._no_browser()
        try:
            target = discovery.new_target(url or "about:blank")
        except HttpClientError as exc:
            return fail(CREATE_FAILED, message=str(exc), url=url)
        with self._lock:
            connected = self._connect(target)
        if not connected["success"]:
            return {**connected, "created": True}
        return ok(targetId=target.id, url=target.url or url, title=target.title)

    def close_tab(self, target_id: str | None = None) -> dict[str, Any]:
        """Close ``target_id`` (default: the session's own tab)."""
        discovery = self.discovery()
        if discovery is None:
            return self._no_browser()
        target_id = target_id or self.current_target_id
        if not target_id:
            return fail(TAB_NOT_FOUND, message="No tab id given and no current tab")
        if discovery.find(target_id) is None:
            return fail(TAB_NOT_FOUND, targetId=target_id)
        with self._lock:
            was_current = target_id == self.current_target_id
            if was_current:
                self._drop_session("closed")
            if target_id == self._attached_id:
                self._attached_id = None
        if not discovery.close_target(target_id):
            return fail(CLOSE_FAILED, targetId=target_id)
        return ok(targetId=target_id, closed=True, wasCurrent=was_current)

    def switch_tab(self, target_id: str) -> dict[str, Any]:
        """Tear down the current session, bring ``target_id`` to front and connect to it."""
        discovery = self.discovery()
        if discovery is None:
            return self._no_browser()
        target = discovery.find(target_id)
        if target is None:
            return fail(TAB_NOT_FOUND, targetId=target_id)
        with self._lock:
            self._drop_session("superseded")
            if not discovery.activate_target(target.id):
                logger.info("could not activate %s; connecting anyway", target.id)
            return self._connect(target)
