from __future__ import annotations

import pytest

from mcp_servers.cdp_bridge.config import BridgeConfig
from mcp_servers.cdp_bridge.session import SessionManager
from mcp_servers.cdp_bridge.session_cdp import CdpSession

from conftest import DevToolsServer, FakeBrowser, free_port


@pytest.fixture
def manager(config: BridgeConfig, browser: FakeBrowser, devtools: DevToolsServer):
    devtools.add_target("ABC", url="https://a.test/", title="A")
    devtools.add_target("DEF", url="https://b.test/", title="B")
    devtools.targets.append({"id": "SW1", "type": "service_worker", "url": "https://a.test/sw.js"})
    config.cdp_port = devtools.port
    m = SessionManager(config, session_factory=lambda cfg: CdpSession(cfg, app_factory=browser.app_factory))
    yield m
    m.shutdown()


def test_ensure_session_connects_to_first_page(manager: SessionManager, browser: FakeBrowser) -> None:
    session, failure = manager.ensure_session()

    assert failure is None
    assert session is not None and session.connected
    assert session.target_id == "ABC"
    assert browser.app.url.endswith("/ABC")

    again, _ = manager.ensure_session()
    assert again is session
    assert len(browser.apps) == 1


def test_list_tabs_marks_current_and_skips_non_pages(manager: SessionManager) -> None:
    before = manager.list_tabs()
    assert before["count"] == 2
    assert not any(t["current"] for t in before["tabs"])

    manager.ensure_session()
    tabs = {t["id"]: t for t in manager.list_tabs()["tabs"]}
    assert tabs["ABC"]["current"] is True
    assert tabs["DEF"]["current"] is False
    assert "SW1" not in tabs


def test_switch_tab_supersedes_old_session(
    manager: SessionManager, browser: FakeBrowser, devtools: DevToolsServer
) -> None:
    old, _ = manager.ensure_session()
    assert old is not None
    waiter = old.expect_event("Page.loadEventFired")

    result = manager.switch_tab("DEF")

    assert result["success"] is True and result["targetId"] == "DEF"
    assert waiter.wait(1.0) is None
    assert waiter.reason == "superseded"
    assert not old.connected
    assert manager.current_target_id == "DEF"
    assert devtools.activated == ["DEF"]


def test_switch_to_unknown_tab_keeps_session(manager: SessionManager) -> None:
    session, _ = manager.ensure_session()

    result = manager.switch_tab("NOPE")

    assert result == {"success": False, "error": "tab_not_found", "targetId": "NOPE"}
    assert manager.session is session and session is not None and session.connected


def test_close_current_tab_drops_session(manager: SessionManager, devtools: DevToolsServer) -> None:
    session, _ = manager.ensure_session()
    assert session is not None

    result = manager.close_tab()

    assert result == {"success": True, "targetId": "ABC", "closed": True, "wasCurrent": True}
    assert session.closed_reason == "closed"
    assert manager.session is None
    assert [t["id"] for t in devtools.targets if t.get("type") == "page"] == ["DEF"]


def test_close_unknown_tab(manager: SessionManager) -> None:
    assert manager.close_tab("NOPE")["error"] == "tab_not_found"


def test_new_tab_uses_put_and_switches(manager: SessionManager, devtools: DevToolsServer) -> None:
    result = manager.new_tab("https://c.test/")

    assert result["success"] is True
    assert result["targetId"] == "NEW1"
    assert ("PUT", "/json/new") in devtools.requests
    assert manager.current_target_id == "NEW1"


def test_no_browser_is_connect_failure(config: BridgeConfig, browser: FakeBrowser) -> None:
    config.cdp_port = 0
    config.candidate_ports = [free_port()]
    config.discovery_timeout = 0.2
    m = SessionManager(config, session_factory=lambda cfg: CdpSession(cfg, app_factory=browser.app_factory))

    session, failure = m.ensure_session()

    assert session is None
    assert failure is not None and failure["error"] == "connect_failed"
    assert m.list_tabs()["error"] == "connect_failed"
    assert browser.apps == []


def test_refused_socket_is_connect_failure(manager: SessionManager, browser: FakeBrowser) -> None:
    browser.refuse_connections = True

    session, failure = manager.ensure_session()

    assert session is None
    assert failure is not None
    assert failure["error"] == "connect_failed" and failure["targetId"] == "ABC"


def test_lost_connection_reattaches_to_same_tab(manager: SessionManager, browser: FakeBrowser) -> None:
    assert manager.switch_tab("DEF")["success"] is True
    browser.app.drop()

    session, failure = manager.ensure_session()

    assert failure is None and session is not None
    assert session.target_id == "DEF"
    assert browser.app.url.endswith("/DEF")


def test_lost_connection_to_vanished_tab_is_not_connected(
    manager: SessionManager, browser: FakeBrowser, devtools: DevToolsServer
) -> None:
    manager.switch_tab("DEF")
    browser.app.drop()
    devtools.targets = [t for t in devtools.targets if t["id"] != "DEF"]
    apps_before = len(browser.apps)

    session, failure = manager.ensure_session()

    assert session is None
    assert failure is not None
    assert failure["error"] == "not_connected" and failure["targetId"] == "DEF"
    assert len(browser.apps) == apps_before


def test_closing_current_tab_lets_next_call_pick_first_page(manager: SessionManager) -> None:
    manager.ensure_session()
    assert manager.close_tab()["success"] is True

    session, failure = manager.ensure_session()

    assert failure is None and session is not None
    assert session.target_id == "DEF"
