from __future__ import annotations

from mcp_servers.cdp_bridge.discovery import TabDiscovery, Target, detect_cdp_port
from mcp_servers.cdp_bridge.http_client import HttpClientError

from conftest import free_port


def test_list_targets_keeps_only_pages(devtools) -> None:
    devtools.add_target("ABC", url="https://example.com", title="Example")
    devtools.add_target("SW1", type="service_worker")
    devtools.add_target("DEF")

    targets = TabDiscovery(port=devtools.port).list_targets()

    assert [t.id for t in targets] == ["ABC", "DEF"]
    first = targets[0]
    assert first.title == "Example"
    assert first.url == "https://example.com"
    assert first.ws_url.endswith("/devtools/page/ABC")


def test_list_targets_is_empty_when_browser_is_absent() -> None:
    assert TabDiscovery(port=free_port(), timeout=0.5).list_targets() == []


def test_list_targets_is_empty_on_unexpected_payload(monkeypatch) -> None:
    from mcp_servers.cdp_bridge import discovery

    monkeypatch.setattr(discovery, "fetch_json", lambda *a, **k: {"not": "a list"})
    assert TabDiscovery().list_targets() == []


def test_new_target_uses_put(devtools) -> None:
    target = TabDiscovery(port=devtools.port).new_target("https://example.com/?q=1")

    assert target.id == "NEW1"
    assert target.url == "https://example.com/?q=1"
    assert ("PUT", "/json/new") in devtools.requests


def test_new_target_keeps_url_fragment(devtools) -> None:
    target = TabDiscovery(port=devtools.port).new_target("https://a.test/docs#install")

    assert target.url == "https://a.test/docs#install"
    assert devtools.targets[-1]["url"] == "https://a.test/docs#install"


def test_close_target_checks_confirmation_body(devtools) -> None:
    devtools.add_target("ABC")
    discovery = TabDiscovery(port=devtools.port)

    assert discovery.close_target("ABC") is True
    assert discovery.find("ABC") is None
    assert discovery.close_target("ABC") is False


def test_activate_target(devtools) -> None:
    devtools.add_target("ABC")
    discovery = TabDiscovery(port=devtools.port)

    assert discovery.activate_target("ABC") is True
    assert discovery.activate_target("NOPE") is False
    assert devtools.activated == ["ABC"]


def test_new_target_raises_when_unreachable() -> None:
    discovery = TabDiscovery(port=free_port(), timeout=0.5)
    try:
        discovery.new_target("about:blank")
    except HttpClientError:
        pass
    else:
        raise AssertionError("expected HttpClientError")


def test_detect_cdp_port_skips_dead_candidates(devtools) -> None:
    dead = free_port()
    assert detect_cdp_port("127.0.0.1", [dead, devtools.port], timeout=0.5) == devtools.port
    assert detect_cdp_port("127.0.0.1", [dead], timeout=0.5) is None


def test_target_from_json_tolerates_missing_fields() -> None:
    target = Target.from_json({"id": "X", "type": "page"})
    assert target.is_page
    assert target.ws_url == ""
    assert target.to_dict() == {"id": "X", "title": "", "url": "", "type": "page"}
