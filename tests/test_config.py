from __future__ import annotations

import pytest

from mcp_servers.cdp_bridge.config import DEFAULT_CANDIDATE_PORTS, BridgeConfig

ENV_VARS = [
    "MCP_CDP_HOST",
    "MCP_CDP_PORT",
    "MCP_CDP_PORTS",
    "MCP_COMMAND_TIMEOUT",
    "MCP_LOAD_TIMEOUT",
    "MCP_CONSOLE_MAX_ENTRIES",
    "MCP_STREAMING_ENDPOINT",
    "MCP_ALLOW_HOSTS",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_config_defaults() -> None:
    cfg = BridgeConfig.from_env()
    assert cfg.cdp_host == "127.0.0.1"
    assert cfg.cdp_port == 0
    assert cfg.candidate_ports == DEFAULT_CANDIDATE_PORTS
    assert cfg.command_timeout == 10.0
    assert cfg.navigate_timeout == 5.0
    assert cfg.load_timeout == 15.0
    assert cfg.console_max_entries == 1000
    assert cfg.streaming_endpoint is None
    assert cfg.allow_hosts == []


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_CDP_HOST", "localhost")
    monkeypatch.setenv("MCP_CDP_PORT", "9333")
    monkeypatch.setenv("MCP_CDP_PORTS", "9333, 9444,bogus")
    monkeypatch.setenv("MCP_COMMAND_TIMEOUT", "2.5")
    monkeypatch.setenv("MCP_CONSOLE_MAX_ENTRIES", "0")
    monkeypatch.setenv("MCP_STREAMING_ENDPOINT", " https://stream.example.com/http ")
    monkeypatch.setenv("MCP_ALLOW_HOSTS", "Example.com, api.test ,*")

    cfg = BridgeConfig.from_env()
    assert cfg.cdp_host == "localhost"
    assert cfg.cdp_port == 9333
    assert cfg.base_url == "http://localhost:9333"
    assert cfg.candidate_ports == [9333, 9444]
    assert cfg.command_timeout == 2.5
    assert cfg.console_max_entries == 0
    assert cfg.streaming_endpoint == "https://stream.example.com/http"
    assert cfg.allow_hosts == ["example.com", "api.test"]


def test_blank_env_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_CDP_PORT", "  ")
    monkeypatch.setenv("MCP_LOAD_TIMEOUT", "")
    cfg = BridgeConfig.from_env()
    assert cfg.cdp_port == 0
    assert cfg.load_timeout == 15.0


def test_host_allowlist_matches_exact_and_subdomains() -> None:
    cfg = BridgeConfig(allow_hosts=["example.com"])
    assert cfg.is_host_allowed("example.com")
    assert cfg.is_host_allowed("api.example.com")
    assert cfg.is_host_allowed("API.Example.com.")
    assert not cfg.is_host_allowed("badexample.com")
    assert not cfg.is_host_allowed("example.org")


def test_empty_allowlist_allows_everything() -> None:
    assert BridgeConfig().is_host_allowed("anything.test")
