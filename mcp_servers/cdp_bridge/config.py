from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_CANDIDATE_PORTS: list[int] = [9222, 9223, 9224, 9225]


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _parse_ports(raw: str) -> list[int]:
    ports: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            ports.append(int(part))
    return ports


@dataclass
class BridgeConfig:
    cdp_host: str = "127.0.0.1"
    # 0 means "probe candidate_ports on first use".
    cdp_port: int = 0
    candidate_ports: list[int] = field(default_factory=lambda: list(DEFAULT_CANDIDATE_PORTS))
    connect_timeout: float = 5.0
    command_timeout: float = 10.0
    navigate_timeout: float = 5.0
    load_timeout: float = 15.0
    discovery_timeout: float = 2.0
    scroll_settle: float = 0.5
    response_cache_ttl: float = 30.0
    console_max_entries: int = 1000
    streaming_endpoint: str | None = None
    allow_hosts: list[str] = field(default_factory=list)
    http_timeout: float = 30.0
    http_max_bytes: int = 1_000_000

    @classmethod
    def from_env(cls) -> BridgeConfig:
        ports_raw = os.environ.get("MCP_CDP_PORTS", "")
        candidates = _parse_ports(ports_raw) or list(DEFAULT_CANDIDATE_PORTS)
        allow_raw = os.environ.get("MCP_ALLOW_HOSTS", "")
        allow_hosts = [host.strip().lower() for host in allow_raw.split(",") if host.strip() and host.strip() != "*"]
        endpoint = (os.environ.get("MCP_STREAMING_ENDPOINT") or "").strip() or None
        return cls(
            cdp_host=os.environ.get("MCP_CDP_HOST", "127.0.0.1").strip() or "127.0.0.1",
            cdp_port=_env_int("MCP_CDP_PORT", 0),
            candidate_ports=candidates,
            connect_timeout=_env_float("MCP_CONNECT_TIMEOUT", 5.0),
            command_timeout=_env_float("MCP_COMMAND_TIMEOUT", 10.0),
            navigate_timeout=_env_float("MCP_NAVIGATE_TIMEOUT", 5.0),
            load_timeout=_env_float("MCP_LOAD_TIMEOUT", 15.0),
            discovery_timeout=_env_float("MCP_DISCOVERY_TIMEOUT", 2.0),
            scroll_settle=_env_float("MCP_SCROLL_SETTLE", 0.5),
            response_cache_ttl=_env_float("MCP_RESPONSE_CACHE_TTL", 30.0),
            console_max_entries=max(0, _env_int("MCP_CONSOLE_MAX_ENTRIES", 1000)),
            streaming_endpoint=endpoint,
            allow_hosts=allow_hosts,
            http_timeout=_env_float("MCP_HTTP_TIMEOUT", 30.0),
            http_max_bytes=_env_int("MCP_HTTP_MAX_BYTES", 1_000_000),
        )

    @property
    def base_url(self) -> str:
        return f"http://{self.cdp_host}:{self.cdp_port}"

    def is_host_allowed(self, host: str) -> bool:
        host = (host or "").strip().lower().rstrip(".")
        if not self.allow_hosts:
            return True
        for raw_allowed in self.allow_hosts:
            allowed = (raw_allowed or "").strip().lower().lstrip(".").rstrip(".")
            if not allowed:
                continue
            if host == allowed:
                return True
            if host.endswith("." + allowed):
                return True
        return False
