"""
Target discovery over the browser's debugging HTTP endpoint.

The endpoint lives on loopback (``http://127.0.0.1:<port>``) and exposes:
- ``/json/list``: every debuggable target
- ``/json/new?<url>``: open a new page target
- ``/json/close/<id>``: close a target
- ``/json/activate/<id>``: bring a target to front

Listing is deliberately fail-soft: no browser simply means no targets.
"""

from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Any

from .http_client import HttpClientError, fetch_json, fetch_text

logger = logging.getLogger("mcp.cdp_bridge.discovery")

CLOSE_OK_BODY = "Target is closing"


@dataclass(frozen=True, slots=True)
class Target:
    """Immutable snapshot of one debuggable browser target."""

    id: str
    title: str
    url: str
    type: str
    ws_url: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Target:
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            type=str(data.get("type") or ""),
            ws_url=str(data.get("webSocketDebuggerUrl") or ""),
        )

    @property
    def is_page(self) -> bool:
        return self.type == "page"

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "url": self.url, "type": self.type}


class TabDiscovery:
    """Stateless client for one browser's discovery endpoint."""

    def __init__(self, host: str = "127.0.0.1", port: int = 9222, timeout: float = 2.0) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def list_targets(self) -> list[Target]:
        """Return page targets, or an empty list when the browser is unreachable."""
        try:
            data = fetch_json(f"{self.base_url}/json/list", timeout=self.timeout)
        except HttpClientError as exc:
            logger.info("discovery failed on port %s: %s", self.port, exc)
            return []
        if not isinstance(data, list):
            logger.warning("discovery returned %s instead of a list", type(data).__name__)
            return []
        targets = [Target.from_json(item) for item in data if isinstance(item, dict)]
        return [t for t in targets if t.is_page]

    def find(self, target_id: str) -> Target | None:
        for target in self.list_targets():
            if target.id == target_id:
                return target
        return None

    def new_target(self, url: str = "about:blank") -> Target:
        """Open a new page target.

        Current Chrome rejects GET on this path, so the request uses PUT.
        """
        quoted = urllib.parse.quote(url or "about:blank", safe=":/?&=%@+,;~")
        data = fetch_json(f"{self.base_url}/json/new?{quoted}", timeout=self.timeout, method="PUT")
        if not isinstance(data, dict) or not data.get("id"):
            raise HttpClientError("Browser did not return the new target")
        return Target.from_json(data)

    def close_target(self, target_id: str) -> bool:
        try:
            body = fetch_text(f"{self.base_url}/json/close/{urllib.parse.quote(target_id)}", timeout=self.timeout)
        except HttpClientError as exc:
            logger.info("close_target %s failed: %s", target_id, exc)
            return False
        return body.strip() == CLOSE_OK_BODY

    def activate_target(self, target_id: str) -> bool:
        try:
            fetch_text(f"{self.base_url}/json/activate/{urllib.parse.quote(target_id)}", timeout=self.timeout)
        except HttpClientError as exc:
            logger.info("activate_target %s failed: %s", target_id, exc)
            return False
        return True


def detect_cdp_port(host: str, candidates: list[int], timeout: float = 1.0) -> int | None:
    """Return the first candidate port whose discovery endpoint answers."""
    for port in candidates:
        try:
            fetch_text(f"http://{host}:{port}/json/list", timeout=timeout)
        except HttpClientError:
            continue
        logger.info("found debugging endpoint on port %s", port)
        return port
    logger.warning("no debugging endpoint on ports %s", ", ".join(str(p) for p in candidates))
    return None
