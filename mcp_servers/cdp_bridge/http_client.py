from __future__ import annotations

import json
import ssl
import urllib.parse
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import HTTPSHandler, Request, build_opener, urlopen

from .config import BridgeConfig

USER_AGENT = "cdp-bridge/0.1"

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH"})


class HttpClientError(Exception):
    pass


def fetch_text(url: str, timeout: float = 2.0, method: str = "GET") -> str:
    """Fetch a small text body from the local debugging HTTP server.

    Non-2xx statuses are errors; the body of a 2xx response is returned decoded.
    """
    req = Request(url, method=method, headers={"User-Agent": USER_AGENT})
    try:
        with urlopen(req, timeout=timeout) as resp:
            return resp.read().decode(errors="replace")
    except HTTPError as exc:
        raise HttpClientError(f"HTTP {exc.code} for {url}") from exc
    except (TimeoutError, URLError, OSError) as exc:
        raise HttpClientError(str(exc)) from exc


def fetch_json(url: str, timeout: float = 2.0, method: str = "GET") -> Any:
    """Fetch and decode a JSON body."""
    body = fetch_text(url, timeout=timeout, method=method)
    try:
        return json.loads(body)
    except ValueError as exc:
        raise HttpClientError(f"Invalid JSON from {url}: {exc}") from exc


def http_request(
    url: str,
    config: BridgeConfig,
    *,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: str | bytes | None = None,
    check_host: bool = True,
) -> dict[str, Any]:
    """Perform an arbitrary HTTP(S) request and return status, headers and (truncated) body.

    Error statuses are returned, not raised: callers relay them to their own client.
    """
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise HttpClientError("Only http/https are supported")
    if check_host and not config.is_host_allowed(parsed.hostname or ""):
        raise HttpClientError(f"Host {parsed.hostname} is not in allowlist")
    verb = (method or "GET").upper()
    if verb not in SUPPORTED_METHODS:
        verb = "GET"

    data: bytes | None = None
    if body is not None and verb in BODY_METHODS:
        data = body.encode() if isinstance(body, str) else body

    req = Request(url, data=data, method=verb, headers={"User-Agent": USER_AGENT})
    for key, value in (headers or {}).items():
        req.add_header(str(key), str(value))

    opener = build_opener(HTTPSHandler(context=ssl.create_default_context()))
    try:
        with opener.open(req, timeout=config.http_timeout) as resp:
            return _read_response(resp.status, resp.headers, resp, config.http_max_bytes)
    except HTTPError as exc:
        with exc:
            return _read_response(exc.code, exc.headers, exc, config.http_max_bytes)
    except (TimeoutError, URLError, OSError) as exc:
        raise HttpClientError(str(exc)) from exc


def _read_response(status: int, headers: Any, stream: Any, max_bytes: int) -> dict[str, Any]:
    raw = stream.read(max_bytes + 1)
    truncated = len(raw) > max_bytes
    if truncated:
        raw = raw[:max_bytes]
    return {
        "status": int(status),
        "headers": dict(headers or {}),
        "body": raw.decode(errors="replace"),
        "truncated": truncated,
    }
