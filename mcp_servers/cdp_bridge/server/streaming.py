"""
HTTP requests on behalf of the client, optionally through a streaming endpoint.

With ``streaming_endpoint`` configured, every request goes to the endpoint
carrying ``X-Target-URL`` and ``X-Original-Method`` headers (and, for
POST/PUT/PATCH, a JSON body describing the original request). Without it the
request is sent to the target URL directly.
"""

from __future__ import annotations

import json
import logging
import urllib.parse
from typing import Any

from ..config import BridgeConfig
from ..http_client import BODY_METHODS, SUPPORTED_METHODS, HttpClientError, http_request

logger = logging.getLogger("mcp.cdp_bridge.streaming")

INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class StreamingProxy:
    def __init__(self, config: BridgeConfig) -> None:
        self.config = config

    @property
    def enabled(self) -> bool:
        return bool(self.config.streaming_endpoint)

    def request(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: dict[str, Any] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        """Perform the request and return ``{status, headers, body, truncated}``.

        Raises:
            HttpClientError: disallowed host, unsupported scheme or transport failure
        """
        verb = (method or "GET").upper()
        if verb not in SUPPORTED_METHODS:
            verb = "GET"
        headers = {str(k): str(v) for k, v in (headers or {}).items()}
        if body is not None and not isinstance(body, (str, bytes)):
            body = json.dumps(body)

        endpoint = self.config.streaming_endpoint
        if not endpoint:
            logger.info("direct %s %s", verb, url)
            return http_request(url, self.config, method=verb, headers=headers, body=body)

        target = urllib.parse.urlparse(url)
        if target.scheme not in ("http", "https"):
            raise HttpClientError("Only http/https are supported")
        if not self.config.is_host_allowed(target.hostname or ""):
            raise HttpClientError(f"Host {target.hostname} is not in allowlist")

        proxy_headers = {
            **headers,
            "X-Target-URL": url,
            "X-Original-Method": verb,
            "Content-Type": "application/json",
        }
        payload = None
        if verb in BODY_METHODS:
            payload = json.dumps(
                {
                    "url": url,
                    "method": verb,
                    "headers": headers,
                    "body": body.decode(errors="replace") if isinstance(body, bytes) else body,
                }
            )
        logger.info("proxy %s %s via %s", verb, url, endpoint)
        return http_request(endpoint, self.config, method=verb, headers=proxy_headers, body=payload, check_host=False)

    def handle_rpc(self, request_id: Any, params: dict[str, Any]) -> dict[str, Any]:
        """Answer a ``streaming/http`` JSON-RPC request with a full response envelope."""
        url = params.get("url")
        if not url or not isinstance(url, str):
            return _error(request_id, INVALID_PARAMS, "Missing required parameter: url")
        try:
            result = self.request(
                url,
                method=str(params.get("method") or "GET"),
                headers=params.get("headers") if isinstance(params.get("headers"), dict) else None,
                body=params.get("body"),
            )
        except HttpClientError as exc:
            logger.info("streaming request failed: %s", exc)
            return _error(request_id, INTERNAL_ERROR, f"HTTP request failed: {exc}")
        return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}
