"""Authenticated JSON HTTP adapter for the agent service.

Responses are returned JSON-decoded when they parse, otherwise as raw text,
so a malformed success body still reaches the caller.
"""
from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from agentproxy.domain.exceptions import RemoteCallError, TransportError

log = logging.getLogger(__name__)


def parse_body(text: str) -> Any:
    """JSON value for a JSON payload, the raw text otherwise, ``None`` when empty."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class AgentHttpClient:
    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def call(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        bearer_token: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {bearer_token}"}
        content: bytes | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(body).encode("utf-8")

        try:
            resp = self._client.request(method, url, params=params, headers=headers, content=content)
        except httpx.HTTPError as exc:
            log.warning("[%s] %s -> %s", method, url, type(exc).__name__)
            raise TransportError(f"Agent service unreachable: {type(exc).__name__}", details=str(exc)) from exc
        data = parse_body(resp.text)

        # Audit line: method, url, status only.
        log.info("[%s] %s -> %s", method, url, resp.status_code)
        if not resp.is_success:
            raise RemoteCallError(resp.status_code, data, reason=resp.reason_phrase)
        return data

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> AgentHttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
