"""Side-channel health and diag checks. Neither touches the agent service."""
from __future__ import annotations

import logging

from agentproxy.api.schemas.agent import DiagnosticsResponse, HealthResponse
from agentproxy.config import Settings
from agentproxy.infra.identity.token_provider import TokenProvider
from agentproxy.logging import redact_endpoint

log = logging.getLogger(__name__)


class DiagnosticsService:
    def __init__(self, cfg: Settings, token_provider: TokenProvider) -> None:
        self._cfg = cfg
        self._token_provider = token_provider

    def health(self) -> HealthResponse:
        log.info("health: attempting token acquisition")
        token = self._token_provider.acquire_token()
        log.info("health: token acquired: %s", bool(token))
        return HealthResponse(token_acquired=bool(token))

    def diagnostics(self) -> DiagnosticsResponse:
        safe = redact_endpoint(self._cfg.FOUNDRY_PROJECT_ENDPOINT)
        return DiagnosticsResponse(
            endpoint_set=bool(self._cfg.FOUNDRY_PROJECT_ENDPOINT),
            agent_set=bool(self._cfg.AGENT_ID),
            endpoint_host=safe["host"],
            project=safe["project"],
            timeout_ms=self._cfg.TIMEOUT_MS,
        )
