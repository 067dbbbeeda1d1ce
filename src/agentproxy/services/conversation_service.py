"""Conversation turn use-case: one proxied request, one run on the agent service.

A turn either creates a thread together with its first run, or appends the
prompt to an existing thread and starts a run there. Both paths then poll the
run to a terminal status and read the agent's reply from the thread.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from agentproxy.config import Settings, missing_settings
from agentproxy.domain.exceptions import (
    INVALID_PROMPT,
    ConfigurationError,
    InvalidInputError,
    RemoteCallError,
)
from agentproxy.infra.agents.api import AgentsApi
from agentproxy.infra.http.client import AgentHttpClient
from agentproxy.infra.identity.token_provider import TokenProvider
from agentproxy.orchestration.extractor import extract_last_assistant_text
from agentproxy.orchestration.poller import RunPoller
from agentproxy.orchestration.state import (
    NO_OUTPUT_PLACEHOLDER,
    RUN_ID_FIELDS,
    TERMINAL_STATUSES,
    THREAD_ID_FIELDS,
    TurnResult,
    first_present,
)

log = logging.getLogger(__name__)


class ConversationService:
    def __init__(
        self,
        cfg: Settings,
        *,
        http: AgentHttpClient,
        token_provider: TokenProvider,
        poller_factory: Callable[[AgentsApi], RunPoller] = RunPoller,
    ) -> None:
        self._cfg = cfg
        self._http = http
        self._token_provider = token_provider
        self._poller_factory = poller_factory

    def ensure_configured(self) -> None:
        missing = missing_settings(self._cfg)
        if missing:
            log.warning("missing settings: %s", ", ".join(missing))
            raise ConfigurationError(missing)

    def handle_turn(self, prompt: str, thread_id: str | None = None) -> TurnResult:
        self.ensure_configured()
        if not isinstance(prompt, str) or not prompt:
            raise InvalidInputError(INVALID_PROMPT)

        log.info("acquiring token for scope %s", self._cfg.TOKEN_SCOPE)
        bearer = self._token_provider.acquire_token()
        api = AgentsApi(
            self._http,
            endpoint=self._cfg.project_endpoint,
            api_version=self._cfg.API_VERSION,
            bearer_token=bearer,
        )
        assistant_id = self._cfg.AGENT_ID or ""

        if not thread_id:
            log.info("create thread+run")
            resp = api.create_thread_and_run(assistant_id, prompt)
            thread_id = _require(first_present(resp, THREAD_ID_FIELDS), "thread id", resp)
            run_id = _require(first_present(resp, RUN_ID_FIELDS), "run id", resp)
        else:
            log.info("add message to thread %s", thread_id)
            api.add_message(thread_id, prompt)
            log.info("create run on thread %s", thread_id)
            resp = api.create_run(thread_id, assistant_id)
            run_id = _require(first_present(resp, RUN_ID_FIELDS), "run id", resp)
        log.info("thread %s run %s", thread_id, run_id)

        run = self._poller_factory(api).poll(
            thread_id,
            run_id,
            TERMINAL_STATUSES,
            poll_interval_ms=self._cfg.POLL_INTERVAL_MS,
            timeout_ms=self._cfg.TIMEOUT_MS,
        )

        messages = api.list_messages(thread_id)
        output = extract_last_assistant_text(messages) or NO_OUTPUT_PLACEHOLDER
        return TurnResult(status=run.status or "", thread_id=thread_id, run_id=run_id, output=output)


def _require(value: str | None, what: str, resp: object) -> str:
    # The remote answered 2xx but without a usable identifier.
    if value is None:
        raise RemoteCallError(502, resp, reason=f"Bad Gateway: response has no {what}")
    return value
