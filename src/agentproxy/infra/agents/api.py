"""Thread/run/message endpoints of the agent service.

One method per remote operation. Every call is bound to the bearer token of
the current request and carries the ``api-version`` query parameter.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

from agentproxy.infra.http.client import AgentHttpClient


class AgentsApi:
    def __init__(
        self,
        http: AgentHttpClient,
        *,
        endpoint: str,
        api_version: str,
        bearer_token: str,
    ) -> None:
        self._http = http
        self._endpoint = endpoint.rstrip("/")
        self._params = {"api-version": api_version}
        self._token = bearer_token

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _url(self, *segments: str) -> str:
        return "/".join([self._endpoint, *(quote(s, safe="") for s in segments)])

    def _call(self, method: str, url: str, body: Any = None) -> Any:
        return self._http.call(method, url, body, bearer_token=self._token, params=self._params)

    # ------------------------------------------------------------------
    # Threads & messages
    # ------------------------------------------------------------------

    def create_thread_and_run(self, assistant_id: str, prompt: str) -> Any:
        body = {
            "assistant_id": assistant_id,
            "thread": {"messages": [{"role": "user", "content": prompt}]},
        }
        return self._call("POST", self._url("threads", "runs"), body)

    def add_message(self, thread_id: str, content: str, role: str = "user") -> Any:
        return self._call(
            "POST", self._url("threads", thread_id, "messages"), {"role": role, "content": content},
        )

    def list_messages(self, thread_id: str) -> Any:
        return self._call("GET", self._url("threads", thread_id, "messages"))

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def create_run(self, thread_id: str, assistant_id: str) -> Any:
        return self._call(
            "POST", self._url("threads", thread_id, "runs"), {"assistant_id": assistant_id},
        )

    def get_run(self, thread_id: str, run_id: str) -> Any:
        return self._call("GET", self._url("threads", thread_id, "runs", run_id))
