"""Shared test fixtures.

Nothing here talks to a real agent service or identity provider:

  test_settings  explicit Settings object (no .env, no environment reads for required values).
  fake_agent     scripted thread/run/message service behind ``httpx.MockTransport``.
  fake_clock     monotonic clock + sleep pair; sleeping advances the clock instantly.
  client         FastAPI TestClient wired to all three.
"""
from __future__ import annotations

import json
import re
from typing import Any

import httpx
import pytest

from agentproxy.config import Settings

ENDPOINT = "https://acct.services.ai.azure.com/api/projects/proj"

_ROUTES = (
    ("POST", re.compile(r"/threads/runs$"), "create_thread_and_run"),
    ("POST", re.compile(r"/threads/(?P<thread>[^/]+)/messages$"), "add_message"),
    ("GET", re.compile(r"/threads/(?P<thread>[^/]+)/messages$"), "list_messages"),
    ("POST", re.compile(r"/threads/(?P<thread>[^/]+)/runs$"), "create_run"),
    ("GET", re.compile(r"/threads/(?P<thread>[^/]+)/runs/(?P<run>[^/]+)$"), "get_run"),
)


def assistant_message(text: str, *, flat: bool = False) -> dict[str, Any]:
    block = {"type": "text", "value": text} if flat else {"type": "text", "text": {"value": text}}
    return {"id": "msg_a", "role": "assistant", "content": [block]}


def user_message(text: str) -> dict[str, Any]:
    return {"id": "msg_u", "role": "user", "content": [{"type": "text", "text": {"value": text}}]}


class FakeAgentService:
    """Scripted agent service. Each operation answers ``(status, body)``; bodies
    that are ``str`` are sent as raw text."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, str], Any]] = []
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, tuple[int, Any]] = {
            "create_thread_and_run": (200, {"thread_id": "t1", "id": "r1"}),
            "add_message": (200, {"id": "msg_new", "role": "user"}),
            "create_run": (200, {"id": "r2"}),
            "list_messages": (200, {"data": [assistant_message("Hi there"), user_message("Hello")]}),
        }
        self.run_statuses: list[str] = ["queued", "completed"]

    @property
    def operations(self) -> list[str]:
        return [name for name, _, _ in self.calls]

    def count(self, operation: str) -> int:
        return self.operations.count(operation)

    def _run_status(self) -> str:
        if len(self.run_statuses) > 1:
            return self.run_statuses.pop(0)
        return self.run_statuses[0]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content) if request.content else None
        for method, pattern, name in _ROUTES:
            match = pattern.search(request.url.path)
            if request.method == method and match:
                ids = match.groupdict()
                self.calls.append((name, ids, body))
                if name == "get_run":
                    return httpx.Response(
                        200,
                        json={"id": ids["run"], "thread_id": ids["thread"], "status": self._run_status()},
                    )
                status, payload = self.responses[name]
                if isinstance(payload, str):
                    return httpx.Response(status, text=payload)
                return httpx.Response(status, json=payload)
        return httpx.Response(404, json={"error": "no such route"})


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        FOUNDRY_PROJECT_ENDPOINT=ENDPOINT,
        AGENT_ID="asst_test",
        TIMEOUT_MS=2000,
        POLL_INTERVAL_MS=1000,
        AGENT_BEARER_TOKEN="test-token",
    )


@pytest.fixture
def fake_agent() -> FakeAgentService:
    return FakeAgentService()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def http_client(fake_agent):
    from agentproxy.infra.http.client import AgentHttpClient

    with AgentHttpClient(transport=httpx.MockTransport(fake_agent.handler)) as c:
        yield c


@pytest.fixture
def poller_factory(fake_clock):
    from agentproxy.orchestration.poller import RunPoller

    return lambda api: RunPoller(api, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def make_client(http_client, poller_factory):
    """Build a TestClient for a given Settings / token provider / HTTP client."""
    from fastapi.testclient import TestClient

    from agentproxy.api.app import create_app
    from agentproxy.infra.identity.token_provider import StaticTokenProvider

    clients: list[TestClient] = []

    def _make(cfg: Settings, token_provider=None, *, http=None, raise_server_exceptions=True) -> TestClient:
        app = create_app(
            cfg,
            http_client=http or http_client,
            token_provider=token_provider or StaticTokenProvider("test-token"),
            poller_factory=poller_factory,
        )
        c = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client, test_settings):
    """FastAPI TestClient backed by the fake agent service."""
    return make_client(test_settings)
