"""Bearer-token capability for the agent service.

How the identity provider issues tokens is outside this package; callers only
see ``acquire_token() -> str``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from agentproxy.config import Settings
from agentproxy.domain.exceptions import CredentialError


@runtime_checkable
class TokenProvider(Protocol):
    """Protocol for anything that can hand out a bearer token."""

    def acquire_token(self) -> str:
        ...


class StaticTokenProvider:
    """Returns a fixed token (local development, tests)."""

    def __init__(self, token: str) -> None:
        self._token = token

    def acquire_token(self) -> str:
        if not self._token:
            raise CredentialError("Static bearer token is empty")
        return self._token


class AzureCredentialTokenProvider:
    """Adapter over ``azure.identity.DefaultAzureCredential`` (managed identity, CLI login, ...)."""

    def __init__(self, scope: str, credential: Any | None = None) -> None:
        self._scope = scope
        self._credential = credential

    def _get_credential(self) -> Any:
        if self._credential is None:
            from azure.identity import DefaultAzureCredential  # lazy import

            self._credential = DefaultAzureCredential()
        return self._credential

    def acquire_token(self) -> str:
        try:
            access = self._get_credential().get_token(self._scope)
        except Exception as exc:
            raise CredentialError("Token acquisition failed", details=str(exc)) from exc
        if not access or not access.token:
            raise CredentialError("Token acquisition returned no token")
        return access.token


def build_token_provider(cfg: Settings) -> TokenProvider:
    if cfg.AGENT_BEARER_TOKEN is not None:
        return StaticTokenProvider(cfg.AGENT_BEARER_TOKEN.get_secret_value())
    return AzureCredentialTokenProvider(cfg.TOKEN_SCOPE)
