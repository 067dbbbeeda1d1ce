from __future__ import annotations

from typing import Any

from agentproxy.logging import EXCERPT_LIMIT, excerpt

INVALID_PROMPT = "Invalid body: 'prompt' (non-empty string) is required."


class ProxyError(Exception):
    """Base for every failure surfaced at the request boundary as ``{error, details}``."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(ProxyError):
    """Required settings are absent; raised before any remote call."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            f"Missing required settings: {', '.join(self.missing)}",
            details={"missing": self.missing},
        )


class InvalidInputError(ProxyError):
    """Request body is missing or malformed; no remote calls are made."""

    status_code = 400


class CredentialError(ProxyError):
    """Bearer token acquisition failed."""

    error_tag = "token_failed"


class RemoteCallError(ProxyError):
    """The agent service answered with a non-2xx status (mirrored to the caller)."""

    def __init__(self, status: int, body: Any = None, reason: str = "") -> None:
        self.status = status
        self.body = body
        self.status_code = status
        label = f"HTTP {status} {reason}".rstrip()
        super().__init__(label, details=bounded_details(body))


class TransportError(ProxyError):
    """The agent service could not be reached or did not answer in time."""


class PollTimeoutError(ProxyError):
    """The run did not reach a terminal status within the configured window."""

    status_code = 504

    def __init__(self, thread_id: str, run_id: str, last_status: str | None, timeout_ms: int) -> None:
        self.thread_id = thread_id
        self.run_id = run_id
        self.last_status = last_status
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Timed out after {timeout_ms} ms waiting for run {run_id}",
            details={"threadId": thread_id, "runId": run_id, "lastStatus": last_status},
        )


def bounded_details(body: Any, limit: int = EXCERPT_LIMIT) -> Any:
    """Pass small remote bodies through; replace oversized ones with a text excerpt."""
    if body is None:
        return None
    rendered = excerpt(body, limit=limit + 1)
    if len(rendered) > limit:
        return rendered[:limit]
    return body
