"""FastAPI dependencies. Process-wide collaborators live on ``app.state``."""
from __future__ import annotations

from fastapi import Request

from agentproxy.config import Settings
from agentproxy.services.conversation_service import ConversationService
from agentproxy.services.diagnostics_service import DiagnosticsService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_conversation_service(request: Request) -> ConversationService:
    """One service per request over the shared HTTP client and token provider."""
    state = request.app.state
    return ConversationService(
        state.settings,
        http=state.http_client,
        token_provider=state.token_provider,
        poller_factory=state.poller_factory,
    )


def get_diagnostics_service(request: Request) -> DiagnosticsService:
    state = request.app.state
    return DiagnosticsService(state.settings, state.token_provider)
