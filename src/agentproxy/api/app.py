"""FastAPI application factory."""
from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentproxy import __version__
from agentproxy.api.schemas.agent import ErrorResponse
from agentproxy.config import Settings
from agentproxy.domain.exceptions import CredentialError, ProxyError, RemoteCallError
from agentproxy.infra.agents.api import AgentsApi
from agentproxy.infra.http.client import AgentHttpClient
from agentproxy.infra.identity.token_provider import TokenProvider, build_token_provider
from agentproxy.logging import excerpt, redact_endpoint
from agentproxy.orchestration.poller import RunPoller

log = logging.getLogger(__name__)


def create_app(
    cfg: Settings | None = None,
    *,
    http_client: AgentHttpClient | None = None,
    token_provider: TokenProvider | None = None,
    poller_factory: Callable[[AgentsApi], RunPoller] = RunPoller,
) -> FastAPI:
    if cfg is None:
        from agentproxy.config import settings as cfg

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        safe = redact_endpoint(cfg.FOUNDRY_PROJECT_ENDPOINT)
        log.info(
            "cfg: endpointSet=%s agentSet=%s endpointHost=%s project=%s timeoutMs=%s",
            bool(cfg.FOUNDRY_PROJECT_ENDPOINT), bool(cfg.AGENT_ID),
            safe["host"], safe["project"], cfg.TIMEOUT_MS,
        )
        yield
        app.state.http_client.close()

    app = FastAPI(
        title="Agent Proxy API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.http_client = http_client or AgentHttpClient(timeout=cfg.HTTP_TIMEOUT_S)
    app.state.token_provider = token_provider or build_token_provider(cfg)
    app.state.poller_factory = poller_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cfg.CORS_ORIGIN],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from agentproxy.api.routers.agent import router as agent_router

    app.include_router(agent_router)

    @app.exception_handler(ProxyError)
    def _proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
        error, details = exc.message, exc.details
        if isinstance(exc, CredentialError):
            error, details = exc.error_tag, exc.details or exc.message
        log.error("ERROR: %s %s", exc.status_code, exc.message)
        if isinstance(exc, RemoteCallError):
            log.error("ERROR data: %s", excerpt(exc.body))
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=error, details=details).model_dump(),
        )

    @app.exception_handler(Exception)
    def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        # Runs outside CORSMiddleware, so the origin header is set here.
        log.error("unhandled error", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(exc)).model_dump(),
            headers={"Access-Control-Allow-Origin": cfg.CORS_ORIGIN},
        )

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app
