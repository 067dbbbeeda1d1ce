"""Agent proxy endpoint: conversation turns plus the health/diag query toggles.

The body is read only after the toggles, so the toggles answer whatever the
request carries. Blocking work (token acquisition, the turn itself) runs in
the threadpool.
"""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agentproxy.api.deps import get_conversation_service, get_diagnostics_service
from agentproxy.api.schemas.agent import AgentTurnRequest, AgentTurnResponse
from agentproxy.domain.exceptions import INVALID_PROMPT, InvalidInputError
from agentproxy.logging import new_invocation_id
from agentproxy.services.conversation_service import ConversationService
from agentproxy.services.diagnostics_service import DiagnosticsService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/agent", tags=["agent"])


async def _read_turn(request: Request) -> AgentTurnRequest:
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw.strip() else {}
    except ValueError as exc:
        raise InvalidInputError(INVALID_PROMPT, details="Body is not valid JSON.") from exc
    try:
        return AgentTurnRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(
            INVALID_PROMPT,
            details=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


@router.api_route("", methods=["GET", "POST"], response_model=None)
async def agent(
    request: Request,
    health: str | None = None,
    diag: str | None = None,
    conversation: ConversationService = Depends(get_conversation_service),
    diagnostics: DiagnosticsService = Depends(get_diagnostics_service),
) -> JSONResponse:
    log.info("invocation %s", new_invocation_id())

    if health == "1":
        token_status = await run_in_threadpool(diagnostics.health)
        return JSONResponse(token_status.model_dump(by_alias=True))
    if diag == "1":
        return JSONResponse(diagnostics.diagnostics().model_dump(by_alias=True))

    conversation.ensure_configured()
    turn = await _read_turn(request)

    result = await run_in_threadpool(conversation.handle_turn, turn.prompt, turn.thread_id)
    return JSONResponse(AgentTurnResponse.from_result(result).model_dump(by_alias=True))
