"""Agent proxy DTOs: pure Pydantic. Wire names are camelCase for the browser client."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agentproxy.orchestration.state import TurnResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AgentTurnRequest(_CamelModel):
    prompt: str = Field(min_length=1)
    thread_id: str | None = Field(default=None, alias="threadId")


class AgentTurnResponse(_CamelModel):
    status: str
    thread_id: str = Field(alias="threadId")
    run_id: str = Field(alias="runId")
    output: str

    @classmethod
    def from_result(cls, result: TurnResult) -> AgentTurnResponse:
        return cls(
            status=result.status,
            thread_id=result.thread_id,
            run_id=result.run_id,
            output=result.output,
        )


class HealthResponse(_CamelModel):
    token_acquired: bool = Field(alias="tokenAcquired")


class DiagnosticsResponse(_CamelModel):
    endpoint_set: bool = Field(alias="endpointSet")
    agent_set: bool = Field(alias="agentSet")
    endpoint_host: str = Field(alias="endpointHost")
    project: str
    timeout_ms: int = Field(alias="timeoutMs")


class ErrorResponse(BaseModel):
    error: str
    details: Any = None
