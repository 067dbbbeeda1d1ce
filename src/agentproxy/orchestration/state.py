"""Run/turn value types and the response-shape tolerances of the agent service.

The composite "create thread and run" response is not rigidly shaped across
API versions, so identifiers are located through ordered candidate field
paths. The first path that resolves to a non-empty string wins.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed", "cancelled", "expired"})

NO_OUTPUT_PLACEHOLDER = "(no output)"

FieldPath = tuple[str, ...]

# Priority order is part of the contract.
THREAD_ID_FIELDS: tuple[FieldPath, ...] = (("thread_id",), ("thread", "id"))
RUN_ID_FIELDS: tuple[FieldPath, ...] = (("id",), ("run_id",), ("run", "id"))


def first_present(payload: Any, candidates: tuple[FieldPath, ...]) -> str | None:
    """Resolve the first candidate path that yields a non-empty string."""
    for path in candidates:
        node = payload
        for key in path:
            if not isinstance(node, dict):
                node = None
                break
            node = node.get(key)
        if isinstance(node, str) and node:
            return node
    return None


class RunSnapshot(BaseModel):
    """Full run object as last observed; unknown remote fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    thread_id: str | None = None
    status: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class TurnResult(BaseModel):
    status: str
    thread_id: str
    run_id: str
    output: str
