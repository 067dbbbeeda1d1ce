"""Locate the agent's reply text in a list-messages response.

Ordering of the message list is not guaranteed by the service. When every
assistant message carries a numeric ``created_at`` the newest one wins
whatever the list order; otherwise the first assistant message in list order
is taken (the service lists newest first by default). Text blocks
are accepted in both the nested (``{"text": {"value": ...}}``) and flat
(``{"value": ...}``) shapes.
"""

from __future__ import annotations

from typing import Any


def message_items(payload: Any) -> list[dict[str, Any]]:
    """Accept either a bare message list or the ``{"data": [...]}`` envelope."""
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []
    return [m for m in payload if isinstance(m, dict)]


def _find_assistant(messages: list[dict[str, Any]]) -> dict[str, Any] | None:
    assistants = [m for m in messages if m.get("role") == "assistant"]
    if not assistants:
        return None
    stamps = [m.get("created_at") for m in assistants]
    if all(isinstance(s, (int, float)) and not isinstance(s, bool) for s in stamps):
        # max() keeps the earliest list position on ties.
        return max(assistants, key=lambda m: m["created_at"])
    return assistants[0]


def _block_text(block: dict[str, Any]) -> str | None:
    nested = block.get("text")
    if isinstance(nested, dict) and isinstance(nested.get("value"), str):
        return nested["value"]
    if isinstance(block.get("value"), str):
        return block["value"]
    return None


def extract_last_assistant_text(payload: Any) -> str | None:
    """Text of the first text block of the latest assistant message, or ``None``."""
    message = _find_assistant(message_items(payload))
    if message is None:
        return None
    content = message.get("content")
    if not isinstance(content, list):
        return None
    for block in content:
        if isinstance(block, dict) and block.get("type") == "text":
            return _block_text(block)
    return None
