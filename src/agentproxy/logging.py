"""Package logger plus redaction helpers for log lines and error payloads.

Nothing logged through here may carry a bearer token or request/response
payload content; remote diagnostics are cut down with ``excerpt()`` first.
"""
from __future__ import annotations

import json
import logging
import sys
import uuid
from typing import Any
from urllib.parse import urlsplit

EXCERPT_LIMIT = 800

_RUN_ID = uuid.uuid4().hex[:12]


class _RunIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID
        return True


def _build_logger() -> logging.Logger:
    log = logging.getLogger("agentproxy")
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(run_id)s] %(name)s: %(message)s")
        )
        handler.addFilter(_RunIdFilter())
        log.addHandler(handler)
        log.setLevel(logging.INFO)
    return log


logger = _build_logger()


def get_run_id() -> str:
    """Identifier of this process, stamped on every log line."""
    return _RUN_ID


def new_invocation_id() -> str:
    return uuid.uuid4().hex


def redact_endpoint(url: str | None) -> dict[str, str]:
    """Reduce a project endpoint to host + project name.

    ``https://acct.services.ai.azure.com/api/projects/myProject`` becomes
    ``{"host": "acct.services.ai.azure.com", "project": "myProject",
    "path": "/api/projects/<redacted>"}``.
    """
    if not url:
        return {"host": "<invalid>", "project": "<invalid>", "path": "<invalid>"}
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return {"host": "<invalid>", "project": "<invalid>", "path": "<invalid>"}
    segments = [s for s in parts.path.split("/") if s]
    project = segments[2] if len(segments) > 2 else "<unknown>"
    return {"host": parts.netloc, "project": project, "path": "/api/projects/<redacted>"}


def excerpt(payload: Any, limit: int = EXCERPT_LIMIT) -> str:
    """Bounded text rendering of an arbitrary (possibly JSON) payload."""
    if payload is None:
        return ""
    if isinstance(payload, str):
        text = payload
    else:
        try:
            text = json.dumps(payload, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            text = str(payload)
    return text[:limit]
