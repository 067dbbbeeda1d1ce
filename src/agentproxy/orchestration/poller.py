"""Run status polling.

``decide_poll_step`` is the whole policy: a pure function of elapsed time and
the latest status. ``RunPoller`` is the thin blocking loop around it, with
the clock and sleep injectable so tests never wait on wall time.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Collection
from enum import Enum
from typing import Any, Protocol

from agentproxy.domain.exceptions import PollTimeoutError
from agentproxy.orchestration.state import TERMINAL_STATUSES, RunSnapshot

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 1000


class PollStep(str, Enum):
    CONTINUE = "continue"
    DONE = "done"
    TIMEOUT = "timeout"


class RunSource(Protocol):
    def get_run(self, thread_id: str, run_id: str) -> Any:
        ...


def decide_poll_step(
    elapsed_ms: float,
    status: str | None,
    timeout_ms: int,
    terminal_statuses: Collection[str] = TERMINAL_STATUSES,
) -> PollStep:
    """Terminal status wins over the deadline; otherwise time out once the window is used up."""
    if status in terminal_statuses:
        return PollStep.DONE
    if elapsed_ms >= timeout_ms:
        return PollStep.TIMEOUT
    return PollStep.CONTINUE


class RunPoller:
    def __init__(
        self,
        source: RunSource,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._source = source
        self._clock = clock
        self._sleep = sleep

    def poll(
        self,
        thread_id: str,
        run_id: str,
        terminal_statuses: Collection[str] = TERMINAL_STATUSES,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        timeout_ms: int = 60000,
    ) -> RunSnapshot:
        started = self._clock()
        while True:
            raw = self._source.get_run(thread_id, run_id)
            snapshot = RunSnapshot.model_validate(raw if isinstance(raw, dict) else {})
            log.info("poll run %s => %s", run_id, snapshot.status)

            elapsed_ms = (self._clock() - started) * 1000
            step = decide_poll_step(elapsed_ms, snapshot.status, timeout_ms, terminal_statuses)
            if step is PollStep.DONE:
                return snapshot
            if step is PollStep.TIMEOUT:
                raise PollTimeoutError(thread_id, run_id, snapshot.status, timeout_ms)
            self._sleep(poll_interval_ms / 1000)
