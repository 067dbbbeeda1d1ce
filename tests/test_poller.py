"""Pure tests for run polling: fake clock, scripted run source, no HTTP."""
from __future__ import annotations

import pytest

from agentproxy.domain.exceptions import PollTimeoutError
from agentproxy.orchestration.poller import PollStep, RunPoller, decide_poll_step
from agentproxy.orchestration.state import TERMINAL_STATUSES


class ScriptedRuns:
    """Returns statuses in order; the last one repeats forever."""

    def __init__(self, *statuses: str, extra: dict | None = None) -> None:
        self.statuses = list(statuses)
        self.extra = extra or {}
        self.polls = 0

    def get_run(self, thread_id: str, run_id: str) -> dict:
        idx = min(self.polls, len(self.statuses) - 1)
        self.polls += 1
        return {"id": run_id, "thread_id": thread_id, "status": self.statuses[idx], **self.extra}


def _poller(source, clock) -> RunPoller:
    return RunPoller(source, clock=clock, sleep=clock.sleep)


# -------------------------------------------------------------------
# Transition function
# -------------------------------------------------------------------
@pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES))
def test_terminal_status_is_done_even_past_deadline(status):
    assert decide_poll_step(0, status, 1000) is PollStep.DONE
    assert decide_poll_step(5000, status, 1000) is PollStep.DONE


@pytest.mark.parametrize("status", ["queued", "in_progress", "requires_action", "cancelling", None])
def test_non_terminal_status_continues_until_deadline(status):
    assert decide_poll_step(999, status, 1000) is PollStep.CONTINUE
    assert decide_poll_step(1000, status, 1000) is PollStep.TIMEOUT


def test_custom_terminal_set_is_honoured():
    assert decide_poll_step(0, "requires_action", 1000, {"requires_action"}) is PollStep.DONE
    assert decide_poll_step(0, "completed", 1000, {"requires_action"}) is PollStep.CONTINUE


# -------------------------------------------------------------------
# Loop
# -------------------------------------------------------------------
def test_poll_returns_full_snapshot_on_completion(fake_clock):
    source = ScriptedRuns("queued", "in_progress", "completed", extra={"usage": {"total_tokens": 7}})
    snapshot = _poller(source, fake_clock).poll("t1", "r1", timeout_ms=60000)

    assert snapshot.status == "completed"
    assert snapshot.id == "r1"
    assert snapshot.thread_id == "t1"
    assert snapshot.model_extra["usage"] == {"total_tokens": 7}
    assert source.polls == 3
    assert fake_clock.sleeps == [1.0, 1.0]


@pytest.mark.parametrize("terminal", ["failed", "cancelled", "expired"])
def test_poll_returns_failure_statuses_without_judging_them(fake_clock, terminal):
    source = ScriptedRuns("queued", terminal, "completed")
    snapshot = _poller(source, fake_clock).poll("t1", "r1")

    assert snapshot.status == terminal
    # Never polls again after a terminal status.
    assert source.polls == 2


def test_poll_times_out_with_bounded_poll_count(fake_clock):
    source = ScriptedRuns("in_progress")
    with pytest.raises(PollTimeoutError) as info:
        _poller(source, fake_clock).poll("t1", "r2", poll_interval_ms=1000, timeout_ms=2000)

    assert 1 <= source.polls <= 3  # floor(2000 / 1000) ± 1
    err = info.value
    assert err.status_code == 504
    assert err.details == {"threadId": "t1", "runId": "r2", "lastStatus": "in_progress"}


def test_poll_interval_is_constant(fake_clock):
    source = ScriptedRuns("queued", "queued", "queued", "queued", "completed")
    _poller(source, fake_clock).poll("t1", "r1", poll_interval_ms=250, timeout_ms=60000)
    assert fake_clock.sleeps == [0.25] * 4


def test_non_object_run_payload_is_treated_as_non_terminal(fake_clock):
    class TextRuns:
        polls = 0

        def get_run(self, thread_id, run_id):
            self.polls += 1
            return "gateway says hi"

    source = TextRuns()
    with pytest.raises(PollTimeoutError) as info:
        _poller(source, fake_clock).poll("t1", "r1", poll_interval_ms=1000, timeout_ms=1000)
    assert info.value.last_status is None
    assert source.polls == 2
