"""Tests for workflow polling with backoff, deadline and cancellation."""

from __future__ import annotations

import threading

import pytest

from mustafa.exceptions import WorkflowCancelledError, WorkflowFailedError, WorkflowTimeoutError
from mustafa.models.platform import Workflow
from mustafa.polling import WorkflowPoller, wait_for_workflow

PENDING = Workflow(id="wf-1", type="change_site_service_level")


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def finishes_after(polls: int, result: str = "succeeded"):
    calls = {"count": 0}

    def fetch(wf: Workflow) -> Workflow:
        calls["count"] += 1
        if calls["count"] >= polls:
            return wf.model_copy(update={"result": result, "reason": "card declined"})
        return wf

    return fetch, calls


class TestWaitForWorkflow:
    def test_already_finished_does_not_poll(self):
        fetch, calls = finishes_after(1)
        done = PENDING.model_copy(update={"result": "succeeded"})
        assert wait_for_workflow(fetch, done, sleep=lambda _s: None) is done
        assert calls["count"] == 0

    def test_backoff_doubles_and_caps(self):
        clock = FakeClock()
        fetch, calls = finishes_after(5)

        result = wait_for_workflow(
            fetch, PENDING, timeout=100, base_delay=1, max_delay=4, sleep=clock.sleep, clock=clock
        )

        assert result.is_successful
        assert calls["count"] == 5
        assert clock.sleeps == [1, 2, 4, 4, 4]

    def test_failure_raises(self):
        fetch, _ = finishes_after(2, result="failed")
        with pytest.raises(WorkflowFailedError, match="card declined") as excinfo:
            wait_for_workflow(fetch, PENDING, sleep=lambda _s: None)
        assert excinfo.value.workflow_id == "wf-1"

    def test_times_out(self):
        clock = FakeClock()

        with pytest.raises(WorkflowTimeoutError, match="within 10s"):
            wait_for_workflow(
                lambda wf: wf,
                PENDING,
                timeout=10,
                base_delay=1,
                max_delay=4,
                sleep=clock.sleep,
                clock=clock,
            )
        # The last sleep is trimmed so the deadline is never overshot.
        assert sum(clock.sleeps) == pytest.approx(10)

    def test_cancel_event(self):
        cancel = threading.Event()

        def fetch(wf: Workflow) -> Workflow:
            cancel.set()
            return wf

        with pytest.raises(WorkflowCancelledError):
            wait_for_workflow(fetch, PENDING, cancel_event=cancel, sleep=lambda _s: None)

    def test_keyboard_interrupt_cancels(self):
        def interrupted(_seconds: float) -> None:
            raise KeyboardInterrupt

        with pytest.raises(WorkflowCancelledError, match="Interrupted"):
            wait_for_workflow(lambda wf: wf, PENDING, sleep=interrupted)


class TestWorkflowPoller:
    def test_from_settings(self, settings):
        poller = WorkflowPoller.from_settings(lambda wf: wf, settings)
        assert poller.timeout == 5.0
        assert poller.base_delay == 0.01
        assert poller.max_delay == 0.02

    def test_wait_and_cancel(self):
        fetch, _ = finishes_after(2)
        poller = WorkflowPoller(fetch=fetch, sleep=lambda _s: None)
        assert poller.wait(PENDING).is_successful

        poller.cancel()
        with pytest.raises(WorkflowCancelledError):
            poller.wait(PENDING)
