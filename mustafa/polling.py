"""Wait for platform workflows with exponential backoff and a deadline."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from mustafa.exceptions import WorkflowCancelledError, WorkflowFailedError, WorkflowTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable

    from mustafa.config import Settings
    from mustafa.models.platform import Workflow

logger = structlog.get_logger()


def wait_for_workflow(
    fetch: Callable[[Workflow], Workflow],
    workflow: Workflow,
    timeout: float = 600.0,
    base_delay: float = 1.0,
    max_delay: float = 15.0,
    cancel_event: threading.Event | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Workflow:
    """Re-fetch *workflow* until it finishes.

    The delay between fetches doubles from *base_delay* up to *max_delay* and
    never overshoots the deadline.

    Raises WorkflowFailedError if the workflow finishes unsuccessfully,
    WorkflowTimeoutError once *timeout* seconds have passed, and
    WorkflowCancelledError when *cancel_event* is set or the wait is
    interrupted with Ctrl-C.
    """
    deadline = clock() + timeout
    current = workflow
    attempt = 0
    try:
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise WorkflowCancelledError(
                    f"Stopped waiting for workflow {current.id}", workflow_id=current.id
                )
            if current.is_finished:
                if current.is_successful:
                    logger.info("Workflow finished", workflow=current.type, polls=attempt)
                    return current
                raise WorkflowFailedError(
                    f"Workflow {current.type or current.id} {current.result}: "
                    f"{current.reason or 'no reason given'}",
                    workflow_id=current.id,
                )
            remaining = deadline - clock()
            if remaining <= 0:
                raise WorkflowTimeoutError(
                    f"Workflow {current.type or current.id} did not finish within {timeout:g}s",
                    workflow_id=current.id,
                )
            delay = min(base_delay * (2**attempt), max_delay, remaining)
            logger.debug(
                "Waiting for workflow",
                workflow=current.type,
                attempt=attempt + 1,
                delay_s=round(delay, 2),
            )
            sleep(delay)
            attempt += 1
            current = fetch(current)
    except KeyboardInterrupt as exc:
        raise WorkflowCancelledError(
            f"Interrupted while waiting for workflow {current.id}", workflow_id=current.id
        ) from exc


@dataclass
class WorkflowPoller:
    """Binds a fetch function and timing settings to ``wait_for_workflow``."""

    fetch: Callable[[Workflow], Workflow]
    timeout: float = 600.0
    base_delay: float = 1.0
    max_delay: float = 15.0
    cancel_event: threading.Event = field(default_factory=threading.Event)
    sleep: Callable[[float], None] = time.sleep

    @classmethod
    def from_settings(
        cls, fetch: Callable[[Workflow], Workflow], settings: Settings
    ) -> WorkflowPoller:
        return cls(
            fetch=fetch,
            timeout=settings.workflow_timeout,
            base_delay=settings.workflow_poll_interval,
            max_delay=settings.workflow_poll_max_interval,
        )

    def wait(self, workflow: Workflow) -> Workflow:
        return wait_for_workflow(
            self.fetch,
            workflow,
            timeout=self.timeout,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            cancel_event=self.cancel_event,
            sleep=self.sleep,
        )

    def cancel(self) -> None:
        self.cancel_event.set()
