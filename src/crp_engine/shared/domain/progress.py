"""
Pipeline Progress
=================

Progress reporting primitives shared by every staged pipeline.

A pipeline announces discrete ``(percent, stage)`` checkpoints. The
``ProgressTracker`` pushes them to an optional sink in order, refuses to
move backwards, and goes quiet once the run has been cancelled.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from crp_engine.core import LaunchCancelledException, ProgressOrderException

ProgressSink = Callable[[int, str], None]


@dataclass(frozen=True)
class ProgressEvent:
    """A single checkpoint reported by a pipeline."""
    percent: int
    stage: str


class CancellationToken:
    """
    Cooperative cancellation flag.

    Pipelines check it between stages only, so a stage is never
    half-applied.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the pipeline holding this token."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ProgressRecorder:
    """Sink that keeps every event it receives (used by the HTTP layer)."""

    def __init__(self):
        self.events: List[ProgressEvent] = []

    def __call__(self, percent: int, stage: str) -> None:
        self.events.append(ProgressEvent(percent, stage))

    @property
    def stages(self) -> List[str]:
        return [event.stage for event in self.events]


class ProgressTracker:
    """
    Ordered checkpoint publisher for one pipeline run.

    Args:
        ticket_id: Ticket the run belongs to (used in cancellation errors)
        sink: Optional callable receiving ``(percent, stage)``
        cancellation: Optional token checked before each checkpoint
    """

    def __init__(
        self,
        ticket_id: str,
        sink: Optional[ProgressSink] = None,
        cancellation: Optional[CancellationToken] = None
    ):
        self._ticket_id = ticket_id
        self._sink = sink
        self._cancellation = cancellation
        self._last_percent = 0
        self.events: List[ProgressEvent] = []

    @property
    def cancelled(self) -> bool:
        return self._cancellation is not None and self._cancellation.cancelled

    def ensure_active(self, stage: Optional[str] = None) -> None:
        """Raise if the run was cancelled; called between stages."""
        if self.cancelled:
            raise LaunchCancelledException(self._ticket_id, stage)

    def report(self, percent: int, stage: str) -> None:
        """
        Publish a checkpoint.

        Raises:
            LaunchCancelledException: the run was cancelled
            ProgressOrderException: percent is lower than the previous one
        """
        self.ensure_active(stage)
        if percent < self._last_percent:
            raise ProgressOrderException(self._last_percent, percent)
        self._last_percent = percent

        event = ProgressEvent(int(percent), stage)
        self.events.append(event)
        if self._sink is not None:
            self._sink(event.percent, event.stage)
