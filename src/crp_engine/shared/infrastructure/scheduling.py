"""
Stage Scheduling
================

Waits between pipeline stages.

The pipelines pace themselves so that progress is visible to a user.
``AsyncioStageScheduler`` really waits; ``VirtualStageScheduler`` only
advances a virtual clock, for tests and batch runs.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List


class IStageScheduler(ABC):
    """Interface for waiting between pipeline stages."""

    @abstractmethod
    async def wait(self, duration_ms: float) -> None:
        """Suspend the current pipeline for ``duration_ms`` milliseconds."""


class AsyncioStageScheduler(IStageScheduler):
    """Real-time scheduler backed by ``asyncio.sleep``."""

    def __init__(self, scale: float = 1.0):
        self._scale = scale

    async def wait(self, duration_ms: float) -> None:
        delay = max(0.0, duration_ms * self._scale) / 1000
        await asyncio.sleep(delay)


class VirtualStageScheduler(IStageScheduler):
    """
    Scheduler that never sleeps on the wall clock.

    Records each requested wait and advances ``elapsed_ms``. It still
    yields to the event loop so cancellation can land between stages.
    """

    def __init__(self):
        self.elapsed_ms = 0.0
        self.waits: List[float] = []

    async def wait(self, duration_ms: float) -> None:
        self.waits.append(duration_ms)
        self.elapsed_ms += max(0.0, duration_ms)
        await asyncio.sleep(0)
