"""
Tests for progress reporting and stage scheduling
"""

import pytest

from crp_engine.core import LaunchCancelledException, ProgressOrderException
from crp_engine.shared.domain import CancellationToken, ProgressRecorder, ProgressTracker
from crp_engine.shared.infrastructure.scheduling import AsyncioStageScheduler, VirtualStageScheduler


class TestProgressTracker:
    """Test ordered checkpoint publishing"""

    def test_reports_in_order(self):
        recorder = ProgressRecorder()
        tracker = ProgressTracker("TKT-1", recorder)

        tracker.report(0, "start")
        tracker.report(0, "still starting")
        tracker.report(100, "done")

        assert [e.percent for e in recorder.events] == [0, 0, 100]
        assert recorder.stages == ["start", "still starting", "done"]
        assert tracker.events == recorder.events

    def test_backwards_progress_rejected(self):
        tracker = ProgressTracker("TKT-1")
        tracker.report(50, "half")

        with pytest.raises(ProgressOrderException) as exc_info:
            tracker.report(40, "back")

        assert exc_info.value.previous == 50
        assert exc_info.value.attempted == 40

    def test_no_events_after_cancel(self):
        token = CancellationToken()
        recorder = ProgressRecorder()
        tracker = ProgressTracker("TKT-1", recorder, token)

        tracker.report(10, "first")
        token.cancel()

        assert tracker.cancelled is True
        with pytest.raises(LaunchCancelledException) as exc_info:
            tracker.report(20, "second")
        assert exc_info.value.stage == "second"
        assert recorder.stages == ["first"]

    def test_ensure_active(self):
        token = CancellationToken()
        tracker = ProgressTracker("TKT-1", cancellation=token)
        tracker.ensure_active()

        token.cancel()
        with pytest.raises(LaunchCancelledException):
            tracker.ensure_active("next")


class TestStageSchedulers:
    """Test stage schedulers"""

    @pytest.mark.asyncio
    async def test_virtual_scheduler_records_waits(self):
        scheduler = VirtualStageScheduler()
        await scheduler.wait(500)
        await scheduler.wait(250.5)

        assert scheduler.waits == [500, 250.5]
        assert scheduler.elapsed_ms == 750.5

    @pytest.mark.asyncio
    async def test_asyncio_scheduler_scaled_to_zero(self):
        await AsyncioStageScheduler(scale=0).wait(10_000)
