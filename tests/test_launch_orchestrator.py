"""
Tests for the staged CRP launch
"""

import asyncio

import pytest

from crp_engine.config import (
    ComplexityTier,
    LaunchReasonKind,
    LaunchState,
    SkillType,
    UrgencyLevel,
)
from crp_engine.core import LaunchCancelledException
from crp_engine.crp.application import CRPService, LaunchOrchestrator
from crp_engine.crp.domain import LaunchEvaluator
from crp_engine.crp.infrastructure import InMemoryEngineerRepository
from crp_engine.shared.domain import CancellationToken, ProgressRecorder
from crp_engine.shared.infrastructure.scheduling import IStageScheduler

from conftest import make_classification, make_ticket


def security_ticket(**overrides):
    fields = {
        "urgency": UrgencyLevel.HIGH,
        "ai_classification": make_classification(tier=ComplexityTier.HIGH, tags=[SkillType.SECURITY]),
    }
    fields.update(overrides)
    return make_ticket(**fields)


class FailingRepository(InMemoryEngineerRepository):
    def list_leads(self):
        raise RuntimeError("roster store unavailable")


class BlockingScheduler(IStageScheduler):
    """Scheduler whose waits never finish on their own."""

    def __init__(self):
        self.entered = asyncio.Event()
        self._release = asyncio.Event()

    async def wait(self, duration_ms):
        self.entered.set()
        await self._release.wait()


class TestLaunchOrchestrator:
    """Test the launch state machine"""

    @pytest.mark.asyncio
    async def test_completed_launch(self, repository, decomposer, scheduler):
        recorder = ProgressRecorder()
        orchestrator = LaunchOrchestrator(
            security_ticket(), repository, decomposer, scheduler, progress_sink=recorder
        )

        result = await orchestrator.run()

        assert orchestrator.state == LaunchState.COMPLETED
        assert result.state == LaunchState.COMPLETED
        assert result.should_launch is True
        assert result.reason_kind == LaunchReasonKind.HIGH_COMPLEXITY
        assert result.estimated_time_ms == 6000
        assert result.lead_engineer.id == "eng-004"
        assert [t.id for t in result.threads] == ["THR-001-1"]
        assert result.threads[0].required_skills == [SkillType.SECURITY]
        assert result.threads[0].assigned_engineer_id == "eng-004"

        assert [e.percent for e in recorder.events] == [15, 30, 50, 75, 90, 100]
        assert recorder.stages == LaunchEvaluator.LAUNCH_STAGES
        assert scheduler.waits == pytest.approx([300, 200, 300, 200, 100, 100])

    @pytest.mark.asyncio
    async def test_rejected_launch(self, repository, decomposer, scheduler):
        recorder = ProgressRecorder()
        orchestrator = LaunchOrchestrator(
            make_ticket(), repository, decomposer, scheduler, progress_sink=recorder
        )

        result = await orchestrator.run()

        assert orchestrator.state == LaunchState.REJECTED
        assert result.state == LaunchState.REJECTED
        assert result.should_launch is False
        assert result.reason_kind == LaunchReasonKind.NOT_CLASSIFIED
        assert result.lead_engineer is None
        assert result.threads == []
        assert recorder.events == []
        assert scheduler.waits == []

    @pytest.mark.asyncio
    async def test_error_becomes_failed_result(self, roster, decomposer, scheduler):
        orchestrator = LaunchOrchestrator(
            security_ticket(), FailingRepository(roster), decomposer, scheduler
        )

        result = await orchestrator.run()

        assert orchestrator.state == LaunchState.FAILED
        assert result.state == LaunchState.FAILED
        assert result.should_launch is False
        assert result.reason == "CRP launch failed due to system error"
        assert result.reason_kind == LaunchReasonKind.SYSTEM_ERROR
        assert result.lead_engineer is None
        assert result.threads == []

    @pytest.mark.asyncio
    async def test_cancel_between_stages(self, repository, decomposer, scheduler):
        token = CancellationToken()
        recorder = ProgressRecorder()

        def sink(percent, stage):
            recorder(percent, stage)
            if percent == 50:
                token.cancel()

        orchestrator = LaunchOrchestrator(
            security_ticket(), repository, decomposer, scheduler,
            progress_sink=sink, cancellation=token
        )

        with pytest.raises(LaunchCancelledException):
            await orchestrator.run()

        assert orchestrator.state == LaunchState.FAILED
        assert [e.percent for e in recorder.events] == [15, 30, 50]

    @pytest.mark.asyncio
    async def test_cancelled_before_start(self, repository, decomposer, scheduler):
        token = CancellationToken()
        token.cancel()
        recorder = ProgressRecorder()
        orchestrator = LaunchOrchestrator(
            security_ticket(), repository, decomposer, scheduler,
            progress_sink=recorder, cancellation=token
        )

        with pytest.raises(LaunchCancelledException) as exc_info:
            await orchestrator.run()

        assert exc_info.value.ticket_id == "TKT-2024-001"
        assert recorder.events == []
        assert scheduler.waits == []

    @pytest.mark.asyncio
    async def test_task_cancellation_fails_launch(self, repository, decomposer):
        scheduler = BlockingScheduler()
        orchestrator = LaunchOrchestrator(security_ticket(), repository, decomposer, scheduler)

        task = asyncio.create_task(orchestrator.run())
        await scheduler.entered.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert orchestrator.state == LaunchState.FAILED

    @pytest.mark.asyncio
    async def test_concurrent_launches_are_independent(self, repository, decomposer, scheduler):
        service = CRPService(repository, decomposer, scheduler)
        first, second = ProgressRecorder(), ProgressRecorder()
        other = security_ticket(
            id="TKT-2024-002",
            ai_classification=make_classification(tier=ComplexityTier.HIGH, tags=[SkillType.BACKEND]),
            subject="Order service crash",
            description="The api server returns errors",
        )

        results = await asyncio.gather(
            service.execute_launch(security_ticket(), progress_sink=first),
            service.execute_launch(other, progress_sink=second),
        )

        assert [r.state for r in results] == [LaunchState.COMPLETED, LaunchState.COMPLETED]
        assert [t.id for t in results[0].threads] == ["THR-001-1"]
        assert [t.id for t in results[1].threads] == ["THR-002-1"]
        assert [e.percent for e in first.events] == [15, 30, 50, 75, 90, 100]
        assert [e.percent for e in second.events] == [15, 30, 50, 75, 90, 100]
