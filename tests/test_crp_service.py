"""
Tests for the CRP service facade
"""

import pytest

from crp_engine.config import AvailabilityStatus, ComplexityTier, SkillType
from crp_engine.core import LaunchCancelledException
from crp_engine.crp.application import CRPService
from crp_engine.crp.domain import IssueThread
from crp_engine.shared.domain import CancellationToken, ProgressRecorder

from conftest import make_classification, make_ticket


def make_thread(thread_id, skills, priority=5):
    return IssueThread(
        id=thread_id,
        parent_ticket_id="TKT-2024-001",
        title="Thread",
        description="Thread description",
        required_skills=list(skills),
        priority=priority,
    )


@pytest.fixture
def service(repository, decomposer, scheduler):
    return CRPService(repository, decomposer, scheduler)


class TestDecompose:
    """Test paced decomposition"""

    @pytest.mark.asyncio
    async def test_checkpoints(self, service, scheduler):
        recorder = ProgressRecorder()

        threads = await service.decompose(make_ticket(), progress_sink=recorder)

        assert [t.required_skills for t in threads] == [[SkillType.SECURITY]]
        assert [e.percent for e in recorder.events] == [0, 30, 60, 90, 100]
        assert recorder.stages[-1] == "Thread decomposition complete"
        assert scheduler.waits == [500, 700, 800, 500]

    @pytest.mark.asyncio
    async def test_cancelled(self, service):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(LaunchCancelledException):
            await service.decompose(make_ticket(), cancellation=token)


class TestMatchEngineers:
    """Test per-thread engineer matching"""

    @pytest.mark.asyncio
    async def test_two_threads(self, service, scheduler):
        recorder = ProgressRecorder()
        threads = [
            make_thread("THR-001-1", [SkillType.DATABASE]),
            make_thread("THR-001-2", [SkillType.SECURITY]),
        ]

        assignments = await service.match_engineers_for_threads(threads, progress_sink=recorder)

        assert [a.engineer.id for a in assignments] == ["eng-003", "eng-004"]
        assert [a.thread.id for a in assignments] == ["THR-001-1", "THR-001-2"]
        assert [e.percent for e in recorder.events] == [0, 0, 40, 90, 100]
        assert recorder.stages[1] == "Matching engineers for thread 1 of 2"
        assert scheduler.waits == [400, 400, 600]

    @pytest.mark.asyncio
    async def test_three_thread_checkpoints(self, service):
        recorder = ProgressRecorder()
        threads = [make_thread(f"THR-001-{i}", [SkillType.CLOUD]) for i in range(1, 4)]

        await service.match_engineers_for_threads(threads, progress_sink=recorder)

        assert [e.percent for e in recorder.events] == [0, 0, 27, 53, 90, 100]

    @pytest.mark.asyncio
    async def test_unmatched_thread(self, service):
        assignments = await service.match_engineers_for_threads(
            [make_thread("THR-001-1", [])]
        )
        assert assignments[0].engineer is None

    @pytest.mark.asyncio
    async def test_roster_refreshed_per_thread(self, service, repository):
        threads = [
            make_thread("THR-001-1", [SkillType.DATABASE]),
            make_thread("THR-001-2", [SkillType.DATABASE]),
        ]

        def sink(percent, stage):
            if stage == "Matching engineers for thread 2 of 2":
                repository.update_availability("eng-003", AvailabilityStatus.BUSY)

        assignments = await service.match_engineers_for_threads(threads, progress_sink=sink)

        assert [a.engineer.id for a in assignments] == ["eng-003", "eng-001"]

    @pytest.mark.asyncio
    async def test_no_threads(self, service):
        recorder = ProgressRecorder()
        assert await service.match_engineers_for_threads([], progress_sink=recorder) == []
        assert [e.percent for e in recorder.events] == [0, 90, 100]


class TestRosterQueries:
    """Test roster-backed helpers"""

    def test_evaluate_launch(self, service):
        ticket = make_ticket(ai_classification=make_classification(tier=ComplexityTier.HIGH))
        assert service.evaluate_launch(ticket).should_launch is True

    def test_find_lead_engineer(self, service):
        ticket = make_ticket(ai_classification=make_classification(tags=[SkillType.SECURITY]))
        assert service.find_lead_engineer(ticket).id == "eng-004"

    def test_find_complementary_engineers(self, service):
        result = service.find_complementary_engineers(
            [SkillType.DATABASE], [SkillType.ANALYTICS, SkillType.CLOUD], exclude_ids=["eng-008"]
        )
        assert [e.id for e in result] == ["eng-004", "eng-001", "eng-003"]

    def test_calculate_workload_impact(self, service):
        thread = make_thread("THR-001-1", [SkillType.DATABASE], priority=8)
        assert service.calculate_workload_impact("eng-001", thread) == pytest.approx(54.75)
        assert service.calculate_workload_impact("eng-999", thread) is None

    def test_thresholds(self):
        thresholds = CRPService.get_crp_thresholds()
        assert thresholds.skill_count_threshold == 3
        assert thresholds.lead_dominance_threshold == 0.70
