"""
Tests for the staged classification pipeline
"""

import pytest

from crp_engine.config import (
    AffectedSystem,
    ComplexityTier,
    RecommendedAction,
    SkillType,
    TicketStatus,
    UrgencyLevel,
)
from crp_engine.core import LaunchCancelledException
from crp_engine.crp.infrastructure import InMemoryEngineerRepository
from crp_engine.shared.domain import CancellationToken, ProgressRecorder
from crp_engine.triage.application import ClassificationService

from conftest import make_attachments, make_classification, make_ticket


@pytest.fixture
def service(repository, decomposer, scheduler, rng):
    return ClassificationService(repository, decomposer, scheduler, rng)


def outage_ticket():
    return make_ticket(
        subject="Database outage",
        description="The database query fails with a timeout. " * 15,
        attachments=make_attachments(3),
        urgency=UrgencyLevel.CRITICAL,
        affected_system=AffectedSystem.BTP,
    )


class TestClassify:
    """Test ClassificationService.classify"""

    @pytest.mark.asyncio
    async def test_crp_ticket(self, service, scheduler):
        recorder = ProgressRecorder()
        ticket = outage_ticket()

        classified = await service.classify(ticket, progress_sink=recorder)

        classification = classified.ai_classification
        assert classification.complexity_score == 75
        assert classification.complexity_tier == ComplexityTier.HIGH
        assert classification.skill_tags == [SkillType.DATABASE]
        assert classification.recommended_action == RecommendedAction.CRP
        assert classification.confidence_score == 60
        assert 80 <= classification.urgency_score <= 99

        assert classified.status == TicketStatus.CLASSIFIED
        assert classified.assigned_lead_id == "eng-001"
        assert [t.id for t in classified.threads] == ["THR-001-1"]
        assert classified.threads[0].required_skills == [SkillType.DATABASE]

        assert [e.percent for e in recorder.events] == [0, 10, 20, 25, 30, 50, 60, 80, 100]
        assert recorder.stages[-1] == "AI processing complete"
        assert scheduler.waits == [500, 700, 600, 500, 800, 700, 1000, 800]

        # input untouched
        assert ticket.ai_classification is None
        assert ticket.status == TicketStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_standard_ticket(self, service):
        recorder = ProgressRecorder()
        ticket = make_ticket(
            subject="Expense question",
            description="How do I submit receipts",
            urgency=UrgencyLevel.LOW,
            affected_system=AffectedSystem.CONCUR,
        )

        classified = await service.classify(ticket, progress_sink=recorder)

        classification = classified.ai_classification
        assert classification.complexity_score == 18
        assert classification.complexity_tier == ComplexityTier.LOW
        assert classification.skill_tags == [SkillType.BACKEND]
        assert classification.recommended_action == RecommendedAction.STANDARD
        assert classified.assigned_lead_id == "eng-001"
        assert classified.threads is None
        assert [e.percent for e in recorder.events] == [0, 10, 20, 25, 30, 50, 100]

    @pytest.mark.asyncio
    async def test_no_lead_with_empty_roster(self, decomposer, scheduler, rng):
        service = ClassificationService(InMemoryEngineerRepository(), decomposer, scheduler, rng)
        classified = await service.classify(make_ticket())
        assert classified.assigned_lead_id is None

    @pytest.mark.asyncio
    async def test_cancelled_mid_pipeline(self, service):
        token = CancellationToken()
        recorder = ProgressRecorder()

        def sink(percent, stage):
            recorder(percent, stage)
            if percent == 25:
                token.cancel()

        with pytest.raises(LaunchCancelledException):
            await service.classify(outage_ticket(), progress_sink=sink, cancellation=token)

        assert [e.percent for e in recorder.events] == [0, 10, 20, 25]


class TestAnalyze:
    """Test synchronous analysis"""

    def test_analyze(self, service, scheduler):
        analysis = service.analyze(make_ticket())

        assert analysis.complexity.score == 30
        assert analysis.complexity.tier == ComplexityTier.LOW
        assert [s.skill for s in analysis.skills] == [SkillType.SECURITY]
        assert analysis.skills[0].confidence == 25
        assert analysis.ticket.status == TicketStatus.CLASSIFIED
        assert analysis.ticket.ai_classification.skill_tags == [SkillType.SECURITY]
        assert analysis.ticket.assigned_lead_id is None
        assert analysis.ticket.threads is None
        assert scheduler.waits == []


class TestProcessingFeedback:
    """Test processing feedback"""

    def test_unclassified(self, service):
        feedback = service.get_processing_feedback(make_ticket())
        assert len(feedback.processing_stages) == 4
        assert feedback.estimated_time_ms == 3000
        assert feedback.complexity_indicator == 50

    def test_high_complexity(self, service):
        ticket = make_ticket(ai_classification=make_classification(tier=ComplexityTier.HIGH))
        feedback = service.get_processing_feedback(ticket)

        assert len(feedback.processing_stages) == 7
        assert feedback.processing_stages[-1] == "Optimizing thread assignments"
        assert feedback.estimated_time_ms == 6000
        assert feedback.complexity_indicator == 93

    def test_medium_crp(self, service):
        ticket = make_ticket(ai_classification=make_classification(
            tier=ComplexityTier.MEDIUM, action=RecommendedAction.CRP))
        feedback = service.get_processing_feedback(ticket)

        assert len(feedback.processing_stages) == 7
        assert feedback.estimated_time_ms == 4500
        assert feedback.complexity_indicator == 60

    def test_low_standard(self, service):
        ticket = make_ticket(ai_classification=make_classification(tier=ComplexityTier.LOW))
        feedback = service.get_processing_feedback(ticket)

        assert len(feedback.processing_stages) == 4
        assert feedback.estimated_time_ms == 3000
        assert feedback.complexity_indicator == 30
