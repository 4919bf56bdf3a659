"""
Triage Application Services
===========================

Application services for ticket classification.

Runs the staged classification pipeline: complexity, skills, routing,
lead engineer and, for CRP-routed tickets, thread decomposition. The
pipeline paces itself through an injected stage scheduler and reports
progress through fixed checkpoints.
"""

import random
from dataclasses import dataclass, replace
from typing import List, Optional

from crp_engine.config import ComplexityTier, RecommendedAction, TicketStatus
from crp_engine.crp.application.services import IEngineerRepository
from crp_engine.crp.domain import LeadEngineerSelector, ThreadDecomposer
from crp_engine.shared.domain import CancellationToken, ProgressSink, ProgressTracker, round_half_up
from crp_engine.shared.infrastructure.logging import get_logger, log_latency
from crp_engine.shared.infrastructure.scheduling import IStageScheduler
from crp_engine.triage.domain import (
    ComplexityResult,
    ComplexityScorer,
    RoutingDecider,
    SkillConfidence,
    SkillIdentifier,
    Ticket,
    TicketClassifier,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class TicketAnalysis:
    """Result of one-shot synchronous analysis."""
    ticket: Ticket
    complexity: ComplexityResult
    skills: List[SkillConfidence]


@dataclass(frozen=True)
class ProcessingFeedback:
    """What a client can show while a ticket is being processed."""
    processing_stages: List[str]
    estimated_time_ms: int
    complexity_indicator: int


class ClassificationService:
    """
    Service for classifying tickets.

    Args:
        engineer_repository: Roster used for lead selection
        decomposer: Thread decomposer for CRP-routed tickets
        scheduler: Waits between pipeline stages
        rng: Random source for urgency/confidence jitter
    """

    BASE_FEEDBACK_STAGES = [
        "Analyzing ticket content",
        "Calculating complexity score",
        "Identifying required skills",
        "Determining routing recommendation",
    ]
    COMPLEX_FEEDBACK_STAGES = [
        "Finding optimal lead engineer",
        "Decomposing into skill-based threads",
        "Optimizing thread assignments",
    ]
    FEEDBACK_BASE_TIME_MS = 3000

    def __init__(
        self,
        engineer_repository: IEngineerRepository,
        decomposer: ThreadDecomposer,
        scheduler: IStageScheduler,
        rng: Optional[random.Random] = None
    ):
        self._repository = engineer_repository
        self._decomposer = decomposer
        self._scheduler = scheduler
        self._rng = rng or random.Random()

    async def classify(
        self,
        ticket: Ticket,
        progress_sink: Optional[ProgressSink] = None,
        cancellation: Optional[CancellationToken] = None
    ) -> Ticket:
        """
        Classify a ticket through the staged pipeline.

        Args:
            ticket: Ticket to classify (not modified)
            progress_sink: Optional callback receiving (percent, stage)
            cancellation: Optional token to abandon the run between stages

        Returns:
            Copy of the ticket with classification, status Classified, the
            lead engineer id when one qualifies and threads when routed to CRP
        """
        tracker = ProgressTracker(ticket.id, progress_sink, cancellation)

        with log_latency(logger, "classification_pipeline", ticket_id=ticket.id):
            tracker.report(0, "Starting AI analysis")
            await self._scheduler.wait(500)

            complexity = ComplexityScorer.score(ticket)
            tracker.report(10, "Analyzing complexity")
            await self._scheduler.wait(700)

            skill_scores = SkillIdentifier.identify(ticket)
            tracker.report(20, "Identifying required skills")
            await self._scheduler.wait(600)

            route_to_crp = RoutingDecider.should_route_to_crp(complexity.tier, ticket.urgency)
            tracker.report(25, "Determining routing recommendation")
            await self._scheduler.wait(500)

            classification = TicketClassifier.classify(
                ticket, self._rng, complexity=complexity, skill_scores=skill_scores
            )
            classified = replace(
                ticket,
                ai_classification=classification,
                status=TicketStatus.CLASSIFIED
            )

            tracker.report(30, "Finding optimal lead engineer")
            await self._scheduler.wait(800)

            lead = LeadEngineerSelector.select(classified, self._repository.list_leads())
            tracker.report(50, "Assigning lead engineer")
            await self._scheduler.wait(700)

            if lead is not None:
                classified = replace(classified, assigned_lead_id=lead.id)

            if route_to_crp:
                tracker.report(60, "Decomposing ticket into threads")
                await self._scheduler.wait(1000)

                threads = self._decomposer.decompose(classified, skill_scores=skill_scores)
                tracker.report(80, "Optimizing thread assignments")
                await self._scheduler.wait(800)

                classified = replace(classified, threads=threads)

            tracker.report(100, "AI processing complete")

        logger.info(
            "Ticket classified",
            extra={
                "ticket_id": ticket.id,
                "complexity_score": complexity.score,
                "complexity_tier": complexity.tier.value,
                "skill_tags": [s.skill.value for s in skill_scores],
                "recommended_action": classification.recommended_action.value,
                "lead_engineer_id": classified.assigned_lead_id,
                "thread_count": len(classified.threads or []),
            }
        )
        return classified

    def analyze(self, ticket: Ticket) -> TicketAnalysis:
        """
        Classify a ticket synchronously, without stages or delays.

        Returns:
            TicketAnalysis with the classified ticket copy and the raw
            complexity and skill rankings behind it
        """
        complexity = ComplexityScorer.score(ticket)
        skills = SkillIdentifier.identify(ticket)
        classification = TicketClassifier.classify(
            ticket, self._rng, complexity=complexity, skill_scores=skills
        )
        classified = replace(ticket, ai_classification=classification, status=TicketStatus.CLASSIFIED)
        return TicketAnalysis(ticket=classified, complexity=complexity, skills=skills)

    def get_processing_feedback(self, ticket: Ticket) -> ProcessingFeedback:
        """Processing stages, estimated time and a complexity indicator for a ticket."""
        classification = ticket.ai_classification
        stages = list(self.BASE_FEEDBACK_STAGES)
        if classification is None:
            return ProcessingFeedback(
                processing_stages=stages,
                estimated_time_ms=self.FEEDBACK_BASE_TIME_MS,
                complexity_indicator=50,
            )

        tier = classification.complexity_tier
        if tier == ComplexityTier.HIGH or classification.recommended_action == RecommendedAction.CRP:
            stages.extend(self.COMPLEX_FEEDBACK_STAGES)

        if tier == ComplexityTier.HIGH:
            factor = 2.0
            indicator = 85 + self._rng.random() * 15
        elif tier == ComplexityTier.MEDIUM:
            factor = 1.5
            indicator = 50 + self._rng.random() * 20
        else:
            factor = 1.0
            indicator = 20 + self._rng.random() * 20

        return ProcessingFeedback(
            processing_stages=stages,
            estimated_time_ms=round_half_up(self.FEEDBACK_BASE_TIME_MS * factor),
            complexity_indicator=min(100, round_half_up(indicator)),
        )
