"""
CRP Application Services
========================

Application services orchestrate the CRP domain rules and coordinate
them with the roster, the stage scheduler and progress reporting.

Following SOLID principles:
- Single Responsibility: the orchestrator runs exactly one launch
- Dependency Inversion: depend on abstractions (repository, providers,
  scheduler), not concrete implementations
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import List, Optional, Sequence

from crp_engine.config import LaunchReasonKind, LaunchState, SkillType
from crp_engine.core import LaunchCancelledException
from crp_engine.crp.domain import (
    CRPThresholds,
    Engineer,
    EngineerMatcher,
    IssueThread,
    LaunchDecision,
    LaunchEvaluator,
    LaunchResult,
    LeadEngineerSelector,
    ThreadAssignment,
    ThreadDecomposer,
    ThreadTemplate,
)
from crp_engine.shared.domain import (
    CancellationToken,
    ProgressSink,
    ProgressTracker,
    round_half_up,
)
from crp_engine.shared.infrastructure.logging import get_logger
from crp_engine.shared.infrastructure.scheduling import IStageScheduler
from crp_engine.triage.domain import ComplexityScorer, Ticket

logger = get_logger(__name__)


# ========== Collaborator Interfaces (Dependency Inversion) ==========

class IEngineerRepository(ABC):
    """
    Interface for engineer roster access.

    Every read returns a snapshot: later roster changes never show up in
    a list that was already returned.
    """

    @abstractmethod
    def find_by_id(self, engineer_id: str) -> Optional[Engineer]:
        """Get engineer by ID."""

    @abstractmethod
    def list_all(self) -> List[Engineer]:
        """List every engineer in roster order."""

    @abstractmethod
    def list_available(self) -> List[Engineer]:
        """List engineers whose availability is Available."""

    @abstractmethod
    def list_by_skill(self, skill: SkillType) -> List[Engineer]:
        """List engineers who list the given skill."""

    @abstractmethod
    def list_leads(self) -> List[Engineer]:
        """List engineers flagged as lead-capable."""


class IThreadTemplateProvider(ABC):
    """Interface for thread title/description text."""

    @abstractmethod
    def get_template(self, skill: SkillType) -> ThreadTemplate:
        """Get the title/description template for a skill."""

    @abstractmethod
    def get_keywords(self, skill: SkillType) -> List[str]:
        """Get keywords marking a description sentence as relevant to a skill."""


class IThreadIdGenerator(ABC):
    """Interface for ticket-scoped thread identifiers."""

    @abstractmethod
    def generate(self, ticket_id: str, sequence: int) -> str:
        """Build the id of the ``sequence``-th (1-based) thread of a ticket."""


# ========== Orchestration ==========

class LaunchOrchestrator:
    """
    Runs one CRP launch through its staged state machine.

    Evaluating -> Rejected, or Evaluating -> Running -> Completed | Failed.

    Each of the six stages reports its checkpoint, waits its share of the
    estimated launch time, then does its work. Cancellation is checked
    between stages; a cancelled run raises instead of returning.
    Any other error while Running becomes a Failed result.
    """

    STAGE_PROGRESS = [15, 30, 50, 75, 90, 100]
    STAGE_WEIGHTS = [0.3, 0.2, 0.3, 0.2, 0.1, 0.1]

    def __init__(
        self,
        ticket: Ticket,
        engineer_repository: IEngineerRepository,
        decomposer: ThreadDecomposer,
        scheduler: IStageScheduler,
        progress_sink: Optional[ProgressSink] = None,
        cancellation: Optional[CancellationToken] = None
    ):
        self._ticket = ticket
        self._repository = engineer_repository
        self._decomposer = decomposer
        self._scheduler = scheduler
        self._tracker = ProgressTracker(ticket.id, progress_sink, cancellation)
        self._state = LaunchState.EVALUATING

    @property
    def state(self) -> LaunchState:
        return self._state

    def _transition(self, state: LaunchState) -> None:
        logger.info(
            "CRP launch state changed",
            extra={"ticket_id": self._ticket.id, "from_state": self._state.value, "to_state": state.value}
        )
        self._state = state

    async def _enter_stage(self, index: int, decision: LaunchDecision) -> None:
        """Report stage ``index`` and wait its share of the launch time."""
        label = decision.launch_stages[index]
        self._tracker.report(self.STAGE_PROGRESS[index], label)
        stage_time = decision.estimated_time_ms / len(decision.launch_stages)
        await self._scheduler.wait(stage_time * self.STAGE_WEIGHTS[index])
        self._tracker.ensure_active(label)

    async def _match_thread(self, thread: IssueThread, roster: List[Engineer]) -> ThreadAssignment:
        return ThreadAssignment(thread=thread, engineer=EngineerMatcher.find_best(thread, roster))

    async def run(self) -> LaunchResult:
        """
        Execute the launch.

        Returns:
            LaunchResult in state Rejected, Completed or Failed

        Raises:
            LaunchCancelledException: the caller cancelled between stages
        """
        decision = LaunchEvaluator.evaluate(self._ticket)
        if not decision.should_launch:
            self._transition(LaunchState.REJECTED)
            return LaunchResult.rejected(decision)

        self._transition(LaunchState.RUNNING)
        try:
            # Stage 1: lead engineer
            await self._enter_stage(0, decision)
            lead = LeadEngineerSelector.select(self._ticket, self._repository.list_leads())

            # Stage 2: re-analysis, paced for the user only
            await self._enter_stage(1, decision)
            complexity = ComplexityScorer.score(self._ticket)
            logger.debug(
                "Complexity re-analysed",
                extra={"ticket_id": self._ticket.id, "score": complexity.score, "tier": complexity.tier.value}
            )

            # Stage 3: decomposition
            await self._enter_stage(2, decision)
            threads = self._decomposer.decompose(self._ticket)

            # Stage 4: per-thread matching against one roster snapshot
            await self._enter_stage(3, decision)
            roster = self._repository.list_available()
            assignments = await asyncio.gather(
                *(self._match_thread(thread, roster) for thread in threads)
            )
            threads = [
                replace(a.thread, assigned_engineer_id=a.engineer.id if a.engineer else None)
                for a in assignments
            ]

            # Stage 5: collaboration channels are opened by the caller
            await self._enter_stage(4, decision)

            # Stage 6: ready
            await self._enter_stage(5, decision)

        except (LaunchCancelledException, asyncio.CancelledError):
            logger.info("CRP launch cancelled", extra={"ticket_id": self._ticket.id})
            self._transition(LaunchState.FAILED)
            raise
        except Exception:
            logger.exception("Error during CRP launch", extra={"ticket_id": self._ticket.id})
            self._transition(LaunchState.FAILED)
            return LaunchResult(
                should_launch=False,
                reason=LaunchEvaluator.SYSTEM_ERROR_REASON,
                reason_kind=LaunchReasonKind.SYSTEM_ERROR,
                state=LaunchState.FAILED,
                launch_stages=list(decision.launch_stages),
                estimated_time_ms=decision.estimated_time_ms,
            )

        self._transition(LaunchState.COMPLETED)
        logger.info(
            "CRP launch completed",
            extra={
                "ticket_id": self._ticket.id,
                "lead_engineer_id": lead.id if lead else None,
                "thread_count": len(threads),
                "assigned_count": sum(1 for t in threads if t.assigned_engineer_id),
            }
        )
        return LaunchResult(
            should_launch=True,
            reason=decision.reason,
            reason_kind=decision.reason_kind,
            state=LaunchState.COMPLETED,
            lead_engineer=lead,
            threads=threads,
            launch_stages=list(decision.launch_stages),
            estimated_time_ms=decision.estimated_time_ms,
        )


class CRPService:
    """
    Service facade for collaborative resolution.

    Coordinates between the CRP domain rules, the roster and the stage
    scheduler. Each launch gets its own orchestrator, so tickets can be
    processed concurrently without shared state.
    """

    DECOMPOSE_STAGES = [
        (0, "Starting thread decomposition", 500),
        (30, "Analyzing ticket complexity", 700),
        (60, "Identifying thread boundaries", 800),
    ]
    MATCH_THREAD_DELAY_MS = 400

    def __init__(
        self,
        engineer_repository: IEngineerRepository,
        decomposer: ThreadDecomposer,
        scheduler: IStageScheduler
    ):
        self._repository = engineer_repository
        self._decomposer = decomposer
        self._scheduler = scheduler

    def evaluate_launch(self, ticket: Ticket) -> LaunchDecision:
        """Synchronous would-this-launch check, no progress, no side effects."""
        return LaunchEvaluator.evaluate(ticket)

    async def execute_launch(
        self,
        ticket: Ticket,
        progress_sink: Optional[ProgressSink] = None,
        cancellation: Optional[CancellationToken] = None
    ) -> LaunchResult:
        """
        Run the full staged CRP launch for a ticket.

        Args:
            ticket: Classified ticket
            progress_sink: Optional callback receiving (percent, stage)
            cancellation: Optional token to abandon the run between stages

        Returns:
            LaunchResult (Rejected, Completed or Failed)
        """
        orchestrator = LaunchOrchestrator(
            ticket,
            self._repository,
            self._decomposer,
            self._scheduler,
            progress_sink=progress_sink,
            cancellation=cancellation,
        )
        return await orchestrator.run()

    async def decompose(
        self,
        ticket: Ticket,
        progress_sink: Optional[ProgressSink] = None,
        cancellation: Optional[CancellationToken] = None
    ) -> List[IssueThread]:
        """Decompose a ticket into threads with paced progress reporting."""
        tracker = ProgressTracker(ticket.id, progress_sink, cancellation)
        for percent, label, delay in self.DECOMPOSE_STAGES:
            tracker.report(percent, label)
            await self._scheduler.wait(delay)

        tracker.ensure_active()
        threads = self._decomposer.decompose(ticket)

        tracker.report(90, "Finalizing thread creation")
        await self._scheduler.wait(500)

        tracker.report(100, "Thread decomposition complete")
        logger.info("Ticket decomposed", extra={"ticket_id": ticket.id, "thread_count": len(threads)})
        return threads

    async def match_engineers_for_threads(
        self,
        threads: Sequence[IssueThread],
        progress_sink: Optional[ProgressSink] = None,
        cancellation: Optional[CancellationToken] = None
    ) -> List[ThreadAssignment]:
        """
        Find the best engineer for each thread, one thread at a time.

        The roster snapshot is refreshed per thread, so an engineer who
        goes offline mid-run is not picked for later threads.
        """
        ticket_id = threads[0].parent_ticket_id if threads else ""
        tracker = ProgressTracker(ticket_id, progress_sink, cancellation)
        tracker.report(0, "Starting engineer matching")

        results: List[ThreadAssignment] = []
        total = len(threads)
        for index, thread in enumerate(threads):
            percent = round_half_up(index / total * 80)
            tracker.report(percent, f"Matching engineers for thread {index + 1} of {total}")
            await self._scheduler.wait(self.MATCH_THREAD_DELAY_MS)
            tracker.ensure_active()

            engineer = EngineerMatcher.find_best(thread, self._repository.list_available())
            results.append(ThreadAssignment(thread=thread, engineer=engineer))

        tracker.report(90, "Optimizing assignments")
        await self._scheduler.wait(600)

        tracker.report(100, "Engineer matching complete")
        return results

    def find_lead_engineer(self, ticket: Ticket) -> Optional[Engineer]:
        """Lead engineer under the skill-dominance rule, or None."""
        return LeadEngineerSelector.select(ticket, self._repository.list_leads())

    def find_complementary_engineers(
        self,
        primary_skills: Sequence[SkillType],
        additional_skills: Sequence[SkillType],
        exclude_ids: Sequence[str] = ()
    ) -> List[Engineer]:
        """Available engineers covering skills the team is missing."""
        return EngineerMatcher.find_complementary(
            primary_skills, additional_skills, self._repository.list_available(), exclude_ids
        )

    def calculate_workload_impact(self, engineer_id: str, thread: IssueThread) -> Optional[float]:
        """Projected workload of an engineer taking a thread (None if unknown)."""
        engineer = self._repository.find_by_id(engineer_id)
        if engineer is None:
            return None
        return EngineerMatcher.calculate_workload_impact(engineer, thread)

    @staticmethod
    def get_crp_thresholds() -> CRPThresholds:
        return LaunchEvaluator.thresholds()
