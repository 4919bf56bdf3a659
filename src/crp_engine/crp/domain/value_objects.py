"""
CRP Domain Services
===================

Pure decision rules for collaborative resolution:
lead selection (skill dominance), thread decomposition, engineer
matching and the launch policy.

All rules operate on roster snapshots passed in by the caller and never
raise for well-formed input; "nobody qualifies" is returned as None or
an empty list.
"""

import re
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from crp_engine.config import (
    ComplexityTier,
    LaunchReasonKind,
    SkillType,
    ThreadStatus,
    UrgencyLevel,
)
from crp_engine.crp.domain.entities import (
    CRPThresholds,
    Engineer,
    IssueThread,
    LaunchDecision,
    MatchScore,
    SkillDominance,
)
from crp_engine.crp.domain.templates import (
    INTEGRATION_THREAD_TEMPLATE,
    RELEVANT_CONTENT_PREFIX,
)
from crp_engine.shared.domain import clamp, round_half_up
from crp_engine.triage.domain import RoutingDecider, SkillConfidence, SkillIdentifier, Ticket
from crp_engine.triage.domain.entities import utc_now

if TYPE_CHECKING:
    from crp_engine.crp.application.services import IThreadIdGenerator, IThreadTemplateProvider


class LeadEngineerSelector:
    """
    Skill-dominance rule for choosing a CRP lead.

    A lead is installed only when one skill clearly dominates the
    candidate's expertise across the ticket's required skills.
    """

    DOMINANCE_THRESHOLD = 0.70

    @staticmethod
    def calculate_dominance(engineer: Engineer, required_skills: Sequence[SkillType]) -> SkillDominance:
        """
        Compute an engineer's dominance over the required skills.

        The primary skill is the strictly highest expertise; equal values
        keep the skill listed first.
        """
        primary_skill: Optional[SkillType] = None
        highest = 0
        for skill in required_skills:
            level = engineer.expertise_in(skill)
            if level > highest:
                highest = level
                primary_skill = skill

        dominance = 0.0
        if primary_skill is not None:
            total = sum(engineer.expertise_in(skill) for skill in required_skills)
            dominance = engineer.expertise_in(primary_skill) / total if total > 0 else 0.0

        return SkillDominance(
            dominance_score=dominance,
            primary_skill=primary_skill,
            primary_expertise=highest,
        )

    @classmethod
    def select(cls, ticket: Ticket, roster: Iterable[Engineer]) -> Optional[Engineer]:
        """
        Pick the lead engineer for a classified ticket.

        Args:
            ticket: Ticket with a classification and skill tags
            roster: Roster snapshot

        Returns:
            The available lead-flagged engineer with the highest dominance
            at or above the threshold, or None
        """
        required_skills = ticket.skill_tags
        if not required_skills:
            return None

        candidates = [e for e in roster if e.is_available and e.is_lead_engineer]
        if not candidates:
            return None

        best: Optional[Engineer] = None
        best_score = -1.0
        for engineer in candidates:
            dominance = cls.calculate_dominance(engineer, required_skills).dominance_score
            if dominance >= cls.DOMINANCE_THRESHOLD and dominance > best_score:
                best = engineer
                best_score = dominance
        return best


class ThreadPriorityCalculator:
    """Priority (1-10) of a skill thread."""

    URGENCY_BASE = {
        UrgencyLevel.CRITICAL: 10,
        UrgencyLevel.HIGH: 8,
        UrgencyLevel.MEDIUM: 6,
        UrgencyLevel.LOW: 4,
    }
    SKILL_BONUS = {
        SkillType.SECURITY: 2,
        SkillType.DATABASE: 1,
    }
    POSITION_PENALTY = 0.5
    INTEGRATION_PRIORITY = 5

    @classmethod
    def calculate(cls, urgency: UrgencyLevel, skill: SkillType, index: int) -> int:
        """
        Args:
            urgency: Parent ticket urgency
            skill: The thread's skill
            index: 0-based position among skill threads
        """
        priority = cls.URGENCY_BASE.get(urgency, 0)
        bonus = cls.SKILL_BONUS.get(skill, 0)
        if bonus:
            priority = min(10, priority + bonus)
        priority = clamp(priority - index * cls.POSITION_PENALTY, 1, 10)
        return round_half_up(priority)


class ThreadDecomposer:
    """
    Splits a ticket into skill-scoped issue threads.

    Args:
        template_provider: Source of per-skill title/description templates
            and relevant-content keywords
        id_generator: Produces thread ids from (ticket id, 1-based sequence)
    """

    SIGNIFICANT_CONFIDENCE = 40
    FALLBACK_SKILL_COUNT = 2
    SENTENCE_SPLIT = re.compile(r"[.!?]+")

    def __init__(
        self,
        template_provider: "IThreadTemplateProvider",
        id_generator: "IThreadIdGenerator"
    ):
        self._templates = template_provider
        self._id_generator = id_generator

    def select_skills(self, skill_scores: List[SkillConfidence]) -> List[SkillConfidence]:
        """Skills above 40% confidence, else the top two regardless."""
        significant = [item for item in skill_scores if item.confidence > self.SIGNIFICANT_CONFIDENCE]
        return significant or skill_scores[:self.FALLBACK_SKILL_COUNT]

    def extract_relevant_content(self, description: str, skill: SkillType) -> Optional[str]:
        """Sentences of the description mentioning one of the skill's keywords."""
        keywords = self._templates.get_keywords(skill)
        sentences = [s for s in self.SENTENCE_SPLIT.split(description) if s.strip()]
        relevant = [
            sentence for sentence in sentences
            if any(keyword in sentence.lower() for keyword in keywords)
        ]
        if not relevant:
            return None
        return ". ".join(relevant) + "."

    def build_content(self, ticket: Ticket, skill: SkillType) -> Tuple[str, str]:
        template = self._templates.get_template(skill)
        title = template.title.replace("{subject}", ticket.subject)
        description = template.description.replace("{subject}", ticket.subject)
        relevant = self.extract_relevant_content(ticket.description, skill)
        if relevant:
            description = f"{description}{RELEVANT_CONTENT_PREFIX}{relevant}"
        return title, description

    def decompose(
        self,
        ticket: Ticket,
        skill_scores: Optional[List[SkillConfidence]] = None,
        now: Optional[datetime] = None
    ) -> List[IssueThread]:
        """
        Decompose a ticket into threads.

        One thread per selected skill, in ranking order. High-complexity
        tickets with more than one thread also get an integration thread.

        Args:
            ticket: Ticket to decompose (classification optional)
            skill_scores: Precomputed skill ranking, identified here when omitted
            now: Creation timestamp for the threads

        Returns:
            Ordered list of Open, chat-enabled threads
        """
        if skill_scores is None:
            skill_scores = SkillIdentifier.identify(ticket)
        now = now or utc_now()

        threads: List[IssueThread] = []
        for index, item in enumerate(self.select_skills(skill_scores)):
            title, description = self.build_content(ticket, item.skill)
            threads.append(IssueThread(
                id=self._id_generator.generate(ticket.id, index + 1),
                parent_ticket_id=ticket.id,
                title=title,
                description=description,
                required_skills=[item.skill],
                status=ThreadStatus.OPEN,
                priority=ThreadPriorityCalculator.calculate(ticket.urgency, item.skill, index),
                chat_enabled=True,
                created_at=now,
                updated_at=now,
            ))

        classification = ticket.ai_classification
        if (len(threads) > 1 and classification is not None
                and classification.complexity_tier == ComplexityTier.HIGH):
            threads.append(IssueThread(
                id=self._id_generator.generate(ticket.id, len(threads) + 1),
                parent_ticket_id=ticket.id,
                title=INTEGRATION_THREAD_TEMPLATE.title.replace("{subject}", ticket.subject),
                description=INTEGRATION_THREAD_TEMPLATE.description,
                required_skills=[SkillType.INTEGRATION],
                status=ThreadStatus.OPEN,
                priority=ThreadPriorityCalculator.INTEGRATION_PRIORITY,
                chat_enabled=True,
                created_at=now,
                updated_at=now,
            ))

        return threads


class EngineerMatcher:
    """Finds the best-fit engineers for threads."""

    COMPLEMENTARY_MIN_EXPERTISE = 60
    PRIMARY_OVERLAP_MIN_EXPERTISE = 70

    @staticmethod
    def score(thread: IssueThread, engineer: Engineer) -> MatchScore:
        """Average expertise over matched skills and share of skills matched."""
        levels = [
            engineer.expertise_in(skill) for skill in thread.required_skills
            if engineer.expertise_in(skill) > 0
        ]
        match_count = len(levels)
        average = sum(levels) / match_count if match_count else 0.0
        coverage = match_count / len(thread.required_skills) if thread.required_skills else 0.0
        return MatchScore(
            engineer=engineer,
            match_count=match_count,
            average_expertise=average,
            skill_coverage=coverage,
        )

    @classmethod
    def find_best(cls, thread: IssueThread, roster: Iterable[Engineer]) -> Optional[Engineer]:
        """
        Best available engineer for a thread.

        Returns:
            Engineer with the highest combined score (> 0), first listed on
            ties, or None
        """
        if not thread.required_skills:
            return None

        best: Optional[Engineer] = None
        best_score = 0.0
        for engineer in roster:
            if not engineer.is_available:
                continue
            combined = cls.score(thread, engineer).combined_score
            if combined > best_score:
                best = engineer
                best_score = combined
        return best

    @classmethod
    def find_complementary(
        cls,
        primary_skills: Sequence[SkillType],
        additional_skills: Sequence[SkillType],
        roster: Iterable[Engineer],
        exclude_ids: Sequence[str] = ()
    ) -> List[Engineer]:
        """
        Engineers who bring skills the team is still missing.

        Sorted by how many additional skills they cover (most first), then
        by overlap with the primary skills (least first).
        """
        available = [e for e in roster if e.is_available and e.id not in exclude_ids]
        if not available or not additional_skills:
            return []

        ranked = []
        for engineer in available:
            covered = [
                skill for skill in additional_skills
                if engineer.has_skill(skill)
                and engineer.expertise_in(skill) > cls.COMPLEMENTARY_MIN_EXPERTISE
            ]
            if not covered:
                continue
            overlap = sum(
                1 for skill in primary_skills
                if engineer.has_skill(skill)
                and engineer.expertise_in(skill) > cls.PRIMARY_OVERLAP_MIN_EXPERTISE
            )
            ranked.append((engineer, len(covered), overlap))

        ranked.sort(key=lambda item: (-item[1], item[2]))
        return [engineer for engineer, _, _ in ranked]

    @staticmethod
    def calculate_workload_impact(engineer: Engineer, thread: IssueThread) -> float:
        """Projected workload (capped at 100) if the engineer takes the thread."""
        base_impact = thread.priority * 3
        adjustment = sum((100 - engineer.expertise_in(skill)) / 20 for skill in thread.required_skills)
        return min(100, engineer.current_workload + base_impact + adjustment)


class LaunchEvaluator:
    """CRP launch policy: triggers, reason texts, stages and pacing."""

    LAUNCH_STAGES = [
        "Identifying optimal lead engineer based on experience",
        "Analyzing ticket complexity and skill requirements",
        "Decomposing ticket into specialized threads",
        "Matching threads with available expert engineers",
        "Initializing real-time collaboration channels",
        "CRP environment ready for collaborative resolution",
    ]
    BASE_LAUNCH_TIME_MS = 4000
    SYSTEM_ERROR_REASON = "CRP launch failed due to system error"

    @staticmethod
    def describe(kind: LaunchReasonKind, ticket: Ticket) -> str:
        """Human-readable reason for a launch decision."""
        tags = ticket.skill_tags
        if kind == LaunchReasonKind.NOT_CLASSIFIED:
            return "Ticket not yet classified by AI"
        if kind == LaunchReasonKind.CRITERIA_NOT_MET:
            return "Ticket does not meet CRP launch criteria"
        if kind == LaunchReasonKind.HIGH_COMPLEXITY:
            return f"High complexity ticket requiring specialized expertise across {len(tags)} skill domains"
        if kind == LaunchReasonKind.AI_RECOMMENDED:
            return "AI analysis recommends collaborative resolution approach"
        if kind == LaunchReasonKind.MULTI_DOMAIN:
            names = ", ".join(tag.value for tag in tags)
            return f"Multi-domain issue spanning {len(tags)} technical areas: {names}"
        if kind == LaunchReasonKind.CRITICAL_URGENCY:
            return "Critical priority ticket requiring immediate collaborative response"
        return LaunchEvaluator.SYSTEM_ERROR_REASON

    @classmethod
    def calculate_launch_time(cls, ticket: Ticket) -> int:
        """Estimated launch duration in milliseconds."""
        classification = ticket.ai_classification
        if classification is None:
            return 0

        multiplier = 1.0
        if classification.complexity_tier == ComplexityTier.HIGH:
            multiplier += 0.5
        if classification.complexity_tier == ComplexityTier.MEDIUM:
            multiplier += 0.2
        if len(classification.skill_tags) >= 4:
            multiplier += 0.3
        if len(classification.skill_tags) >= 6:
            multiplier += 0.2
        if ticket.urgency == UrgencyLevel.CRITICAL:
            multiplier -= 0.2

        return round_half_up(cls.BASE_LAUNCH_TIME_MS * max(0.8, multiplier))

    @classmethod
    def evaluate(cls, ticket: Ticket) -> LaunchDecision:
        """
        Decide whether a ticket would launch CRP. No side effects.
        """
        kind = RoutingDecider.launch_trigger(ticket)
        reason = cls.describe(kind, ticket)
        if not RoutingDecider.is_launch_trigger(kind):
            return LaunchDecision(should_launch=False, reason=reason, reason_kind=kind)

        return LaunchDecision(
            should_launch=True,
            reason=reason,
            reason_kind=kind,
            launch_stages=list(cls.LAUNCH_STAGES),
            estimated_time_ms=cls.calculate_launch_time(ticket),
        )

    @staticmethod
    def thresholds() -> CRPThresholds:
        return CRPThresholds(
            skill_count_threshold=RoutingDecider.MULTI_DOMAIN_SKILL_COUNT,
            lead_dominance_threshold=LeadEngineerSelector.DOMINANCE_THRESHOLD,
        )
