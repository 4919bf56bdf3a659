"""
Triage Domain Services
======================

Stateless scoring rules for ticket triage.

Following the calculator style used across the domain layer - all
scoring logic in one place, pure functions over entities. The only
non-deterministic inputs (urgency and confidence jitter) come from an
injected ``random.Random``.
"""

import random
from typing import List, Optional

from crp_engine.config import (
    ComplexityTier,
    LaunchReasonKind,
    RecommendedAction,
    UrgencyLevel,
    ACCEPTING_REASON_KINDS,
)
from crp_engine.shared.domain import clamp, round_half_up
from crp_engine.triage.domain import catalog
from crp_engine.triage.domain.entities import (
    Classification,
    ComplexityResult,
    SkillConfidence,
    Ticket,
)


class ComplexityScorer:
    """
    Scores how complex a ticket is from its text and metadata.

    Score = description length + attachments + urgency + keywords +
    affected system, each factor capped, total clamped to [0, 100].
    """

    @staticmethod
    def description_points(description: str) -> int:
        length = len(description)
        for threshold, points in catalog.DESCRIPTION_LENGTH_BUCKETS:
            if length > threshold:
                return points
        return catalog.DESCRIPTION_LENGTH_MINIMUM

    @staticmethod
    def attachment_points(attachment_count: int) -> int:
        return min(attachment_count * catalog.ATTACHMENT_POINTS, catalog.ATTACHMENT_CAP)

    @staticmethod
    def urgency_points(urgency: UrgencyLevel) -> int:
        return catalog.URGENCY_COMPLEXITY_WEIGHT.get(urgency, 0)

    @staticmethod
    def keyword_points(text: str) -> int:
        """Each keyword counts once; the total is capped."""
        lowered = text.lower()
        total = sum(
            weight for term, weight in catalog.COMPLEXITY_KEYWORDS.items()
            if term in lowered
        )
        return min(total, catalog.KEYWORD_SCORE_CAP)

    @staticmethod
    def system_points(system_name: str) -> int:
        return catalog.SYSTEM_COMPLEXITY.get(system_name, catalog.DEFAULT_SYSTEM_COMPLEXITY)

    @staticmethod
    def tier_for(score: int) -> ComplexityTier:
        if score >= catalog.HIGH_TIER_THRESHOLD:
            return ComplexityTier.HIGH
        if score >= catalog.MEDIUM_TIER_THRESHOLD:
            return ComplexityTier.MEDIUM
        return ComplexityTier.LOW

    @classmethod
    def score(cls, ticket: Ticket) -> ComplexityResult:
        """
        Score a ticket.

        Args:
            ticket: Ticket to analyze

        Returns:
            ComplexityResult with the clamped score and its tier
        """
        total = (
            cls.description_points(ticket.description)
            + cls.attachment_points(ticket.attachment_count)
            + cls.urgency_points(ticket.urgency)
            + cls.keyword_points(ticket.full_text)
            + cls.system_points(ticket.system_name)
        )
        total = int(clamp(total, 0, 100))
        return ComplexityResult(score=total, tier=cls.tier_for(total))


class SkillIdentifier:
    """Infers required skills from keyword coverage per skill."""

    @staticmethod
    def keyword_confidence(text: str, keywords: List[str]) -> float:
        if not keywords:
            return 0.0
        matched = sum(1 for keyword in keywords if keyword in text)
        return min(100.0, matched / len(keywords) * 100)

    @staticmethod
    def fallback_for(system_name: str) -> List[SkillConfidence]:
        pairs = catalog.SYSTEM_FALLBACK_SKILLS.get(system_name, catalog.DEFAULT_FALLBACK_SKILLS)
        return [SkillConfidence(skill, float(confidence)) for skill, confidence in pairs]

    @classmethod
    def identify(cls, ticket: Ticket) -> List[SkillConfidence]:
        """
        Rank the skills a ticket needs.

        Skills under the minimum confidence are dropped. When nothing is
        left, the affected system's default skills are used instead.

        Returns:
            Skills sorted by confidence, highest first (stable on ties)
        """
        text = ticket.full_text
        scores = []
        for skill, keywords in catalog.SKILL_KEYWORDS.items():
            confidence = cls.keyword_confidence(text, keywords)
            if confidence >= catalog.MIN_SKILL_CONFIDENCE:
                scores.append(SkillConfidence(skill, confidence))

        if not scores:
            scores = cls.fallback_for(ticket.system_name)

        return sorted(scores, key=lambda item: item.confidence, reverse=True)


class RoutingDecider:
    """Decides whether a ticket belongs in collaborative resolution."""

    MULTI_DOMAIN_SKILL_COUNT = 3

    @staticmethod
    def should_route_to_crp(tier: ComplexityTier, urgency: UrgencyLevel) -> bool:
        """High complexity, or medium complexity with high/critical urgency."""
        return tier == ComplexityTier.HIGH or (
            tier == ComplexityTier.MEDIUM
            and urgency in (UrgencyLevel.CRITICAL, UrgencyLevel.HIGH)
        )

    @classmethod
    def launch_trigger(cls, ticket: Ticket) -> LaunchReasonKind:
        """
        Find the first launch trigger that holds for a ticket.

        Order: complexity High, AI recommends CRP, three or more skills,
        critical urgency with non-Low complexity.

        Returns:
            The triggering reason kind, NOT_CLASSIFIED or CRITERIA_NOT_MET
        """
        classification = ticket.ai_classification
        if classification is None:
            return LaunchReasonKind.NOT_CLASSIFIED

        if classification.complexity_tier == ComplexityTier.HIGH:
            return LaunchReasonKind.HIGH_COMPLEXITY
        if classification.recommended_action == RecommendedAction.CRP:
            return LaunchReasonKind.AI_RECOMMENDED
        if len(classification.skill_tags) >= cls.MULTI_DOMAIN_SKILL_COUNT:
            return LaunchReasonKind.MULTI_DOMAIN
        if (ticket.urgency == UrgencyLevel.CRITICAL
                and classification.complexity_tier != ComplexityTier.LOW):
            return LaunchReasonKind.CRITICAL_URGENCY
        return LaunchReasonKind.CRITERIA_NOT_MET

    @classmethod
    def evaluate_for_crp_launch(cls, ticket: Ticket) -> bool:
        return cls.is_launch_trigger(cls.launch_trigger(ticket))

    @staticmethod
    def is_launch_trigger(kind: LaunchReasonKind) -> bool:
        return kind in ACCEPTING_REASON_KINDS


class ScoreJitter:
    """Decorative randomness for urgency and confidence scores."""

    @staticmethod
    def urgency_score(urgency: UrgencyLevel, rng: random.Random) -> int:
        """Base of the urgency band plus 0-19."""
        base = catalog.URGENCY_SCORE_BASE.get(urgency, 0)
        return base + rng.randrange(catalog.URGENCY_BAND_WIDTH)

    @staticmethod
    def confidence_score(
        complexity_score: int,
        skill_scores: List[SkillConfidence],
        rng: random.Random
    ) -> float:
        """
        Weighted skill confidence and simplicity, jittered, clamped to [60, 95].

        Higher complexity lowers confidence.
        """
        if skill_scores:
            average = sum(item.confidence for item in skill_scores) / len(skill_scores)
        else:
            average = 50.0
        complexity_factor = max(0, 100 - complexity_score) / 100
        weighted = average * 0.7 + complexity_factor * 100 * 0.3
        jitter = rng.random() * catalog.CONFIDENCE_JITTER - catalog.CONFIDENCE_JITTER / 2
        return clamp(
            round_half_up(weighted) + jitter,
            catalog.CONFIDENCE_FLOOR,
            catalog.CONFIDENCE_CEILING,
        )


class TicketClassifier:
    """Builds a Classification from the individual scoring rules."""

    @staticmethod
    def classify(
        ticket: Ticket,
        rng: random.Random,
        complexity: Optional[ComplexityResult] = None,
        skill_scores: Optional[List[SkillConfidence]] = None
    ) -> Classification:
        """
        Classify a ticket in one synchronous step.

        Args:
            ticket: Ticket to classify
            rng: Random source for urgency/confidence jitter
            complexity: Precomputed complexity, scored here when omitted
            skill_scores: Precomputed skills, identified here when omitted
        """
        if complexity is None:
            complexity = ComplexityScorer.score(ticket)
        if skill_scores is None:
            skill_scores = SkillIdentifier.identify(ticket)

        route_to_crp = RoutingDecider.should_route_to_crp(complexity.tier, ticket.urgency)
        return Classification(
            urgency_score=ScoreJitter.urgency_score(ticket.urgency, rng),
            complexity_tier=complexity.tier,
            complexity_score=complexity.score,
            skill_tags=[item.skill for item in skill_scores],
            recommended_action=RecommendedAction.CRP if route_to_crp else RecommendedAction.STANDARD,
            confidence_score=ScoreJitter.confidence_score(complexity.score, skill_scores, rng),
        )
