"""
Triage Domain Entities
======================

Domain entities for ticket classification.

Contains pure Python business objects; no framework or infrastructure
dependencies. Tickets are treated as values by the engine: every
operation returns a derived copy instead of mutating the input.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional, Union

from crp_engine.config import (
    AffectedSystem,
    ComplexityTier,
    RecommendedAction,
    SkillType,
    TicketStatus,
    UrgencyLevel,
)

if TYPE_CHECKING:
    from crp_engine.crp.domain.entities import IssueThread


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Attachment:
    """File attached to a ticket; only the count matters for scoring."""
    id: str
    name: str
    type: str = "application/octet-stream"
    size: int = 0
    url: str = ""


@dataclass(frozen=True)
class SkillConfidence:
    """A required skill and how strongly the ticket text points at it."""
    skill: SkillType
    confidence: float

    def __post_init__(self):
        if not 0 <= self.confidence <= 100:
            raise ValueError("Skill confidence must be between 0 and 100")


@dataclass(frozen=True)
class ComplexityResult:
    """Complexity score in [0, 100] and the tier it maps to."""
    score: int
    tier: ComplexityTier


@dataclass(frozen=True)
class Classification:
    """
    AI classification attached to a ticket.

    Immutable once produced.
    """
    urgency_score: int
    complexity_tier: ComplexityTier
    complexity_score: int
    skill_tags: List[SkillType]
    recommended_action: RecommendedAction
    confidence_score: float

    def __post_init__(self):
        """Validate score ranges."""
        if not 0 <= self.urgency_score <= 100:
            raise ValueError("Urgency score must be between 0 and 100")
        if not 0 <= self.complexity_score <= 100:
            raise ValueError("Complexity score must be between 0 and 100")
        if not 0 <= self.confidence_score <= 100:
            raise ValueError("Confidence score must be between 0 and 100")

    @property
    def is_crp_recommended(self) -> bool:
        return self.recommended_action == RecommendedAction.CRP


@dataclass
class Ticket:
    """
    Support ticket as seen by the routing engine.

    Owned by the caller. ``affected_system`` is normally an
    ``AffectedSystem`` but unknown system names are accepted and scored
    with defaults.
    """
    id: str
    subject: str
    description: str
    urgency: UrgencyLevel
    affected_system: Union[AffectedSystem, str]
    attachments: List[Attachment] = field(default_factory=list)
    status: TicketStatus = TicketStatus.SUBMITTED
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    ai_classification: Optional[Classification] = None
    threads: Optional[List["IssueThread"]] = None
    assigned_lead_id: Optional[str] = None
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None

    @property
    def full_text(self) -> str:
        """Lowercase subject and description, as scanned for keywords."""
        return f"{self.subject} {self.description}".lower()

    @property
    def attachment_count(self) -> int:
        return len(self.attachments)

    @property
    def system_name(self) -> str:
        if isinstance(self.affected_system, AffectedSystem):
            return self.affected_system.value
        return self.affected_system

    @property
    def is_classified(self) -> bool:
        return self.ai_classification is not None

    @property
    def skill_tags(self) -> List[SkillType]:
        """Ranked skill tags, empty when the ticket is not classified."""
        if self.ai_classification is None:
            return []
        return list(self.ai_classification.skill_tags)
