"""
CRP Domain Entities
===================

Pure Python domain entities for collaborative resolution.

Engineers are read as snapshots from the roster; threads are created by
the decomposer and only ever replaced (never mutated) by the engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from crp_engine.config import (
    AvailabilityStatus,
    ComplexityTier,
    LaunchReasonKind,
    LaunchState,
    SkillType,
    ThreadStatus,
    UrgencyLevel,
)
from crp_engine.triage.domain.entities import utc_now


@dataclass
class Engineer:
    """
    Engineer entity from the roster.

    ``expertise`` holds proficiency (0-100) only for skills the engineer
    has meaningfully; missing skills count as 0.
    """
    id: str
    name: str
    skills: List[SkillType] = field(default_factory=list)
    availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    current_workload: int = 0
    expertise: Dict[SkillType, int] = field(default_factory=dict)
    is_lead_engineer: bool = False
    email: Optional[str] = None
    department: Optional[str] = None
    avatar: Optional[str] = None

    def __post_init__(self):
        """Validate workload and expertise ranges."""
        if not 0 <= self.current_workload <= 100:
            raise ValueError("current_workload must be between 0 and 100")
        for skill, level in self.expertise.items():
            if not 0 <= level <= 100:
                raise ValueError(f"expertise for {skill} must be between 0 and 100")

    @property
    def is_available(self) -> bool:
        return self.availability == AvailabilityStatus.AVAILABLE

    def expertise_in(self, skill: SkillType) -> int:
        return self.expertise.get(skill, 0)

    def has_skill(self, skill: SkillType) -> bool:
        return skill in self.skills


@dataclass
class IssueThread:
    """
    Skill-scoped unit of work split off a parent ticket.

    ``priority`` is an integer in [1, 10], 10 being the most urgent.
    """
    id: str
    parent_ticket_id: str
    title: str
    description: str
    required_skills: List[SkillType]
    assigned_engineer_id: Optional[str] = None
    status: ThreadStatus = ThreadStatus.OPEN
    priority: int = 5
    chat_enabled: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    solution: Optional[str] = None

    def __post_init__(self):
        if not 1 <= self.priority <= 10:
            raise ValueError("Thread priority must be between 1 and 10")


@dataclass(frozen=True)
class ThreadAssignment:
    """Best-fit engineer for a thread (None when nobody qualifies)."""
    thread: IssueThread
    engineer: Optional[Engineer]


@dataclass(frozen=True)
class SkillDominance:
    """How strongly one skill dominates an engineer's relevant expertise."""
    dominance_score: float
    primary_skill: Optional[SkillType]
    primary_expertise: int


@dataclass(frozen=True)
class MatchScore:
    """Breakdown of an engineer's fit for a thread."""
    engineer: Engineer
    match_count: int
    average_expertise: float
    skill_coverage: float

    @property
    def combined_score(self) -> float:
        return self.average_expertise * self.skill_coverage


@dataclass(frozen=True)
class ThreadTemplate:
    """Title and description template; ``{subject}`` is substituted."""
    title: str
    description: str


@dataclass(frozen=True)
class LaunchDecision:
    """Outcome of the synchronous would-this-launch evaluation."""
    should_launch: bool
    reason: str
    reason_kind: LaunchReasonKind
    launch_stages: List[str] = field(default_factory=list)
    estimated_time_ms: int = 0


@dataclass(frozen=True)
class LaunchResult:
    """
    Final value of one CRP launch run.

    Rejected and failed runs never carry a lead or threads.
    """
    should_launch: bool
    reason: str
    reason_kind: LaunchReasonKind
    state: LaunchState
    lead_engineer: Optional[Engineer] = None
    threads: List[IssueThread] = field(default_factory=list)
    launch_stages: List[str] = field(default_factory=list)
    estimated_time_ms: int = 0

    @classmethod
    def rejected(cls, decision: LaunchDecision) -> "LaunchResult":
        return cls(
            should_launch=False,
            reason=decision.reason,
            reason_kind=decision.reason_kind,
            state=LaunchState.REJECTED,
        )


@dataclass(frozen=True)
class CRPThresholds:
    """Published thresholds of the CRP launch policy."""
    complexity_threshold: ComplexityTier = ComplexityTier.MEDIUM
    skill_count_threshold: int = 3
    urgency_override: List[UrgencyLevel] = field(
        default_factory=lambda: [UrgencyLevel.CRITICAL]
    )
    confidence_threshold: int = 70
    lead_dominance_threshold: float = 0.70
