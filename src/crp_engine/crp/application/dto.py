"""
CRP Application DTOs
====================

Data Transfer Objects for the CRP API layer.

Pydantic models for request/response validation. Tickets and threads use
the shared ticket aggregate DTOs from the triage context.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from crp_engine.config import (
    AvailabilityStatus,
    ComplexityTier,
    LaunchReasonKind,
    LaunchState,
    SkillType,
    UrgencyLevel,
)
from crp_engine.crp.domain import (
    CRPThresholds,
    Engineer,
    LaunchDecision,
    LaunchResult,
    ThreadAssignment,
)
from crp_engine.triage.application.dto import IssueThreadDTO, ProgressEventInfo


# ========== Domain DTOs ==========

class EngineerDTO(BaseModel):
    """Roster entry."""
    id: str = Field(..., min_length=1)
    name: str
    skills: List[SkillType] = Field(default_factory=list)
    availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    current_workload: int = Field(default=0, ge=0, le=100)
    expertise: Dict[SkillType, int] = Field(default_factory=dict)
    is_lead_engineer: bool = False
    email: Optional[str] = None
    department: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("expertise")
    @classmethod
    def validate_expertise(cls, v: Dict[SkillType, int]) -> Dict[SkillType, int]:
        """Ensure expertise levels are percentages."""
        for skill, level in v.items():
            if not 0 <= level <= 100:
                raise ValueError(f"Expertise for {skill.value} must be between 0 and 100")
        return v

    def to_domain(self) -> Engineer:
        return Engineer(
            id=self.id,
            name=self.name,
            skills=list(self.skills),
            availability=self.availability,
            current_workload=self.current_workload,
            expertise=dict(self.expertise),
            is_lead_engineer=self.is_lead_engineer,
            email=self.email,
            department=self.department,
            avatar=self.avatar
        )

    @classmethod
    def from_domain(cls, engineer: Engineer) -> "EngineerDTO":
        return cls(
            id=engineer.id,
            name=engineer.name,
            skills=list(engineer.skills),
            availability=engineer.availability,
            current_workload=engineer.current_workload,
            expertise=dict(engineer.expertise),
            is_lead_engineer=engineer.is_lead_engineer,
            email=engineer.email,
            department=engineer.department,
            avatar=engineer.avatar
        )


# ========== Request DTOs ==========

class MatchRequest(BaseModel):
    """Request model for engineer matching."""
    threads: List[IssueThreadDTO] = Field(..., description="Threads to staff")


class AvailabilityUpdateRequest(BaseModel):
    """Request model for changing an engineer's availability."""
    availability: AvailabilityStatus


# ========== Response DTOs ==========

class LaunchDecisionResponse(BaseModel):
    """Response model for the synchronous launch evaluation."""
    should_launch: bool
    reason: str
    reason_kind: LaunchReasonKind
    launch_stages: List[str]
    estimated_time_ms: int

    @classmethod
    def from_domain(cls, decision: LaunchDecision) -> "LaunchDecisionResponse":
        return cls(
            should_launch=decision.should_launch,
            reason=decision.reason,
            reason_kind=decision.reason_kind,
            launch_stages=list(decision.launch_stages),
            estimated_time_ms=decision.estimated_time_ms
        )


class LaunchResultResponse(BaseModel):
    """Response model for a full CRP launch."""
    should_launch: bool
    reason: str
    reason_kind: LaunchReasonKind
    state: LaunchState
    lead_engineer: Optional[EngineerDTO] = None
    threads: List[IssueThreadDTO] = Field(default_factory=list)
    launch_stages: List[str] = Field(default_factory=list)
    estimated_time_ms: int = 0
    progress: List[ProgressEventInfo] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls,
        result: LaunchResult,
        progress: Optional[List[ProgressEventInfo]] = None
    ) -> "LaunchResultResponse":
        return cls(
            should_launch=result.should_launch,
            reason=result.reason,
            reason_kind=result.reason_kind,
            state=result.state,
            lead_engineer=EngineerDTO.from_domain(result.lead_engineer) if result.lead_engineer else None,
            threads=[IssueThreadDTO.from_domain(t) for t in result.threads],
            launch_stages=list(result.launch_stages),
            estimated_time_ms=result.estimated_time_ms,
            progress=progress or []
        )


class DecomposeResponse(BaseModel):
    """Response model for thread decomposition."""
    ticket_id: str
    threads: List[IssueThreadDTO]
    progress: List[ProgressEventInfo]


class ThreadAssignmentInfo(BaseModel):
    """Best-fit engineer for one thread."""
    thread: IssueThreadDTO
    engineer: Optional[EngineerDTO] = None

    @classmethod
    def from_domain(cls, assignment: ThreadAssignment) -> "ThreadAssignmentInfo":
        return cls(
            thread=IssueThreadDTO.from_domain(assignment.thread),
            engineer=EngineerDTO.from_domain(assignment.engineer) if assignment.engineer else None
        )


class MatchResponse(BaseModel):
    """Response model for engineer matching."""
    assignments: List[ThreadAssignmentInfo]
    progress: List[ProgressEventInfo]


class CRPThresholdsResponse(BaseModel):
    """Response model for the published CRP launch thresholds."""
    complexity_threshold: ComplexityTier
    skill_count_threshold: int
    urgency_override: List[UrgencyLevel]
    confidence_threshold: int
    lead_dominance_threshold: float

    @classmethod
    def from_domain(cls, thresholds: CRPThresholds) -> "CRPThresholdsResponse":
        return cls(
            complexity_threshold=thresholds.complexity_threshold,
            skill_count_threshold=thresholds.skill_count_threshold,
            urgency_override=list(thresholds.urgency_override),
            confidence_threshold=thresholds.confidence_threshold,
            lead_dominance_threshold=thresholds.lead_dominance_threshold
        )


class EngineerListResponse(BaseModel):
    """Response model for roster listings."""
    engineers: List[EngineerDTO]
    total: int
