"""
Triage Application DTOs
========================

Data Transfer Objects for Triage API layer.

Pydantic models for request/response validation. The ticket DTO is the
wire form of the whole ticket aggregate (classification and threads
included) and is shared with the CRP API.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any
from datetime import datetime

from crp_engine.config import (
    AffectedSystem,
    ComplexityTier,
    RecommendedAction,
    SkillType,
    ThreadStatus,
    TicketStatus,
    UrgencyLevel,
)
from crp_engine.triage.domain import Attachment, Classification, Ticket


# ========== Domain DTOs ==========

class AttachmentDTO(BaseModel):
    """Attachment metadata."""
    id: str
    name: str
    type: str = "application/octet-stream"
    size: int = Field(default=0, ge=0)
    url: str = ""

    def to_domain(self) -> Attachment:
        return Attachment(id=self.id, name=self.name, type=self.type, size=self.size, url=self.url)

    @classmethod
    def from_domain(cls, attachment: Attachment) -> "AttachmentDTO":
        return cls(
            id=attachment.id,
            name=attachment.name,
            type=attachment.type,
            size=attachment.size,
            url=attachment.url
        )


class ClassificationDTO(BaseModel):
    """AI classification of a ticket."""
    urgency_score: int = Field(..., ge=0, le=100)
    complexity_tier: ComplexityTier
    complexity_score: int = Field(..., ge=0, le=100)
    skill_tags: List[SkillType] = Field(default_factory=list)
    recommended_action: RecommendedAction
    confidence_score: float = Field(..., ge=0.0, le=100.0)

    def to_domain(self) -> Classification:
        return Classification(
            urgency_score=self.urgency_score,
            complexity_tier=self.complexity_tier,
            complexity_score=self.complexity_score,
            skill_tags=list(self.skill_tags),
            recommended_action=self.recommended_action,
            confidence_score=self.confidence_score
        )

    @classmethod
    def from_domain(cls, classification: Classification) -> "ClassificationDTO":
        return cls(
            urgency_score=classification.urgency_score,
            complexity_tier=classification.complexity_tier,
            complexity_score=classification.complexity_score,
            skill_tags=list(classification.skill_tags),
            recommended_action=classification.recommended_action,
            confidence_score=classification.confidence_score
        )


class IssueThreadDTO(BaseModel):
    """DTO for a skill-scoped issue thread."""
    id: str
    parent_ticket_id: str
    title: str
    description: str
    required_skills: List[SkillType] = Field(default_factory=list)
    assigned_engineer_id: Optional[str] = None
    status: ThreadStatus = ThreadStatus.OPEN
    priority: int = Field(default=5, ge=1, le=10)
    chat_enabled: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    solution: Optional[str] = None

    def to_domain(self) -> Any:
        """Convert to domain entity."""
        from crp_engine.crp.domain import IssueThread
        timestamps = {}
        if self.created_at is not None:
            timestamps["created_at"] = self.created_at
        if self.updated_at is not None:
            timestamps["updated_at"] = self.updated_at
        return IssueThread(
            id=self.id,
            parent_ticket_id=self.parent_ticket_id,
            title=self.title,
            description=self.description,
            required_skills=list(self.required_skills),
            assigned_engineer_id=self.assigned_engineer_id,
            status=self.status,
            priority=self.priority,
            chat_enabled=self.chat_enabled,
            solution=self.solution,
            **timestamps
        )

    @classmethod
    def from_domain(cls, thread: Any) -> "IssueThreadDTO":
        """Create from domain entity."""
        return cls(
            id=thread.id,
            parent_ticket_id=thread.parent_ticket_id,
            title=thread.title,
            description=thread.description,
            required_skills=list(thread.required_skills),
            assigned_engineer_id=thread.assigned_engineer_id,
            status=thread.status,
            priority=thread.priority,
            chat_enabled=thread.chat_enabled,
            created_at=thread.created_at,
            updated_at=thread.updated_at,
            solution=thread.solution
        )


class TicketDTO(BaseModel):
    """DTO for passing the ticket aggregate between layers."""
    id: str = Field(..., min_length=1, description="Ticket ID, e.g. TKT-2024-001")
    subject: str = Field(..., min_length=1, description="Ticket subject")
    description: str = Field(..., description="Ticket description")
    urgency: UrgencyLevel
    affected_system: str = Field(..., min_length=1, description="Affected SAP system")
    attachments: List[AttachmentDTO] = Field(default_factory=list)
    status: TicketStatus = TicketStatus.SUBMITTED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ai_classification: Optional[ClassificationDTO] = None
    threads: Optional[List[IssueThreadDTO]] = None
    assigned_lead_id: Optional[str] = None
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def validate_description_length(cls, v: str) -> str:
        """Ensure description is not unreasonably long."""
        if len(v) > 20000:
            raise ValueError("Description too long (max 20000 characters)")
        return v

    def to_domain(self) -> Ticket:
        """Convert to domain entity; unknown systems are kept as plain names."""
        try:
            system = AffectedSystem(self.affected_system)
        except ValueError:
            system = self.affected_system

        timestamps = {}
        if self.created_at is not None:
            timestamps["created_at"] = self.created_at
        if self.updated_at is not None:
            timestamps["updated_at"] = self.updated_at

        return Ticket(
            id=self.id,
            subject=self.subject,
            description=self.description,
            urgency=self.urgency,
            affected_system=system,
            attachments=[a.to_domain() for a in self.attachments],
            status=self.status,
            ai_classification=self.ai_classification.to_domain() if self.ai_classification else None,
            threads=[t.to_domain() for t in self.threads] if self.threads is not None else None,
            assigned_lead_id=self.assigned_lead_id,
            resolution=self.resolution,
            resolved_at=self.resolved_at,
            **timestamps
        )

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketDTO":
        """Create from domain entity."""
        return cls(
            id=ticket.id,
            subject=ticket.subject,
            description=ticket.description,
            urgency=ticket.urgency,
            affected_system=ticket.system_name,
            attachments=[AttachmentDTO.from_domain(a) for a in ticket.attachments],
            status=ticket.status,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            ai_classification=(
                ClassificationDTO.from_domain(ticket.ai_classification)
                if ticket.ai_classification else None
            ),
            threads=(
                [IssueThreadDTO.from_domain(t) for t in ticket.threads]
                if ticket.threads is not None else None
            ),
            assigned_lead_id=ticket.assigned_lead_id,
            resolution=ticket.resolution,
            resolved_at=ticket.resolved_at
        )


class ProgressEventInfo(BaseModel):
    """One progress checkpoint reported by a pipeline."""
    percent: int = Field(..., ge=0, le=100)
    stage: str


# ========== Response DTOs ==========

class SkillConfidenceInfo(BaseModel):
    """Required skill with its keyword confidence."""
    skill: SkillType
    confidence: float


class ClassifyResponse(BaseModel):
    """Response model for the staged classification pipeline."""
    ticket: TicketDTO
    progress: List[ProgressEventInfo]
    processing_time_ms: int


class AnalyzeResponse(BaseModel):
    """Response model for one-shot synchronous analysis."""
    ticket_id: str
    complexity_score: int
    complexity_tier: ComplexityTier
    skills: List[SkillConfidenceInfo]
    classification: ClassificationDTO
    should_launch_crp: bool


class ProcessingFeedbackResponse(BaseModel):
    """Response model for processing feedback shown while a ticket is handled."""
    ticket_id: str
    processing_stages: List[str]
    estimated_time_ms: int
    complexity_indicator: int = Field(..., ge=0, le=100)
