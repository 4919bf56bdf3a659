"""
Triage Application Layer
========================

Application layer for ticket triage.

Contains:
- Services: staged classification pipeline, one-shot analysis and
  processing feedback
- DTOs: ticket aggregate and triage request/response models
"""

from crp_engine.triage.application.dto import (
    AnalyzeResponse,
    AttachmentDTO,
    ClassificationDTO,
    ClassifyResponse,
    IssueThreadDTO,
    ProcessingFeedbackResponse,
    ProgressEventInfo,
    SkillConfidenceInfo,
    TicketDTO,
)
from crp_engine.triage.application.services import (
    ClassificationService,
    ProcessingFeedback,
    TicketAnalysis,
)

__all__ = [
    # DTOs
    "AnalyzeResponse",
    "AttachmentDTO",
    "ClassificationDTO",
    "ClassifyResponse",
    "IssueThreadDTO",
    "ProcessingFeedbackResponse",
    "ProgressEventInfo",
    "SkillConfidenceInfo",
    "TicketDTO",
    # Services
    "ClassificationService",
    "ProcessingFeedback",
    "TicketAnalysis",
]
