"""
Triage Domain Layer
===================

Domain layer for ticket triage.

Contains:
- Entities: Ticket, Attachment, Classification, SkillConfidence, ComplexityResult
- Domain services: ComplexityScorer, SkillIdentifier, RoutingDecider,
  ScoreJitter, TicketClassifier

This layer is framework-agnostic and contains pure business logic.
"""

from crp_engine.triage.domain.entities import (
    Attachment,
    Classification,
    ComplexityResult,
    SkillConfidence,
    Ticket,
)
from crp_engine.triage.domain.value_objects import (
    ComplexityScorer,
    RoutingDecider,
    ScoreJitter,
    SkillIdentifier,
    TicketClassifier,
)

__all__ = [
    "Attachment",
    "Classification",
    "ComplexityResult",
    "SkillConfidence",
    "Ticket",
    "ComplexityScorer",
    "RoutingDecider",
    "ScoreJitter",
    "SkillIdentifier",
    "TicketClassifier",
]
