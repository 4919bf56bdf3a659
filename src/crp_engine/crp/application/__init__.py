"""
CRP Application Layer
=====================

Application layer for collaborative resolution.

Contains:
- Services: LaunchOrchestrator and the CRPService facade
- Interfaces: roster repository, thread id generator, template provider
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and collaborator interfaces,
but not on concrete infrastructure implementations.
"""

from crp_engine.crp.application.dto import (
    AvailabilityUpdateRequest,
    CRPThresholdsResponse,
    DecomposeResponse,
    EngineerDTO,
    EngineerListResponse,
    LaunchDecisionResponse,
    LaunchResultResponse,
    MatchRequest,
    MatchResponse,
    ThreadAssignmentInfo,
)
from crp_engine.crp.application.services import (
    CRPService,
    IEngineerRepository,
    IThreadIdGenerator,
    IThreadTemplateProvider,
    LaunchOrchestrator,
)

__all__ = [
    # DTOs
    "AvailabilityUpdateRequest",
    "CRPThresholdsResponse",
    "DecomposeResponse",
    "EngineerDTO",
    "EngineerListResponse",
    "LaunchDecisionResponse",
    "LaunchResultResponse",
    "MatchRequest",
    "MatchResponse",
    "ThreadAssignmentInfo",
    # Services
    "CRPService",
    "LaunchOrchestrator",
    # Collaborator Interfaces
    "IEngineerRepository",
    "IThreadIdGenerator",
    "IThreadTemplateProvider",
]
