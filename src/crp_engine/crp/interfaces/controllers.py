"""
CRP Controllers (API Routes)
============================

FastAPI routes for collaborative resolution endpoints.

Controllers delegate to the CRP service facade. Collaborators are read
from ``app.state`` where the application lifespan put them.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from crp_engine.config import SkillType
from crp_engine.core import ResourceNotFoundException
from crp_engine.crp.application import (
    AvailabilityUpdateRequest,
    CRPService,
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
from crp_engine.crp.infrastructure import InMemoryEngineerRepository
from crp_engine.shared.domain import ProgressRecorder
from crp_engine.shared.infrastructure.logging import get_context_logger, get_logger
from crp_engine.triage.application import IssueThreadDTO, ProgressEventInfo, TicketDTO

logger = get_logger(__name__)
router = APIRouter(prefix="/crp", tags=["Collaborative Resolution"])


# ========== Dependencies ==========

def get_engineer_repository(request: Request) -> InMemoryEngineerRepository:
    """Get the roster repository from app state."""
    return request.app.state.engineer_repository


def get_crp_service(request: Request) -> CRPService:
    """Build the CRP service from app state."""
    state = request.app.state
    return CRPService(
        state.engineer_repository,
        state.thread_decomposer,
        state.stage_scheduler
    )


def _progress(recorder: ProgressRecorder) -> List[ProgressEventInfo]:
    return [ProgressEventInfo(percent=e.percent, stage=e.stage) for e in recorder.events]


# ========== Route Handlers ==========

@router.post(
    "/evaluate",
    response_model=LaunchDecisionResponse,
    summary="Check whether a ticket would launch CRP",
    description="""
    Synchronous launch evaluation. A classified ticket launches CRP when it is
    High complexity, the classification recommends CRP, it spans three or more
    skills, or it is Critical with non-Low complexity.
    """
)
async def evaluate_launch(
    payload: TicketDTO,
    service: CRPService = Depends(get_crp_service)
):
    decision = service.evaluate_launch(payload.to_domain())
    return LaunchDecisionResponse.from_domain(decision)


@router.post(
    "/launch",
    response_model=LaunchResultResponse,
    summary="Launch collaborative resolution for a ticket",
    description="""
    Runs the staged CRP launch: lead engineer, re-analysis, decomposition,
    engineer matching, collaboration channels, ready.

    Rejected and failed launches return `should_launch: false` with a reason.
    """
)
async def launch_crp(
    request: Request,
    payload: TicketDTO,
    service: CRPService = Depends(get_crp_service)
):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    request_logger = get_context_logger(__name__, correlation_id)
    request_logger.info("Launching CRP", extra={"ticket_id": payload.id})

    recorder = ProgressRecorder()
    result = await service.execute_launch(payload.to_domain(), progress_sink=recorder)
    return LaunchResultResponse.from_domain(result, progress=_progress(recorder))


@router.post(
    "/decompose",
    response_model=DecomposeResponse,
    summary="Decompose a ticket into skill threads"
)
async def decompose_ticket(
    payload: TicketDTO,
    service: CRPService = Depends(get_crp_service)
):
    recorder = ProgressRecorder()
    threads = await service.decompose(payload.to_domain(), progress_sink=recorder)
    return DecomposeResponse(
        ticket_id=payload.id,
        threads=[IssueThreadDTO.from_domain(t) for t in threads],
        progress=_progress(recorder)
    )


@router.post(
    "/match",
    response_model=MatchResponse,
    summary="Find the best available engineer for each thread"
)
async def match_engineers(
    payload: MatchRequest,
    service: CRPService = Depends(get_crp_service)
):
    recorder = ProgressRecorder()
    assignments = await service.match_engineers_for_threads(
        [t.to_domain() for t in payload.threads],
        progress_sink=recorder
    )
    return MatchResponse(
        assignments=[ThreadAssignmentInfo.from_domain(a) for a in assignments],
        progress=_progress(recorder)
    )


@router.get(
    "/thresholds",
    response_model=CRPThresholdsResponse,
    summary="Published CRP launch thresholds"
)
async def get_thresholds():
    return CRPThresholdsResponse.from_domain(CRPService.get_crp_thresholds())


@router.get(
    "/engineers",
    response_model=EngineerListResponse,
    summary="List the engineer roster"
)
async def list_engineers(
    available_only: bool = Query(False, description="Only engineers currently Available"),
    leads_only: bool = Query(False, description="Only lead-capable engineers"),
    skill: Optional[SkillType] = Query(None, description="Only engineers listing this skill"),
    repository: InMemoryEngineerRepository = Depends(get_engineer_repository)
):
    engineers = repository.list_by_skill(skill) if skill is not None else repository.list_all()

    if available_only:
        engineers = [e for e in engineers if e.is_available]
    if leads_only:
        engineers = [e for e in engineers if e.is_lead_engineer]

    return EngineerListResponse(
        engineers=[EngineerDTO.from_domain(e) for e in engineers],
        total=len(engineers)
    )


@router.get(
    "/engineers/{engineer_id}",
    response_model=EngineerDTO,
    summary="Get one engineer",
    responses={404: {"description": "Engineer not found"}}
)
async def get_engineer(
    engineer_id: str,
    repository: InMemoryEngineerRepository = Depends(get_engineer_repository)
):
    engineer = repository.find_by_id(engineer_id)
    if engineer is None:
        raise ResourceNotFoundException("Engineer", engineer_id)
    return EngineerDTO.from_domain(engineer)


@router.patch(
    "/engineers/{engineer_id}/availability",
    response_model=EngineerDTO,
    summary="Change an engineer's availability",
    responses={404: {"description": "Engineer not found"}}
)
async def update_engineer_availability(
    engineer_id: str,
    payload: AvailabilityUpdateRequest,
    repository: InMemoryEngineerRepository = Depends(get_engineer_repository)
):
    engineer = repository.update_availability(engineer_id, payload.availability)
    return EngineerDTO.from_domain(engineer)


# Export router for inclusion in main app
crp_router = router
