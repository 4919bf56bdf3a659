"""
Triage Controllers (API Routes)
================================

FastAPI routes for ticket triage endpoints.

Controllers delegate to application services. Collaborators (roster,
decomposer, stage scheduler, random source) are read from ``app.state``
where the application lifespan put them.
"""

import time

from fastapi import APIRouter, Body, Depends, Request

from crp_engine.crp.domain import LaunchEvaluator
from crp_engine.shared.domain import ProgressRecorder
from crp_engine.shared.infrastructure.logging import get_context_logger, get_logger
from crp_engine.triage.application import (
    AnalyzeResponse,
    ClassificationDTO,
    ClassificationService,
    ClassifyResponse,
    ProcessingFeedbackResponse,
    ProgressEventInfo,
    SkillConfidenceInfo,
    TicketDTO,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/triage", tags=["Ticket Triage"])


# ========== Example payloads for Swagger ==========

TICKET_REQUEST_EXAMPLE = {
    "id": "TKT-2024-001",
    "subject": "Database connection timeout in SAP ERP",
    "description": (
        "Users are experiencing intermittent database connection timeouts when accessing "
        "the financial module. The issue started after the recent update and affects "
        "multiple departments."
    ),
    "urgency": "High",
    "affected_system": "SAP ERP",
    "attachments": []
}


# ========== Dependencies ==========

def get_classification_service(request: Request) -> ClassificationService:
    """Build the classification service from app state."""
    state = request.app.state
    return ClassificationService(
        state.engineer_repository,
        state.thread_decomposer,
        state.stage_scheduler,
        state.random_source
    )


# ========== Route Handlers ==========

@router.post(
    "/classify",
    response_model=ClassifyResponse,
    summary="Classify a ticket through the staged pipeline",
    description="""
    Runs the full classification pipeline:
    - **Complexity**: score (0-100) and tier (Low, Medium, High)
    - **Skills**: required skills ranked by keyword confidence
    - **Routing**: Standard or CRP
    - **Lead engineer**: assigned when one skill clearly dominates an available lead
    - **Threads**: skill-scoped threads for CRP-routed tickets

    The response carries every progress checkpoint the pipeline reported.
    """,
    responses={
        200: {"description": "Ticket classified successfully"},
        422: {"description": "Invalid ticket payload"}
    }
)
async def classify_ticket(
    request: Request,
    payload: TicketDTO = Body(..., examples=[TICKET_REQUEST_EXAMPLE]),
    service: ClassificationService = Depends(get_classification_service)
):
    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    request_logger = get_context_logger(__name__, correlation_id)
    request_logger.info("Classifying ticket", extra={"ticket_id": payload.id})

    recorder = ProgressRecorder()
    classified = await service.classify(payload.to_domain(), progress_sink=recorder)

    return ClassifyResponse(
        ticket=TicketDTO.from_domain(classified),
        progress=[ProgressEventInfo(percent=e.percent, stage=e.stage) for e in recorder.events],
        processing_time_ms=int((time.perf_counter() - start_time) * 1000)
    )


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    summary="Analyze a ticket without pipeline pacing",
    description="""
    One-shot synchronous analysis: complexity, skill ranking, classification
    and whether the classified ticket would launch CRP. No progress, no delays,
    no lead or threads.
    """
)
async def analyze_ticket(
    payload: TicketDTO,
    service: ClassificationService = Depends(get_classification_service)
):
    analysis = service.analyze(payload.to_domain())
    decision = LaunchEvaluator.evaluate(analysis.ticket)

    return AnalyzeResponse(
        ticket_id=analysis.ticket.id,
        complexity_score=analysis.complexity.score,
        complexity_tier=analysis.complexity.tier,
        skills=[SkillConfidenceInfo(skill=s.skill, confidence=s.confidence) for s in analysis.skills],
        classification=ClassificationDTO.from_domain(analysis.ticket.ai_classification),
        should_launch_crp=decision.should_launch
    )


@router.post(
    "/feedback",
    response_model=ProcessingFeedbackResponse,
    summary="Processing feedback for a ticket",
    description="""
    Stages a client can display while the ticket is processed, an estimated
    processing time and a complexity indicator (0-100). Unclassified tickets
    get the base stages and a neutral indicator of 50.
    """
)
async def processing_feedback(
    payload: TicketDTO,
    service: ClassificationService = Depends(get_classification_service)
):
    feedback = service.get_processing_feedback(payload.to_domain())
    return ProcessingFeedbackResponse(
        ticket_id=payload.id,
        processing_stages=feedback.processing_stages,
        estimated_time_ms=feedback.estimated_time_ms,
        complexity_indicator=feedback.complexity_indicator
    )


# Export router for inclusion in main app
triage_router = router
