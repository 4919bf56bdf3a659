"""
CRP Routing Engine - Main Application
======================================

Ticket classification and collaborative-routing decision engine.

Modules:
- Ticket Triage: complexity, skills and routing recommendation
- Collaborative Resolution (CRP): lead selection, thread decomposition,
  engineer matching and staged launch

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and decision rules
- Infrastructure: Roster store, id generator, templates
"""

import random
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from crp_engine.config import settings
from crp_engine.core import ApplicationException

# CRP Module - Infrastructure
from crp_engine.crp.domain import ThreadDecomposer
from crp_engine.crp.infrastructure import (
    InMemoryEngineerRepository,
    RosterManager,
    SequentialThreadIdGenerator,
    StaticTemplateProvider,
)

# Module Routers
from crp_engine.crp.interfaces import crp_router
from crp_engine.triage.interfaces import triage_router

# Logging and scheduling
from crp_engine.shared.infrastructure.logging import setup_logging, get_logger
from crp_engine.shared.infrastructure.scheduling import (
    AsyncioStageScheduler,
    VirtualStageScheduler,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Load the engineer roster
    3. Start the roster file watcher
    4. Build the stage scheduler, random source and thread decomposer

    SHUTDOWN:
    1. Stop the roster file watcher
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting CRP Routing Engine", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    repository = InMemoryEngineerRepository()
    roster_manager = RosterManager(repository)
    count = roster_manager.load(settings.roster_path)
    logger.info("Engineer roster loaded", extra={
        "roster_path": str(settings.roster_path),
        "engineer_count": count
    })
    if settings.roster_watch:
        roster_manager.start_watching()

    if settings.simulate_processing_delays:
        scheduler = AsyncioStageScheduler(scale=settings.delay_scale)
    else:
        scheduler = VirtualStageScheduler()

    # Store services in app state for dependency injection
    app.state.settings = settings
    app.state.engineer_repository = repository
    app.state.roster_manager = roster_manager
    app.state.stage_scheduler = scheduler
    app.state.random_source = random.Random(settings.random_seed)
    app.state.thread_decomposer = ThreadDecomposer(
        StaticTemplateProvider(),
        SequentialThreadIdGenerator()
    )

    logger.info("CRP Routing Engine started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down CRP Routing Engine")
    roster_manager.stop_watching()
    logger.info("CRP Routing Engine shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="CRP Routing Engine API",
    description="""
    ## Ticket Classification and Collaborative Routing

    Scores ticket complexity, infers required skills and decides whether a
    ticket goes through standard handling or the Collaborative Resolution
    Process (CRP).

    ---

    ### Triage Module

    - `POST /triage/classify` - Staged classification pipeline
    - `POST /triage/analyze` - One-shot synchronous analysis
    - `POST /triage/feedback` - Processing stages and indicators

    ### CRP Module

    - `POST /crp/evaluate` - Would this ticket launch CRP?
    - `POST /crp/launch` - Staged CRP launch
    - `POST /crp/decompose` - Skill threads for a ticket
    - `POST /crp/match` - Best engineer per thread
    - `GET /crp/thresholds` - Published launch thresholds
    - `GET /crp/engineers` - Engineer roster

    ---

    ### Complexity Tiers

    | Score | Tier |
    |-------|------|
    | 70-100 | High |
    | 40-69 | Medium |
    | 0-39 | Low |
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
from crp_engine.shared.api.middleware import (  # noqa: E402
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(triage_router)
app.include_router(crp_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "roster": "loaded (8 engineers)",
                        "available_engineers": 5,
                        "lead_engineers": 2,
                        "stage_scheduler": "realtime"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Returns service health status including roster size and the
    pipeline pacing mode.
    """
    repository = request.app.state.engineer_repository
    engineers = repository.list_all()
    scheduler = request.app.state.stage_scheduler

    checks = {
        "roster": f"loaded ({len(engineers)} engineers)",
        "available_engineers": sum(1 for e in engineers if e.is_available),
        "lead_engineers": sum(1 for e in engineers if e.is_lead_engineer),
        "stage_scheduler": "virtual" if isinstance(scheduler, VirtualStageScheduler) else "realtime"
    }

    return {
        "status": "healthy" if engineers else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": "CRP Routing Engine",
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "triage": {
                "prefix": "/triage",
                "endpoints": [
                    "POST /triage/classify - Staged classification",
                    "POST /triage/analyze - Synchronous analysis",
                    "POST /triage/feedback - Processing feedback"
                ]
            },
            "crp": {
                "prefix": "/crp",
                "endpoints": [
                    "POST /crp/evaluate - Evaluate CRP launch",
                    "POST /crp/launch - Launch CRP",
                    "POST /crp/decompose - Decompose ticket into threads",
                    "POST /crp/match - Match engineers to threads",
                    "GET /crp/thresholds - CRP thresholds",
                    "GET /crp/engineers - Engineer roster",
                    "GET /crp/engineers/{id} - Engineer details"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crp_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
