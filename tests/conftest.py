"""
Pytest configuration and fixtures for CRP routing engine tests
"""

import random

import pytest

from crp_engine.config import (
    AffectedSystem,
    AvailabilityStatus,
    ComplexityTier,
    RecommendedAction,
    SkillType,
    UrgencyLevel,
)
from crp_engine.crp.domain import Engineer, ThreadDecomposer
from crp_engine.crp.infrastructure import (
    InMemoryEngineerRepository,
    SequentialThreadIdGenerator,
    StaticTemplateProvider,
)
from crp_engine.shared.infrastructure.scheduling import VirtualStageScheduler
from crp_engine.triage.domain import Attachment, Classification, Ticket


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value (no jitter at 0.5)."""

    def __init__(self, value: float = 0.5):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def make_engineer(engineer_id, skills, expertise, availability=AvailabilityStatus.AVAILABLE,
                  is_lead=False, workload=0, name=None):
    return Engineer(
        id=engineer_id,
        name=name or engineer_id,
        skills=list(skills),
        availability=availability,
        current_workload=workload,
        expertise=dict(expertise),
        is_lead_engineer=is_lead,
    )


def make_ticket(**overrides):
    fields = {
        "id": "TKT-2024-001",
        "subject": "Login problem",
        "description": "Password reset fails for every user",
        "urgency": UrgencyLevel.MEDIUM,
        "affected_system": AffectedSystem.ERP,
    }
    fields.update(overrides)
    return Ticket(**fields)


def make_classification(tier=ComplexityTier.MEDIUM, tags=(SkillType.BACKEND,),
                        action=RecommendedAction.STANDARD, complexity_score=50):
    return Classification(
        urgency_score=50,
        complexity_tier=tier,
        complexity_score=complexity_score,
        skill_tags=list(tags),
        recommended_action=action,
        confidence_score=75.0,
    )


def make_attachments(count):
    return [Attachment(id=f"att-{i}", name=f"log-{i}.txt") for i in range(count)]


@pytest.fixture
def roster():
    """The sample roster shipped in roster.yaml"""
    S = SkillType
    return [
        make_engineer("eng-001", [S.BACKEND, S.DATABASE, S.CLOUD],
                      {S.BACKEND: 90, S.DATABASE: 85, S.CLOUD: 75, S.INTEGRATION: 60},
                      is_lead=True, workload=30, name="Alex Weber"),
        make_engineer("eng-002", [S.FRONTEND, S.MOBILE, S.UX],
                      {S.FRONTEND: 95, S.MOBILE: 80, S.UX: 85, S.BACKEND: 40},
                      availability=AvailabilityStatus.BUSY, workload=70, name="Sophia Chen"),
        make_engineer("eng-003", [S.DATABASE, S.ANALYTICS, S.BACKEND],
                      {S.DATABASE: 95, S.ANALYTICS: 90, S.BACKEND: 70, S.CLOUD: 65},
                      workload=20, name="Marcus Johnson"),
        make_engineer("eng-004", [S.SECURITY, S.NETWORK, S.CLOUD],
                      {S.SECURITY: 95, S.NETWORK: 85, S.CLOUD: 80, S.DEVOPS: 70},
                      is_lead=True, workload=40, name="Elena Rodriguez"),
        make_engineer("eng-005", [S.DEVOPS, S.CLOUD, S.INTEGRATION],
                      {S.DEVOPS: 90, S.CLOUD: 95, S.INTEGRATION: 85, S.NETWORK: 75},
                      availability=AvailabilityStatus.BUSY, workload=80, name="David Kim"),
        make_engineer("eng-006", [S.INTEGRATION, S.BACKEND, S.ANALYTICS],
                      {S.INTEGRATION: 95, S.BACKEND: 80, S.ANALYTICS: 75, S.DATABASE: 70},
                      availability=AvailabilityStatus.OFFLINE, name="Priya Sharma"),
        make_engineer("eng-007", [S.FRONTEND, S.UX, S.MOBILE],
                      {S.FRONTEND: 90, S.UX: 95, S.MOBILE: 85, S.INTEGRATION: 60},
                      workload=50, name="Thomas Mueller"),
        make_engineer("eng-008", [S.ANALYTICS, S.DATABASE, S.CLOUD],
                      {S.ANALYTICS: 95, S.DATABASE: 85, S.CLOUD: 70, S.BACKEND: 65},
                      workload=30, name="Sarah Johnson"),
    ]


@pytest.fixture
def repository(roster):
    return InMemoryEngineerRepository(roster)


@pytest.fixture
def scheduler():
    return VirtualStageScheduler()


@pytest.fixture
def rng():
    return FixedRandom(0.5)


@pytest.fixture
def decomposer():
    return ThreadDecomposer(StaticTemplateProvider(), SequentialThreadIdGenerator())
