"""
CRP Domain Layer
================

Domain layer for collaborative resolution.

Contains:
- Entities: Engineer, IssueThread, ThreadAssignment, LaunchDecision, LaunchResult
- Value objects: SkillDominance, MatchScore, ThreadTemplate, CRPThresholds
- Domain services: LeadEngineerSelector, ThreadDecomposer, EngineerMatcher,
  ThreadPriorityCalculator, LaunchEvaluator

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from crp_engine.crp.domain.entities import (
    CRPThresholds,
    Engineer,
    IssueThread,
    LaunchDecision,
    LaunchResult,
    MatchScore,
    SkillDominance,
    ThreadAssignment,
    ThreadTemplate,
)
from crp_engine.crp.domain.value_objects import (
    EngineerMatcher,
    LaunchEvaluator,
    LeadEngineerSelector,
    ThreadDecomposer,
    ThreadPriorityCalculator,
)

__all__ = [
    # Entities
    "CRPThresholds",
    "Engineer",
    "IssueThread",
    "LaunchDecision",
    "LaunchResult",
    "MatchScore",
    "SkillDominance",
    "ThreadAssignment",
    "ThreadTemplate",
    # Domain services
    "EngineerMatcher",
    "LaunchEvaluator",
    "LeadEngineerSelector",
    "ThreadDecomposer",
    "ThreadPriorityCalculator",
]
