"""
CRP Infrastructure Layer
========================

Concrete implementations of the CRP collaborator interfaces.
"""

from crp_engine.crp.infrastructure.repositories import InMemoryEngineerRepository
from crp_engine.crp.infrastructure.external import (
    RosterFileHandler,
    RosterManager,
    SequentialThreadIdGenerator,
    StaticTemplateProvider,
    load_roster_file,
)

__all__ = [
    "InMemoryEngineerRepository",
    "RosterFileHandler",
    "RosterManager",
    "SequentialThreadIdGenerator",
    "StaticTemplateProvider",
    "load_roster_file",
]
