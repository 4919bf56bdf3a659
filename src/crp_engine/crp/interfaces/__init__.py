"""
CRP Interfaces Layer
====================

Interface adapters (controllers) for collaborative resolution.

Contains:
- Controllers: FastAPI route handlers
"""

from crp_engine.crp.interfaces.controllers import crp_router

__all__ = ["crp_router"]
