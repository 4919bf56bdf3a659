"""
CRP Routing Engine
==================

Ticket classification and collaborative-routing decision engine.

Modules:
- Triage: complexity scoring, skill identification, routing decisions
- CRP: lead selection, thread decomposition, engineer matching, launch
"""

__version__ = "1.0.0"
