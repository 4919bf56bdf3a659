"""
Triage Module
=============

Bounded context for ticket classification.

Responsibilities:
- Score ticket complexity and urgency
- Identify the skills a ticket requires
- Recommend Standard or CRP routing
- Run the staged classification pipeline with progress reporting
"""
