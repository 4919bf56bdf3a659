"""
Shared Kernel Module
====================

Shared infrastructure and domain elements used across both bounded
contexts (Ticket Triage and Collaborative Resolution).

DO NOT add triage or CRP business logic to the shared kernel.
"""
