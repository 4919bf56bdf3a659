"""
Collaborative Resolution Module
===============================

Bounded context for collaborative resolution process (CRP) launches.

Responsibilities:
- Select a lead engineer under the skill-dominance rule
- Decompose tickets into skill-scoped issue threads
- Match threads to the best-fit available engineers
- Orchestrate the staged CRP launch with progress and cancellation
"""
