"""
Infrastructure Layer
=====================

Low-level technical concerns:
- Logging setup
- Stage scheduling (real and virtual clocks)
"""
