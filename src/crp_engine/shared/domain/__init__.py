"""
Shared Domain
=============

Pipeline progress primitives used by every staged service.
"""

from crp_engine.shared.domain.rounding import clamp, round_half_up
from crp_engine.shared.domain.progress import (
    CancellationToken,
    ProgressEvent,
    ProgressRecorder,
    ProgressSink,
    ProgressTracker,
)

__all__ = [
    "CancellationToken",
    "ProgressEvent",
    "ProgressRecorder",
    "ProgressSink",
    "ProgressTracker",
    "clamp",
    "round_half_up",
]
