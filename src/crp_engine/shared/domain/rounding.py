"""Numeric helpers shared by the scoring code."""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves going up.

    ``round()`` uses banker's rounding (``round(4.5) == 4``); scores and
    priorities here round ``x.5`` upwards.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
