"""Numeric helpers shared by the scoring engines."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""

    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    return max(lower, min(upper, value))


def percentage(part: int, whole: int) -> float:
    """Percent of ``whole``; a zero denominator yields 0 rather than NaN."""

    if whole <= 0:
        return 0.0
    return part / whole * 100


__all__ = ["round_half_up", "clamp", "percentage"]
