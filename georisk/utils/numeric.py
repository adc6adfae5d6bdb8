"""Rounding and clamping helpers shared by the scoring code."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from negative infinity, like a JS ``Math.round``.

    Python's ``round`` uses banker's rounding, which would move scores that
    land exactly on a half point (e.g. 82.5 -> 82).
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))
