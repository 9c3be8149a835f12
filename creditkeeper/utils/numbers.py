"""Numeric helpers shared by the scoring core."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round to ``ndigits`` decimals with halves rounded up (686.5 -> 687),
    unlike the built-in ``round`` which rounds halves to even.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))
