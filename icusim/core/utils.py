"""
Shared utility functions for ICUSim.
"""

from typing import Tuple


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp value to the inclusive range [low, high].
    """
    if low > high:
        low, high = high, low
    return max(low, min(high, value))


def clamp_to(value: float, bounds: Tuple[float, float]) -> float:
    """Clamp value to a (low, high) range tuple from constants."""
    return clamp(value, bounds[0], bounds[1])


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0.0 when the denominator is zero.

    The engine reports undefined ratios as 0 rather than inf/NaN.
    """
    if denominator == 0:
        return 0.0
    return numerator / denominator
