"""Scalar helpers shared by the difficulty evaluators."""

from __future__ import annotations

import math

__all__ = [
    "EPSILON",
    "bpm_to_milliseconds",
    "clamp",
    "lerp",
    "logistic",
    "milliseconds_to_bpm",
    "safe_divide",
    "sigmoid",
    "smootherstep",
]


EPSILON = 1e-10

# math.exp overflows a double just above 709.78.
_MAX_EXPONENT = 709.0


def _exp(exponent: float) -> float:
    return math.exp(min(exponent, _MAX_EXPONENT))


def clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide unless ``denominator`` is within :data:`EPSILON` of zero."""

    if abs(denominator) < EPSILON:
        return default
    return numerator / denominator


def logistic(
    x: float,
    *,
    midpoint_offset: float = 0.0,
    multiplier: float = 1.0,
    max_value: float = 1.0,
) -> float:
    """Logistic curve rising through ``midpoint_offset`` towards ``max_value``."""

    return max_value / (1.0 + _exp(multiplier * (midpoint_offset - x)))


def sigmoid(x: float) -> float:
    """Standard ``1 / (1 + e^-x)`` sigmoid."""

    return 1.0 / (1.0 + _exp(-x))


def smootherstep(x: float, start: float, end: float) -> float:
    """Ken Perlin's smootherstep; ``start > end`` yields a falling edge."""

    if start == end:
        return 1.0 if x >= end else 0.0
    x = clamp((x - start) / (end - start), 0.0, 1.0)
    return x * x * x * (x * (6.0 * x - 15.0) + 10.0)


def lerp(start: float, end: float, amount: float) -> float:
    return start + (end - start) * amount


def milliseconds_to_bpm(milliseconds: float, delimiter: int = 4) -> float:
    """Convert a note interval to beats per minute at ``1/delimiter`` snapping."""

    return safe_divide(60000.0, milliseconds * delimiter, default=math.inf)


def bpm_to_milliseconds(bpm: float, delimiter: int = 4) -> float:
    return safe_divide(60000.0, bpm * delimiter, default=math.inf)
