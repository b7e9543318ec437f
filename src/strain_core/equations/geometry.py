"""Planar geometry helpers for movement-path analysis."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .utils import EPSILON

__all__ = [
    "distance",
    "normalised_distance",
    "segment_circle_roots",
]


Point = Sequence[float]


def distance(start: Point, end: Point) -> float:
    return float(np.linalg.norm(np.asarray(end, dtype=float) - np.asarray(start, dtype=float)))


def normalised_distance(start: Point, end: Point, unit: float) -> float:
    """Distance between two points measured in multiples of ``unit``."""

    if unit <= 0.0:
        return 0.0
    return distance(start, end) / unit


def segment_circle_roots(
    start: Point, end: Point, centre: Point, radius: float
) -> tuple[float, float] | None:
    """Solve ``|start + t * (end - start) - centre| = radius`` for ``t``.

    Returns the ordered roots ``(entry, exit)`` of the quadratic, or ``None``
    when the line misses the circle or the segment has no length.
    """

    origin = np.asarray(start, dtype=float)
    direction = np.asarray(end, dtype=float) - origin
    offset = origin - np.asarray(centre, dtype=float)

    a = float(np.dot(direction, direction))
    if a < EPSILON:
        return None
    b = 2.0 * float(np.dot(offset, direction))
    c = float(np.dot(offset, offset)) - radius * radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None
    root = math.sqrt(discriminant)
    return (-b - root) / (2.0 * a), (-b + root) / (2.0 * a)
