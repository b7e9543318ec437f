"""Piecewise-linear lookup tables."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable

from .utils import lerp

__all__ = ["RatioTable"]


@dataclass(frozen=True, slots=True)
class RatioTable:
    """Immutable ``(ratio, multiplier)`` control points sorted by ratio.

    Lookups interpolate linearly between the two bracketing points and clamp
    to the end multipliers outside the table's domain.
    """

    ratios: tuple[float, ...]
    multipliers: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.ratios) != len(self.multipliers):
            raise ValueError("ratios and multipliers must have the same length")
        if not self.ratios:
            raise ValueError("a ratio table needs at least one control point")
        if any(later <= earlier for earlier, later in zip(self.ratios, self.ratios[1:])):
            raise ValueError("ratios must be strictly increasing")

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> "RatioTable":
        pairs = tuple((float(ratio), float(multiplier)) for ratio, multiplier in points)
        return cls(
            ratios=tuple(ratio for ratio, _ in pairs),
            multipliers=tuple(multiplier for _, multiplier in pairs),
        )

    @property
    def points(self) -> tuple[tuple[float, float], ...]:
        return tuple(zip(self.ratios, self.multipliers))

    def __call__(self, ratio: float) -> float:
        return self.lookup(ratio)

    def lookup(self, ratio: float) -> float:
        ratios = self.ratios
        multipliers = self.multipliers
        if ratio <= ratios[0]:
            return multipliers[0]
        if ratio >= ratios[-1]:
            return multipliers[-1]

        upper = bisect_right(ratios, ratio)
        lower = upper - 1
        if ratio == ratios[lower]:
            return multipliers[lower]
        start, end = multipliers[lower], multipliers[upper]
        distance = (ratio - ratios[lower]) / (ratios[upper] - ratios[lower])
        value = lerp(start, end, distance)
        # Rounding must not step outside the bracketing multipliers.
        return min(max(start, end), max(min(start, end), value))
