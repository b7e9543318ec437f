"""Fold per-object strains into section peaks and a single difficulty value."""

from __future__ import annotations

import enum
import logging
import math
from typing import TYPE_CHECKING, Iterable

import numpy as np

from strain_core.equations.utils import clamp, lerp
from strain_core.runtime.sequence import HitObjectSequence

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import StrainModel

__all__ = [
    "AggregatorState",
    "AggregatorStateError",
    "StrainAggregator",
    "decay_strain",
    "weighted_peak_sum",
]


logger = logging.getLogger(__name__)


def decay_strain(value: float, base: float, elapsed_ms: float) -> float:
    """Decay ``value`` by ``base^(elapsed_ms / 1000)``.

    Non-positive elapsed time leaves the value untouched.
    """

    if elapsed_ms <= 0.0 or base == 1.0:
        return value
    return value * base ** (elapsed_ms / 1000.0)


def weighted_peak_sum(peaks: Iterable[float], decay_weight: float = 0.9) -> float:
    """Sum ``peak[i] * decay_weight^i`` over peaks sorted in descending order."""

    ordered = np.sort(np.asarray(list(peaks), dtype=float))[::-1]
    if not ordered.size:
        return 0.0
    weights = decay_weight ** np.arange(ordered.size, dtype=float)
    return float(np.dot(ordered, weights))


class AggregatorState(str, enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


class AggregatorStateError(RuntimeError):
    """Raised when an aggregator receives input it can no longer accept."""


class StrainAggregator:
    """Sequential strain state machine for one skill.

    Objects must be fed in chronological order.  Each object first closes any
    sections it has moved past, seeding the next section with the model's
    decayed strain at the section boundary, then adds its own strain.  The
    first call to :meth:`difficulty_value` finalises the aggregator.
    """

    __slots__ = (
        "model",
        "section_length",
        "decay_weight",
        "reduced_section_count",
        "reduced_strain_baseline",
        "_state",
        "_peaks",
        "_object_strains",
        "_current_peak",
        "_section_end",
        "_last_time",
        "_difficulty",
    )

    def __init__(
        self,
        model: "StrainModel",
        *,
        section_length: float = 400.0,
        decay_weight: float = 0.9,
        reduced_section_count: int = 0,
        reduced_strain_baseline: float = 0.75,
    ) -> None:
        if section_length <= 0.0:
            raise ValueError("section_length must be positive")
        self.model = model
        self.section_length = float(section_length)
        self.decay_weight = float(decay_weight)
        self.reduced_section_count = int(reduced_section_count)
        self.reduced_strain_baseline = float(reduced_strain_baseline)
        self._state = AggregatorState.IDLE
        self._peaks: list[float] = []
        self._object_strains: list[float] = []
        self._current_peak = 0.0
        self._section_end: float | None = None
        self._last_time: float | None = None
        self._difficulty: float | None = None

    @property
    def state(self) -> AggregatorState:
        return self._state

    def process(self, sequence: HitObjectSequence, index: int) -> float:
        """Feed the object at ``index`` and return its strain."""

        if self._state is AggregatorState.FINALIZED:
            raise AggregatorStateError("aggregator has already been finalised")

        current = sequence[index]
        if self._last_time is not None and current.start_time < self._last_time:
            raise AggregatorStateError(
                f"object {index} starts at {current.start_time} before the previous object"
            )

        if self._section_end is None:
            self._section_end = (
                math.ceil(current.start_time / self.section_length) * self.section_length
            )

        while current.start_time > self._section_end:
            self._peaks.append(self._current_peak)
            self._current_peak = self.model.initial_strain(self._section_end, sequence, index)
            self._section_end += self.section_length

        strain = self.model.strain_at(sequence, index)
        self._current_peak = max(self._current_peak, strain)
        self._object_strains.append(strain)
        self._last_time = current.start_time
        self._state = AggregatorState.ACCUMULATING
        return strain

    def process_all(self, sequence: HitObjectSequence) -> "StrainAggregator":
        for index in range(len(sequence)):
            self.process(sequence, index)
        return self

    def peaks(self) -> tuple[float, ...]:
        """Recorded section peaks including the still-open section."""

        if self._state is AggregatorState.IDLE:
            return ()
        return (*self._peaks, self._current_peak)

    def object_strains(self) -> tuple[float, ...]:
        return tuple(self._object_strains)

    def finalize(self) -> None:
        self._state = AggregatorState.FINALIZED

    def difficulty_value(self) -> float:
        """Weighted sum of the section peaks sorted in descending order.

        The strongest ``reduced_section_count`` peaks are first scaled by a
        factor rising logarithmically from ``reduced_strain_baseline`` to 1.
        """

        if self._difficulty is not None:
            return self._difficulty

        peaks = np.asarray([peak for peak in self.peaks() if peak > 0.0], dtype=float)
        peaks = np.sort(peaks)[::-1]

        if self.reduced_section_count > 0 and peaks.size:
            peaks = peaks.copy()
            for position in range(min(peaks.size, self.reduced_section_count)):
                scale = math.log10(
                    lerp(1.0, 10.0, clamp(position / self.reduced_section_count, 0.0, 1.0))
                )
                peaks[position] *= lerp(self.reduced_strain_baseline, 1.0, scale)

        self._difficulty = weighted_peak_sum(peaks, self.decay_weight)
        self.finalize()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Strain sections reduced",
                extra={
                    "event": "strain.difficulty",
                    "model": type(self.model).__name__,
                    "sections": int(peaks.size),
                    "objects": len(self._object_strains),
                    "difficulty": self._difficulty,
                },
            )
        return self._difficulty

    def relevant_object_count(self) -> float:
        """Logistic count of objects whose strain is close to the maximum."""

        strains = np.asarray(self._object_strains, dtype=float)
        if not strains.size:
            return 0.0
        top = float(strains.max())
        if top <= 0.0:
            return 0.0
        return float(np.sum(1.0 / (1.0 + np.exp(-(strains / top * 12.0 - 6.0)))))
