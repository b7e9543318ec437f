"""Rhythm complexity of a single hit object.

Recent history is split into *islands*: runs of objects whose delta times
agree within a tolerance derived from the great hit window.  Alternating
between island shapes is rewarded through :data:`RHYTHM_RATIOS`; an island
shape that keeps repeating is progressively penalised.
"""

from __future__ import annotations

import math
from typing import MutableSequence

from strain_core.equations.interpolation import RatioTable
from strain_core.equations.utils import logistic, safe_divide
from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import MIN_DELTA_TIME

from ._shared import lacks_history

__all__ = [
    "HISTORY_OBJECTS_MAX",
    "HISTORY_TIME_MAX",
    "ISLAND_EPSILON_MULTIPLIER",
    "Island",
    "RHYTHM_RATIOS",
    "delta_ratio",
    "evaluate_rhythm",
]


HISTORY_TIME_MAX = 5000.0
HISTORY_OBJECTS_MAX = 32
ISLAND_EPSILON_MULTIPLIER = 0.3

_UNSET_DELTA = float(2**31 - 1)
_SPEED_UP_PENALTY = 0.5
_SLIDER_CHANGE_PENALTY = 0.35
_DOUBLETAP_DISCOUNT = 0.75

RHYTHM_RATIOS = RatioTable.from_points(
    (
        (1.0, 0.01),
        (4.0 / 3.0, 3.0),
        (1.5, 1.25),
        (5.0 / 3.0, 3.0),
        (2.0, 0.2),
        (2.5, 1.2),
        (3.0, 0.25),
        (4.0, 0.0),
    )
)


class Island:
    """Run of objects sharing the same delta time within ``epsilon``."""

    __slots__ = ("delta", "delta_count", "epsilon")

    def __init__(self, epsilon: float, delta: float | None = None) -> None:
        self.epsilon = float(epsilon)
        if delta is None:
            self.delta = _UNSET_DELTA
            self.delta_count = 0
        else:
            self.delta = max(float(delta), float(MIN_DELTA_TIME))
            self.delta_count = 1

    def add_delta(self, delta: float) -> None:
        if self.delta == _UNSET_DELTA:
            self.delta = max(float(delta), float(MIN_DELTA_TIME))
        self.delta_count += 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Island):
            return NotImplemented
        epsilon = max(self.epsilon, other.epsilon)
        return (
            abs(self.delta - other.delta) < epsilon
            and self.delta_count == other.delta_count
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Island(delta={self.delta:g}, count={self.delta_count})"


def delta_ratio(previous_delta: float, current_delta: float) -> float:
    """Ratio of the longer delta to the shorter one (always ``>= 1``)."""

    shorter = min(previous_delta, current_delta)
    longer = max(previous_delta, current_delta)
    return safe_divide(longer, shorter, default=1.0)


def _find_island(counts: list[list], island: Island) -> MutableSequence | None:
    for entry in counts:
        if entry[0] == island:
            return entry
    return None


def evaluate_rhythm(
    sequence: HitObjectSequence, index: int, *, table: RatioTable = RHYTHM_RATIOS
) -> float:
    """Evaluate the rhythm complexity of the object at ``index``.

    Evenly spaced streams settle on ``1.0``; irregular rhythms raise the
    value.  The result is discounted by the chance the object is doubletapped
    together with its successor.
    """

    if lacks_history(sequence, index):
        return 0.0

    current = sequence[index]
    epsilon = current.hit_window_great * ISLAND_EPSILON_MULTIPLIER
    historical_count = min(index, HISTORY_OBJECTS_MAX)

    rhythm_start = 0
    while (
        rhythm_start < historical_count - 2
        and current.start_time - sequence.previous(index, rhythm_start).start_time
        < HISTORY_TIME_MAX
    ):
        rhythm_start += 1

    island = Island(epsilon)
    previous_island = Island(epsilon)
    island_counts: list[list] = []

    complexity = 0.0
    previous_ratio = 0.0
    previous_position = index - (rhythm_start + 1)
    previous = sequence[previous_position]

    for back in range(rhythm_start, 0, -1):
        position = index - back
        obj = sequence[position]

        time_decay = (HISTORY_TIME_MAX - (current.start_time - obj.start_time)) / HISTORY_TIME_MAX
        note_decay = (historical_count - back) / historical_count
        decay = min(note_decay, time_decay)

        current_delta = obj.strain_time
        previous_delta = previous.strain_time

        effective_ratio = table.lookup(delta_ratio(previous_delta, current_delta))
        if previous.is_slider:
            # Rhythm perceived from the slider end rather than its head.
            slider_ratio = table.lookup(delta_ratio(obj.minimum_jump_time, current_delta))
            effective_ratio = min(effective_ratio, slider_ratio)

        if previous_delta > current_delta + epsilon:
            effective_ratio *= _SPEED_UP_PENALTY

        if abs(previous_delta - current_delta) < epsilon:
            island.add_delta(current_delta)
        else:
            if obj.is_slider:
                effective_ratio *= _SLIDER_CHANGE_PENALTY

            entry = _find_island(island_counts, island)
            if entry is not None:
                if previous_island == island:
                    entry[1] += 1
                repeats = entry[1]
                power = logistic(
                    island.delta, max_value=0.75, multiplier=0.24, midpoint_offset=58.33
                )
                effective_ratio *= min(5.0 / repeats, (1.0 / repeats) ** power)
            else:
                island_counts.append([island, 1])

            effective_ratio *= 1.0 - sequence.doubletapness(previous_position) * _DOUBLETAP_DISCOUNT

            complexity += math.sqrt(effective_ratio * previous_ratio) * decay
            previous_ratio = effective_ratio
            previous_island = island
            island = Island(epsilon, current_delta)

        previous = obj
        previous_position = position

    difficulty = math.sqrt(4.0 + complexity * 3.2) / 2.0
    return difficulty * (1.0 - sequence.doubletapness(index))
