"""Reading difficulty: how hard the upcoming pattern is to parse on screen.

Two components are combined.  *Rhythm reading* rewards overlapping objects
whose spacing changes independently of the rhythm, scaled by how hard the
fingers are already working.  *Aim reading* rewards movements whose path
crosses other visible objects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from strain_core.equations.geometry import normalised_distance, segment_circle_roots
from strain_core.equations.utils import EPSILON, clamp, sigmoid
from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import NORMALISED_DIAMETER

from ._shared import lacks_history

__all__ = [
    "AIM_MULTIPLIER",
    "READING_WINDOW",
    "RHYTHM_MULTIPLIER",
    "ReadingComponents",
    "evaluate_reading",
    "reading_components",
]


RHYTHM_MULTIPLIER = 15.0
AIM_MULTIPLIER = 32.0
COMPLEXITY_EXPONENT = 2.5
READING_WINDOW = 3000.0
HIDDEN_RHYTHM_BONUS = 1.05


@dataclass(frozen=True, slots=True)
class ReadingComponents:
    """Diagnostic breakdown of a reading evaluation."""

    visible_count: int = 0
    overlap: float = 0.0
    rhythm_complexity: float = 0.0
    aim_complexity: float = 0.0
    value: float = 0.0


_EMPTY = ReadingComponents()


def _time_falloff(elapsed: float) -> float:
    return clamp(1.0 - elapsed / READING_WINDOW, 0.0, 1.0)


def _visible_window(sequence: HitObjectSequence, index: int, density: float) -> list[int]:
    current = sequence[index]
    positions = [index]
    for offset in range(math.ceil(density)):
        position = index + offset + 1
        if position >= len(sequence):
            break
        if sequence[position].start_time - current.start_time > READING_WINDOW:
            break
        positions.append(position)
    return positions


def _visibility(sequence: HitObjectSequence, index: int, position: int, hidden: bool) -> float:
    current = sequence[index]
    elapsed = sequence[position].start_time - current.start_time
    return sequence.opacity_at(position, current.start_time, hidden=hidden) * _time_falloff(
        elapsed
    )


def _overlapness(normalised: float) -> float:
    return sigmoid((0.5 - normalised) / 0.1) - 0.2


def _rhythm_reading(
    sequence: HitObjectSequence,
    index: int,
    positions: Sequence[int],
    finger_strain: float,
    hidden: bool,
) -> tuple[float, float]:
    current = sequence[index]
    previous = sequence[index - 1]
    following = sequence[index + 1]

    previous_distance = normalised_distance(previous.position, current.position, NORMALISED_DIAMETER)
    next_distance = normalised_distance(current.position, following.position, NORMALISED_DIAMETER)

    overlap = _overlapness(previous_distance)
    for position in positions[1:]:
        visible = sequence[position]
        separation = normalised_distance(current.position, visible.position, NORMALISED_DIAMETER)
        overlap += _overlapness(separation) * _visibility(sequence, index, position, hidden)
        if visible.is_slider:
            overlap /= 2.0
        overlap = max(0.0, overlap)
    overlap /= len(positions) / 2.0

    time_ratio = (following.start_time - current.start_time) / (
        current.start_time - previous.start_time + EPSILON
    )
    distance_ratio = next_distance / (previous_distance + EPSILON)
    change_ratio = distance_ratio * time_ratio
    # Rhythm changes without a matching spacing change are easy to misread.
    spacing_change = min(1.05, (change_ratio - 1.0) ** 2 * 1000.0) * min(
        1.0, (distance_ratio - 1.0) ** 2 * 1000.0
    )

    complexity = 0.3 ** (2.0 / (finger_strain + EPSILON)) * overlap * spacing_change
    if hidden:
        complexity *= HIDDEN_RHYTHM_BONUS
    return overlap, complexity


def _intersection_weight(roots: tuple[float, float] | None) -> float:
    if roots is None:
        return 0.0
    entry, exit_ = roots
    if 0.0 <= entry <= 1.0:
        return entry
    if entry < 0.0 <= exit_ <= 1.0:
        # Movement starts inside the circle; only the exit leg crosses it.
        return exit_ / 2.0
    return 0.0


def _aim_reading(
    sequence: HitObjectSequence, index: int, positions: Sequence[int], hidden: bool
) -> float:
    current = sequence[index]
    following = sequence[index + 1]
    movement = normalised_distance(current.position, following.position, NORMALISED_DIAMETER)

    crossings = 0.0
    for position in positions[2:]:
        visible = sequence[position]
        to_next = normalised_distance(following.position, visible.position, NORMALISED_DIAMETER)
        weight = _intersection_weight(
            segment_circle_roots(
                current.position, following.position, visible.position, following.radius * 2.0
            )
        )
        bonus = weight * sigmoid((movement - 3.0) / 0.7) * sigmoid((3.0 - to_next) / 0.7)
        bonus *= _visibility(sequence, index, position, hidden)
        if visible.is_slider:
            bonus *= math.sqrt(visible.travel_distance / NORMALISED_DIAMETER)
        crossings += bonus
    return crossings / len(positions)


def reading_components(
    sequence: HitObjectSequence,
    index: int,
    *,
    finger_strain: float,
    hidden: bool = False,
) -> ReadingComponents:
    """Evaluate reading difficulty and return every intermediate component.

    ``finger_strain`` is the rhythm difficulty of the same object; reading is
    harder when the fingers are already busy.
    """

    if lacks_history(sequence, index):
        return _EMPTY
    current = sequence[index]
    density = min(current.note_density, float(index))
    if density <= 1.0 or sequence.next(index) is None:
        return _EMPTY

    positions = _visible_window(sequence, index, density)
    overlap, rhythm = _rhythm_reading(sequence, index, positions, finger_strain, hidden)
    aim = _aim_reading(sequence, index, positions, hidden)

    rhythm *= RHYTHM_MULTIPLIER
    aim *= AIM_MULTIPLIER
    return ReadingComponents(
        visible_count=len(positions) - 1,
        overlap=overlap,
        rhythm_complexity=rhythm,
        aim_complexity=aim,
        value=(rhythm + aim) ** COMPLEXITY_EXPONENT,
    )


def evaluate_reading(
    sequence: HitObjectSequence,
    index: int,
    *,
    finger_strain: float,
    hidden: bool = False,
) -> float:
    return reading_components(
        sequence, index, finger_strain=finger_strain, hidden=hidden
    ).value
