"""Tapping speed and stamina of a single hit object."""

from __future__ import annotations

from strain_core.equations.utils import (
    bpm_to_milliseconds,
    clamp,
    milliseconds_to_bpm,
    safe_divide,
)
from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import NORMALISED_DIAMETER

from ._shared import lacks_history

__all__ = [
    "DISTANCE_MULTIPLIER",
    "MIN_SPEED_BONUS",
    "SINGLE_SPACING_THRESHOLD",
    "SPEED_BALANCING_FACTOR",
    "STAMINA_BASE",
    "STAMINA_INTERVAL_SCALE",
    "evaluate_speed",
    "evaluate_stamina",
]


SINGLE_SPACING_THRESHOLD = NORMALISED_DIAMETER * 1.25
MIN_SPEED_BONUS = 200.0
SPEED_BALANCING_FACTOR = 40.0
DISTANCE_MULTIPLIER = 0.9

STAMINA_BASE = 0.5
STAMINA_INTERVAL_SCALE = 30.0


def evaluate_speed(
    sequence: HitObjectSequence, index: int, *, autopilot: bool = False
) -> float:
    """Evaluate how fast the object at ``index`` has to be tapped.

    Short intervals are lengthened slightly when they are tight relative to
    the great hit window, intervals faster than :data:`MIN_SPEED_BONUS` BPM
    earn a quadratic bonus, and spacing up to
    :data:`SINGLE_SPACING_THRESHOLD` adds a distance bonus unless the cursor
    is automated.
    """

    if lacks_history(sequence, index):
        return 0.0

    current = sequence[index]
    previous = sequence.previous(index)
    strain_time = current.strain_time

    if current.hit_window_great > 0.0:
        strain_time /= clamp(
            (strain_time / current.hit_window_great) / 0.93, 0.92, 1.0
        )

    speed_bonus = 0.0
    if milliseconds_to_bpm(strain_time) > MIN_SPEED_BONUS:
        speed_bonus = 0.75 * (
            (bpm_to_milliseconds(MIN_SPEED_BONUS) - strain_time) / SPEED_BALANCING_FACTOR
        ) ** 2

    distance_bonus = 0.0
    if not autopilot:
        travel = previous.travel_distance if previous is not None else 0.0
        spacing = min(travel + current.minimum_jump_distance, SINGLE_SPACING_THRESHOLD)
        distance_bonus = (spacing / SINGLE_SPACING_THRESHOLD) ** 3.95 * DISTANCE_MULTIPLIER

    value = (1.0 + speed_bonus + distance_bonus) * safe_divide(1000.0, strain_time)
    return value * (1.0 - sequence.doubletapness(index))


def evaluate_stamina(sequence: HitObjectSequence, index: int) -> float:
    """Per-object stamina load from the gap to the same-finger press.

    Alternating fingers hit every other object, so the interval is taken to
    the object two places back.
    """

    if lacks_history(sequence, index):
        return 0.0

    current = sequence[index]
    same_finger = sequence.previous(index, 1)
    interval = max(current.start_time - same_finger.start_time, 1.0)
    value = STAMINA_BASE + STAMINA_INTERVAL_SCALE / interval
    return value * (1.0 - sequence.doubletapness(index))
