"""Cursor-movement difficulty of a single hit object."""

from __future__ import annotations

import math

from strain_core.equations.utils import (
    clamp,
    milliseconds_to_bpm,
    safe_divide,
    smootherstep,
)
from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import NORMALISED_DIAMETER, NORMALISED_RADIUS

from ._shared import lacks_history

__all__ = [
    "ACUTE_ANGLE_MULTIPLIER",
    "SLIDER_MULTIPLIER",
    "VELOCITY_CHANGE_MULTIPLIER",
    "WIDE_ANGLE_MULTIPLIER",
    "WIGGLE_MULTIPLIER",
    "acute_angle_bonus",
    "evaluate_aim",
    "wide_angle_bonus",
]


WIDE_ANGLE_MULTIPLIER = 1.5
ACUTE_ANGLE_MULTIPLIER = 2.45
SLIDER_MULTIPLIER = 1.35
VELOCITY_CHANGE_MULTIPLIER = 0.75
WIGGLE_MULTIPLIER = 1.1

_SAME_RHYTHM_RATIO = 1.25
_WIGGLE_WIDE = math.radians(110)
_WIGGLE_SHARP = math.radians(60)


def wide_angle_bonus(angle: float) -> float:
    """``sin(3/4 * (clamp(angle, pi/6, 5pi/6) - pi/6))^2``."""

    clamped = clamp(angle, math.pi / 6, 5.0 / 6.0 * math.pi)
    return math.sin(3.0 / 4.0 * (clamped - math.pi / 6)) ** 2


def acute_angle_bonus(angle: float) -> float:
    return 1.0 - wide_angle_bonus(angle)


def evaluate_aim(
    sequence: HitObjectSequence, index: int, *, with_slider_travel: bool = True
) -> float:
    """Evaluate the aiming difficulty of the object at ``index``.

    The value starts from the cursor velocity into the object and adds
    bonuses for wide and acute angles, wiggle patterns, sharp velocity
    changes and (when ``with_slider_travel`` is set) slider movement.
    """

    if lacks_history(sequence, index, depth=2):
        return 0.0

    current = sequence[index]
    last = sequence[index - 1]
    last_last = sequence[index - 2]

    current_velocity = safe_divide(current.jump_distance, current.strain_time)
    if last.is_slider and with_slider_travel:
        travel_velocity = safe_divide(last.travel_distance, last.travel_time)
        movement_velocity = safe_divide(
            current.minimum_jump_distance, current.minimum_jump_time
        )
        current_velocity = max(current_velocity, movement_velocity + travel_velocity)

    previous_velocity = safe_divide(last.jump_distance, last.strain_time)
    if last_last.is_slider and with_slider_travel:
        travel_velocity = safe_divide(last_last.travel_distance, last_last.travel_time)
        movement_velocity = safe_divide(last.minimum_jump_distance, last.minimum_jump_time)
        previous_velocity = max(previous_velocity, movement_velocity + travel_velocity)

    wide_bonus = 0.0
    acute_bonus = 0.0
    wiggle_bonus = 0.0
    velocity_change_bonus = 0.0
    slider_bonus = 0.0

    aim_strain = current_velocity

    shorter = min(current.strain_time, last.strain_time)
    longer = max(current.strain_time, last.strain_time)
    same_rhythm = longer < _SAME_RHYTHM_RATIO * shorter
    angles = (current.angle, last.angle, last_last.angle)

    if same_rhythm and all(angle is not None for angle in angles):
        current_angle, last_angle, last_last_angle = angles
        angle_base = min(current_velocity, previous_velocity)

        wide_bonus = wide_angle_bonus(current_angle)
        acute_bonus = (
            acute_angle_bonus(current_angle)
            * angle_base
            * smootherstep(milliseconds_to_bpm(current.strain_time, 2), 300, 400)
            * smootherstep(current.jump_distance, NORMALISED_DIAMETER, NORMALISED_DIAMETER * 2)
        )

        # Repeated wide angles are easier; less so once the previous angle sharpens.
        wide_bonus *= angle_base * (
            1.0 - min(wide_bonus, wide_angle_bonus(last_angle) ** 3)
        )
        acute_bonus *= 1.0 - min(acute_bonus, acute_angle_bonus(last_last_angle) ** 3)

        wiggle_bonus = (
            angle_base
            * smootherstep(current.jump_distance, NORMALISED_RADIUS, NORMALISED_DIAMETER)
            * smootherstep(current.jump_distance, NORMALISED_DIAMETER * 2, NORMALISED_DIAMETER)
            * smootherstep(current_angle, _WIGGLE_WIDE, _WIGGLE_SHARP)
            * smootherstep(last.jump_distance, NORMALISED_RADIUS, NORMALISED_DIAMETER)
            * smootherstep(last.jump_distance, NORMALISED_DIAMETER * 2, NORMALISED_DIAMETER)
            * smootherstep(last_angle, _WIGGLE_WIDE, _WIGGLE_SHARP)
        )

    if max(previous_velocity, current_velocity) != 0.0:
        # Average velocity over the whole object, slider body included.
        previous_velocity = safe_divide(
            last.jump_distance + last_last.travel_distance, last.strain_time
        )
        current_velocity = safe_divide(
            current.jump_distance + last.travel_distance, current.strain_time
        )
        velocity_delta = abs(previous_velocity - current_velocity)

        distance_ratio = (
            math.sin(
                math.pi / 2
                * safe_divide(velocity_delta, max(previous_velocity, current_velocity))
            )
            ** 2
        )
        overlap_velocity_buff = min(
            safe_divide(NORMALISED_DIAMETER * 1.25, shorter), velocity_delta
        )
        velocity_change_bonus = overlap_velocity_buff * distance_ratio
        velocity_change_bonus *= safe_divide(shorter, longer) ** 2

    if last.is_slider:
        slider_bonus = safe_divide(last.travel_distance, last.travel_time)

    aim_strain += wiggle_bonus * WIGGLE_MULTIPLIER
    aim_strain += max(
        acute_bonus * ACUTE_ANGLE_MULTIPLIER,
        wide_bonus * WIDE_ANGLE_MULTIPLIER
        + velocity_change_bonus * VELOCITY_CHANGE_MULTIPLIER,
    )
    if with_slider_travel:
        aim_strain += slider_bonus * SLIDER_MULTIPLIER

    return aim_strain
