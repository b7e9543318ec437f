"""Reject malformed hit object attributes before they reach the core."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from strain_core.runtime.sequence import HitObjectAttributes

__all__ = ["AttributeValidationError", "validate_clock_rate", "validate_records"]


class AttributeValidationError(ValueError):
    """Raised when attribute records cannot be rated."""

    def __init__(self, message: str, *, index: int | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.index = index
        self.field = field


_FINITE_FIELDS: tuple[str, ...] = (
    "start_time",
    "jump_distance",
    "travel_distance",
    "minimum_jump_distance",
    "strain_time",
    "travel_time",
    "minimum_jump_time",
    "hit_window_great",
    "note_density",
    "time_preempt",
    "time_fade_in",
    "radius",
)

_NON_NEGATIVE_FIELDS: tuple[str, ...] = (
    "jump_distance",
    "travel_distance",
    "minimum_jump_distance",
    "travel_time",
    "hit_window_great",
    "note_density",
    "time_preempt",
    "time_fade_in",
    "radius",
)


def validate_clock_rate(clock_rate: float) -> float:
    try:
        rate = float(clock_rate)
    except (TypeError, ValueError) as exc:
        raise AttributeValidationError(f"Invalid clock rate {clock_rate!r}", field="clock_rate") from exc
    if not math.isfinite(rate) or rate <= 0.0:
        raise AttributeValidationError(
            f"Clock rate must be a positive finite number, got {clock_rate!r}",
            field="clock_rate",
        )
    return rate


def validate_records(
    records: Iterable[HitObjectAttributes], *, allow_empty: bool = False
) -> tuple[HitObjectAttributes, ...]:
    """Return ``records`` as a tuple after checking every invariant.

    Start times must be finite and non-decreasing, strain times strictly
    positive and visible object indices must point into the sequence.
    """

    items: Sequence[HitObjectAttributes] = tuple(records)
    if not items and not allow_empty:
        raise AttributeValidationError("No hit objects to rate")

    previous_start: float | None = None
    for index, record in enumerate(items):
        if not isinstance(record, HitObjectAttributes):
            raise AttributeValidationError(
                f"Record {index} is {type(record).__name__}, expected HitObjectAttributes",
                index=index,
            )
        for name in _FINITE_FIELDS:
            value = getattr(record, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise AttributeValidationError(
                    f"Record {index} has non-numeric {name}: {value!r}", index=index, field=name
                )
            if not math.isfinite(value):
                raise AttributeValidationError(
                    f"Record {index} has non-finite {name}: {value!r}", index=index, field=name
                )
        for name in _NON_NEGATIVE_FIELDS:
            value = getattr(record, name)
            if value < 0.0:
                raise AttributeValidationError(
                    f"Record {index} has negative {name}: {value!r}", index=index, field=name
                )
        if record.strain_time <= 0.0:
            raise AttributeValidationError(
                f"Record {index} must have a positive strain_time", index=index, field="strain_time"
            )
        if record.angle is not None and not math.isfinite(record.angle):
            raise AttributeValidationError(
                f"Record {index} has non-finite angle", index=index, field="angle"
            )
        if not all(math.isfinite(axis) for axis in record.position):
            raise AttributeValidationError(
                f"Record {index} has a non-finite position", index=index, field="position"
            )
        if previous_start is not None and record.start_time < previous_start:
            raise AttributeValidationError(
                f"Record {index} starts at {record.start_time} before the previous object "
                f"({previous_start})",
                index=index,
                field="start_time",
            )
        for visible in record.visible_objects:
            if not 0 <= visible < len(items):
                raise AttributeValidationError(
                    f"Record {index} references visible object {visible} outside the sequence",
                    index=index,
                    field="visible_objects",
                )
        previous_start = record.start_time

    return tuple(items)
