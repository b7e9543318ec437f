"""Immutable hit object records and the indexable sequence evaluators walk."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Sequence, overload

from .shared import (
    MIN_DELTA_TIME,
    NORMALISED_RADIUS,
    HitObjectKind,
    SupportsHitObject,
)

__all__ = ["HIDDEN_FADE_OUT_MULTIPLIER", "HitObjectAttributes", "HitObjectSequence"]


HIDDEN_FADE_OUT_MULTIPLIER = 0.3

_TIME_FIELDS: tuple[str, ...] = (
    "start_time",
    "strain_time",
    "travel_time",
    "minimum_jump_time",
    "hit_window_great",
    "time_preempt",
    "time_fade_in",
)


@dataclass(frozen=True, slots=True)
class HitObjectAttributes:
    """Precomputed attributes for a single hit object.

    Distances are expressed in normalised units where a circle has radius
    :data:`~strain_core.runtime.shared.NORMALISED_RADIUS`.  Times are in
    milliseconds.  ``visible_objects`` lists indices of the objects that are
    on screen together with this one, nearest first.
    """

    start_time: float
    kind: HitObjectKind = HitObjectKind.NORMAL
    position: tuple[float, float] = (0.0, 0.0)
    jump_distance: float = 0.0
    travel_distance: float = 0.0
    minimum_jump_distance: float = 0.0
    strain_time: float = float(MIN_DELTA_TIME)
    travel_time: float = 0.0
    minimum_jump_time: float = float(MIN_DELTA_TIME)
    angle: float | None = None
    hit_window_great: float = 0.0
    note_density: float = 0.0
    visible_objects: tuple[int, ...] = field(default_factory=tuple)
    time_preempt: float = 600.0
    time_fade_in: float = 400.0
    radius: float = NORMALISED_RADIUS

    def __post_init__(self) -> None:
        x, y = self.position
        object.__setattr__(self, "kind", HitObjectKind.coerce(self.kind))
        object.__setattr__(self, "position", (float(x), float(y)))
        object.__setattr__(
            self, "visible_objects", tuple(int(item) for item in self.visible_objects)
        )

    @property
    def is_slider(self) -> bool:
        return self.kind is HitObjectKind.SLIDER

    @property
    def is_spinner(self) -> bool:
        return self.kind is HitObjectKind.SPINNER

    def scaled(self, clock_rate: float) -> "HitObjectAttributes":
        """Return a copy with every time-domain field divided by ``clock_rate``."""

        if clock_rate == 1.0:
            return self
        return replace(
            self,
            **{name: getattr(self, name) / clock_rate for name in _TIME_FIELDS},
        )


class HitObjectSequence(Sequence[HitObjectAttributes]):
    """Time-ordered, immutable collection of hit objects.

    Relative lookups never raise: out-of-range neighbours resolve to ``None``
    so evaluators can treat missing history as a zero contribution.
    """

    __slots__ = ("_objects", "_clock_rate")

    def __init__(
        self, objects: Iterable[SupportsHitObject], *, clock_rate: float = 1.0
    ) -> None:
        self._objects: tuple[SupportsHitObject, ...] = tuple(objects)
        self._clock_rate = float(clock_rate)

    @classmethod
    def from_attributes(
        cls, records: Iterable[HitObjectAttributes], *, clock_rate: float = 1.0
    ) -> "HitObjectSequence":
        """Build a sequence applying ``clock_rate`` to all time-domain fields."""

        rate = float(clock_rate)
        if rate <= 0.0:
            raise ValueError("clock_rate must be positive")
        return cls((record.scaled(rate) for record in records), clock_rate=rate)

    @property
    def clock_rate(self) -> float:
        return self._clock_rate

    def __len__(self) -> int:
        return len(self._objects)

    @overload
    def __getitem__(self, index: int) -> SupportsHitObject: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[SupportsHitObject, ...]: ...

    def __getitem__(self, index):  # type: ignore[override]
        return self._objects[index]

    def __iter__(self) -> Iterator[SupportsHitObject]:
        return iter(self._objects)

    def __repr__(self) -> str:
        return f"HitObjectSequence(len={len(self._objects)}, clock_rate={self._clock_rate})"

    def _resolve(self, position: int) -> SupportsHitObject | None:
        if 0 <= position < len(self._objects):
            return self._objects[position]
        return None

    def previous(self, index: int, backwards: int = 0) -> SupportsHitObject | None:
        """Return the object ``backwards + 1`` places before ``index``."""

        return self._resolve(index - (backwards + 1))

    def next(self, index: int, forwards: int = 0) -> SupportsHitObject | None:
        """Return the object ``forwards + 1`` places after ``index``."""

        return self._resolve(index + (forwards + 1))

    def delta_time(self, index: int) -> float:
        """Elapsed time between ``index`` and its predecessor (0 for the first)."""

        previous = self.previous(index)
        if previous is None:
            return 0.0
        return self._objects[index].start_time - previous.start_time

    def visible_objects(self, index: int) -> tuple[SupportsHitObject, ...]:
        """Resolve the visible neighbour indices of ``index`` into objects."""

        return tuple(
            obj
            for obj in (self._resolve(position) for position in self._objects[index].visible_objects)
            if obj is not None
        )

    def doubletapness(self, index: int) -> float:
        """Probability that ``index`` and the following object are hit as one input.

        Returns 0 when there is no following object.
        """

        if self.next(index) is None:
            return 0.0
        current = self._objects[index]
        current_delta = max(1.0, self.delta_time(index))
        next_delta = max(1.0, self.delta_time(index + 1))
        delta_difference = abs(next_delta - current_delta)
        speed_ratio = current_delta / max(current_delta, delta_difference)
        if current.hit_window_great <= 0.0:
            return 0.0
        window_ratio = min(1.0, current_delta / current.hit_window_great) ** 2
        return 1.0 - speed_ratio ** (1.0 - window_ratio)

    def opacity_at(self, index: int, time: float, *, hidden: bool = False) -> float:
        """Fractional visibility of ``index`` at ``time`` (0 hidden, 1 opaque)."""

        current = self._objects[index]
        if time > current.start_time:
            return 0.0
        fade_in_start = current.start_time - current.time_preempt
        fade_in = _clamped_progress(time - fade_in_start, current.time_fade_in)
        if not hidden:
            return fade_in
        fade_out_start = fade_in_start + current.time_fade_in
        fade_out_duration = current.time_preempt * HIDDEN_FADE_OUT_MULTIPLIER
        return min(fade_in, 1.0 - _clamped_progress(time - fade_out_start, fade_out_duration))


def _clamped_progress(elapsed: float, duration: float) -> float:
    if duration <= 0.0:
        return 1.0 if elapsed >= 0.0 else 0.0
    return min(1.0, max(0.0, elapsed / duration))
