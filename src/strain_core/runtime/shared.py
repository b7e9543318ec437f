"""Primitives shared between the equations, evaluators and skills layers."""

from __future__ import annotations

import enum
from typing import Final, Iterable, Protocol, Sequence, runtime_checkable

__all__ = [
    "NORMALISED_RADIUS",
    "NORMALISED_DIAMETER",
    "MIN_DELTA_TIME",
    "HitObjectKind",
    "Modifiers",
    "SupportsHitObject",
]


NORMALISED_RADIUS: Final[float] = 50.0
NORMALISED_DIAMETER: Final[float] = NORMALISED_RADIUS * 2
MIN_DELTA_TIME: Final[int] = 25


class HitObjectKind(str, enum.Enum):
    """Base type of a hit object as exposed by the attribute source."""

    NORMAL = "normal"
    SLIDER = "slider"
    SPINNER = "spinner"

    @classmethod
    def coerce(cls, value: "HitObjectKind | str") -> "HitObjectKind":
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower()
        aliases = {"circle": "normal", "hitcircle": "normal"}
        try:
            return cls(aliases.get(normalised, normalised))
        except ValueError:
            raise ValueError(f"Unknown hit object kind: {value!r}") from None


class Modifiers(enum.Flag):
    """Active gameplay modifiers relevant to difficulty evaluation."""

    NONE = 0
    HIDDEN = enum.auto()
    AUTOPILOT = enum.auto()

    @classmethod
    def from_acronyms(cls, acronyms: str | Iterable[str] | None) -> "Modifiers":
        """Parse ``"HD,AP"`` style acronyms into a flag set."""

        if acronyms is None:
            return cls.NONE
        if isinstance(acronyms, str):
            tokens: Iterable[str] = acronyms.replace("+", ",").split(",")
        else:
            tokens = acronyms
        result = cls.NONE
        for token in tokens:
            key = str(token).strip().upper()
            if not key:
                continue
            try:
                result |= _ACRONYMS[key]
            except KeyError:
                raise ValueError(f"Unknown modifier acronym: {token!r}") from None
        return result

    def acronyms(self) -> tuple[str, ...]:
        return tuple(
            acronym for acronym, flag in _ACRONYMS.items() if flag and flag in self
        )


_ACRONYMS: Final[dict[str, Modifiers]] = {
    "HD": Modifiers.HIDDEN,
    "AP": Modifiers.AUTOPILOT,
}


@runtime_checkable
class SupportsHitObject(Protocol):
    """Read-only hit object attributes consumed by the evaluators."""

    start_time: float
    kind: HitObjectKind
    position: tuple[float, float]

    jump_distance: float
    travel_distance: float
    minimum_jump_distance: float

    strain_time: float
    travel_time: float
    minimum_jump_time: float

    angle: float | None
    hit_window_great: float
    note_density: float
    visible_objects: Sequence[int]

    time_preempt: float
    time_fade_in: float
    radius: float

    @property
    def is_slider(self) -> bool: ...

    @property
    def is_spinner(self) -> bool: ...
