"""Select strain models by skill name and rate whole sequences."""

from __future__ import annotations

import enum
import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from strain_core.config.loader import SkillSettings
from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import Modifiers

from .aggregator import StrainAggregator
from .models import (
    AimStrain,
    ReadingStrain,
    RhythmStrain,
    SpeedStrain,
    StrainModel,
    VisualStrain,
)

__all__ = [
    "DEFAULT_SKILLS",
    "SkillKind",
    "SkillValues",
    "create_aggregator",
    "create_strain_model",
    "rate_sequence",
    "rate_skill",
]


logger = logging.getLogger(__name__)

SkillValues = Mapping[str, float]


class SkillKind(str, enum.Enum):
    AIM = "aim"
    AIM_NO_SLIDERS = "aim_no_sliders"
    SPEED = "speed"
    RHYTHM = "rhythm"
    READING = "reading"
    VISUAL = "visual"

    @classmethod
    def coerce(cls, value: "SkillKind | str") -> "SkillKind":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError as exc:
            choices = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown skill {value!r}; expected one of: {choices}") from exc


DEFAULT_SKILLS: tuple[SkillKind, ...] = (
    SkillKind.AIM,
    SkillKind.SPEED,
    SkillKind.RHYTHM,
    SkillKind.READING,
)


def create_strain_model(
    kind: SkillKind | str,
    settings: SkillSettings | None = None,
    modifiers: Modifiers = Modifiers.NONE,
) -> StrainModel:
    """Instantiate a fresh model for ``kind``; models are never shared."""

    kind = SkillKind.coerce(kind)
    settings = settings or SkillSettings()
    hidden = bool(modifiers & Modifiers.HIDDEN)

    if kind is SkillKind.AIM:
        return AimStrain(settings.aim, with_slider_travel=True)
    if kind is SkillKind.AIM_NO_SLIDERS:
        return AimStrain(settings.aim, with_slider_travel=False)
    if kind is SkillKind.SPEED:
        return SpeedStrain(settings.speed, autopilot=bool(modifiers & Modifiers.AUTOPILOT))
    if kind is SkillKind.RHYTHM:
        return RhythmStrain(settings.rhythm)
    if kind is SkillKind.READING:
        return ReadingStrain(settings.reading, hidden=hidden)
    return VisualStrain(settings.visual, hidden=hidden)


def create_aggregator(
    kind: SkillKind | str,
    settings: SkillSettings | None = None,
    modifiers: Modifiers = Modifiers.NONE,
) -> StrainAggregator:
    settings = settings or SkillSettings()
    return StrainAggregator(
        create_strain_model(kind, settings, modifiers),
        section_length=settings.section_length,
        decay_weight=settings.decay_weight,
        reduced_section_count=settings.reduced_section_count,
        reduced_strain_baseline=settings.reduced_strain_baseline,
    )


def rate_skill(
    sequence: HitObjectSequence,
    kind: SkillKind | str,
    *,
    settings: SkillSettings | None = None,
    modifiers: Modifiers = Modifiers.NONE,
) -> float:
    """Run one skill over ``sequence`` and return its difficulty value."""

    aggregator = create_aggregator(kind, settings, modifiers)
    return aggregator.process_all(sequence).difficulty_value()


def rate_sequence(
    sequence: HitObjectSequence,
    skills: Iterable[SkillKind | str] | None = None,
    *,
    settings: SkillSettings | None = None,
    modifiers: Modifiers = Modifiers.NONE,
) -> SkillValues:
    """Rate ``sequence`` for every requested skill, each with its own aggregator."""

    kinds = tuple(dict.fromkeys(SkillKind.coerce(skill) for skill in (skills or DEFAULT_SKILLS)))
    settings = settings or SkillSettings()
    values = {
        kind.value: rate_skill(sequence, kind, settings=settings, modifiers=modifiers)
        for kind in kinds
    }
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Sequence rated",
            extra={"event": "skills.rated", "objects": len(sequence), "values": dict(values)},
        )
    return MappingProxyType(values)
