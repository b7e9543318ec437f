"""Rate attribute records across skills, one worker per skill."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from joblib import Parallel, delayed

from strain_core.config.loader import SkillSettings
from strain_core.runtime.sequence import HitObjectAttributes, HitObjectSequence
from strain_core.runtime.shared import Modifiers
from strain_core.skills.composition import DEFAULT_SKILLS, SkillKind, rate_skill

from strain_osu.io.validation import validate_clock_rate, validate_records

__all__ = ["DifficultyResult", "compute_difficulty"]


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DifficultyResult:
    """Skill values for one rated sequence."""

    values: Mapping[str, float]
    object_count: int
    clock_rate: float
    modifiers: Modifiers
    duration: float

    def as_dict(self) -> dict[str, object]:
        return {
            "values": dict(self.values),
            "object_count": self.object_count,
            "clock_rate": self.clock_rate,
            "modifiers": list(self.modifiers.acronyms()),
            "duration": self.duration,
        }


def _rate_one(
    sequence: HitObjectSequence,
    kind: SkillKind,
    settings: SkillSettings,
    modifiers: Modifiers,
) -> tuple[str, float]:
    return kind.value, rate_skill(sequence, kind, settings=settings, modifiers=modifiers)


def compute_difficulty(
    records: Iterable[HitObjectAttributes],
    *,
    clock_rate: float = 1.0,
    modifiers: Modifiers | str | Iterable[str] | None = Modifiers.NONE,
    skills: Iterable[SkillKind | str] | None = None,
    settings: SkillSettings | None = None,
    n_jobs: int = 1,
) -> DifficultyResult:
    """Validate ``records`` and rate them for every requested skill.

    Skills share no state, so with ``n_jobs != 1`` each runs in its own
    process through :class:`joblib.Parallel`.  A single skill, or
    ``n_jobs == 1``, is evaluated in-process.
    """

    rate = validate_clock_rate(clock_rate)
    items = validate_records(records)
    if not isinstance(modifiers, Modifiers):
        modifiers = Modifiers.from_acronyms(modifiers)
    kinds = tuple(dict.fromkeys(SkillKind.coerce(skill) for skill in (skills or DEFAULT_SKILLS)))
    settings = settings or SkillSettings()
    sequence = HitObjectSequence.from_attributes(items, clock_rate=rate)

    started = time.perf_counter()
    if n_jobs == 1 or len(kinds) == 1:
        pairs = [_rate_one(sequence, kind, settings, modifiers) for kind in kinds]
    else:
        workers = len(kinds) if n_jobs in (None, 0) else n_jobs
        pairs = Parallel(n_jobs=workers, prefer="processes")(
            delayed(_rate_one)(sequence, kind, settings, modifiers) for kind in kinds
        )
    elapsed = time.perf_counter() - started

    values = MappingProxyType({name: value for name, value in pairs})
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Difficulty computed",
            extra={
                "event": "rating.computed",
                "objects": len(sequence),
                "skills": [kind.value for kind in kinds],
                "clock_rate": rate,
                "modifiers": list(modifiers.acronyms()),
                "n_jobs": n_jobs,
                "elapsed": elapsed,
            },
        )

    duration = (sequence[-1].start_time - sequence[0].start_time) if len(sequence) else 0.0
    return DifficultyResult(
        values=values,
        object_count=len(sequence),
        clock_rate=rate,
        modifiers=modifiers,
        duration=duration,
    )
