"""Load strain parameters for the difficulty skills."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping as MappingABC
from dataclasses import dataclass, field, fields
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

__all__ = [
    "SkillSettings",
    "SpeedParameters",
    "StrainParameters",
    "deep_merge",
    "load_skill_config",
]


_SKILLS_RESOURCE_PACKAGE = "strain_core.config"
_SKILLS_RESOURCE_NAME = "skills.yaml"


@dataclass(frozen=True, slots=True)
class StrainParameters:
    """Multiplier, decay base and output exponent of a single-strain skill."""

    multiplier: float = 1.0
    decay_base: float = 1.0
    exponent: float = 1.0


@dataclass(frozen=True, slots=True)
class SpeedParameters:
    """Burst and stamina sub-strain parameters of the speed skill."""

    burst_multiplier: float = 2.2
    stamina_multiplier: float = 0.02
    total_multiplier: float = 0.98
    burst_decay_base: float = 0.1
    stamina_decay_base: float = 0.1
    stamina_decay_exponent: float = 3.5


@dataclass(frozen=True, slots=True)
class SkillSettings:
    """Immutable view over ``skills.yaml``."""

    section_length: float = 400.0
    decay_weight: float = 0.9
    reduced_section_count: int = 0
    reduced_strain_baseline: float = 0.75
    aim: StrainParameters = field(
        default_factory=lambda: StrainParameters(multiplier=25.18, decay_base=0.15)
    )
    rhythm: StrainParameters = field(
        default_factory=lambda: StrainParameters(exponent=5.0)
    )
    reading: StrainParameters = field(default_factory=StrainParameters)
    visual: StrainParameters = field(
        default_factory=lambda: StrainParameters(multiplier=0.01, decay_base=0.15)
    )
    speed: SpeedParameters = field(default_factory=SpeedParameters)

    def __post_init__(self) -> None:
        if self.section_length <= 0.0:
            raise ValueError("section_length must be positive")
        if not 0.0 < self.decay_weight < 1.0:
            raise ValueError("decay_weight must lie in (0, 1)")
        if self.reduced_section_count < 0:
            raise ValueError("reduced_section_count must not be negative")

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "SkillSettings":
        """Coerce a mapping shaped like ``skills.yaml`` into settings.

        Missing entries keep their defaults; unknown keys are ignored.
        """

        if config is None:
            config = load_skill_config()
        defaults = cls()
        aggregation = _section(config, "aggregation")
        skills = _section(config, "skills")

        return cls(
            section_length=float(aggregation.get("section_length", defaults.section_length)),
            decay_weight=float(aggregation.get("decay_weight", defaults.decay_weight)),
            reduced_section_count=int(
                aggregation.get("reduced_section_count", defaults.reduced_section_count)
            ),
            reduced_strain_baseline=float(
                aggregation.get("reduced_strain_baseline", defaults.reduced_strain_baseline)
            ),
            aim=_coerce(StrainParameters, _section(skills, "aim"), defaults.aim),
            rhythm=_coerce(StrainParameters, _section(skills, "rhythm"), defaults.rhythm),
            reading=_coerce(StrainParameters, _section(skills, "reading"), defaults.reading),
            visual=_coerce(StrainParameters, _section(skills, "visual"), defaults.visual),
            speed=_coerce(SpeedParameters, _section(skills, "speed"), defaults.speed),
        )


def _section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = config.get(key)
    if isinstance(value, MappingABC):
        return value
    return {}


def _coerce(factory: type, payload: Mapping[str, Any], default: Any) -> Any:
    values = {}
    for item in fields(factory):
        raw = payload.get(item.name, getattr(default, item.name))
        try:
            values[item.name] = float(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Skill parameter {item.name!r} must be numeric: {raw!r}") from exc
    return factory(**values)


def _search_candidates(search_paths: Iterable[str | Path]) -> Iterator[Path]:
    for entry in search_paths:
        location = Path(entry).expanduser()
        yield location / _SKILLS_RESOURCE_NAME if location.is_dir() else location


def load_skill_config(
    path: str | Path | None = None,
    *,
    search_paths: Iterable[str | Path] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Mapping[str, Any]:
    """Load skill defaults honouring explicit files and search paths.

    Parameters
    ----------
    path:
        Path to a YAML file. When supplied the search order is skipped and
        the file must exist.
    search_paths:
        Directories or files to inspect; directories resolve against
        ``skills.yaml``. The first existing file wins, otherwise the packaged
        defaults are used.
    overrides:
        Mapping deep-merged on top of whatever was loaded.
    """

    if path is not None:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise FileNotFoundError(explicit)
        source = explicit
    else:
        found = next((c for c in _search_candidates(search_paths or ()) if c.is_file()), None)
        source = found or resources.files(_SKILLS_RESOURCE_PACKAGE) / _SKILLS_RESOURCE_NAME

    tree = _parse_skills(source.read_text(encoding="utf-8"), origin=str(source))
    if overrides:
        deep_merge(tree, overrides)
    return MappingProxyType(tree)


def deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    """Recursively merge ``source`` into ``target`` in place.

    Nested tables are merged key by key; any other value replaces what
    ``target`` held.
    """

    for key, incoming in source.items():
        name = str(key)
        current = target.get(name)
        if not isinstance(incoming, MappingABC):
            target[name] = incoming
            continue
        branch = _plain_tree(current) if isinstance(current, MappingABC) else {}
        deep_merge(branch, incoming)
        target[name] = branch


def _plain_tree(source: Mapping[str, Any]) -> dict[str, Any]:
    return {
        str(key): _plain_tree(value) if isinstance(value, MappingABC) else value
        for key, value in source.items()
    }


def _parse_skills(text: str, *, origin: str) -> dict[str, Any]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in skill configuration: {origin}") from exc
    if document is None:
        return {}
    if not isinstance(document, MappingABC):
        raise TypeError(f"Skill configuration in {origin} must decode to a mapping")
    return _plain_tree(document)
