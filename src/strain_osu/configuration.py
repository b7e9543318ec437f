"""Project defaults read from ``pyproject.toml``.

Two tables are recognised: ``[tool.strain_osu]`` holds the CLI and rating
defaults, and ``[tool.strain_core]`` carries engine overrides that are
surfaced under the ``core`` key of the loaded configuration.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping as ABCMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore

from strain_core.config.loader import SkillSettings, deep_merge, load_skill_config
from strain_core.runtime.shared import Modifiers
from strain_core.skills.composition import DEFAULT_SKILLS, SkillKind

__all__ = [
    "PYPROJECT_NAME",
    "RatingOptions",
    "iter_unique_paths",
    "load_project_config",
    "pyproject_location",
    "resolve_skill_settings",
]


PYPROJECT_NAME = "pyproject.toml"
_CLI_TABLE = "strain_osu"
_CORE_TABLE = "strain_core"


def _thaw(value: Any) -> Any:
    if isinstance(value, ABCMapping):
        return {str(key): _thaw(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_thaw(item) for item in value]
    return value


def pyproject_location(base: Path) -> Path | None:
    """Return the ``pyproject.toml`` addressed by ``base``.

    ``base`` may name the file itself or the directory holding it.  Any other
    file yields ``None``.
    """

    base = Path(base).expanduser()
    if base.name == PYPROJECT_NAME:
        return base
    return None if base.suffix else base / PYPROJECT_NAME


def iter_unique_paths(paths: Iterable[Path]) -> list[Path]:
    """Resolve ``paths`` dropping repeats, first occurrence wins."""

    resolved = (Path(path).expanduser().resolve(strict=False) for path in paths)
    return list(dict.fromkeys(resolved))


def _tool_tables(path: Path) -> ABCMapping[str, Any]:
    if not path.is_file():
        return {}
    with path.open("rb") as handle:
        document = tomllib.load(handle)
    tools = document.get("tool")
    return tools if isinstance(tools, ABCMapping) else {}


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load the ``[tool.strain_osu]`` table together with its resolved path.

    Returns ``None`` when there is no ``pyproject.toml`` at ``path`` or when
    it lacks the table.
    """

    location = pyproject_location(path)
    if location is None:
        return None
    location = location.resolve(strict=False)
    tools = _tool_tables(location)
    cli_table = tools.get(_CLI_TABLE)
    if not isinstance(cli_table, ABCMapping):
        return None

    config: dict[str, Any] = _thaw(cli_table)
    core_table = tools.get(_CORE_TABLE)
    if isinstance(core_table, ABCMapping) and "core" not in config:
        config["core"] = _thaw(core_table)
    return config, location


def resolve_skill_settings(config: ABCMapping[str, Any] | None = None) -> SkillSettings:
    """Merge ``skills`` and ``aggregation`` overrides into the packaged defaults.

    Overrides may live at the top level of ``[tool.strain_osu]`` or inside
    ``[tool.strain_core]``; the latter wins.
    """

    config = config or {}
    overrides: dict[str, Any] = {}
    for scope in (config, config.get("core")):
        if not isinstance(scope, ABCMapping):
            continue
        for key in ("aggregation", "skills"):
            section = scope.get(key)
            if isinstance(section, ABCMapping):
                deep_merge(overrides, {key: section})

    skills_path = config.get("skills_path")
    payload = load_skill_config(
        Path(skills_path) if skills_path else None, overrides=overrides or None
    )
    return SkillSettings.from_config(payload)


@dataclass(frozen=True, slots=True)
class RatingOptions:
    """Defaults for rating runs read from the ``rating`` table."""

    clock_rate: float = 1.0
    modifiers: Modifiers = Modifiers.NONE
    skills: tuple[SkillKind, ...] = DEFAULT_SKILLS
    n_jobs: int = 1

    @classmethod
    def from_config(cls, config: ABCMapping[str, Any] | None = None) -> "RatingOptions":
        rating = (config or {}).get("rating")
        if not isinstance(rating, ABCMapping):
            return cls()
        skills_raw = rating.get("skills")
        skills = (
            tuple(SkillKind.coerce(skill) for skill in skills_raw)
            if skills_raw
            else DEFAULT_SKILLS
        )
        return cls(
            clock_rate=float(rating.get("clock_rate", 1.0)),
            modifiers=Modifiers.from_acronyms(rating.get("modifiers")),
            skills=skills,
            n_jobs=int(rating.get("n_jobs", 1)),
        )
