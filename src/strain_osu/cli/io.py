"""Configuration discovery and attribute loading for the CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from strain_core.runtime.sequence import HitObjectAttributes
from strain_osu.cli.errors import attribute_load_error
from strain_osu.configuration import iter_unique_paths, load_project_config, pyproject_location
from strain_osu.io.attributes import load_attributes
from strain_osu.io.validation import AttributeValidationError

__all__ = ["CONFIG_ENV_VAR", "load_cli_config", "load_records"]


CONFIG_ENV_VAR = "STRAIN_OSU_CONFIG"


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml``.

    An explicit ``path`` wins, then :data:`CONFIG_ENV_VAR`, then the current
    working directory.  The resolved file is recorded under ``_config_path``.
    """

    bases: List[Path] = [Path(path)] if path is not None else []
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    locations = [pyproject_location(base) for base in bases]
    for candidate in iter_unique_paths(item for item in locations if item is not None):
        loaded = load_project_config(candidate)
        if loaded is None:
            continue
        payload, resolved = loaded
        payload["_config_path"] = str(resolved)
        return payload

    return {"_config_path": None}


def load_records(path: Path) -> List[HitObjectAttributes]:
    """Load attribute records translating failures into :class:`CliError`."""

    try:
        return load_attributes(path)
    except (OSError, AttributeValidationError) as exc:
        raise attribute_load_error(path, exc) from exc
