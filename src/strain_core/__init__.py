"""Strain-based difficulty computation for hit object sequences."""

from __future__ import annotations

from importlib import import_module

_config = import_module("strain_core.config")
_equations = import_module("strain_core.equations")
_evaluators = import_module("strain_core.evaluators")
_runtime = import_module("strain_core.runtime")
_skills = import_module("strain_core.skills")

from strain_core.config import *  # noqa: E402,F401,F403
from strain_core.equations import *  # noqa: E402,F401,F403
from strain_core.evaluators import *  # noqa: E402,F401,F403
from strain_core.runtime import *  # noqa: E402,F401,F403
from strain_core.skills import *  # noqa: E402,F401,F403

__all__ = list(
    dict.fromkeys(
        [
            *_runtime.__all__,
            *_equations.__all__,
            *_evaluators.__all__,
            *_skills.__all__,
            *_config.__all__,
        ]
    )
)

# Public handles to the structured namespaces.
config = _config
equations = _equations
evaluators = _evaluators
runtime = _runtime
skills = _skills
