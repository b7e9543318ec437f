"""Tooling around :mod:`strain_core`.

This package ingests and validates precomputed hit object attributes, loads
project configuration, configures logging and exposes the ``strain-osu``
command line interface.
"""

from ._version import __version__
from .configuration import RatingOptions, load_project_config, resolve_skill_settings
from .io import (
    AttributeValidationError,
    iter_attributes,
    load_attributes,
    validate_records,
    write_attributes,
)
from .rating import DifficultyResult, compute_difficulty

__all__ = [
    "AttributeValidationError",
    "DifficultyResult",
    "RatingOptions",
    "__version__",
    "compute_difficulty",
    "iter_attributes",
    "load_attributes",
    "load_project_config",
    "resolve_skill_settings",
    "validate_records",
    "write_attributes",
]
