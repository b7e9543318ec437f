"""Argument parsing helpers for the strain-osu CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from strain_core.skills.composition import SkillKind
from strain_osu.configuration import RatingOptions

from .commands import handle_rate, handle_strains

__all__ = ["build_parser"]


_SKILL_CHOICES = tuple(kind.value for kind in SkillKind)


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0.0:
        raise argparse.ArgumentTypeError("value must be positive")
    return parsed


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = dict(config.get("logging", {}) or {})
    options = RatingOptions.from_config(config)

    parser = argparse.ArgumentParser(
        prog="strain-osu",
        description="Strain-based difficulty rating for hit object sequences",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding a [tool.strain_osu] table.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    rate_parser = subparsers.add_parser(
        "rate", help="Compute skill difficulty values for an attribute file."
    )
    _add_common_arguments(rate_parser, options)
    rate_parser.add_argument(
        "--skill",
        dest="skills",
        action="append",
        choices=_SKILL_CHOICES,
        default=None,
        help="Skill to rate; repeat for several (default: configured skills).",
    )
    rate_parser.add_argument(
        "--jobs",
        dest="n_jobs",
        type=int,
        default=options.n_jobs,
        help="Worker processes, one skill per worker (default: %(default)s).",
    )
    rate_parser.set_defaults(handler=handle_rate)

    strains_parser = subparsers.add_parser(
        "strains", help="Print per-object evaluator diagnostics."
    )
    _add_common_arguments(strains_parser, options)
    strains_parser.add_argument(
        "--skill",
        dest="skill",
        choices=_SKILL_CHOICES,
        default=None,
        help="Also report the running strain of this skill.",
    )
    strains_parser.set_defaults(handler=handle_strains)

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser, options: RatingOptions) -> None:
    parser.add_argument(
        "attributes",
        type=Path,
        help="Attribute file (.jsonl, .jsonl.gz, .json, .yaml).",
    )
    parser.add_argument(
        "--clock-rate",
        dest="clock_rate",
        type=_positive_float,
        default=options.clock_rate,
        help="Playback rate applied to every time field (default: %(default)s).",
    )
    parser.add_argument(
        "--mods",
        dest="mods",
        default=",".join(options.modifiers.acronyms()),
        help="Comma separated modifier acronyms, e.g. HD,AP.",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("json", "text"),
        default="text",
        help="Output format (default: %(default)s).",
    )
