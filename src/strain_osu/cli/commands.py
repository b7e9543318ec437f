"""Command handlers for the strain-osu CLI."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Mapping

from strain_core.config.loader import SkillSettings
from strain_core.evaluators.aim import evaluate_aim
from strain_core.evaluators.reading import reading_components
from strain_core.evaluators.rhythm import evaluate_rhythm
from strain_core.evaluators.speed import evaluate_speed, evaluate_stamina
from strain_core.evaluators.visual import visual_components
from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import Modifiers
from strain_core.skills.composition import create_aggregator
from strain_osu.configuration import RatingOptions, resolve_skill_settings
from strain_osu.io.validation import AttributeValidationError, validate_records
from strain_osu.rating import compute_difficulty

from .errors import CliError, attribute_load_error
from .io import load_records

__all__ = ["handle_rate", "handle_strains"]


logger = logging.getLogger(__name__)


def _parse_modifiers(raw: str | None) -> Modifiers:
    try:
        return Modifiers.from_acronyms(raw)
    except ValueError as exc:
        raise CliError(str(exc), category="usage", context={"mods": raw}) from exc


def _load_settings(config: Mapping[str, Any]) -> SkillSettings:
    try:
        return resolve_skill_settings(config)
    except FileNotFoundError as exc:
        raise CliError(
            f"Skill configuration '{exc}' does not exist.", category="not_found"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise CliError(f"Invalid skill configuration: {exc}", category="usage") from exc


def handle_rate(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    records = load_records(namespace.attributes)
    modifiers = _parse_modifiers(namespace.mods)
    skills = namespace.skills or RatingOptions.from_config(config).skills
    settings = _load_settings(config)

    try:
        result = compute_difficulty(
            records,
            clock_rate=namespace.clock_rate,
            modifiers=modifiers,
            skills=skills,
            settings=settings,
            n_jobs=namespace.n_jobs,
        )
    except AttributeValidationError as exc:
        raise attribute_load_error(namespace.attributes, exc) from exc

    logger.info(
        "Rated attribute file",
        extra={
            "event": "cli.rate",
            "path": str(namespace.attributes),
            "objects": result.object_count,
            "values": dict(result.values),
        },
    )

    if namespace.output_format == "json":
        return json.dumps(result.as_dict(), indent=2, sort_keys=True)

    width = max(len(name) for name in result.values)
    lines = [f"{name.ljust(width)}  {value:.4f}" for name, value in result.values.items()]
    mods = "+".join(result.modifiers.acronyms()) or "none"
    lines.append(
        f"{'objects'.ljust(width)}  {result.object_count} "
        f"(clock rate {result.clock_rate:g}, mods {mods})"
    )
    return "\n".join(lines)


def _object_rows(
    sequence: HitObjectSequence,
    modifiers: Modifiers,
    strains: List[float] | None,
) -> List[Dict[str, Any]]:
    hidden = bool(modifiers & Modifiers.HIDDEN)
    autopilot = bool(modifiers & Modifiers.AUTOPILOT)
    rows: List[Dict[str, Any]] = []
    for index, obj in enumerate(sequence):
        rhythm = evaluate_rhythm(sequence, index)
        reading = reading_components(sequence, index, finger_strain=rhythm, hidden=hidden)
        visual = visual_components(sequence, index, hidden=hidden)
        row: Dict[str, Any] = {
            "index": index,
            "start_time": obj.start_time,
            "kind": obj.kind.value,
            "aim": evaluate_aim(sequence, index),
            "rhythm": rhythm,
            "speed": evaluate_speed(sequence, index, autopilot=autopilot),
            "stamina": evaluate_stamina(sequence, index),
            "reading": {
                "visible": reading.visible_count,
                "overlap": reading.overlap,
                "rhythm_complexity": reading.rhythm_complexity,
                "aim_complexity": reading.aim_complexity,
                "value": reading.value,
            },
            "visual": {
                "visible": visual.visible_count,
                "overlap": visual.overlap,
                "path_length": visual.path_length,
                "value": visual.value,
            },
        }
        if strains is not None:
            row["strain"] = strains[index]
        rows.append(row)
    return rows


def handle_strains(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    records = load_records(namespace.attributes)
    modifiers = _parse_modifiers(namespace.mods)
    try:
        items = validate_records(records)
    except AttributeValidationError as exc:
        raise attribute_load_error(namespace.attributes, exc) from exc
    sequence = HitObjectSequence.from_attributes(items, clock_rate=namespace.clock_rate)

    strains: List[float] | None = None
    if namespace.skill is not None:
        aggregator = create_aggregator(namespace.skill, _load_settings(config), modifiers)
        strains = list(aggregator.process_all(sequence).object_strains())

    rows = _object_rows(sequence, modifiers, strains)
    if namespace.output_format == "json":
        return json.dumps({"objects": rows}, indent=2, sort_keys=True)

    header = ["#", "time", "kind", "aim", "rhythm", "speed", "stamina", "reading", "visual"]
    if strains is not None:
        header.append(namespace.skill)
    lines = ["\t".join(header)]
    for row in rows:
        cells = [
            str(row["index"]),
            f"{row['start_time']:.1f}",
            row["kind"],
            f"{row['aim']:.4f}",
            f"{row['rhythm']:.4f}",
            f"{row['speed']:.4f}",
            f"{row['stamina']:.4f}",
            f"{row['reading']['value']:.4f}",
            f"{row['visual']['value']:.4f}",
        ]
        if strains is not None:
            cells.append(f"{row['strain']:.4f}")
        lines.append("\t".join(cells))
    return "\n".join(lines)
