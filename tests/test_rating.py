from __future__ import annotations

import logging

import pytest

from strain_core.config import SkillSettings
from strain_core.runtime import Modifiers
from strain_core.skills import rate_sequence
from strain_osu import DifficultyResult, compute_difficulty
from strain_osu.io import AttributeValidationError

from tests.helpers import build_hit_object, build_sequence, build_stream


@pytest.fixture
def records():
    return build_stream(32, interval=140.0, spacing=160.0, angle=1.7, note_density=2.0)


def test_values_match_core_rating(records) -> None:
    result = compute_difficulty(records)
    assert isinstance(result, DifficultyResult)
    assert dict(result.values) == dict(rate_sequence(build_sequence(records)))
    assert result.object_count == 32
    assert result.duration == pytest.approx(31 * 140.0)


def test_clock_rate_speeds_the_map_up(records) -> None:
    normal = compute_difficulty(records, skills=["speed"])
    faster = compute_difficulty(records, skills=["speed"], clock_rate=1.5)
    assert faster.values["speed"] > normal.values["speed"]
    assert faster.duration == pytest.approx(normal.duration / 1.5)


def test_modifier_acronyms_are_accepted(records) -> None:
    result = compute_difficulty(records, modifiers="HD", skills=["visual"])
    assert result.modifiers is Modifiers.HIDDEN
    assert result.as_dict()["modifiers"] == ["HD"]


def test_parallel_workers_match_serial(records) -> None:
    serial = compute_difficulty(records, skills=["aim", "rhythm"])
    parallel = compute_difficulty(records, skills=["aim", "rhythm"], n_jobs=2)
    assert dict(parallel.values) == pytest.approx(dict(serial.values))


def test_custom_settings_are_used(records) -> None:
    baseline = compute_difficulty(records, skills=["aim"])
    halved = compute_difficulty(
        records, skills=["aim"], settings=SkillSettings(decay_weight=0.45)
    )
    assert halved.values["aim"] < baseline.values["aim"]


def test_result_serialises(records) -> None:
    payload = compute_difficulty(records, skills=["rhythm"]).as_dict()
    assert set(payload) == {"values", "object_count", "clock_rate", "modifiers", "duration"}
    assert set(payload["values"]) == {"rhythm"}


def test_invalid_input_is_rejected(records) -> None:
    with pytest.raises(AttributeValidationError):
        compute_difficulty([])
    with pytest.raises(AttributeValidationError):
        compute_difficulty(records, clock_rate=0.0)
    with pytest.raises(AttributeValidationError):
        compute_difficulty([build_hit_object(10.0), build_hit_object(5.0)])
    with pytest.raises(ValueError):
        compute_difficulty(records, skills=["flashlight"])


def test_debug_event_is_logged(records, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="strain_osu"):
        compute_difficulty(records, skills=["rhythm"])
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "rating.computed" in events
