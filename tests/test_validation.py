from __future__ import annotations

import math
from dataclasses import replace

import pytest

from strain_osu.io import AttributeValidationError, validate_clock_rate, validate_records

from tests.helpers import build_hit_object, build_stream


def test_valid_records_are_returned_as_tuple() -> None:
    records = build_stream(4)
    assert validate_records(iter(records)) == tuple(records)


def test_empty_input_requires_opt_in() -> None:
    with pytest.raises(AttributeValidationError, match="No hit objects"):
        validate_records([])
    assert validate_records([], allow_empty=True) == ()


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"start_time": math.nan}, "start_time"),
        ({"jump_distance": math.inf}, "jump_distance"),
        ({"travel_distance": -1.0}, "travel_distance"),
        ({"hit_window_great": -5.0}, "hit_window_great"),
        ({"strain_time": 0.0}, "strain_time"),
        ({"angle": math.nan}, "angle"),
        ({"position": (math.inf, 0.0)}, "position"),
        ({"visible_objects": (3,)}, "visible_objects"),
        ({"note_density": "dense"}, "note_density"),
        ({"radius": True}, "radius"),
    ],
)
def test_invalid_fields_are_reported(overrides, field: str) -> None:
    records = build_stream(3)
    records[1] = replace(records[1], **overrides)
    with pytest.raises(AttributeValidationError) as excinfo:
        validate_records(records)
    assert excinfo.value.index == 1
    assert excinfo.value.field == field


def test_start_times_must_not_decrease() -> None:
    records = [build_hit_object(100.0), build_hit_object(100.0), build_hit_object(50.0)]
    with pytest.raises(AttributeValidationError, match="before the previous object") as excinfo:
        validate_records(records)
    assert excinfo.value.index == 2


def test_foreign_records_are_rejected() -> None:
    with pytest.raises(AttributeValidationError, match="expected HitObjectAttributes"):
        validate_records([build_hit_object(0.0), {"start_time": 1.0}])


@pytest.mark.parametrize("rate", [0.0, -1.5, math.inf, math.nan, "fast"])
def test_invalid_clock_rates(rate) -> None:
    with pytest.raises(AttributeValidationError) as excinfo:
        validate_clock_rate(rate)
    assert excinfo.value.field == "clock_rate"


def test_clock_rate_is_coerced() -> None:
    assert validate_clock_rate("1.5") == 1.5
