from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strain_core.equations import RatioTable
from strain_core.evaluators import RHYTHM_RATIOS


def test_control_points_return_exact_multipliers() -> None:
    for ratio, multiplier in RHYTHM_RATIOS.points:
        assert RHYTHM_RATIOS.lookup(ratio) == multiplier


def test_lookup_clamps_outside_domain() -> None:
    assert RHYTHM_RATIOS(0.5) == 0.01
    assert RHYTHM_RATIOS(12.0) == 0.0


def test_lookup_interpolates_linearly() -> None:
    table = RatioTable.from_points([(1.0, 0.0), (2.0, 1.0)])
    assert table(1.25) == pytest.approx(0.25)


@pytest.mark.parametrize(
    "points",
    [
        [],
        [(1.0, 0.0), (1.0, 1.0)],
        [(2.0, 0.0), (1.0, 1.0)],
    ],
)
def test_invalid_tables_are_rejected(points) -> None:
    with pytest.raises(ValueError):
        RatioTable.from_points(points)


def test_mismatched_lengths_are_rejected() -> None:
    with pytest.raises(ValueError):
        RatioTable(ratios=(1.0, 2.0), multipliers=(1.0,))


def test_table_is_immutable() -> None:
    with pytest.raises(AttributeError):
        RHYTHM_RATIOS.ratios = (1.0,)  # type: ignore[misc]


@given(st.floats(min_value=1.0, max_value=4.0, allow_nan=False))
def test_interpolation_stays_within_bracketing_multipliers(ratio: float) -> None:
    value = RHYTHM_RATIOS.lookup(ratio)
    ratios = RHYTHM_RATIOS.ratios
    multipliers = RHYTHM_RATIOS.multipliers
    for index in range(len(ratios) - 1):
        if ratios[index] <= ratio <= ratios[index + 1]:
            low = min(multipliers[index], multipliers[index + 1])
            high = max(multipliers[index], multipliers[index + 1])
            assert low <= value <= high
            break
    assert min(multipliers) <= value <= max(multipliers)
