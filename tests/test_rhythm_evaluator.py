from __future__ import annotations

import math
from dataclasses import replace

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strain_core.equations import RatioTable
from strain_core.evaluators import Island, delta_ratio, evaluate_rhythm
from strain_core.runtime import MIN_DELTA_TIME, HitObjectKind

from tests.helpers import build_sequence, build_stream, build_timed_stream


def _alternating(count: int, short: float = 100.0, long: float = 150.0) -> list[float]:
    return [short if index % 2 == 0 else long for index in range(count)]


def test_steady_stream_settles_on_baseline(steady_sequence) -> None:
    for index in range(2, len(steady_sequence)):
        assert evaluate_rhythm(steady_sequence, index) == 1.0


def test_four_even_objects_score_baseline() -> None:
    sequence = build_sequence(build_stream(4, interval=200.0, spacing=100.0, angle=1.0))
    assert evaluate_rhythm(sequence, 2) == 1.0
    assert evaluate_rhythm(sequence, 3) == 1.0


def test_first_two_objects_contribute_nothing(steady_sequence) -> None:
    assert evaluate_rhythm(steady_sequence, 0) == 0.0
    assert evaluate_rhythm(steady_sequence, 1) == 0.0


def test_irregular_rhythm_raises_complexity() -> None:
    sequence = build_sequence(build_timed_stream(_alternating(20), hit_window=30.0))
    assert evaluate_rhythm(sequence, 16) > 1.0


def test_ratio_table_is_injectable() -> None:
    sequence = build_sequence(build_timed_stream(_alternating(20), hit_window=30.0))
    flat = RatioTable.from_points([(1.0, 0.0), (4.0, 0.0)])
    generous = RatioTable.from_points([(1.0, 5.0), (4.0, 5.0)])
    assert evaluate_rhythm(sequence, 16, table=flat) == 1.0
    assert evaluate_rhythm(sequence, 16, table=generous) > evaluate_rhythm(sequence, 16)


def test_history_outside_window_is_ignored() -> None:
    # A rhythm change more than five seconds back no longer counts.
    intervals = [100.0, 150.0, 100.0, 150.0] + [100.0] * 60
    sequence = build_sequence(build_timed_stream(intervals, hit_window=30.0))
    assert evaluate_rhythm(sequence, len(sequence) - 1) == 1.0


def test_spinner_and_its_successor_contribute_nothing(spinner_sequence) -> None:
    assert evaluate_rhythm(spinner_sequence, 3) == 0.0
    assert evaluate_rhythm(spinner_sequence, 4) == 0.0
    assert evaluate_rhythm(spinner_sequence, 5) > 0.0


def test_delta_ratio_is_symmetric() -> None:
    assert delta_ratio(100.0, 150.0) == pytest.approx(1.5)
    assert delta_ratio(150.0, 100.0) == pytest.approx(1.5)
    assert delta_ratio(0.0, 0.0) == 1.0


def test_island_tracks_deltas() -> None:
    island = Island(epsilon=9.0)
    assert island.delta_count == 0
    island.add_delta(10.0)
    island.add_delta(120.0)
    assert island.delta == MIN_DELTA_TIME
    assert island.delta_count == 2


def test_unset_islands_compare_equal() -> None:
    assert Island(9.0) == Island(9.0)
    assert Island(9.0) != Island(9.0, 100.0)


def test_islands_are_not_hashable() -> None:
    with pytest.raises(TypeError):
        hash(Island(9.0, 100.0))


_deltas = st.floats(min_value=float(MIN_DELTA_TIME), max_value=5000.0, allow_nan=False)
_epsilons = st.floats(min_value=0.5, max_value=60.0, allow_nan=False)


@given(delta=_deltas, epsilon=_epsilons)
def test_island_equality_is_reflexive(delta: float, epsilon: float) -> None:
    island = Island(epsilon, delta)
    assert island == island


@given(
    delta=_deltas,
    epsilon=_epsilons,
    fraction=st.floats(min_value=0.0, max_value=0.9, allow_nan=False),
)
def test_island_equality_respects_epsilon(delta: float, epsilon: float, fraction: float) -> None:
    first = Island(epsilon, delta)
    second = Island(epsilon, delta + epsilon * fraction)
    assert first == second
    assert second == first

    second.add_delta(delta)
    assert first != second
    assert second != first


@given(delta=_deltas, epsilon=_epsilons)
def test_islands_beyond_epsilon_differ(delta: float, epsilon: float) -> None:
    assert Island(epsilon, delta) != Island(epsilon, delta + epsilon * 1.5)


FLAT = RatioTable.from_points([(1.0, 1.0), (4.0, 1.0)])


def _difficulty(complexity: float) -> float:
    return math.sqrt(4.0 + complexity * 3.2) / 2.0


def _last(sequence) -> float:
    return evaluate_rhythm(sequence, len(sequence) - 1, table=FLAT)


def test_speeding_up_halves_each_change() -> None:
    slowing = build_sequence(
        build_timed_stream([100.0, 100.0, 100.0, 150.0, 225.0, 225.0], hit_window=10.0)
    )
    speeding = build_sequence(
        build_timed_stream([225.0, 225.0, 225.0, 150.0, 100.0, 100.0], hit_window=10.0)
    )
    # Two changes; only the second pairs with a previous ratio, at note decay 5/6.
    assert _last(slowing) == pytest.approx(_difficulty(1.0 * 5 / 6))
    assert _last(speeding) == pytest.approx(_difficulty(0.5 * 5 / 6))


def test_change_onto_slider_is_discounted() -> None:
    records = build_timed_stream([100.0, 100.0, 100.0, 150.0, 225.0, 225.0], hit_window=10.0)
    records[5] = replace(records[5], kind=HitObjectKind.SLIDER)
    sequence = build_sequence(records)
    assert _last(sequence) == pytest.approx(_difficulty(math.sqrt(0.35) * 5 / 6))


@pytest.mark.parametrize(
    ("slider_end_gap", "expected_ratio"),
    [
        # Slider end to the next head as long as the gap: reads as even rhythm.
        (225.0, 0.01),
        (150.0, 1.25),
    ],
)
def test_slider_end_timing_caps_ratio(slider_end_gap: float, expected_ratio: float) -> None:
    records = build_timed_stream([100.0, 100.0, 100.0, 150.0, 225.0, 225.0], hit_window=10.0)
    records[4] = replace(records[4], kind=HitObjectKind.SLIDER)
    records[5] = replace(records[5], minimum_jump_time=slider_end_gap)
    sequence = build_sequence(records)
    # The change onto the slider itself is 1.25 scaled by 0.35.
    first = 1.25 * 0.35
    expected = _difficulty(math.sqrt(expected_ratio * first) * 5 / 6)
    assert evaluate_rhythm(sequence, 6) == pytest.approx(expected)


def test_doubletappable_predecessor_discounts_change() -> None:
    sequence = build_sequence(
        build_timed_stream([200.0, 200.0, 200.0, 50.0, 200.0, 200.0], hit_window=100.0)
    )
    # Object 4 sits 50 ms after its predecessor and 200 ms before its successor.
    doubletap = 1.0 - (1.0 / 3.0) ** 0.75
    assert sequence.doubletapness(4) == pytest.approx(doubletap)
    ratio = 1.0 - 0.75 * doubletap
    assert _last(sequence) == pytest.approx(_difficulty(math.sqrt(ratio * 0.5) * 5 / 6))

    tight_window = build_sequence(
        build_timed_stream([200.0, 200.0, 200.0, 50.0, 200.0, 200.0], hit_window=10.0)
    )
    assert _last(tight_window) == pytest.approx(_difficulty(math.sqrt(0.5) * 5 / 6))


def test_repeated_island_is_attenuated() -> None:
    # Two back-to-back two-note islands around 100 ms, then a 150 ms gap.
    repeated = build_sequence(
        build_timed_stream([150.0, 100.0, 96.0, 103.0, 99.0, 150.0, 150.0], hit_window=20.0)
    )
    power = 0.75 / (1.0 + math.exp(0.24 * (58.33 - 103.0)))
    attenuation = min(5.0 / 2.0, 0.5**power)
    expected = math.sqrt(0.5) * 4 / 7 + math.sqrt(attenuation) * 6 / 7
    assert _last(repeated) == pytest.approx(_difficulty(expected))

    # A three-note island after the two-note one is a new shape.
    followed = build_sequence(
        build_timed_stream(
            [150.0, 100.0, 96.0, 103.0, 99.0, 103.0, 150.0, 150.0], hit_window=20.0
        )
    )
    assert _last(followed) == pytest.approx(_difficulty(math.sqrt(0.5) * 4 / 8 + 7 / 8))
    assert _last(repeated) < _last(followed)
