from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from strain_core.config import SkillSettings
from strain_core.runtime import HitObjectKind, HitObjectSequence, Modifiers
from strain_core.skills import (
    DEFAULT_SKILLS,
    AimStrain,
    SkillKind,
    SpeedStrain,
    VisualStrain,
    create_aggregator,
    create_strain_model,
    rate_sequence,
    rate_skill,
)

from tests.helpers import build_sequence, build_stream


@pytest.fixture
def jump_sequence():
    records = build_stream(30, interval=150.0, spacing=220.0, angle=1.4, note_density=2.5)
    records[10] = replace(
        records[10], kind=HitObjectKind.SLIDER, travel_distance=150.0, travel_time=120.0
    )
    return build_sequence(records)


@pytest.mark.parametrize("name", ["aim", "AIM", "aim-no-sliders", " speed "])
def test_skill_names_are_coerced(name: str) -> None:
    assert isinstance(SkillKind.coerce(name), SkillKind)


def test_unknown_skill_is_rejected() -> None:
    with pytest.raises(ValueError, match="expected one of"):
        SkillKind.coerce("flashlight")


def test_models_follow_modifiers() -> None:
    speed = create_strain_model("speed", modifiers=Modifiers.AUTOPILOT)
    assert isinstance(speed, SpeedStrain) and speed.autopilot
    visual = create_strain_model(SkillKind.VISUAL, modifiers=Modifiers.HIDDEN)
    assert isinstance(visual, VisualStrain) and visual.hidden
    aim = create_strain_model(SkillKind.AIM_NO_SLIDERS)
    assert isinstance(aim, AimStrain) and not aim.with_slider_travel


def test_every_aggregator_owns_a_fresh_model() -> None:
    first = create_aggregator(SkillKind.AIM)
    second = create_aggregator(SkillKind.AIM)
    assert first.model is not second.model


def test_aggregator_uses_configured_sections() -> None:
    settings = SkillSettings(section_length=250.0, decay_weight=0.8)
    aggregator = create_aggregator("aim", settings)
    assert aggregator.section_length == 250.0
    assert aggregator.decay_weight == 0.8


def test_rate_sequence_reports_default_skills(jump_sequence) -> None:
    values = rate_sequence(jump_sequence)
    assert tuple(values) == tuple(kind.value for kind in DEFAULT_SKILLS)
    assert values["aim"] > 0.0
    assert values["speed"] > 0.0
    with pytest.raises(TypeError):
        values["aim"] = 0.0  # type: ignore[index]


def test_rate_sequence_matches_individual_skills(jump_sequence) -> None:
    values = rate_sequence(jump_sequence, ["aim", "visual", "aim"])
    assert tuple(values) == ("aim", "visual")
    assert values["aim"] == rate_skill(jump_sequence, SkillKind.AIM)


def test_slider_travel_raises_aim(jump_sequence) -> None:
    values = rate_sequence(jump_sequence, ["aim", "aim_no_sliders"])
    assert values["aim"] > values["aim_no_sliders"]


def test_autopilot_lowers_speed(jump_sequence) -> None:
    plain = rate_skill(jump_sequence, "speed")
    automated = rate_skill(jump_sequence, "speed", modifiers=Modifiers.AUTOPILOT)
    assert automated < plain


def test_rating_is_deterministic(jump_sequence) -> None:
    assert dict(rate_sequence(jump_sequence)) == dict(rate_sequence(jump_sequence))


def test_rating_logs_at_debug(jump_sequence, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="strain_core"):
        rate_sequence(jump_sequence, ["rhythm"])
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "skills.rated" in events
    assert "strain.difficulty" in events


def test_empty_sequence_rates_zero() -> None:
    values = rate_sequence(HitObjectSequence(()), list(SkillKind))
    assert set(values.values()) == {0.0}
