"""Per-skill strain models plugged into :class:`StrainAggregator`.

Every model owns the running strain of exactly one aggregator and exposes
two hooks: :meth:`initial_strain` gives the strain a new section starts
from, :meth:`strain_at` advances the running strain through one object.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from strain_core.config.loader import SpeedParameters, StrainParameters
from strain_core.evaluators.aim import evaluate_aim
from strain_core.evaluators.reading import evaluate_reading
from strain_core.evaluators.rhythm import evaluate_rhythm
from strain_core.evaluators.speed import evaluate_speed, evaluate_stamina
from strain_core.evaluators.visual import evaluate_visual
from strain_core.runtime.sequence import HitObjectSequence

from .aggregator import decay_strain

__all__ = [
    "AimStrain",
    "ReadingStrain",
    "RhythmStrain",
    "SpeedStrain",
    "StrainModel",
    "VisualStrain",
]


@runtime_checkable
class StrainModel(Protocol):
    def initial_strain(self, time: float, sequence: HitObjectSequence, index: int) -> float:
        """Strain at ``time``, just before the object at ``index`` is applied."""

    def strain_at(self, sequence: HitObjectSequence, index: int) -> float:
        """Advance through the object at ``index`` and return the new strain."""


def _elapsed_since_previous(time: float, sequence: HitObjectSequence, index: int) -> float:
    previous = sequence.previous(index)
    if previous is None:
        return 0.0
    return time - previous.start_time


class AimStrain:
    """Exponentially decaying cursor-movement strain."""

    __slots__ = ("parameters", "with_slider_travel", "_strain")

    def __init__(
        self, parameters: StrainParameters | None = None, *, with_slider_travel: bool = True
    ) -> None:
        self.parameters = parameters or StrainParameters(multiplier=25.18, decay_base=0.15)
        self.with_slider_travel = with_slider_travel
        self._strain = 0.0

    def initial_strain(self, time: float, sequence: HitObjectSequence, index: int) -> float:
        elapsed = _elapsed_since_previous(time, sequence, index)
        return decay_strain(self._strain, self.parameters.decay_base, elapsed)

    def strain_at(self, sequence: HitObjectSequence, index: int) -> float:
        self._strain = decay_strain(
            self._strain, self.parameters.decay_base, sequence.delta_time(index)
        )
        self._strain += (
            evaluate_aim(sequence, index, with_slider_travel=self.with_slider_travel)
            * self.parameters.multiplier
        )
        return self._strain


class VisualStrain:
    """Exponentially decaying on-screen density strain."""

    __slots__ = ("parameters", "hidden", "_strain")

    def __init__(self, parameters: StrainParameters | None = None, *, hidden: bool = False) -> None:
        self.parameters = parameters or StrainParameters(multiplier=0.01, decay_base=0.15)
        self.hidden = hidden
        self._strain = 0.0

    def initial_strain(self, time: float, sequence: HitObjectSequence, index: int) -> float:
        elapsed = _elapsed_since_previous(time, sequence, index)
        return decay_strain(self._strain, self.parameters.decay_base, elapsed)

    def strain_at(self, sequence: HitObjectSequence, index: int) -> float:
        self._strain = decay_strain(
            self._strain, self.parameters.decay_base, sequence.delta_time(index)
        )
        self._strain += evaluate_visual(sequence, index, hidden=self.hidden) * self.parameters.multiplier
        return self._strain


class RhythmStrain:
    """Rhythm complexity raised to ``parameters.exponent``; no accumulation."""

    __slots__ = ("parameters", "_strain")

    def __init__(self, parameters: StrainParameters | None = None) -> None:
        self.parameters = parameters or StrainParameters(exponent=5.0)
        self._strain = 0.0

    def initial_strain(self, time: float, sequence: HitObjectSequence, index: int) -> float:
        elapsed = _elapsed_since_previous(time, sequence, index)
        return decay_strain(self._strain, self.parameters.decay_base, elapsed)

    def strain_at(self, sequence: HitObjectSequence, index: int) -> float:
        rhythm = evaluate_rhythm(sequence, index)
        self._strain = rhythm**self.parameters.exponent * self.parameters.multiplier
        return self._strain


class ReadingStrain:
    """Reading complexity using the rhythm output as finger strain."""

    __slots__ = ("parameters", "hidden", "_strain")

    def __init__(self, parameters: StrainParameters | None = None, *, hidden: bool = False) -> None:
        self.parameters = parameters or StrainParameters()
        self.hidden = hidden
        self._strain = 0.0

    def initial_strain(self, time: float, sequence: HitObjectSequence, index: int) -> float:
        elapsed = _elapsed_since_previous(time, sequence, index)
        return decay_strain(self._strain, self.parameters.decay_base, elapsed)

    def strain_at(self, sequence: HitObjectSequence, index: int) -> float:
        finger_strain = evaluate_rhythm(sequence, index)
        self._strain = (
            evaluate_reading(sequence, index, finger_strain=finger_strain, hidden=self.hidden)
            * self.parameters.multiplier
        )
        return self._strain


class SpeedStrain:
    """Sum of a fast-decaying burst strain and a slow-decaying stamina strain.

    The burst component is scaled by the current rhythm complexity before
    both are combined.
    """

    __slots__ = ("parameters", "autopilot", "_burst", "_stamina", "_rhythm")

    def __init__(self, parameters: SpeedParameters | None = None, *, autopilot: bool = False) -> None:
        self.parameters = parameters or SpeedParameters()
        self.autopilot = autopilot
        self._burst = 0.0
        self._stamina = 0.0
        self._rhythm = 0.0

    def _burst_decay(self, elapsed: float) -> float:
        if elapsed <= 0.0:
            return 1.0
        return self.parameters.burst_decay_base ** (elapsed / 1000.0)

    def _stamina_decay(self, elapsed: float) -> float:
        if elapsed <= 0.0:
            return 1.0
        return self.parameters.stamina_decay_base ** (
            (elapsed / 1000.0) ** self.parameters.stamina_decay_exponent
        )

    def _combine(self, burst: float, stamina: float) -> float:
        return (burst * self._rhythm + stamina) * self.parameters.total_multiplier

    def initial_strain(self, time: float, sequence: HitObjectSequence, index: int) -> float:
        elapsed = _elapsed_since_previous(time, sequence, index)
        return self._combine(
            self._burst * self._burst_decay(elapsed),
            self._stamina * self._stamina_decay(elapsed),
        )

    def strain_at(self, sequence: HitObjectSequence, index: int) -> float:
        elapsed = sequence[index].strain_time
        self._burst *= self._burst_decay(elapsed)
        self._burst += (
            evaluate_speed(sequence, index, autopilot=self.autopilot)
            * self.parameters.burst_multiplier
        )
        self._stamina *= self._stamina_decay(elapsed)
        self._stamina += evaluate_stamina(sequence, index) * self.parameters.stamina_multiplier
        self._rhythm = evaluate_rhythm(sequence, index)
        return self._combine(self._burst, self._stamina)
