"""Boundary checks shared by every evaluator."""

from __future__ import annotations

from strain_core.runtime.sequence import HitObjectSequence
from strain_core.runtime.shared import HitObjectKind

__all__ = ["is_spinner", "lacks_history"]


def is_spinner(obj: object | None) -> bool:
    return obj is not None and getattr(obj, "kind", None) is HitObjectKind.SPINNER


def lacks_history(sequence: HitObjectSequence, index: int, *, depth: int = 1) -> bool:
    """Return ``True`` when ``index`` cannot be evaluated.

    Objects within the first two positions, spinners and objects whose
    ``depth`` nearest predecessors include a spinner all contribute nothing.
    """

    if index < 2 or is_spinner(sequence[index]):
        return True
    return any(is_spinner(sequence.previous(index, back)) for back in range(depth))
