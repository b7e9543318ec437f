"""Visual density of the screen around a hit object."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from strain_core.runtime.sequence import HitObjectSequence

from ._shared import lacks_history

__all__ = [
    "DENSITY_EXPONENT",
    "HIDDEN_MULTIPLIER",
    "VISUAL_BASE",
    "VisualComponents",
    "evaluate_visual",
    "visual_components",
]


VISUAL_BASE = 0.1
HIDDEN_MULTIPLIER = 2.0
DENSITY_EXPONENT = 4


@dataclass(frozen=True, slots=True)
class VisualComponents:
    visible_count: int = 0
    overlap: float = 0.0
    path_length: float = 0.0
    value: float = 0.0


_EMPTY = VisualComponents()


def visual_components(
    sequence: HitObjectSequence, index: int, *, hidden: bool = False
) -> VisualComponents:
    """Score on-screen density and describe the visible cluster.

    ``overlap`` sums, over every pair of visible objects, how far apart they
    sit in units of the current object's radius, counting ``1`` for a
    perfect stack and ``0`` from one radius apart.  ``path_length`` is the
    distance the cursor would travel from the current object through the
    visible ones in order.
    """

    if lacks_history(sequence, index):
        return _EMPTY

    current = sequence[index]
    visible = sequence.visible_objects(index)
    density = max(0.0, current.note_density - 1.0)
    value = VISUAL_BASE * density**DENSITY_EXPONENT
    if hidden:
        value *= HIDDEN_MULTIPLIER

    points = np.asarray(
        [current.position, *(obj.position for obj in visible)], dtype=float
    )
    steps = np.diff(points, axis=0)
    path_length = float(np.linalg.norm(steps, axis=1).sum()) if len(steps) else 0.0

    overlap = 0.0
    others = points[1:]
    if len(others) > 1 and current.radius > 0.0:
        pairwise = np.linalg.norm(others[:, None, :] - others[None, :, :], axis=-1)
        upper = pairwise[np.triu_indices(len(others), k=1)]
        overlap = float((1.0 - np.minimum(upper / current.radius, 1.0)).sum())

    return VisualComponents(
        visible_count=len(visible),
        overlap=overlap,
        path_length=path_length,
        value=value,
    )


def evaluate_visual(
    sequence: HitObjectSequence, index: int, *, hidden: bool = False
) -> float:
    """``0.1 * (density - 1)^4``, doubled under the hidden modifier."""

    return visual_components(sequence, index, hidden=hidden).value
