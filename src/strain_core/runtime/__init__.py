"""Runtime primitives shared across :mod:`strain_core` layers."""

from __future__ import annotations

from . import sequence as _sequence
from . import shared as _shared
from .sequence import *  # noqa: F401,F403
from .shared import *  # noqa: F401,F403

__all__ = [
    *getattr(_shared, "__all__", ()),
    *getattr(_sequence, "__all__", ()),
]
