"""Analytic primitives for :mod:`strain_core`."""

from . import geometry as _geometry
from . import interpolation as _interpolation
from . import utils as _utils

from .geometry import *  # noqa: F401,F403
from .interpolation import *  # noqa: F401,F403
from .utils import *  # noqa: F401,F403

__all__ = [
    *_utils.__all__,
    *_interpolation.__all__,
    *_geometry.__all__,
]
