"""Strain models, aggregation and skill composition."""

from . import aggregator as _aggregator
from . import composition as _composition
from . import models as _models

from .aggregator import *  # noqa: F401,F403
from .composition import *  # noqa: F401,F403
from .models import *  # noqa: F401,F403

__all__ = [
    *_aggregator.__all__,
    *_models.__all__,
    *_composition.__all__,
]
