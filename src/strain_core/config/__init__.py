"""Skill configuration helpers."""

from .loader import *  # noqa: F401,F403
from .loader import __all__ as _loader_all

__all__ = list(_loader_all)
