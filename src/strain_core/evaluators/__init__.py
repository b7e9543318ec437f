"""Per-object difficulty evaluators."""

from . import aim as _aim
from . import reading as _reading
from . import rhythm as _rhythm
from . import speed as _speed
from . import visual as _visual

from .aim import *  # noqa: F401,F403
from .reading import *  # noqa: F401,F403
from .rhythm import *  # noqa: F401,F403
from .speed import *  # noqa: F401,F403
from .visual import *  # noqa: F401,F403

__all__ = [
    *_aim.__all__,
    *_rhythm.__all__,
    *_reading.__all__,
    *_visual.__all__,
    *_speed.__all__,
]
