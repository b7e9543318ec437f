from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from textwrap import dedent

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
for _entry in (SRC_ROOT, ROOT):
    if str(_entry) not in sys.path:
        sys.path.insert(0, str(_entry))

from strain_core.runtime.sequence import HitObjectAttributes, HitObjectSequence  # noqa: E402

from tests.helpers import build_sequence, build_stream  # noqa: E402


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


@pytest.fixture
def steady_stream() -> list[HitObjectAttributes]:
    """Twenty evenly timed circles 100 ms apart with a 30 ms great window."""

    return build_stream(20, interval=100.0, spacing=0.0, hit_window=30.0)


@pytest.fixture
def steady_sequence(steady_stream: list[HitObjectAttributes]) -> HitObjectSequence:
    return build_sequence(steady_stream)


@pytest.fixture
def spinner_sequence() -> HitObjectSequence:
    """Stream with a spinner at index 3."""

    records = build_stream(8, interval=150.0, spacing=120.0, angle=2.0, hit_window=30.0)
    records[3] = replace(records[3], kind="spinner")
    return build_sequence(records)


@pytest.fixture(autouse=True)
def _reset_package_loggers():
    yield
    for name in ("strain_osu", "strain_core"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
