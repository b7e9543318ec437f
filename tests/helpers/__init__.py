"""Convenience re-exports for test helpers."""

from __future__ import annotations

import importlib
from typing import Any, Dict, Iterable, Tuple

_MODULE_EXPORTS: Tuple[Tuple[str, Iterable[str]], ...] = (
    (
        "objects",
        (
            "build_hit_object",
            "build_sequence",
            "build_stream",
            "build_timed_stream",
        ),
    ),
    ("cli", ("run_cli_in_tmp", "write_stream_file")),
)

_EXPORT_SOURCES: Dict[str, str] = {
    name: module for module, names in _MODULE_EXPORTS for name in names
}

__all__ = sorted(_EXPORT_SOURCES)


def __getattr__(name: str) -> Any:
    module_name = _EXPORT_SOURCES.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = importlib.import_module(f"{__name__}.{module_name}")
    value = getattr(module, name)
    globals()[name] = value
    return value
