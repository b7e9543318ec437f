"""Logging configuration for the strain-osu tooling."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

__all__ = ["JsonFormatter", "setup_logging"]


_ROOT_LOGGER_NAMES: tuple[str, ...] = ("strain_osu", "strain_core")
_HANDLER_MARKER = "_strain_osu_handler"

# Attributes present on every LogRecord; anything else arrived through ``extra``.
_RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRIBUTES or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    name = str(value or "info").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level {value!r}")
    return level


def _build_handler(output: str) -> logging.Handler:
    target = (output or "stderr").strip()
    if target.lower() == "stdout":
        return logging.StreamHandler(sys.stdout)
    if target.lower() == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf8")


def setup_logging(config: Mapping[str, Any] | None = None) -> None:
    """Configure the package loggers from ``config["logging"]``.

    Recognised keys are ``level`` (default ``info``), ``output`` (``stdout``,
    ``stderr`` or a file path; default ``stderr``) and ``format`` (``json`` or
    ``text``; default ``json``).  Calling it again replaces the handler that a
    previous call installed.
    """

    logging_cfg = dict((config or {}).get("logging", {}) or {})
    level = _resolve_level(logging_cfg.get("level", "info"))
    fmt = str(logging_cfg.get("format", "json")).lower()
    if fmt not in {"json", "text"}:
        raise ValueError(f"Unknown logging format {fmt!r}")

    handler = _build_handler(str(logging_cfg.get("output", "stderr")))
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)

    for name in _ROOT_LOGGER_NAMES:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if getattr(existing, _HANDLER_MARKER, False):
                logger.removeHandler(existing)
                existing.close()
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
