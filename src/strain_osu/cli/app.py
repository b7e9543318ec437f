"""Entry point wiring project configuration, logging and the command handlers."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from ..logging.config import setup_logging
from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import build_parser

__all__ = ["main", "run_cli"]


_LOGGING_DEFAULTS: Dict[str, str] = {"level": "info", "output": "stderr", "format": "json"}


def _bootstrap_parser() -> argparse.ArgumentParser:
    # Options that must be known before the project config is read.
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", dest="config_path", type=Path, default=None)
    parser.add_argument("--log-level", dest="log_level", default=None)
    parser.add_argument("--log-output", dest="log_output", default=None)
    parser.add_argument("--log-format", dest="log_format", choices=("json", "text"), default=None)
    return parser


def _logging_settings(config: Dict[str, Any], options: argparse.Namespace) -> Dict[str, Any]:
    settings: Dict[str, Any] = dict(_LOGGING_DEFAULTS)
    settings.update(config.get("logging") or {})
    overrides = {
        "level": options.log_level,
        "output": options.log_output,
        "format": options.log_format,
    }
    settings.update({key: value for key, value in overrides.items() if value is not None})
    return settings


def _emit(text: str) -> None:
    if text:
        sys.stdout.write(text if text.endswith("\n") else f"{text}\n")


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Run one strain-osu command and return the text it printed.

    A :class:`CliError` raised by a command is logged, its message printed,
    and the process exits with the status of its category.
    """

    options, remaining = _bootstrap_parser().parse_known_args(args)
    config = load_cli_config(options.config_path)
    config["logging"] = _logging_settings(config, options)
    setup_logging(config)

    namespace = build_parser(config).parse_args(remaining, namespace=options)
    try:
        result = namespace.handler(namespace, config=config)
    except CliError as exc:
        log_cli_error(exc)
        _emit(str(exc))
        raise SystemExit(exc.status_code) from exc
    _emit(result)
    return result


def main() -> None:  # pragma: no cover
    run_cli()


if __name__ == "__main__":  # pragma: no cover
    main()
