"""Failures surfaced by the strain-osu commands and their exit statuses."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from strain_osu.io.validation import AttributeValidationError

__all__ = ["EXIT_STATUS", "CliError", "attribute_load_error", "log_cli_error"]


EXIT_STATUS: Mapping[str, int] = MappingProxyType(
    {
        "runtime": 1,
        "usage": 2,
        "io": 3,
        "not_found": 4,
    }
)

logger = logging.getLogger("strain_osu.cli")


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class CliError(RuntimeError):
    """Command failure that maps onto a process exit status.

    ``category`` selects the status from :data:`EXIT_STATUS`; ``context``
    values are flattened to JSON scalars so they can travel through the
    structured log handlers unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        category: str = "runtime",
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if category not in EXIT_STATUS:
            raise ValueError(
                f"Unknown error category {category!r}; expected one of {sorted(EXIT_STATUS)}"
            )
        super().__init__(message)
        self.category = category
        self.context: Dict[str, Any] = {
            key: _plain(value) for key, value in (context or {}).items()
        }

    @property
    def status_code(self) -> int:
        return EXIT_STATUS[self.category]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": str(self),
            "context": dict(self.context),
        }


def attribute_load_error(path: Path, exc: Exception) -> CliError:
    """Describe why the attribute file at ``path`` could not be rated."""

    if isinstance(exc, FileNotFoundError):
        return CliError(
            f"Attribute file '{path}' does not exist.",
            category="not_found",
            context={"path": path},
        )
    if isinstance(exc, AttributeValidationError):
        return CliError(
            f"Invalid attribute file '{path}': {exc}",
            category="io",
            context={"path": path, "index": exc.index, "field": exc.field},
        )
    return CliError(
        f"Unable to read attribute file '{path}': {exc}",
        category="io",
        context={"path": path},
    )


def log_cli_error(error: CliError) -> None:
    logger.error(
        str(error),
        extra={
            "event": "cli.error",
            "category": error.category,
            "status_code": error.status_code,
            "context": dict(error.context),
        },
        exc_info=error,
    )
