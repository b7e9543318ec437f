"""Resolve ``strain_osu.__version__`` from metadata or the changelog."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

_DISTRIBUTION_NAME = "strain-osu"
_CHANGELOG_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b")


def _changelog_version() -> str:
    # Development checkouts have no dist-info; the newest changelog heading wins.
    root = Path(__file__).resolve().parent
    for changelog in (root.parent / "CHANGELOG.md", root.parent.parent / "CHANGELOG.md"):
        if not changelog.is_file():
            continue
        with changelog.open(encoding="utf-8") as handle:
            for line in handle:
                heading = _CHANGELOG_HEADING.match(line)
                if heading is not None:
                    return heading.group("version")
    raise RuntimeError(f"No installed metadata or CHANGELOG.md version for {_DISTRIBUTION_NAME!r}.")


def _validated(raw_version: str) -> str:
    try:
        release = Version(raw_version).release
    except InvalidVersion as exc:
        raise RuntimeError(f"{_DISTRIBUTION_NAME!r} has an unparsable version {raw_version!r}.") from exc
    if len(release) != 3:
        raise RuntimeError(
            f"{_DISTRIBUTION_NAME!r} versions are MAJOR.MINOR.PATCH, got {raw_version!r}."
        )
    return raw_version


def _load_version() -> str:
    try:
        raw_version = metadata.version(_DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        raw_version = _changelog_version()
    return _validated(raw_version)


__version__ = _load_version()

__all__ = ["__version__"]
