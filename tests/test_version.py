from __future__ import annotations

from importlib import metadata

import pytest
from packaging.version import Version

import strain_osu
from strain_osu import _version


def test_version_is_semantic() -> None:
    assert len(Version(strain_osu.__version__).release) == 3


def test_changelog_is_used_without_metadata(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing(name: str) -> str:
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(_version.metadata, "version", _missing)
    assert _version._load_version() == "0.1.0"


@pytest.mark.parametrize("raw", ["1.0", "not-a-version"])
def test_malformed_versions_are_rejected(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setattr(_version.metadata, "version", lambda name: raw)
    with pytest.raises(RuntimeError):
        _version._load_version()
