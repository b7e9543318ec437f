"""Persistence helpers for precomputed hit object attributes."""

from __future__ import annotations

import gzip
import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Sequence

import yaml

from strain_core.runtime.sequence import HitObjectAttributes

from .validation import AttributeValidationError

__all__ = [
    "iter_attributes",
    "load_attributes",
    "record_from_payload",
    "record_to_payload",
    "write_attributes",
]


_GZIP_MAGIC = b"\x1f\x8b"
_FIELD_NAMES = frozenset(item.name for item in fields(HitObjectAttributes))


def record_to_payload(record: HitObjectAttributes) -> dict[str, Any]:
    payload = asdict(record)
    payload["kind"] = record.kind.value
    payload["position"] = list(record.position)
    payload["visible_objects"] = list(record.visible_objects)
    return payload


def record_from_payload(payload: Mapping[str, Any], *, index: int | None = None) -> HitObjectAttributes:
    """Decode a JSON/YAML mapping into :class:`HitObjectAttributes`."""

    if not isinstance(payload, Mapping):
        raise AttributeValidationError(
            f"Hit object entry must be a mapping, got {type(payload).__name__}", index=index
        )
    unknown = sorted(set(payload) - _FIELD_NAMES)
    if unknown:
        raise AttributeValidationError(
            f"Unknown hit object fields: {', '.join(map(str, unknown))}", index=index
        )
    if "start_time" not in payload:
        raise AttributeValidationError(
            "Hit object entry is missing start_time", index=index, field="start_time"
        )
    values = dict(payload)
    if values.get("position") is not None:
        values["position"] = tuple(values["position"])
    if values.get("visible_objects") is not None:
        values["visible_objects"] = tuple(values["visible_objects"])
    try:
        return HitObjectAttributes(**values)
    except (TypeError, ValueError) as exc:
        raise AttributeValidationError(f"Invalid hit object entry: {exc}", index=index) from exc


def write_attributes(
    records: Sequence[HitObjectAttributes],
    path: str | Path,
    *,
    compress: bool = True,
) -> None:
    """Persist ``records`` to ``path`` as newline-delimited JSON.

    Parameters
    ----------
    records:
        Attribute records to serialise.
    path:
        Destination file.  Parent directories are created automatically.
    compress:
        When ``True`` the payload is gzip-compressed.  :func:`iter_attributes`
        reads both compressed and plain files.
    """

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    opener = gzip.open if compress else open

    with opener(destination, "wt", encoding="utf8") as handle:
        for record in records:
            json.dump(record_to_payload(record), handle, sort_keys=True)
            handle.write("\n")


def iter_attributes(path: str | Path) -> Iterator[HitObjectAttributes]:
    """Yield records previously persisted with :func:`write_attributes`."""

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Attribute file {source} does not exist")

    with source.open("rb") as handle:
        compressed = handle.read(2) == _GZIP_MAGIC
    opener = gzip.open if compressed else open

    with opener(source, "rt", encoding="utf8") as handle:
        yield from _iter_records(handle)


def _iter_records(handle: Iterable[str]) -> Iterator[HitObjectAttributes]:
    for line_number, line in enumerate(handle):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise AttributeValidationError(
                f"Line {line_number + 1} is not valid JSON: {exc.msg}"
            ) from exc
        yield record_from_payload(payload, index=line_number)


def _entries(document: Any, source: Path) -> list[Any]:
    if isinstance(document, Mapping):
        document = document.get("objects")
    if not isinstance(document, list):
        raise AttributeValidationError(
            f"{source} must contain a list of hit objects or an 'objects' list"
        )
    return document


def load_attributes(path: str | Path) -> list[HitObjectAttributes]:
    """Load records from ``.jsonl[.gz]``, ``.json`` or ``.yaml`` files."""

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Attribute file {source} does not exist")

    suffixes = [suffix.lower() for suffix in source.suffixes]
    if ".jsonl" in suffixes or suffixes[-1:] == [".gz"]:
        return list(iter_attributes(source))

    text = source.read_text(encoding="utf8")
    if suffixes[-1:] == [".json"]:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise AttributeValidationError(f"{source} is not valid JSON: {exc.msg}") from exc
    elif suffixes[-1:] in ([".yaml"], [".yml"]):
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise AttributeValidationError(f"{source} is not valid YAML") from exc
    else:
        raise AttributeValidationError(f"Unsupported attribute file format: {source.name}")

    return [
        record_from_payload(entry, index=index)
        for index, entry in enumerate(_entries(document, source))
    ]
