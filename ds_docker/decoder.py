"""Decode JSON-per-line engine output into picker entries."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Iterator

from pydantic import ValidationError

from ds_docker.models import EntityKind, ImageEntry, PickerEntry, ProcessEntry, VolumeEntry

logger = logging.getLogger(__name__)


def decode(line: str) -> dict[str, Any] | None:
    """Parse one output line; ``None`` for blanks, non-JSON and non-objects."""
    text = line.strip()
    if not text:
        return None
    try:
        value = json.loads(text)
    except ValueError:
        logger.debug("Skipping undecodable line %r", text[:200])
        return None
    if not isinstance(value, dict):
        logger.debug("Skipping non-object JSON line %r", text[:200])
        return None
    return value


def project(kind: EntityKind, record: dict[str, Any]) -> PickerEntry | None:
    """Map a decoded record to the uniform ``{value, display, ordinal}`` shape."""
    try:
        entry = kind.model.model_validate(record)
    except ValidationError as exc:
        logger.debug("Skipping %s record: %s", kind.value, exc)
        return None

    if isinstance(entry, ProcessEntry):
        return PickerEntry(value=entry, display=entry.names, ordinal=f"{entry.id} {entry.names}")
    if isinstance(entry, VolumeEntry):
        return PickerEntry(value=entry, display=entry.name, ordinal=entry.name)
    if isinstance(entry, ImageEntry):
        return PickerEntry(value=entry, display=entry.reference, ordinal=entry.reference)
    raise TypeError(f"Unsupported entity record {type(entry).__name__}")


def decode_entry(kind: EntityKind, line: str) -> PickerEntry | None:
    record = decode(line)
    if record is None:
        return None
    return project(kind, record)


def decode_lines(kind: EntityKind, lines: Iterable[str]) -> Iterator[PickerEntry]:
    """Lazily decode ``lines``, dropping every line that does not decode."""
    for line in lines:
        entry = decode_entry(kind, line)
        if entry is not None:
            yield entry
