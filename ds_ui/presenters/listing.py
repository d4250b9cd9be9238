"""Presenter for non-interactive listings."""

from __future__ import annotations

from typing import Sequence

from ds_docker.models import EntityKind, ImageEntry, PickerEntry, ProcessEntry, VolumeEntry
from ds_ui.tui.system.models import TableModel

SHORT_ID_LENGTH = 12

_COLUMNS: dict[EntityKind, list[str]] = {
    EntityKind.PROCESS: ["ID", "Names", "Image", "State", "Status"],
    EntityKind.VOLUME: ["Name", "Driver", "Scope", "Mountpoint"],
    EntityKind.IMAGE: ["Image", "ID", "Size", "Created"],
}


def _short_id(value: str) -> str:
    if value.startswith("sha256:"):
        value = value[len("sha256:"):]
    return value[:SHORT_ID_LENGTH]


def _row(entry: PickerEntry) -> list[str]:
    value = entry.value
    if isinstance(value, ProcessEntry):
        return [_short_id(value.id), value.names, value.image, value.state, value.status]
    if isinstance(value, VolumeEntry):
        return [value.name, value.driver, value.scope, value.mountpoint]
    if isinstance(value, ImageEntry):
        return [entry.display, _short_id(value.id), value.size, value.created_since]
    raise TypeError(f"Unsupported entry {type(value).__name__}")


def build_listing_table(kind: EntityKind, entries: Sequence[PickerEntry]) -> TableModel:
    """Transform decoded entries into a TableModel."""
    return TableModel(
        title=f"{kind.picker_title} ({len(entries)})",
        columns=list(_COLUMNS[kind]),
        rows=[_row(entry) for entry in entries],
    )
