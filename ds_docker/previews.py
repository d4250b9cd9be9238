"""Markdown-like detail blocks for the preview pane."""

from __future__ import annotations

from typing import Iterable, List

from ds_docker.models import EngineEntry, ImageEntry, PickerEntry, ProcessEntry, VolumeEntry


def _field(label: str, value: str) -> str:
    return f"*{label}*: {value}"


def render_process(entry: ProcessEntry) -> List[str]:
    return [
        f"# ID: {entry.id}",
        "",
        _field("Names", entry.names),
        _field("Command", entry.command),
        _field("Labels", entry.labels),
        "",
        _field("Image", entry.image),
        _field("LocalVolumes", entry.local_volumes),
        _field("Mounts", entry.mounts),
        _field("Networks", entry.networks),
        _field("Ports", entry.ports),
        "",
        _field("Size", entry.size),
        "",
        _field("State", entry.state),
        _field("Status", entry.status),
        _field("CreatedAt", entry.created_at),
        _field("RunningFor", entry.running_for),
    ]


def render_volume(entry: VolumeEntry) -> List[str]:
    return [
        f"# {entry.name}",
        "",
        _field("Labels", entry.labels),
        _field("Availability", entry.availability),
        _field("Driver", entry.driver),
        _field("Group", entry.group),
        _field("Links", entry.links),
        _field("Scope", entry.scope),
        _field("Size", entry.size),
        _field("Status", entry.status),
        _field("Mountpoint", entry.mountpoint),
    ]


def render_image(entry: ImageEntry) -> List[str]:
    return [
        f"# {entry.reference}",
        "",
        _field("ID", entry.id),
        _field("Tag", entry.tag),
        _field("Containers", entry.containers),
        _field("Digest", entry.digest),
        "",
        _field("CreatedAt", entry.created_at),
        _field("CreatedSince", entry.created_since),
        "",
        _field("SharedSize", entry.shared_size),
        _field("Size", entry.size),
        _field("UniqueSize", entry.unique_size),
        _field("VirtualSize", entry.virtual_size),
    ]


def render(entry: PickerEntry | EngineEntry) -> List[str]:
    """Render the detail lines for a picker entry or a bare record."""
    value = entry.value if isinstance(entry, PickerEntry) else entry
    if isinstance(value, ProcessEntry):
        return render_process(value)
    if isinstance(value, VolumeEntry):
        return render_volume(value)
    if isinstance(value, ImageEntry):
        return render_image(value)
    raise TypeError(f"No preview for {type(value).__name__}")


def lines_to_markdown(lines: Iterable[str]) -> str:
    # Markdown joins consecutive lines into one paragraph; two trailing spaces keep the breaks.
    return "\n".join(f"{line}  " if line else line for line in lines)


def render_markdown(entry: PickerEntry | EngineEntry) -> str:
    return lines_to_markdown(render(entry))
