"""Listing pickers: one interactive session per entity kind."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional

from rich.markdown import Markdown

from ds_common.errors import DSError
from ds_docker.attach import AttachResult
from ds_docker.models import EntityKind, PickerEntry
from ds_docker.previews import lines_to_markdown, render
from ds_docker.service import DockerScope, EntryStream
from ds_docker.shells import ProbeOutcome
from ds_ui.tui.system.models import PickItem
from ds_ui.tui.system.protocols import UI

logger = logging.getLogger(__name__)


def to_pick_item(entry: PickerEntry) -> PickItem:
    return PickItem(
        id=entry.key,
        title=entry.display,
        search_blob=entry.ordinal,
        payload=entry,
    )


class EntrySource:
    """PickSource adapter over a streaming engine query."""

    def __init__(self, stream: EntryStream) -> None:
        self._stream = stream
        self.cancel: threading.Event = stream.cancel

    @property
    def error(self) -> Optional[DSError]:
        return self._stream.error

    def __iter__(self) -> Iterator[PickItem]:
        for entry in self._stream:
            yield to_pick_item(entry)


@dataclass
class ListingOutcome:
    kind: EntityKind
    selected: Optional[PickerEntry] = None
    attach: Optional[AttachResult] = None
    error: Optional[DSError] = None


class ListingPicker:
    """Bind a query, the entry decoder, fuzzy sorting and the previewer to one picker."""

    kind: EntityKind = EntityKind.PROCESS

    def __init__(self, service: DockerScope, ui: UI, kind: EntityKind | None = None) -> None:
        self._service = service
        self._ui = ui
        if kind is not None:
            self.kind = kind

    def open(self, *, query_hint: str = "", title: str | None = None) -> ListingOutcome:
        """Run one picker session; closing it stops the engine query."""
        stream = self._service.stream_entries(self.kind)
        source = EntrySource(stream)
        try:
            selection = self._ui.picker.pick_one(
                source,
                title=title or self.kind.picker_title,
                query_hint=query_hint,
                preview=self._preview,
            )
        finally:
            stream.cancel.set()

        if stream.error is not None:
            self._ui.present.warning(f"{self.kind.picker_title}: {stream.error}")
        if selection is None or not isinstance(selection.payload, PickerEntry):
            logger.debug("Picker for %s closed without selection", self.kind.value)
            return ListingOutcome(kind=self.kind, error=stream.error)
        outcome = self.on_confirm(selection.payload)
        outcome.error = outcome.error or stream.error
        return outcome

    def on_highlight(self, entry: PickerEntry) -> List[str]:
        return render(entry)

    def on_confirm(self, entry: PickerEntry) -> ListingOutcome:
        logger.debug("Selected %s %s", self.kind.value, entry.key)
        return ListingOutcome(kind=self.kind, selected=entry)

    def _preview(self, item: PickItem) -> Markdown | None:
        if not isinstance(item.payload, PickerEntry):
            return None
        return Markdown(lines_to_markdown(self.on_highlight(item.payload)))


class ProcessListingPicker(ListingPicker):
    kind = EntityKind.PROCESS


class VolumeListingPicker(ListingPicker):
    kind = EntityKind.VOLUME


class ImageListingPicker(ListingPicker):
    """Confirming an image opens an interactive shell in a new container."""

    kind = EntityKind.IMAGE

    def on_confirm(self, entry: PickerEntry) -> ListingOutcome:
        outcome = super().on_confirm(entry)
        outcome.attach = attach_image(self._service, self._ui, entry)
        return outcome


def attach_image(service: DockerScope, ui: UI, image: PickerEntry | str) -> AttachResult:
    result = service.attach_image(image)
    probe = result.probe
    if probe.outcome is ProbeOutcome.NOT_FOUND:
        ui.present.warning(f"No supported shell found in {probe.image}; used '{probe.shell}'")
    elif probe.outcome is ProbeOutcome.FAILED:
        ui.present.warning(f"Could not probe {probe.image} for a shell ({probe.error}); used '{probe.shell}'")
    if result.returncode not in (0, 130):
        ui.present.warning(f"`{' '.join(result.command)}` exited with status {result.returncode}")
    return result


PICKERS: dict[EntityKind, type[ListingPicker]] = {
    EntityKind.PROCESS: ProcessListingPicker,
    EntityKind.VOLUME: VolumeListingPicker,
    EntityKind.IMAGE: ImageListingPicker,
}


def create_listing_picker(kind: EntityKind, service: DockerScope, ui: UI) -> ListingPicker:
    return PICKERS[kind](service, ui)
