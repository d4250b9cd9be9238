"""UI implementation that records everything instead of drawing it.

Used by tests and by callers that want listing flows without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from ds_ui.tui.system.components.presenter import SinkPresenter
from ds_ui.tui.system.models import PickItem, TableModel
from ds_ui.tui.system.protocols import UI, Picker, PickSource, PresenterSink, TablePresenter


@dataclass
class RecordedTable:
    model: TableModel


@dataclass
class RecordedPick:
    title: str
    query_hint: str
    items: list[PickItem]
    error: object | None = None
    preview: Callable[[PickItem], object | None] | None = None


@dataclass
class HeadlessUI(UI):
    recorded_tables: list[RecordedTable] = field(default_factory=list)
    recorded_messages: list[str] = field(default_factory=list)
    recorded_picks: list[RecordedPick] = field(default_factory=list)

    # Answer of the next pick: a fixed item, an item id, or a predicate.
    next_pick_one: PickItem | None = None
    next_pick_id: str | None = None
    next_pick_when: Callable[[PickItem], bool] | None = None

    def __post_init__(self) -> None:
        self.picker = _RecordingPicker(self)
        self.tables = _RecordingTables(self)
        self.present = SinkPresenter(_RecordingSink(self))

    def choose(self, items: list[PickItem]) -> PickItem | None:
        if self.next_pick_one is not None:
            return self.next_pick_one
        for item in items:
            if self.next_pick_id is not None and item.id == self.next_pick_id:
                return item
            if self.next_pick_when is not None and self.next_pick_when(item):
                return item
        return None


class _RecordingPicker(Picker):
    """Drain the whole source, as the real picker would before the user confirms."""

    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def pick_one(
        self,
        source: PickSource,
        *,
        title: str,
        query_hint: str = "",
        preview: Callable[[PickItem], object | None] | None = None,
    ) -> PickItem | None:
        try:
            items = list(source)
        finally:
            source.cancel.set()
        self._ui.recorded_picks.append(
            RecordedPick(
                title=title, query_hint=query_hint, items=items, error=source.error, preview=preview
            )
        )
        return self._ui.choose(items)


class _RecordingTables(TablePresenter):
    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def show(self, table: TableModel) -> None:
        self._ui.recorded_tables.append(RecordedTable(table))


class _RecordingSink(PresenterSink):
    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def emit(self, level: str, message: str) -> None:
        self._ui.recorded_messages.append(f"{level.upper()}: {message}")

    def emit_markdown(self, text: str) -> None:
        self._ui.recorded_messages.append(f"MARKDOWN: {text}")
