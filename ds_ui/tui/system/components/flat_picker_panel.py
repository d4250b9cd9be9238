"""Search box, result list and preview pane for a picker whose items keep arriving."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeAlias

from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import TextArea
from rapidfuzz import fuzz, process
from rich.console import Console

from ds_ui.tui.system.models import PickItem

RowFragment: TypeAlias = tuple[str, str]
RowRenderer: TypeAlias = Callable[[PickItem, bool], RowFragment]
PreviewRenderer: TypeAlias = Callable[[PickItem], object | None]


@dataclass(frozen=True)
class FlatPickerPanelConfig:
    enable_fuzzy: bool = True
    fuzzy_score_cutoff: int = 50
    wrap_navigation: bool = False


class ItemFilter:
    """Rank items against a query with rapidfuzz ``WRatio``, best match first.

    With fuzzy matching disabled this is a case-insensitive substring test that
    keeps the arrival order.
    """

    def __init__(self, config: FlatPickerPanelConfig) -> None:
        self._config = config

    def __call__(self, items: Sequence[PickItem], query: str) -> list[PickItem]:
        if not query:
            return list(items)
        if not self._config.enable_fuzzy:
            needle = query.lower()
            return [item for item in items if needle in item.match_text.lower()]

        matches = process.extract(
            query,
            [item.match_text for item in items],
            scorer=fuzz.WRatio,
            limit=None,
            score_cutoff=self._config.fuzzy_score_cutoff,
        )
        return [items[index] for _choice, _score, index in matches]


class FlatPickerPanel:
    """Picker state plus the prompt_toolkit controls that render it.

    A feeder thread appends items while the event loop renders, so the item
    list, the filtered view and the highlight are only touched under ``_lock``.
    The highlight follows the item, not the row number, as new items re-rank
    the list.
    """

    def __init__(
        self,
        items: Sequence[PickItem] = (),
        *,
        row_renderer: RowRenderer,
        preview_renderer: PreviewRenderer | None = None,
        config: FlatPickerPanelConfig | None = None,
    ) -> None:
        self._config = config or FlatPickerPanelConfig()
        self._filter = ItemFilter(self._config)
        self._row_renderer = row_renderer
        self._preview_renderer = preview_renderer or (lambda item: item.preview)
        self._console = Console(force_terminal=True)
        self._lock = threading.RLock()

        self._items: list[PickItem] = list(items)
        self._filtered: list[PickItem] = list(self._items)
        self._index = 0
        self._query = ""

        self.search = TextArea(height=1, prompt="> ", style="class:search", multiline=False)
        self.list_control = FormattedTextControl(self._render_list, focusable=True)
        self.preview_control = FormattedTextControl(self._render_preview)

    @property
    def items(self) -> list[PickItem]:
        with self._lock:
            return list(self._items)

    @property
    def filtered(self) -> list[PickItem]:
        with self._lock:
            return list(self._filtered)

    @property
    def filter_text(self) -> str:
        return self._query

    @property
    def selected_index(self) -> int:
        return self._index

    @property
    def selected_item(self) -> PickItem | None:
        with self._lock:
            if not self._filtered:
                return None
            return self._filtered[self._index]

    def append_items(self, items: Iterable[PickItem]) -> None:
        with self._lock:
            highlighted = self.selected_item
            self._items.extend(items)
            self._refilter(keep=highlighted)

    def apply_filter(self) -> None:
        """Re-rank against the search box text and highlight the best match."""
        with self._lock:
            self._query = self.search.text.strip()
            self._refilter(keep=None)

    def reset_filter(self) -> None:
        self.search.text = ""
        self.apply_filter()

    def move(self, delta: int) -> None:
        with self._lock:
            count = len(self._filtered)
            if not count:
                return
            if self._config.wrap_navigation:
                self._index = (self._index + delta) % count
            else:
                self._index = max(0, min(self._index + delta, count - 1))

    def _refilter(self, *, keep: PickItem | None) -> None:
        self._filtered = self._filter(self._items, self._query)
        self._index = 0
        if keep is None:
            return
        for position, item in enumerate(self._filtered):
            if item is keep:
                self._index = position
                return

    def _render_list(self) -> list[RowFragment]:
        with self._lock:
            rows = list(self._filtered)
            current = self._index
        fragments: list[RowFragment] = []
        for position, item in enumerate(rows):
            style, text = self._row_renderer(item, position == current)
            fragments.append((style, text if text.endswith("\n") else f"{text}\n"))
        return fragments

    def _render_preview(self) -> ANSI:
        item = self.selected_item
        renderable = None if item is None else self._preview_renderer(item)
        if renderable is None:
            return ANSI("")
        with self._console.capture() as capture:
            self._console.print(renderable)
        return ANSI(capture.get())
