from __future__ import annotations

import threading
from typing import Callable, Iterator, Protocol

from ds_ui.tui.system.models import PickItem, TableModel


class PickSource(Protocol):
    """Items produced while the picker is open; ``cancel`` stops the producer."""

    cancel: threading.Event

    def __iter__(self) -> Iterator[PickItem]: ...

    @property
    def error(self) -> object | None: ...


class TablePresenter(Protocol):
    def show(self, table: TableModel) -> None: ...


class Picker(Protocol):
    def pick_one(
        self,
        source: PickSource,
        *,
        title: str,
        query_hint: str = "",
        preview: Callable[[PickItem], object | None] | None = None,
    ) -> PickItem | None: ...


class PresenterSink(Protocol):
    """Where presenter output lands: a rich console, or a list in tests."""

    def emit(self, level: str, message: str) -> None: ...

    def emit_markdown(self, text: str) -> None: ...


class Presenter(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def markdown(self, text: str) -> None: ...


class UI(Protocol):
    picker: Picker
    tables: TablePresenter
    present: Presenter
