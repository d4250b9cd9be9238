import threading
from dataclasses import dataclass
from typing import Any, Iterator, Sequence


@dataclass
class TableModel:
    title: str
    columns: list[str]
    rows: list[list[str]]


@dataclass(frozen=True)
class PickItem:
    """One picker row: ``title`` is shown, ``search_blob`` is matched, ``payload`` is returned."""

    id: str
    title: str
    search_blob: str = ""
    preview: object | None = None  # Rich renderable
    payload: Any = None

    @property
    def match_text(self) -> str:
        return self.search_blob or self.title


class StaticSource:
    """PickSource over an already materialized list of items."""

    def __init__(self, items: Sequence[PickItem]) -> None:
        self._items = list(items)
        self.cancel = threading.Event()
        self.error: object | None = None

    def __iter__(self) -> Iterator[PickItem]:
        return iter(self._items)
