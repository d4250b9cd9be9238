"""Rich rendering of TableModel listings, one terminal line per row."""

from __future__ import annotations

import shutil

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ds_ui.tui.core import theme
from ds_ui.tui.system.models import TableModel
from ds_ui.tui.system.protocols import TablePresenter

MIN_COL_WIDTH = 4
STATE_COLUMN = "State"


def _console_width(console: Console) -> int:
    width = console.size.width
    if width > 0:
        return width
    return shutil.get_terminal_size(fallback=(100, 24)).columns


def fit_column_widths(model: TableModel, max_width: int) -> list[int]:
    """Shrink the widest column one character at a time until the row fits."""
    # Outer borders plus " | " between columns.
    overhead = 4 + 3 * (max(1, len(model.columns)) - 1)
    widths = []
    for idx, header in enumerate(model.columns):
        cells = [row[idx] for row in model.rows if idx < len(row)]
        longest = max([len(header), *(len(cell) for cell in cells)])
        widths.append(max(MIN_COL_WIDTH, min(longest, max_width)))

    while widths and sum(widths) + overhead > max_width:
        widest = widths.index(max(widths))
        if widths[widest] <= MIN_COL_WIDTH:
            break
        widths[widest] -= 1
    return widths


def _cell(value: str, column: str) -> Text:
    # Plain Text: engine values such as labels may contain brackets.
    style = theme.state_style(value) if column == STATE_COLUMN else ""
    return Text(value, style=style)


def build_rich_table(model: TableModel, *, console: Console, box_style: box.Box = box.ROUNDED) -> Table:
    max_width = max(60, _console_width(console) - 2)
    table = Table(
        title=Text(model.title, no_wrap=True, overflow="ellipsis"),
        width=max_width if model.rows else None,
        box=box_style,
        border_style=theme.RICH_BORDER_STYLE,
        header_style=theme.RICH_ACCENT_BOLD,
        title_style=theme.RICH_ACCENT_BOLD,
    )
    for header, width in zip(model.columns, fit_column_widths(model, max_width)):
        table.add_column(header, overflow="ellipsis", no_wrap=True, min_width=MIN_COL_WIDTH, max_width=width)
    for row in model.rows:
        table.add_row(*(_cell(value, header) for value, header in zip(row, model.columns)))
    return table


class RichTablePresenter(TablePresenter):
    def __init__(self, console: Console) -> None:
        self._console = console

    def show(self, table: TableModel) -> None:
        self._console.print(build_rich_table(table, console=self._console))
