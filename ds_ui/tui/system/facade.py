from rich.console import Console

from ds_ui.tui.system.components.picker import PowerPicker
from ds_ui.tui.system.components.presenter import RichPresenter
from ds_ui.tui.system.components.table import RichTablePresenter
from ds_ui.tui.system.protocols import UI, Picker, Presenter, TablePresenter


class TUI(UI):
    def __init__(
        self,
        console: Console | None = None,
        *,
        fuzzy_score_cutoff: int = 50,
    ):
        self._console = console or Console()
        self.picker: Picker = PowerPicker(fuzzy_score_cutoff=fuzzy_score_cutoff)
        self.tables: TablePresenter = RichTablePresenter(self._console)
        self.present: Presenter = RichPresenter(self._console)
