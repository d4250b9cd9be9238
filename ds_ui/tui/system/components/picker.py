from __future__ import annotations

from ds_ui.tui.screens.picker_screen import PickerScreen
from ds_ui.tui.system.components.flat_picker_panel import (
    FlatPickerPanelConfig,
    PreviewRenderer,
)
from ds_ui.tui.system.models import PickItem
from ds_ui.tui.system.protocols import Picker, PickSource


class PowerPicker(Picker):
    """Full-screen prompt_toolkit picker with rapidfuzz filtering."""

    def __init__(self, *, fuzzy_score_cutoff: int = 50) -> None:
        self._config = FlatPickerPanelConfig(fuzzy_score_cutoff=fuzzy_score_cutoff)

    def pick_one(
        self,
        source: PickSource,
        *,
        title: str,
        query_hint: str = "",
        preview: PreviewRenderer | None = None,
    ) -> PickItem | None:
        screen = PickerScreen(
            source,
            title=title,
            query_hint=query_hint,
            preview_renderer=preview,
            config=self._config,
        )
        return screen.run()
