from __future__ import annotations

import logging
import threading
from typing import Any

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from ds_ui.tui.core import theme
from ds_ui.tui.system.components.flat_picker_panel import (
    FlatPickerPanel,
    FlatPickerPanelConfig,
    PreviewRenderer,
)
from ds_ui.tui.system.models import PickItem
from ds_ui.tui.system.protocols import PickSource

logger = logging.getLogger(__name__)


class SourceFeed:
    """Pull items from a PickSource into a panel on a background thread."""

    def __init__(self, source: PickSource, panel: FlatPickerPanel, on_change: Any) -> None:
        self._source = source
        self._panel = panel
        self._on_change = on_change
        self._thread = threading.Thread(target=self._consume, name="picker-feed", daemon=True)
        self.loading = False
        self.error: object | None = None

    def start(self) -> None:
        self.loading = True
        self._thread.start()

    def stop(self) -> None:
        self._source.cancel.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _consume(self) -> None:
        try:
            for item in self._source:
                if self._source.cancel.is_set():
                    break
                self._panel.append_items([item])
                self._on_change()
            self.error = self._source.error
        except Exception as exc:  # pragma: no cover - surfaced in the status line
            logger.exception("Picker source failed")
            self.error = exc
        finally:
            self.loading = False
            self._on_change()


class PickerScreen:
    """Single-select fuzzy picker fed by a streaming source, with a preview pane."""

    def __init__(
        self,
        source: PickSource,
        *,
        title: str,
        query_hint: str = "",
        preview_renderer: PreviewRenderer | None = None,
        config: FlatPickerPanelConfig | None = None,
    ) -> None:
        self._panel = FlatPickerPanel(
            row_renderer=self._render_row,
            preview_renderer=preview_renderer,
            config=config,
        )
        if query_hint:
            self._panel.search.text = query_hint
            self._panel.apply_filter()

        self.search = self._panel.search
        self.list_control = self._panel.list_control
        self.preview_control = self._panel.preview_control
        self._status_control = FormattedTextControl(self._render_status)
        self._feed = SourceFeed(source, self._panel, self._invalidate)

        inner_layout = HSplit(
            [
                self.search,
                Window(content=self._status_control, height=1),
                Window(height=1, char="-", style="class:separator"),
                VSplit(
                    [
                        Window(self.list_control, width=Dimension(weight=1)),
                        Window(width=1, char="|", style="class:separator"),
                        Window(self.preview_control, width=Dimension(weight=2), wrap_lines=True),
                    ],
                    padding=1,
                ),
            ]
        )

        self._app: Application = Application(
            layout=Layout(Frame(inner_layout, title=title), focused_element=self.search),
            key_bindings=self._bindings(),
            style=Style.from_dict(theme.prompt_toolkit_picker_style()),
            full_screen=True,
        )

        self.search.buffer.on_text_changed += lambda _: self._on_query_changed()

    @property
    def panel(self) -> FlatPickerPanel:
        return self._panel

    def run(self) -> PickItem | None:
        try:
            return self._app.run(pre_run=self._feed.start)
        finally:
            # Closing the picker abandons the query and kills the engine process.
            self._feed.stop()

    def _invalidate(self) -> None:
        self._app.invalidate()

    def _on_query_changed(self) -> None:
        self._panel.apply_filter()
        self._app.invalidate()

    def _render_row(self, item: PickItem, is_selected: bool) -> tuple[str, str]:
        style = "class:selected" if is_selected else ""
        marker = ">" if is_selected else " "
        return style, f" {marker} {item.title}"

    def _render_status(self) -> list[tuple[str, str]]:
        shown = len(self._panel.filtered)
        total = len(self._panel.items)
        counts = f" {shown} / {total}"
        if self._feed.loading:
            return [("class:status", f"{counts}  loading...")]
        if self._feed.error is not None:
            return [("class:status", counts), ("class:status-error", f"  {self._feed.error}")]
        return [("class:status", counts)]

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("down")
        @kb.add("c-n")
        def _(event: Any) -> None:
            self._move(1)

        @kb.add("up")
        @kb.add("c-p")
        def _(event: Any) -> None:
            self._move(-1)

        @kb.add("pagedown")
        def _(event: Any) -> None:
            self._move(10)

        @kb.add("pageup")
        def _(event: Any) -> None:
            self._move(-10)

        @kb.add("enter")
        def _(event: Any) -> None:
            current = self._panel.selected_item
            if current is None:
                return
            self._exit(current)

        @kb.add("escape", eager=True)
        @kb.add("c-c")
        def _(event: Any) -> None:
            self._exit(None)

        @kb.add("c-r")
        def _(event: Any) -> None:
            self._panel.reset_filter()
            self._app.invalidate()

        return kb

    def _move(self, delta: int) -> None:
        self._panel.move(delta)
        self._app.invalidate()

    def _exit(self, result: Any) -> None:
        try:
            self._app.exit(result=result)
        except Exception as exc:  # pragma: no cover
            if "Return value already set" not in str(exc):
                raise
