import io
from types import SimpleNamespace

import pytest
from rich.console import Console

from ds_ui import tui
from ds_ui.tui.core import capabilities, theme
from ds_ui.tui.system.components.table import build_rich_table, fit_column_widths
from ds_ui.tui.system.facade import TUI
from ds_ui.tui.system.models import TableModel

pytestmark = pytest.mark.unit_ui


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=120, color_system=None), buffer


def test_tui_public_api_exports() -> None:
    for name in ("UI", "TUI", "HeadlessUI", "Picker", "PickSource", "TablePresenter", "Presenter"):
        assert hasattr(tui, name)


def test_theme_prompt_toolkit_style_has_keys() -> None:
    styles = theme.prompt_toolkit_picker_style()
    for key in ("selected", "separator", "frame.border", "search", "status", "status-error", "title"):
        assert key in styles


def test_state_style_known_and_unknown() -> None:
    assert theme.state_style("Running") == "green"
    assert theme.state_style("weird") == ""


def test_fit_column_widths_shrinks_widest_column() -> None:
    model = TableModel(title="t", columns=["ID", "Labels"], rows=[["abc", "x" * 200]])

    widths = fit_column_widths(model, 60)

    assert widths[0] == 4
    assert sum(widths) + 7 <= 60


def test_table_cells_are_not_markup() -> None:
    console, buffer = _console()
    model = TableModel(title="Docker Processes (1)", columns=["ID", "Labels", "State"], rows=[["abc", "[bold]x[/bold]", "running"]])

    console.print(build_rich_table(model, console=console))

    assert "[bold]x[/bold]" in buffer.getvalue()


def test_rich_presenter_escapes_markup() -> None:
    console, buffer = _console()
    ui = TUI(console)

    ui.present.warning("label [app=web]")
    ui.present.markdown("# ID: abc123")

    output = buffer.getvalue()
    assert "label [app=web]" in output
    assert "ID: abc123" in output


def test_fullscreen_requires_tty_and_capable_term(monkeypatch: pytest.MonkeyPatch) -> None:
    tty = SimpleNamespace(isatty=lambda: True)
    monkeypatch.setattr(capabilities, "sys", SimpleNamespace(stdin=tty, stdout=tty))
    monkeypatch.setenv("TERM", "xterm-256color")
    assert capabilities.supports_fullscreen_ui() is True

    monkeypatch.setenv("TERM", "dumb")
    assert capabilities.supports_fullscreen_ui() is False

    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.setattr(
        capabilities,
        "sys",
        SimpleNamespace(stdin=tty, stdout=SimpleNamespace(isatty=lambda: False)),
    )
    assert capabilities.supports_fullscreen_ui() is False
