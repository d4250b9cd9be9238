from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from ds_ui.tui.core import theme
from ds_ui.tui.system.protocols import Presenter, PresenterSink


class SinkPresenter(Presenter):
    """Presenter that forwards every message to a sink with its level name."""

    def __init__(self, sink: PresenterSink) -> None:
        self._sink = sink

    def info(self, message: str) -> None:
        self._sink.emit("info", message)

    def warning(self, message: str) -> None:
        self._sink.emit("warning", message)

    def error(self, message: str) -> None:
        self._sink.emit("error", message)

    def success(self, message: str) -> None:
        self._sink.emit("success", message)

    def markdown(self, text: str) -> None:
        self._sink.emit_markdown(text)


class ConsoleSink(PresenterSink):
    # Engine output (labels, stderr) may contain brackets; never read it as markup.
    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, level: str, message: str) -> None:
        self._console.print(theme.presenter_message(level, escape(message)))

    def emit_markdown(self, text: str) -> None:
        self._console.print(Markdown(text))


class RichPresenter(SinkPresenter):
    def __init__(self, console: Console) -> None:
        super().__init__(ConsoleSink(console))
