from __future__ import annotations

from typing import Mapping

RICH_ACCENT = "blue"
RICH_ACCENT_BOLD = f"bold {RICH_ACCENT}"
RICH_BORDER_STYLE = RICH_ACCENT

RICH_STATE_COLORS: dict[str, str] = {
    "running": "green",
    "restarting": "yellow",
    "paused": "yellow",
    "created": "dim",
    "exited": "red",
    "dead": "red",
}

PRESENTER_TEMPLATES: dict[str, str] = {
    "info": "[blue]ℹ[/blue] {message}",
    "warning": "[yellow]⚠ {message}[/yellow]",
    "error": "[red]✖ {message}[/red]",
    "success": "[green]✔ {message}[/green]",
}


def state_style(state: str) -> str:
    return RICH_STATE_COLORS.get(state.lower(), "")


def presenter_message(level: str, message: str) -> str:
    template = PRESENTER_TEMPLATES.get(level, "{message}")
    return template.format(message=message)


def prompt_toolkit_picker_style() -> Mapping[str, str]:
    return {
        "selected": "bg:#0000aa fg:white bold",
        "separator": "fg:#0000aa",
        "frame.border": "fg:#0000aa",
        "frame.label": "fg:#0000aa bold",
        "search": "bg:#eeeeee fg:#000000",
        "status": "fg:#888888 italic",
        "status-error": "fg:#aa0000 bold",
        "title": "bold",
    }
