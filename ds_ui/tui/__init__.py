"""
UI adapter package providing Rich/prompt_toolkit and headless renderers.
"""

from ds_ui.tui.system.facade import TUI
from ds_ui.tui.system.headless import HeadlessUI
from ds_ui.tui.system.protocols import UI, Picker, PickSource, Presenter, TablePresenter

__all__ = [
    "UI",
    "TUI",
    "HeadlessUI",
    "Picker",
    "PickSource",
    "TablePresenter",
    "Presenter",
]
