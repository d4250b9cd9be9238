from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ds_common.api import configure_logging
from ds_docker.config import DockScopeConfig, load_config
from ds_docker.service import DockerScope
from ds_ui.tui.core.capabilities import supports_fullscreen_ui
from ds_ui.tui.system.facade import TUI
from ds_ui.tui.system.protocols import UI

__all__ = ["UIContext", "configure_logging"]


@dataclass
class UIContext:
    """Container for UI services and state, initialized lazily."""

    headless: bool = False
    config_path: Optional[Path] = None

    # Lazily initialized services
    _config: Optional[DockScopeConfig] = None
    _service: Optional[DockerScope] = None
    _ui: Optional[UI] = None

    @property
    def interactive(self) -> bool:
        return not self.headless and supports_fullscreen_ui()

    @property
    def config(self) -> DockScopeConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @config.setter
    def config(self, value: DockScopeConfig):
        self._config = value

    @property
    def service(self) -> DockerScope:
        if self._service is None:
            self._service = DockerScope(self.config)
        return self._service

    @service.setter
    def service(self, value: DockerScope):
        self._service = value

    @property
    def ui(self) -> UI:
        if self._ui is None:
            self._ui = TUI(fuzzy_score_cutoff=self.config.fuzzy_score_cutoff)
        return self._ui

    @ui.setter
    def ui(self, value: UI):
        self._ui = value
