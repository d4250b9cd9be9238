"""Open an interactive shell in a fresh container started from an image."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Sequence

from ds_common.errors import EngineUnavailableError
from ds_docker.shells import ShellProbe, ShellProber

logger = logging.getLogger(__name__)


def attach_command(
    engine: str,
    image: str,
    shell: str,
    terminal_command: Sequence[str] = (),
) -> List[str]:
    """``docker run -it <image> <shell>``, optionally wrapped in a terminal launcher."""
    return [*terminal_command, engine, "run", "-it", image, shell]


@dataclass(frozen=True)
class AttachResult:
    command: List[str]
    probe: ShellProbe
    returncode: int


class ShellAttacher:
    """Probe the image for a shell, then hand the terminal to ``docker run -it``."""

    def __init__(
        self,
        engine: str,
        prober: ShellProber,
        *,
        terminal_command: Sequence[str] = (),
    ) -> None:
        self._engine = engine
        self._prober = prober
        self._terminal_command = list(terminal_command)

    def attach(self, image: str) -> AttachResult:
        probe = self._prober.probe(image)
        command = attach_command(self._engine, image, probe.shell, self._terminal_command)
        logger.info("Running %s (shell %s)", command, probe.outcome.value)
        try:
            if self._terminal_command:
                # The launcher owns the new window; do not wait for the session.
                subprocess.Popen(command, start_new_session=True)
                returncode = 0
            else:
                returncode = subprocess.run(command, check=False).returncode
        except OSError as exc:
            raise EngineUnavailableError(
                f"Cannot start {command[0]}: {exc.strerror or exc}",
                context={"args": command},
                cause=exc,
            ) from exc
        return AttachResult(command=command, probe=probe, returncode=returncode)
