from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from ds_common.errors import EngineUnavailableError
from ds_docker.attach import ShellAttacher, attach_command
from ds_docker.shells import ProbeOutcome, ShellProbe

pytestmark = pytest.mark.unit_docker


def _prober(shell: str = "bash", outcome: ProbeOutcome = ProbeOutcome.FOUND) -> MagicMock:
    prober = MagicMock()
    prober.probe.side_effect = lambda image: ShellProbe(image, shell, outcome)
    return prober


def test_attach_command_shape() -> None:
    assert attach_command("docker", "myapp", "bash") == ["docker", "run", "-it", "myapp", "bash"]
    assert attach_command("docker", "myapp", "sh", ["xterm", "-e"]) == [
        "xterm",
        "-e",
        "docker",
        "run",
        "-it",
        "myapp",
        "sh",
    ]


def test_attach_runs_in_foreground() -> None:
    attacher = ShellAttacher("docker", _prober())
    with patch("ds_docker.attach.subprocess.run") as run:
        run.return_value.returncode = 130
        result = attacher.attach("myapp")

    run.assert_called_once_with(["docker", "run", "-it", "myapp", "bash"], check=False)
    assert result.returncode == 130
    assert result.probe.shell == "bash"


def test_attach_with_terminal_launcher_does_not_wait() -> None:
    attacher = ShellAttacher("docker", _prober("sh", ProbeOutcome.NOT_FOUND), terminal_command=["xterm", "-e"])
    with patch("ds_docker.attach.subprocess.Popen") as popen, patch("ds_docker.attach.subprocess.run") as run:
        result = attacher.attach("distroless")

    popen.assert_called_once_with(
        ["xterm", "-e", "docker", "run", "-it", "distroless", "sh"],
        start_new_session=True,
    )
    run.assert_not_called()
    assert result.returncode == 0
    assert result.probe.outcome is ProbeOutcome.NOT_FOUND


def test_attach_missing_binary_raises_typed_error() -> None:
    attacher = ShellAttacher("dockscope-no-such-engine-binary", _prober())

    with pytest.raises(EngineUnavailableError):
        attacher.attach("myapp")
