from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable, Sequence

import pytest
from rich.console import Console
from rich.table import Table

from ds_docker.runner import CommandResult

KNOWN_MARKERS = {"unit_common", "unit_docker", "unit_ui"}


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Print statistics by marker at the end of the test session."""
    _ = (exitstatus, config)
    marker_stats = defaultdict(lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0})

    for outcome in ["passed", "failed", "skipped"]:
        for report in terminalreporter.stats.get(outcome, []):
            if report.when == "call" or (report.when == "setup" and report.outcome == "skipped"):
                for marker in KNOWN_MARKERS:
                    if marker in report.keywords:
                        stats = marker_stats[marker]
                        stats[outcome] += 1
                        stats["total"] += 1
                        stats["duration"] += getattr(report, "duration", 0.0)

    if not marker_stats:
        return

    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")

    for marker in sorted(marker_stats):
        stats = marker_stats[marker]
        table.add_row(
            marker,
            str(stats["total"]),
            str(stats["passed"]),
            str(stats["failed"]),
            str(stats["skipped"]),
            f"{stats['duration']:.2f}",
        )

    console = Console()
    console.print("\n")
    console.print(table)


class FakeRunner:
    """Stand-in for CommandRunner answering from canned results keyed by the first args."""

    def __init__(self, engine: str = "docker") -> None:
        self.engine = engine
        self.timeout = None
        self.calls: list[dict[str, Any]] = []
        self._results: dict[tuple[str, ...], CommandResult] = {}

    def command(self, args: Sequence[str]) -> list[str]:
        return [self.engine, *args]

    def respond(self, prefix: Sequence[str], result: CommandResult) -> None:
        self._results[tuple(prefix)] = result

    def _lookup(self, args: Sequence[str]) -> CommandResult:
        for prefix, result in self._results.items():
            if tuple(args[: len(prefix)]) == prefix:
                return result
        return CommandResult(args=self.command(args), returncode=0)

    def run(self, args, *, timeout=None, keep_output_on_error=False) -> CommandResult:
        self.calls.append({"args": list(args), "timeout": timeout, "keep_output_on_error": keep_output_on_error})
        return self._lookup(args)

    def run_json(self, args, *, timeout=None) -> CommandResult:
        return self.run([*args, "--format", "json"], timeout=timeout)

    def stream_json(self, args, *, cancel=None, timeout=None):
        result = self.run([*args, "--format", "json"], timeout=timeout)
        return FakeStream(result, cancel)


class FakeStream:
    def __init__(self, result: CommandResult, cancel=None) -> None:
        self._result = result
        self.cancel = cancel or threading.Event()
        self.error = None

    @property
    def cancelled(self) -> bool:
        return self.cancel.is_set()

    def __iter__(self):
        for line in self._result.lines:
            if self.cancel.is_set():
                break
            yield line
        self.error = self._result.error


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_result() -> Callable[..., CommandResult]:
    def _make(lines: Sequence[str] = (), *, returncode: int = 0, stderr: Sequence[str] = (), error=None):
        return CommandResult(
            args=["docker"],
            lines=list(lines),
            stderr=list(stderr),
            returncode=returncode,
            error=error,
        )

    return _make


@pytest.fixture
def process_record() -> dict[str, str]:
    return {
        "ID": "abc123",
        "Names": "web",
        "Command": "nginx",
        "Image": "nginx:latest",
        "State": "running",
        "Status": "Up 2 hours",
        "Labels": "",
        "LocalVolumes": "0",
        "Mounts": "",
        "Networks": "bridge",
        "Ports": "0.0.0.0:80->80/tcp",
        "Size": "0B",
        "CreatedAt": "2024-05-01 10:00:00 +0000 UTC",
        "RunningFor": "2 hours ago",
    }


@pytest.fixture
def image_record() -> dict[str, str]:
    return {
        "Repository": "myapp",
        "Tag": "latest",
        "ID": "sha256:0123456789abcdef",
        "Containers": "N/A",
        "Digest": "<none>",
        "CreatedAt": "2024-05-01 10:00:00 +0000 UTC",
        "CreatedSince": "2 weeks ago",
        "SharedSize": "N/A",
        "Size": "120MB",
        "UniqueSize": "N/A",
        "VirtualSize": "120MB",
    }
