"""Run container-engine CLI commands and capture their line output.

Failures never raise: a missing binary, a non-zero exit or a timeout degrade
to an empty line sequence, and the typed error is attached to the result so
the UI can show a warning next to the empty list.
"""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from ds_common.errors import (
    CommandTimeoutError,
    DSError,
    EngineUnavailableError,
    command_failed,
    error_to_payload,
    wrap_error,
)

logger = logging.getLogger(__name__)

JSON_FORMAT_ARGS = ("--format", "json")
# Exit codes >= 125 come from `docker run` itself, not from the command inside.
ENGINE_ERROR_EXIT = 125
_TERMINATE_GRACE = 2.0
_WATCH_INTERVAL = 0.05


def _split_lines(text: str | None) -> List[str]:
    if not text:
        return []
    return text.splitlines()


@dataclass
class CommandResult:
    """Outcome of one engine invocation."""

    args: List[str]
    lines: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    returncode: Optional[int] = None
    error: Optional[DSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0


class CommandStream:
    """Iterate stdout lines of a running command; stops early when cancelled.

    Errors land on ``error`` and are logged at debug level only: the consumer
    is the picker, which reports them once it has released the terminal.
    """

    def __init__(
        self,
        args: Sequence[str],
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> None:
        self.args = list(args)
        self.cancel = cancel or threading.Event()
        self.timeout = timeout
        self.stderr: List[str] = []
        self.returncode: Optional[int] = None
        self.error: Optional[DSError] = None
        self._done = threading.Event()
        self._timed_out = False

    @property
    def cancelled(self) -> bool:
        return self.cancel.is_set() and not self._timed_out

    def __iter__(self) -> Iterator[str]:
        logger.debug("Running job %s", self.args)
        try:
            proc = subprocess.Popen(
                self.args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            self.error = _unavailable(self.args, exc)
            _log_error(self.error, logging.DEBUG)
            return

        stderr_reader = threading.Thread(target=self._drain_stderr, args=(proc,), daemon=True)
        watcher = threading.Thread(target=self._watch, args=(proc,), daemon=True)
        stderr_reader.start()
        watcher.start()
        try:
            assert proc.stdout is not None
            for raw in proc.stdout:
                if self.cancel.is_set():
                    break
                yield raw.rstrip("\n")
        finally:
            self._done.set()
            if proc.poll() is None:
                _terminate(proc)
            self.returncode = proc.wait()
            stderr_reader.join(timeout=_TERMINATE_GRACE)
            self._finish()

    def _drain_stderr(self, proc: subprocess.Popen) -> None:
        assert proc.stderr is not None
        for raw in proc.stderr:
            self.stderr.append(raw.rstrip("\n"))

    def _watch(self, proc: subprocess.Popen) -> None:
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        while not self._done.is_set():
            if self.cancel.wait(_WATCH_INTERVAL):
                logger.debug("Cancelling job %s", self.args)
                _terminate(proc)
                return
            if deadline is not None and time.monotonic() >= deadline:
                self._timed_out = True
                self.cancel.set()
                _terminate(proc)
                return

    def _finish(self) -> None:
        if self._timed_out:
            self.error = CommandTimeoutError(
                f"{self.args[0]} did not finish within {self.timeout}s",
                context={"args": self.args, "timeout": self.timeout},
            )
        elif self.cancel.is_set():
            logger.debug("Job cancelled %s", self.args)
            return
        elif self.returncode:
            self.error = command_failed(self.args, self.returncode, self.stderr)
        else:
            return
        _log_error(self.error, logging.DEBUG)


def _terminate(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    proc.terminate()
    try:
        proc.wait(timeout=_TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        proc.kill()


def _log_error(error: DSError, level: int = logging.WARNING) -> None:
    logger.log(level, "%s", error, extra=error_to_payload(error))


def _unavailable(args: Sequence[str], exc: OSError) -> EngineUnavailableError:
    return wrap_error(
        EngineUnavailableError,
        f"Cannot run {args[0]}: {exc.strerror or exc}",
        context={"args": list(args)},
        cause=exc,
    )


class CommandRunner:
    """Spawn one engine process per call and block until it exits."""

    def __init__(self, engine: str = "docker", *, timeout: float | None = None) -> None:
        self.engine = engine
        self.timeout = timeout

    def command(self, args: Sequence[str]) -> List[str]:
        return [self.engine, *args]

    def run(
        self,
        args: Sequence[str],
        *,
        timeout: float | None = None,
        keep_output_on_error: bool = False,
    ) -> CommandResult:
        """Run ``<engine> *args`` and capture stdout/stderr as lines.

        On a non-zero exit the stdout lines are dropped unless
        ``keep_output_on_error`` is set (``find`` exits 1 when some of its
        paths are missing while still printing the others).
        """
        cmd = self.command(args)
        effective_timeout = self.timeout if timeout is None else timeout
        result = CommandResult(args=cmd)
        logger.debug("Running job %s", cmd)
        try:
            proc = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
                timeout=effective_timeout,
            )
        except subprocess.TimeoutExpired as exc:
            result.error = CommandTimeoutError(
                f"{self.engine} did not finish within {effective_timeout}s",
                context={"args": cmd, "timeout": effective_timeout},
                cause=exc,
            )
            _log_error(result.error)
            return result
        except OSError as exc:
            result.error = _unavailable(cmd, exc)
            _log_error(result.error)
            return result

        result.returncode = proc.returncode
        result.stderr = _split_lines(proc.stderr)
        lines = _split_lines(proc.stdout)
        if proc.returncode != 0:
            result.error = command_failed(cmd, proc.returncode, result.stderr)
            if keep_output_on_error:
                # The caller decides whether this exit status is a failure.
                _log_error(result.error, logging.DEBUG)
            else:
                _log_error(result.error)
                lines = []
        result.lines = lines
        logger.debug("Ran job %s -> %d line(s)", cmd, len(lines))
        return result

    def run_json(self, args: Sequence[str], *, timeout: float | None = None) -> CommandResult:
        """Run a listing subcommand forced to one JSON object per line."""
        return self.run([*args, *JSON_FORMAT_ARGS], timeout=timeout)

    def stream_json(
        self,
        args: Sequence[str],
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> CommandStream:
        """Like :meth:`run_json` but yields lines as the engine prints them."""
        return CommandStream(
            self.command([*args, *JSON_FORMAT_ARGS]),
            cancel=cancel,
            timeout=self.timeout if timeout is None else timeout,
        )
