"""Detect an interactive shell available inside a container image."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from ds_common.errors import CommandFailedError, DSError
from ds_docker.config import ShellCandidate
from ds_docker.runner import ENGINE_ERROR_EXIT, CommandResult, CommandRunner

logger = logging.getLogger(__name__)


class ProbeOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class ShellProbe:
    """Result of probing one image.

    ``shell`` is always usable as a command; ``outcome`` tells whether it was
    detected or is the fallback guess.
    """

    image: str
    shell: str
    outcome: ProbeOutcome
    error: Optional[DSError] = None

    @property
    def detected(self) -> bool:
        return self.outcome is ProbeOutcome.FOUND


def probe_command(image: str, candidates: Sequence[ShellCandidate]) -> list[str]:
    """Arguments for one throwaway run listing the executable candidate paths."""
    return [
        "run",
        "--rm",
        image,
        "find",
        *(candidate.path for candidate in candidates),
        "-maxdepth",
        "0",
        "-type",
        "f",
        "-executable",
    ]


def select_shell(
    lines: Iterable[str], candidates: Sequence[ShellCandidate]
) -> ShellCandidate | None:
    """Return the first candidate, in preference order, whose path was printed."""
    present = {line.strip() for line in lines}
    for candidate in candidates:
        if candidate.path in present:
            return candidate
    return None


def _run_failed(result: CommandResult) -> bool:
    if result.error is None:
        return False
    if not isinstance(result.error, CommandFailedError):
        return True
    return result.returncode is None or result.returncode >= ENGINE_ERROR_EXIT


class ShellProber:
    """Probe images for a shell, caching answers per image for ``cache_ttl`` seconds."""

    def __init__(
        self,
        runner: CommandRunner,
        candidates: Sequence[ShellCandidate],
        *,
        fallback: str = "sh",
        cache_ttl: float = 0.0,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._runner = runner
        self._candidates = tuple(candidates)
        self._fallback = fallback
        self._cache_ttl = cache_ttl
        self._timeout = timeout
        self._clock = clock
        self._cache: dict[str, tuple[float, ShellProbe]] = {}
        self._lock = threading.Lock()

    @property
    def candidates(self) -> tuple[ShellCandidate, ...]:
        return self._candidates

    def probe(self, image: str) -> ShellProbe:
        cached = self._cached(image)
        if cached is not None:
            logger.debug("Using cached shell probe for %s: %s", image, cached.shell)
            return cached

        result = self._runner.run(
            probe_command(image, self._candidates),
            timeout=self._timeout,
            keep_output_on_error=True,
        )
        # find reports each absent candidate on stderr; that is only noise
        # unless the engine itself failed.
        failed = _run_failed(result)
        level = logging.WARNING if failed else logging.DEBUG
        for line in result.stderr:
            logger.log(level, "Error checking shells in %s: %s", image, line)

        if failed:
            logger.warning("Shell probe failed for image %s, falling back to %s", image, self._fallback)
            return ShellProbe(image, self._fallback, ProbeOutcome.FAILED, result.error)

        match = select_shell(result.lines, self._candidates)
        if match is not None:
            probe = ShellProbe(image, match.name, ProbeOutcome.FOUND)
        else:
            logger.warning("No supported shell found in image %s", image)
            probe = ShellProbe(image, self._fallback, ProbeOutcome.NOT_FOUND)
        self._store(image, probe)
        return probe

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _cached(self, image: str) -> ShellProbe | None:
        if self._cache_ttl <= 0:
            return None
        with self._lock:
            hit = self._cache.get(image)
            if hit is None:
                return None
            stored_at, probe = hit
            if self._clock() - stored_at > self._cache_ttl:
                del self._cache[image]
                return None
            return probe

    def _store(self, image: str, probe: ShellProbe) -> None:
        if self._cache_ttl <= 0:
            return
        with self._lock:
            self._cache[image] = (self._clock(), probe)
