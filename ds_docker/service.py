"""High-level entry points the UI uses: list, stream, preview and attach."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ds_common.errors import DSError
from ds_docker.attach import AttachResult, ShellAttacher
from ds_docker.config import DockScopeConfig
from ds_docker.decoder import decode_lines
from ds_docker.models import EntityKind, ImageEntry, PickerEntry
from ds_docker.runner import CommandRunner, CommandStream
from ds_docker.shells import ShellProbe, ShellProber

logger = logging.getLogger(__name__)


@dataclass
class Listing:
    """Entries of one completed query, plus the error that emptied it, if any."""

    kind: EntityKind
    entries: List[PickerEntry] = field(default_factory=list)
    error: Optional[DSError] = None


class EntryStream:
    """Decoded entries of an in-flight query; cancel via the shared token."""

    def __init__(self, kind: EntityKind, stream: CommandStream) -> None:
        self.kind = kind
        self._stream = stream

    @property
    def cancel(self) -> threading.Event:
        return self._stream.cancel

    @property
    def error(self) -> Optional[DSError]:
        return self._stream.error

    @property
    def cancelled(self) -> bool:
        return self._stream.cancelled

    def __iter__(self) -> Iterator[PickerEntry]:
        return decode_lines(self.kind, self._stream)


class DockerScope:
    def __init__(
        self,
        config: DockScopeConfig | None = None,
        *,
        runner: CommandRunner | None = None,
        prober: ShellProber | None = None,
        attacher: ShellAttacher | None = None,
    ) -> None:
        self.config = config or DockScopeConfig()
        self.runner = runner or CommandRunner(self.config.engine, timeout=self.config.query_timeout)
        self.prober = prober or ShellProber(
            self.runner,
            self.config.shells,
            fallback=self.config.fallback_shell,
            cache_ttl=self.config.probe_cache_ttl,
            timeout=self.config.probe_timeout,
        )
        self.attacher = attacher or ShellAttacher(
            self.config.engine,
            self.prober,
            terminal_command=self.config.terminal_command,
        )

    def list_entries(self, kind: EntityKind) -> Listing:
        result = self.runner.run_json(kind.query_args)
        return Listing(kind=kind, entries=list(decode_lines(kind, result.lines)), error=result.error)

    def stream_entries(
        self, kind: EntityKind, cancel: threading.Event | None = None
    ) -> EntryStream:
        return EntryStream(kind, self.runner.stream_json(kind.query_args, cancel=cancel))

    def find_entry(self, kind: EntityKind, key: str) -> PickerEntry | None:
        """Look an entry up by identity key, display label or ID prefix."""
        listing = self.list_entries(kind)
        for entry in listing.entries:
            if key in (entry.key, entry.display):
                return entry
        for entry in listing.entries:
            entry_id = getattr(entry.value, "id", "")
            if entry_id and entry_id.startswith(key):
                return entry
        return None

    def probe_shell(self, image: str) -> ShellProbe:
        return self.prober.probe(image)

    def attach_image(self, image: PickerEntry | ImageEntry | str) -> AttachResult:
        if isinstance(image, PickerEntry):
            image = image.value  # type: ignore[assignment]
        reference = image.reference if isinstance(image, ImageEntry) else str(image)
        return self.attacher.attach(reference)
