"""MusicBrainz lookups run on a background thread."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from discmeta.musicbrainz import DiscEntry, MusicBrainzError, MusicBrainzLookup

log = logging.getLogger(__name__)


@dataclass
class LookupOutcome:
    """What a finished background lookup produced."""

    entries: list[DiscEntry] = field(default_factory=list)
    error: MusicBrainzError | None = None


class AsyncMusicBrainzLookup:
    """Starts lookups without blocking and reports each one when it ends."""

    def __init__(
        self,
        callback: Callable[[LookupOutcome], Any] | None = None,
        lookup_factory: Callable[[], Any] = MusicBrainzLookup,
    ) -> None:
        self._callback = callback
        self._factory = lookup_factory
        self._lock = threading.Lock()
        self._entries: list[DiscEntry] = []
        self._threads: list[threading.Thread] = []

    def lookup(self, offsets: Sequence[int]) -> None:
        """Start a lookup of the disc; the callback gets its outcome."""
        offsets = list(offsets)
        thread = threading.Thread(target=self._run, args=(offsets,), daemon=True)
        with self._lock:
            self._threads.append(thread)
        thread.start()

    def _run(self, offsets: list[int]) -> None:
        try:
            outcome = LookupOutcome(entries=list(self._factory().lookup(offsets)))
        except MusicBrainzError as exc:
            outcome = LookupOutcome(error=exc)
        log.debug("lookup finished: %r", outcome.error)
        with self._lock:
            self._entries = outcome.entries
        if self._callback is not None:
            self._callback(outcome)

    def lookup_response(self) -> list[DiscEntry]:
        """The entries of the lookup that finished last."""
        with self._lock:
            return list(self._entries)

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for every started lookup; True if all of them finished."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            thread.join(remaining)
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            return not self._threads