"""The shared "now playing" cell handed to both the poller and the display."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class TrackRecord:
    """A displayable track: both fields are non-empty."""

    title: str
    artist: str

    def __str__(self) -> str:
        return f"{self.title} — {self.artist}"


class TrackCell:
    """
    Latest track record, or ``None`` when nothing is playing.

    One thread writes, any number of threads read. The lock only guards the
    reference swap; records are immutable, so readers never see a partial one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: TrackRecord | None = None

    def get(self) -> TrackRecord | None:
        with self._lock:
            return self._current

    def set(self, record: TrackRecord | None) -> None:
        with self._lock:
            self._current = record

    def clear(self) -> None:
        self.set(None)
