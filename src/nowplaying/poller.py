"""Sample a bound player and publish what it is playing."""

from __future__ import annotations

import logging
from typing import Any

from nowplaying.mpris import (
    ARTIST_KEY,
    METADATA_PROPERTY,
    STATUS_PROPERTY,
    TITLE_KEY,
    PlaybackStatus,
)
from nowplaying.state import TrackCell, TrackRecord


log = logging.getLogger(__name__)


def sample_status(player: Any) -> PlaybackStatus:
    return PlaybackStatus.parse(player.get(STATUS_PROPERTY))


def extract_title(metadata: dict[str, Any]) -> str | None:
    """Return ``xesam:title``, or ``None`` when absent or not a string."""
    title = metadata.get(TITLE_KEY)
    return title if isinstance(title, str) else None


def extract_artist(metadata: dict[str, Any]) -> str | None:
    """
    Return the first entry of ``xesam:artist``.

    The key is a list of strings per MPRIS2; some players send a bare string,
    which is taken as a one-element list.
    """
    artists = metadata.get(ARTIST_KEY)
    if isinstance(artists, str):
        artists = [artists]
    if not isinstance(artists, list) or not artists:
        return None
    first = artists[0]
    return first if isinstance(first, str) else None


def to_record(metadata: Any) -> TrackRecord | None:
    """Normalize a ``Metadata`` mapping into a record, or ``None``."""
    if not isinstance(metadata, dict):
        log.debug("Metadata is not a mapping: %r", metadata)
        return None

    title = extract_title(metadata)
    artist = extract_artist(metadata)
    if title is None or artist is None:
        log.debug("Metadata lacks %s", "title" if title is None else "artist")
        return None
    if not title or not artist:
        log.debug("Metadata has an empty %s", "title" if not title else "artist")
        return None
    return TrackRecord(title=title, artist=artist)


def sample_metadata(player: Any) -> TrackRecord | None:
    return to_record(player.get(METADATA_PROPERTY))


class TrackPoller:
    """Publish one status + metadata sample per cycle into a ``TrackCell``."""

    def __init__(self, cell: TrackCell) -> None:
        self.cell = cell
        self._last: TrackRecord | None = None

    def cycle(self, player: Any) -> bool:
        """
        Run one poll cycle against *player*.

        Returns ``False`` when the player is no longer playing; the cell is
        cleared and the caller should look for another player. Bus errors are
        left to the caller.
        """
        status = sample_status(player)
        if status is not PlaybackStatus.PLAYING:
            log.debug("%s is %s", player.service, status.value.lower())
            self.reset()
            return False

        record = sample_metadata(player)
        self.cell.set(record)
        if record != self._last:
            if record is None:
                log.info("%s: no displayable track", player.service)
            else:
                log.info("Now playing: %s", record)
            self._last = record
        return True

    def reset(self) -> None:
        self.cell.clear()
        self._last = None
