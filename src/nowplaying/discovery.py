"""Find the MPRIS2 player most likely to be the one the user is listening to."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from nowplaying.errors import PropertyReadError
from nowplaying.mpris import (
    MPRIS_PATH,
    MPRIS_PREFIX,
    PLAYER_IFACE,
    STATUS_PROPERTY,
    PlaybackStatus,
)


log = logging.getLogger(__name__)


def list_candidates(client: Any, conn: Any, prefix: str = MPRIS_PREFIX) -> list[str]:
    """Return registered player bus names, in bus enumeration order."""
    return [n for n in client.list_names(conn) if n.startswith(prefix)]


def read_status(client: Any, conn: Any, service: str) -> PlaybackStatus:
    raw = client.get_property(conn, service, MPRIS_PATH, PLAYER_IFACE, STATUS_PROPERTY)
    return PlaybackStatus.parse(raw)


def iter_statuses(
    client: Any, conn: Any, prefix: str = MPRIS_PREFIX
) -> Iterator[tuple[str, PlaybackStatus | None]]:
    """
    Yield each candidate with its playback status.

    The status is ``None`` for a candidate that did not answer. A lost bus
    connection is not a per-candidate failure and propagates as
    ``BusGoneError``.
    """
    for service in list_candidates(client, conn, prefix):
        try:
            status: PlaybackStatus | None = read_status(client, conn, service)
        except PropertyReadError as e:
            log.debug("No status from %s: %s", service, e)
            status = None
        yield service, status


def probe(
    client: Any, conn: Any, prefix: str = MPRIS_PREFIX
) -> list[tuple[str, PlaybackStatus | None]]:
    return list(iter_statuses(client, conn, prefix))


def discover(client: Any, conn: Any, prefix: str = MPRIS_PREFIX) -> str | None:
    """
    Pick one player in a single pass over the candidates.

    Preference: the first one playing, else the first one paused, else the
    first one that answered at all. Candidates that fail to report a status
    are skipped. Returns ``None`` when nothing is left.
    """
    paused: str | None = None
    fallback: str | None = None
    for service, status in iter_statuses(client, conn, prefix):
        if status is None:
            continue
        if status is PlaybackStatus.PLAYING:
            return service
        if status is PlaybackStatus.PAUSED and paused is None:
            paused = service
        if fallback is None:
            fallback = service
    return paused or fallback
