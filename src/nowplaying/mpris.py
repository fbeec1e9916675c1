"""MPRIS2 names and the playback status vocabulary."""

from __future__ import annotations

import enum
import re


MPRIS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_PATH = "/org/mpris/MediaPlayer2"
PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"

STATUS_PROPERTY = "PlaybackStatus"
METADATA_PROPERTY = "Metadata"

TITLE_KEY = "xesam:title"
ARTIST_KEY = "xesam:artist"


class PlaybackStatus(enum.Enum):
    PLAYING = "Playing"
    PAUSED = "Paused"
    STOPPED = "Stopped"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, raw: object) -> PlaybackStatus:
        """Map a raw ``PlaybackStatus`` value; anything unexpected is UNKNOWN."""
        if isinstance(raw, str):
            for status in (cls.PLAYING, cls.PAUSED, cls.STOPPED):
                if raw == status.value:
                    return status
        return cls.UNKNOWN


def full_name(player: str, prefix: str = MPRIS_PREFIX) -> str:
    """Expand a short player name such as ``spotify`` to its bus name."""
    return player if player.startswith(prefix) else prefix + player


def friendly_name(bus_name: str) -> str:
    """Extract the human-friendly player name from the bus name."""
    name = bus_name.removeprefix(MPRIS_PREFIX)
    # Remove instance suffix like '.instance12345'
    name = re.sub(r"\.instance\d+$", "", name)
    return name.capitalize()
