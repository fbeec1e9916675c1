"""Exception hierarchy for bus access.

Every error here is recoverable: the supervisor turns it into a state
transition and a log line, never into a crash.
"""

from __future__ import annotations


class NowPlayingError(Exception):
    """Base class for all nowplaying errors."""


class BusError(NowPlayingError):
    """A call on the session bus failed."""


class BusConnectError(BusError):
    """The session bus could not be reached."""


class BindError(BusError):
    """A player service vanished before a proxy could be bound to it."""

    def __init__(self, service: str, reason: str = "") -> None:
        self.service = service
        super().__init__(f"cannot bind {service}" + (f": {reason}" if reason else ""))


class PropertyReadError(BusError):
    """Reading a property from a player service failed."""

    def __init__(self, service: str, prop: str, reason: str = "") -> None:
        self.service = service
        self.prop = prop
        super().__init__(
            f"cannot read {prop} from {service}" + (f": {reason}" if reason else "")
        )


class BusGoneError(BusError):
    """The bus connection itself is gone and must be re-established."""
