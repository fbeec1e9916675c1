"""Runtime settings."""

from __future__ import annotations

from dataclasses import dataclass

from nowplaying.mpris import MPRIS_PREFIX


@dataclass(frozen=True)
class Settings:
    player: str | None = None  # fixed bus name; None means discover every cycle
    prefix: str = MPRIS_PREFIX
    poll_interval: float = 1.0
    connect_backoff: float = 3.0
    discover_backoff: float = 2.0
    bind_backoff: float = 0.5
    call_timeout: float = 2.0
    refresh_interval: float = 0.5
