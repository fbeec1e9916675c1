"""CLI entry point for nowplaying."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from nowplaying.config import Settings
from nowplaying.discovery import probe
from nowplaying.display import display_now_playing, display_pipe
from nowplaying.errors import BusError
from nowplaying.logs import setup_logger
from nowplaying.mpris import MPRIS_PREFIX, friendly_name
from nowplaying.state import TrackCell
from nowplaying.supervisor import Supervisor

_BOLD = "\033[1m"
_DIM = "\033[2m"
_RESET = "\033[0m"

log = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nowplaying",
        description="Show the track playing in the active MPRIS2 media player.",
    )
    parser.add_argument(
        "--player",
        type=str,
        default=None,
        help="MPRIS2 bus name of the player to watch (e.g. org.mpris.MediaPlayer2.spotify "
        "or just spotify). Without it the active player is discovered every cycle.",
    )
    parser.add_argument(
        "--list-players",
        action="store_true",
        help="List available MPRIS2 players with their playback status and exit.",
    )
    parser.add_argument(
        "--pipe",
        action="store_true",
        help="Plain text mode: print 'title — artist' to stdout whenever it changes.",
    )
    parser.add_argument(
        "--interval",
        type=_positive_float,
        default=Settings.poll_interval,
        help="Seconds between polls of the player (default: %(default)s).",
    )
    parser.add_argument(
        "--call-timeout",
        type=_positive_float,
        default=Settings.call_timeout,
        help="Timeout in seconds for each bus call (default: %(default)s).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more to stderr (-v for info, -vv for debug).",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        player=args.player,
        poll_interval=args.interval,
        call_timeout=args.call_timeout,
    )


def list_players(client: Any) -> int:
    try:
        conn = client.connect()
    except BusError as e:
        log.error("Cannot reach the session bus: %s", e)
        return 1
    try:
        players = probe(client, conn, MPRIS_PREFIX)
    except BusError as e:
        log.error("Listing players failed: %s", e)
        return 1
    finally:
        client.disconnect(conn)

    if not players:
        print("No MPRIS2 players found.")
        return 0
    print(f"{_BOLD}Available players:{_RESET}")
    for name, status in players:
        state = status.value if status is not None else "no status"
        print(f"  • {name} {_DIM}({friendly_name(name)}, {state}){_RESET}")
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    console_level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logger(log_file=args.log_file, console_level=console_level)

    # dbus is only needed once the bus is actually used.
    from nowplaying.bus import BusClient

    settings = settings_from_args(args)
    client = BusClient(timeout=settings.call_timeout)

    if args.list_players:
        sys.exit(list_players(client))

    cell = TrackCell()
    supervisor = Supervisor(client, cell, settings)
    supervisor.start()

    try:
        if args.pipe:
            display_pipe(cell, settings.refresh_interval)
        else:
            display_now_playing(cell, settings.refresh_interval)
    except KeyboardInterrupt:
        pass
    finally:
        supervisor.stop(timeout=settings.call_timeout + 1)
    print(f"{_DIM}Bye!{_RESET}", file=sys.stderr)


if __name__ == "__main__":
    main()
