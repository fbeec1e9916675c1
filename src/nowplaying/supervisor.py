"""
Session supervisor: keeps a player bound and the track cell current.

The loop is an explicit state machine. Each state has a handler that does
one unit of work and returns a ``Transition`` naming the next state, how long
to wait before entering it, and whether the published track must be cleared::

    DISCONNECTED -> CONNECTING -> DISCOVERING -> POLLING
         ^              |             |  ^          |
         +--------------+             |  +----------+
         ^                            |             |
         +----------- bus gone -------+-------------+

Every failure retreats to an earlier state; none ends the loop.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from nowplaying.config import Settings
from nowplaying.discovery import discover
from nowplaying.errors import BindError, BusConnectError, BusError, BusGoneError
from nowplaying.mpris import friendly_name, full_name
from nowplaying.poller import TrackPoller
from nowplaying.state import TrackCell


log = logging.getLogger(__name__)


class State(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    DISCOVERING = "discovering"
    POLLING = "polling"


@dataclass(frozen=True)
class Transition:
    target: State
    delay: float = 0.0
    clear: bool = False


class Supervisor:
    """Drive connect -> discover -> poll forever, publishing into *cell*."""

    def __init__(self, client: Any, cell: TrackCell, settings: Settings | None = None) -> None:
        self.client = client
        self.cell = cell
        self.settings = settings or Settings()
        self.state = State.DISCONNECTED
        self.poller = TrackPoller(cell)

        self._conn: Any = None
        self._player: Any = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        # Last failure message, so a repeating failure is logged once.
        self._last_failure: str | None = None
        self._watching: str | None = None

        self._handlers: dict[State, Callable[[], Transition]] = {
            State.DISCONNECTED: self._disconnected,
            State.CONNECTING: self._connecting,
            State.DISCOVERING: self._discovering,
            State.POLLING: self._polling,
        }

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(
            target=self.run, name="nowplaying-supervisor", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run(self) -> None:
        log.debug("Supervisor started")
        try:
            while not self._stop.is_set():
                try:
                    transition = self.step()
                except Exception:
                    log.exception("Supervisor failed while %s", self.state.value)
                    transition = self._recover()
                if transition.delay > 0:
                    self._stop.wait(transition.delay)
        finally:
            self._drop_connection()
            self.poller.reset()
            log.debug("Supervisor stopped")

    def step(self) -> Transition:
        """Run the current state's handler and apply its transition."""
        transition = self._handlers[self.state]()
        if transition.clear:
            self.poller.reset()
        if transition.target is not self.state:
            log.debug("%s -> %s", self.state.value, transition.target.value)
        self.state = transition.target
        return transition

    # ── State handlers ───────────────────────────────────────────────────────

    def _disconnected(self) -> Transition:
        self._drop_connection()
        return Transition(State.CONNECTING, clear=True)

    def _connecting(self) -> Transition:
        try:
            self._conn = self.client.connect()
        except BusConnectError as e:
            self._failure(f"Session bus unreachable: {e}")
            return Transition(State.DISCONNECTED, self.settings.connect_backoff, clear=True)
        log.info("Connected to the session bus")
        self._last_failure = None
        return Transition(State.DISCOVERING)

    def _discovering(self) -> Transition:
        s = self.settings
        try:
            if s.player is not None:
                candidate: str | None = full_name(s.player, s.prefix)
            else:
                candidate = discover(self.client, self._conn, s.prefix)
        except BusGoneError as e:
            self._failure(f"Bus connection lost during discovery: {e}")
            return Transition(State.DISCONNECTED, clear=True)
        except BusError as e:
            self._failure(f"Discovery failed: {e}")
            return Transition(State.DISCOVERING, s.discover_backoff, clear=True)

        if candidate is None:
            self._failure("No media player found")
            return Transition(State.DISCOVERING, s.discover_backoff, clear=True)

        try:
            self._player = self.client.bind(self._conn, candidate)
        except BusGoneError as e:
            self._failure(f"Bus connection lost while binding: {e}")
            return Transition(State.DISCONNECTED, clear=True)
        except BindError as e:
            self._failure(str(e))
            return Transition(State.DISCOVERING, s.bind_backoff, clear=True)

        if candidate != self._watching:
            log.info("Watching %s (%s)", friendly_name(candidate), candidate)
            self._watching = candidate
        return Transition(State.POLLING)

    def _polling(self) -> Transition:
        try:
            playing = self.poller.cycle(self._player)
        except BusGoneError as e:
            self._failure(f"Bus connection lost: {e}")
            self._player = None
            return Transition(State.DISCONNECTED, clear=True)
        except BusError as e:
            self._failure(f"Lost {self._player.service}: {e}")
            self._player = None
            return Transition(State.DISCOVERING, self.settings.poll_interval, clear=True)

        if not playing:
            self._player = None
            return Transition(State.DISCOVERING, self.settings.poll_interval, clear=True)
        self._last_failure = None
        return Transition(State.POLLING, self.settings.poll_interval)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _drop_connection(self) -> None:
        self._player = None
        if self._conn is not None:
            self.client.disconnect(self._conn)
            self._conn = None

    def _recover(self) -> Transition:
        self._drop_connection()
        self.poller.reset()
        self.state = State.DISCONNECTED
        return Transition(State.DISCONNECTED, self.settings.connect_backoff, clear=True)

    def _failure(self, message: str) -> None:
        if message != self._last_failure:
            log.warning(message)
            self._last_failure = message
        else:
            log.debug(message)
