"""Render the current track in the terminal using ANSI escape codes.

Text-only rendering with:
  • Synchronized output (\033[?2026h / l) for flicker-free updates
  • Differential updates — only changed lines redrawn
  • SIGWINCH for instant resize
  • Basic 3/4-bit ANSI colours (always respects terminal theme)
  • Raw terminal mode (no echo)

The display only ever reads the ``TrackCell``; it never touches the bus.
"""

from __future__ import annotations

import io
import os
import signal
import sys
import termios
import time
import tty

from nowplaying.state import TrackCell, TrackRecord

# ── ANSI escape helpers ──────────────────────────────────────────────────────

_ESC = "\033["
_RESET = f"{_ESC}0m"
_BOLD = f"{_ESC}1m"
_DIM = f"{_ESC}2m"

_HIDE_CURSOR = f"{_ESC}?25l"
_SHOW_CURSOR = f"{_ESC}?25h"
_CLEAR = f"{_ESC}2J{_ESC}H"
_EL = f"{_ESC}K"  # erase to end of line

_SYNC_START = "\033[?2026h"
_SYNC_END = "\033[?2026l"

_FG_MAGENTA = f"{_ESC}35m"
_FG_CYAN = f"{_ESC}36m"
_FG_BR_BLACK = f"{_ESC}90m"
_FG_BR_WHITE = f"{_ESC}97m"

DEFAULT_REFRESH = 0.5  # seconds between reads of the cell


# ── Terminal helpers ─────────────────────────────────────────────────────────

def _move(row: int, col: int) -> str:
    return f"{_ESC}{row};{col}H"


def _term_size() -> tuple[int, int]:
    """Return (columns, lines)."""
    try:
        sz = os.get_terminal_size()
        return sz.columns, sz.lines
    except OSError:
        return 80, 24


def _center(text: str, width: int) -> str:
    if len(text) >= width:
        return text[:width]
    return " " * ((width - len(text)) // 2) + text


# ── Frame builder ────────────────────────────────────────────────────────────

def build_frame(record: TrackRecord | None, w: int, h: int) -> list[str]:
    """Build one full-screen frame: a header and the track centred below it."""
    rows: list[str] = [
        f"{_BOLD}{_FG_MAGENTA}{_center('Now Playing', w)}{_RESET}{_EL}",
        f"{_EL}",
    ]

    if record is None:
        body = [f"{_DIM}{_FG_BR_BLACK}{_center('Nothing playing.', w)}{_RESET}{_EL}"]
    else:
        body = [
            f"{_BOLD}{_FG_BR_WHITE}{_center(record.title, w)}{_RESET}{_EL}",
            f"{_FG_CYAN}{_center(record.artist, w)}{_RESET}{_EL}",
        ]

    available = max(0, h - len(rows))
    top = max(0, (available - len(body)) // 2)
    rows.extend(f"{_EL}" for _ in range(top))
    rows.extend(body)

    while len(rows) < h:
        rows.append(f"{_EL}")

    return rows[:max(h, 0)]


# ── Differential writer ─────────────────────────────────────────────────────

def _write_diff(out, prev: list[str], cur: list[str], force: bool = False) -> None:
    buf = io.StringIO()
    buf.write(_SYNC_START)
    changed = False

    for row_idx, line in enumerate(cur):
        if force or row_idx >= len(prev) or prev[row_idx] != line:
            buf.write(_move(row_idx + 1, 1))
            buf.write(line)
            changed = True

    buf.write(_SYNC_END)

    if changed:
        out.write(buf.getvalue())
        out.flush()


# ── Pipe mode ────────────────────────────────────────────────────────────────

def display_pipe(cell: TrackCell, refresh: float = DEFAULT_REFRESH, out=None) -> None:
    """Print ``title — artist`` whenever the track changes; a blank line when cleared."""
    out = out or sys.stdout
    interrupted = False

    def _handler(sig, frame):
        nonlocal interrupted
        interrupted = True

    old_handler = signal.signal(signal.SIGINT, _handler)
    try:
        previous: TrackRecord | None = None
        first = True
        while not interrupted:
            record = cell.get()
            if first or record != previous:
                print(str(record) if record else "", file=out, flush=True)
                previous = record
                first = False
            time.sleep(refresh)
    finally:
        signal.signal(signal.SIGINT, old_handler)


# ── Main display loop ───────────────────────────────────────────────────────

def display_now_playing(cell: TrackCell, refresh: float = DEFAULT_REFRESH) -> None:
    interrupted = False
    needs_redraw = True

    def _int_handler(sig, frame):
        nonlocal interrupted
        interrupted = True

    def _winch_handler(sig, frame):
        nonlocal needs_redraw
        needs_redraw = True

    old_int = signal.signal(signal.SIGINT, _int_handler)
    old_winch = signal.signal(signal.SIGWINCH, _winch_handler)

    prev_frame: list[str] = []

    out = sys.stdout
    fd = sys.stdin.fileno()

    try:
        old_termios = termios.tcgetattr(fd)
        has_termios = True
    except termios.error:
        has_termios = False

    try:
        if has_termios:
            tty.setcbreak(fd)

        out.write(_HIDE_CURSOR)
        out.write(_CLEAR)
        out.flush()

        while not interrupted:
            w, h = _term_size()
            frame = build_frame(cell.get(), w, h)
            _write_diff(out, prev_frame, frame, needs_redraw)
            prev_frame = frame
            needs_redraw = False
            time.sleep(refresh)

    finally:
        out.write(_SHOW_CURSOR)
        out.write(_CLEAR)
        out.flush()
        if has_termios:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_termios)
        signal.signal(signal.SIGINT, old_int)
        signal.signal(signal.SIGWINCH, old_winch)
