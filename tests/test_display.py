"""Tests for terminal frame rendering."""

from __future__ import annotations

from nowplaying.display import build_frame
from nowplaying.state import TrackRecord


def _text(rows: list[str]) -> str:
    return "\n".join(rows)


def test_frame_shows_track() -> None:
    rows = build_frame(TrackRecord("Song A", "Artist A"), 40, 10)
    assert len(rows) == 10
    assert "Now Playing" in rows[0]
    assert "Song A" in _text(rows)
    assert "Artist A" in _text(rows)
    assert "Nothing playing." not in _text(rows)


def test_frame_without_track() -> None:
    rows = build_frame(None, 40, 10)
    assert len(rows) == 10
    assert "Nothing playing." in _text(rows)


def test_frame_truncates_to_width() -> None:
    rows = build_frame(TrackRecord("x" * 100, "y"), 20, 6)
    assert "x" * 20 in _text(rows)
    assert "x" * 21 not in _text(rows)


def test_tiny_terminal() -> None:
    assert len(build_frame(TrackRecord("a", "b"), 10, 1)) == 1
