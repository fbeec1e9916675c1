"""Tests for the shared track cell."""

from __future__ import annotations

import dataclasses
import threading

import pytest

from nowplaying.state import TrackCell, TrackRecord


def test_cell_starts_empty() -> None:
    assert TrackCell().get() is None


def test_set_and_clear() -> None:
    cell = TrackCell()
    record = TrackRecord(title="Song A", artist="Artist A")
    cell.set(record)
    assert cell.get() is record
    cell.clear()
    assert cell.get() is None


def test_record_is_immutable() -> None:
    record = TrackRecord(title="Song A", artist="Artist A")
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.title = "Song B"  # type: ignore[misc]


def test_record_str() -> None:
    assert str(TrackRecord("Song A", "Artist A")) == "Song A — Artist A"


def test_concurrent_reads_see_whole_records() -> None:
    cell = TrackCell()
    records = [TrackRecord(title=f"title {i}", artist=f"artist {i}") for i in range(200)]
    stop = threading.Event()
    bad: list[object] = []

    def reader() -> None:
        while not stop.is_set():
            seen = cell.get()
            if seen is None:
                continue
            if seen.title.split()[-1] != seen.artist.split()[-1]:
                bad.append(seen)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    try:
        for _ in range(20):
            for record in records:
                cell.set(record)
            cell.clear()
    finally:
        stop.set()
        for t in readers:
            t.join()

    assert bad == []
