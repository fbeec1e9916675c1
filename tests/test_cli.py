"""Tests for argument parsing and player listing."""

from __future__ import annotations

import pytest

from fakes import FakeClient
from nowplaying.cli import build_parser, list_players, settings_from_args
from nowplaying.config import Settings
from nowplaying.errors import BusConnectError, PropertyReadError

P = "org.mpris.MediaPlayer2."


def test_defaults() -> None:
    settings = settings_from_args(build_parser().parse_args([]))
    assert settings == Settings()


def test_player_and_intervals() -> None:
    args = build_parser().parse_args(
        ["--player", "spotify", "--interval", "0.25", "--call-timeout", "5"]
    )
    settings = settings_from_args(args)
    assert settings.player == "spotify"
    assert settings.poll_interval == 0.25
    assert settings.call_timeout == 5.0


@pytest.mark.parametrize("value", ["0", "-1", "soon"])
def test_rejects_bad_interval(value: str) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--interval", value])


def test_list_players(client: FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    client.add(P + "vlc.instance7", "Playing")
    client.add(P + "spotify", PropertyReadError(P + "spotify", "PlaybackStatus"))

    assert list_players(client) == 0

    out = capsys.readouterr().out
    assert P + "vlc.instance7" in out
    assert "Vlc, Playing" in out
    assert "Spotify, no status" in out
    assert client.connections[0].closed


def test_list_players_none(client: FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    assert list_players(client) == 0
    assert "No MPRIS2 players found." in capsys.readouterr().out


def test_list_players_without_bus(client: FakeClient) -> None:
    client.connect_error = BusConnectError("no bus")
    assert list_players(client) == 1
