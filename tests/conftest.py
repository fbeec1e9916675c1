"""Shared pytest fixtures."""

from __future__ import annotations

import logging

import pytest

from fakes import FakeClient
from nowplaying.logs import LOGGER_NAME


@pytest.fixture(autouse=True)
def _propagate_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let caplog see package records even after setup_logger() ran."""
    monkeypatch.setattr(logging.getLogger(LOGGER_NAME), "propagate", True)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()
