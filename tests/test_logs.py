"""Tests for logger setup."""

from __future__ import annotations

import logging
from pathlib import Path

from nowplaying.logs import LOGGER_NAME, setup_logger


def test_file_handler_receives_debug(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "nowplaying.log"
    logger = setup_logger(log_file=log_file)
    logging.getLogger(f"{LOGGER_NAME}.supervisor").debug("connecting -> discovering")
    for handler in logger.handlers:
        handler.flush()

    assert "connecting -> discovering" in log_file.read_text(encoding="utf-8")
    setup_logger()


def test_setup_is_idempotent() -> None:
    setup_logger()
    logger = setup_logger(console_level=logging.INFO)
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.INFO
