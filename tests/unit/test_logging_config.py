"""Tests for logging configuration."""

from pathlib import Path

from loguru import logger

from blocknotes.logging_config import configure_logging


def test_log_file_receives_debug_messages(tmp_path: Path) -> None:
    log_file = tmp_path / "blocknotes.log"
    configure_logging(log_file=log_file)
    try:
        logger.debug("refused to remove row {}", 3)
    finally:
        logger.remove()
    assert "refused to remove row 3" in log_file.read_text()
