"""Logging configuration for blocknotes."""

import sys
from pathlib import Path

from loguru import logger


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Log to stderr at INFO (DEBUG when verbose), and optionally to a file.

    The file sink always records DEBUG so sweeps and refused edits can be
    inspected after the fact.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
    if log_file is not None:
        logger.add(log_file, level="DEBUG", rotation="1 MB", retention=3)
