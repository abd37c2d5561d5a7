"""Configuration constants for blocknotes."""

import os
from pathlib import Path

# Table grid defaults. Size arrays are padded with these values.
DEFAULT_COLUMN_WIDTH: float = 150.0
DEFAULT_ROW_HEIGHT: float = 36.0
MIN_COLUMN_WIDTH: float = 40.0
MIN_ROW_HEIGHT: float = 20.0
DEFAULT_TABLE_ROWS: int = 3
DEFAULT_TABLE_COLUMNS: int = 3

# Undo history cap (entries on the undo stack).
UNDO_HISTORY_LIMIT: int = 50

# Retention: temp notes expire after this many hours, deleted notes are
# purged this many days after they were moved to deleted.
TEMP_DURATION_HOURS: int = 24
PURGE_AFTER_DAYS: int = 30

# Directory with data. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/blocknotes").expanduser(),
    Path("~/.blocknotes").expanduser(),
    Path("~/.config/blocknotes").expanduser(),
]

DATABASE_FILENAME: str = "notes.db"

DATA_DIR_ENV: str = "BLOCKNOTES_DATA_DIR"


def resolve_data_directory() -> Path:
    """Return the data directory.

    ``$BLOCKNOTES_DATA_DIR`` wins; otherwise the first existing candidate in
    DATA_DIRECTORIES, falling back to the first candidate.
    """
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
