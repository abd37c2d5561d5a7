"""Metadata records filled in by the metadata-fetch collaborator."""

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger


@dataclass(frozen=True)
class UrlMetadata:
    """Page metadata for a bookmark."""

    url: str
    title: str | None = None
    description: str | None = None
    favicon_url: str | None = None
    og_image_url: str | None = None


@dataclass(frozen=True)
class FileMetadata:
    """Cached filesystem facts for a file link."""

    path: str
    file_size: int | None = None
    modified_at: datetime | None = None
    is_directory: bool = False


def stat_file(path: str | Path) -> FileMetadata | None:
    """Read size, modification time and kind of a local path.

    Returns None if the path does not exist or cannot be read; file metadata
    is optional and a missing file is not an error.
    """
    p = Path(path).expanduser()
    try:
        st = p.stat()
    except OSError as e:
        logger.debug("Cannot stat {}: {}", p, e)
        return None
    return FileMetadata(
        path=os.fspath(p),
        file_size=st.st_size,
        modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        is_directory=p.is_dir(),
    )
