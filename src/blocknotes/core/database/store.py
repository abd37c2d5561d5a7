"""SQLite-backed note store with staged writes."""

import json
import sqlite3
from pathlib import Path

from loguru import logger

from blocknotes.core.database.codec import note_from_dict, note_to_dict
from blocknotes.core.database.schema import migrate_schema
from blocknotes.core.search.extractor import TextExtractor
from blocknotes.models.note import Note, NoteStatus

_COLUMNS = "id, status, moved_to_deleted_at, body"
_ORDER = "ORDER BY is_pinned DESC, updated_at DESC"


def open_database(db_path: Path) -> sqlite3.Connection:
    """Connect to ``db_path``, creating parent directories and the schema as needed."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    migrate_schema(conn)
    return conn


class NoteStore:
    """Note persistence over one SQLite connection.

    ``insert`` and ``delete`` only stage changes; ``save`` writes them in a
    single transaction. Each note is stored as one encoded record together
    with its extracted search text, so deleting the row drops the whole
    block tree.

    Args:
        conn: Connection with the schema already in place.
        extractor: Text extractor used to build the search column.
    """

    def __init__(self, conn: sqlite3.Connection, *, extractor: TextExtractor | None = None) -> None:
        self._conn = conn
        self._extractor = extractor or TextExtractor()
        self._pending: dict[str, Note] = {}
        self._deleted: dict[str, Note] = {}

    @property
    def has_changes(self) -> bool:
        return bool(self._pending or self._deleted)

    def insert(self, note: Note) -> None:
        self._deleted.pop(note.id, None)
        self._pending[note.id] = note

    def delete(self, note: Note) -> None:
        self._pending.pop(note.id, None)
        self._deleted[note.id] = note

    def save(self) -> bool:
        """Write staged changes. On failure everything is rolled back and stays staged."""
        if not self.has_changes:
            return True
        try:
            self._conn.executemany(
                "DELETE FROM notes WHERE id = ?",
                [(note_id,) for note_id in self._deleted],
            )
            self._conn.executemany(
                """INSERT OR REPLACE INTO notes
                   (id, title, status, is_pinned, category, created_at, updated_at,
                    moved_to_deleted_at, body, search_text)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                [self._row(note) for note in self._pending.values()],
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            logger.exception(
                "Failed to save {} notes and {} deletions",
                len(self._pending), len(self._deleted),
            )
            return False
        logger.debug("Saved {} notes, deleted {}", len(self._pending), len(self._deleted))
        self._pending.clear()
        self._deleted.clear()
        return True

    def _row(self, note: Note) -> tuple:
        return (
            note.id,
            note.title,
            note.status.value,
            int(note.is_pinned),
            note.category.name if note.category else None,
            note.created_at.isoformat(),
            note.updated_at.isoformat(),
            note.moved_to_deleted_at.isoformat() if note.moved_to_deleted_at else None,
            json.dumps(note_to_dict(note)),
            self._extractor.extract_note(note).casefold(),
        )

    def _load(self, row: tuple, *, repair: bool = True) -> Note | None:
        note_id, status, moved_at, body = row
        try:
            note = note_from_dict(json.loads(body), repair=repair)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("Skipping unreadable note {}", note_id)
            return None
        stored_moved_at = note.moved_to_deleted_at.isoformat() if note.moved_to_deleted_at else None
        if repair and (note.status.value != status or stored_moved_at != moved_at):
            # Repaired while decoding; persist the fix with the next save.
            self.insert(note)
        return note

    def _load_all(self, rows: list[tuple], *, repair: bool = True) -> list[Note]:
        notes = (self._load(row, repair=repair) for row in rows)
        return [note for note in notes if note is not None]

    def get(self, note_id: str) -> Note | None:
        """Load one note, or None if it does not exist or cannot be read."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
        ).fetchone()
        return self._load(row) if row else None

    def list_notes(
        self, *, status: NoteStatus | None = None, repair: bool = True
    ) -> list[Note]:
        """Return stored notes, pinned first then most recently updated.

        With ``repair=False`` notes come back exactly as stored, leaving
        invariant repair (and its timestamp) to the caller.
        """
        if status is None:
            rows = self._conn.execute(f"SELECT {_COLUMNS} FROM notes {_ORDER}").fetchall()
        else:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM notes WHERE status = ? {_ORDER}", (status.value,)
            ).fetchall()
        return self._load_all(rows, repair=repair)

    def search(self, query: str, *, include_deleted: bool = False) -> list[Note]:
        """Case-insensitive substring search over each note's extracted text.

        A blank query returns every note.
        """
        where = ["1 = 1"]
        params: list[str] = []
        needle = query.strip().casefold()
        if needle:
            where.append("instr(search_text, ?) > 0")
            params.append(needle)
        if not include_deleted:
            where.append("status != ?")
            params.append(NoteStatus.DELETED.value)
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes WHERE {' AND '.join(where)} {_ORDER}",
            params,
        ).fetchall()
        return self._load_all(rows)

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
