"""Protocols for the collaborators the note model is handed."""

from typing import Protocol, runtime_checkable

from blocknotes.models.note import Note, NoteStatus


@runtime_checkable
class StoreProtocol(Protocol):
    """Persistent store for notes.

    Deleting a note drops everything it owns. ``save`` reports failure by
    returning False; callers are free to ignore it.
    """

    def insert(self, note: Note) -> None:
        """Stage a new or changed note for the next save."""
        ...

    def delete(self, note: Note) -> None:
        """Stage a note (and its whole block tree) for deletion."""
        ...

    def save(self) -> bool:
        """Commit staged changes. Returns False if the commit failed."""
        ...

    def list_notes(
        self, *, status: NoteStatus | None = None, repair: bool = True
    ) -> list[Note]:
        """Return stored notes, optionally filtered by status.

        ``repair=False`` skips repair-on-read so the caller can repair with
        its own clock.
        """
        ...
