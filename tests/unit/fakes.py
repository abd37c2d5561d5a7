"""Fake implementations for testing code that talks to a note store."""

from blocknotes.models.note import Note, NoteStatus


class FakeStore:
    """In-memory fake for NoteStore.

    Holds notes in a dict, applies staged changes on ``save`` and records
    every call for assertions. Set ``fail_saves`` to make ``save`` report
    failure without applying anything.
    """

    def __init__(self, notes: list[Note] | None = None) -> None:
        self.notes: dict[str, Note] = {n.id: n for n in notes or []}
        self.staged: dict[str, Note] = {}
        self.deleted: dict[str, Note] = {}
        self.calls: list[str] = []
        self.fail_saves = False

    def insert(self, note: Note) -> None:
        self.calls.append("insert")
        self.deleted.pop(note.id, None)
        self.staged[note.id] = note

    def delete(self, note: Note) -> None:
        self.calls.append("delete")
        self.staged.pop(note.id, None)
        self.deleted[note.id] = note

    def save(self) -> bool:
        self.calls.append("save")
        if self.fail_saves:
            return False
        for note_id in self.deleted:
            self.notes.pop(note_id, None)
        self.notes.update(self.staged)
        self.staged.clear()
        self.deleted.clear()
        return True

    def list_notes(
        self, *, status: NoteStatus | None = None, repair: bool = True
    ) -> list[Note]:
        return [n for n in self.notes.values() if status is None or n.status is status]
