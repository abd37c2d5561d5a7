"""Shared test fixtures."""

import sqlite3

import pytest

from blocknotes.core.database.schema import create_schema
from blocknotes.core.database.store import NoteStore
from blocknotes.models.enums import NoteStatus
from blocknotes.models.note import Note
from tests.unit.fakes import FakeStore
from tests.unit.samples import T0, make_sample_note, make_text


@pytest.fixture
def sample_note() -> Note:
    return make_sample_note()


@pytest.fixture
def conn() -> sqlite3.Connection:
    """In-memory database with the schema in place."""
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    return connection


@pytest.fixture
def store(conn: sqlite3.Connection) -> NoteStore:
    return NoteStore(conn)


@pytest.fixture
def populated_store(store: NoteStore, sample_note: Note) -> NoteStore:
    """Store holding the sample note, a pinned note, a temp note and a deleted note."""
    pinned = Note(title="Shopping", is_pinned=True, created_at=T0, updated_at=T0)
    pinned.append_block(make_text("milk and eggs"))
    temp = Note(title="Scratch", status=NoteStatus.TEMP, created_at=T0, updated_at=T0)
    temp.append_block(make_text("python snippet"))
    deleted = Note(title="Old python notes", created_at=T0, updated_at=T0)
    deleted.mark_deleted(now=T0)
    for note in (sample_note, pinned, temp, deleted):
        store.insert(note)
    assert store.save()
    return store


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()
