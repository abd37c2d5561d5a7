"""Tests for the note aggregate."""

from datetime import UTC, datetime

import pytest

from blocknotes.models.enums import NoteStatus
from blocknotes.models.note import UNCATEGORIZED, Category, Note, Tag

NOW = datetime(2024, 3, 1, tzinfo=UTC)


def test_category_name_defaults_to_uncategorized() -> None:
    assert Note().category_name == UNCATEGORIZED
    assert Note(category=Category(name="Home")).category_name == "Home"


def test_tag_default_color() -> None:
    assert Tag(name="x").hex_color == "007AFF"


def test_mark_deleted_sets_timestamp() -> None:
    note = Note()
    note.mark_deleted(now=NOW)
    assert note.status is NoteStatus.DELETED
    assert note.moved_to_deleted_at == NOW


def test_restore_clears_timestamp() -> None:
    note = Note()
    note.mark_deleted(now=NOW)
    note.restore(status=NoteStatus.TEMP)
    assert note.status is NoteStatus.TEMP
    assert note.moved_to_deleted_at is None


def test_restore_into_deleted_raises() -> None:
    with pytest.raises(ValueError):
        Note().restore(status=NoteStatus.DELETED)


def test_repair_sets_missing_deleted_timestamp() -> None:
    note = Note(status=NoteStatus.DELETED)
    assert note.repair(now=NOW) is True
    assert note.moved_to_deleted_at == NOW


def test_repair_clears_stray_timestamp() -> None:
    note = Note(status=NoteStatus.SAVED, moved_to_deleted_at=NOW)
    assert note.repair() is True
    assert note.moved_to_deleted_at is None


def test_repair_on_consistent_note_is_noop() -> None:
    note = Note()
    note.mark_deleted(now=NOW)
    assert note.repair() is False
    assert note.moved_to_deleted_at == NOW


def test_has_tag() -> None:
    note = Note(tags=[Tag(name="work")])
    assert note.has_tag("work")
    assert not note.has_tag("home")


def test_touch_updates_timestamp() -> None:
    note = Note(updated_at=NOW)
    note.touch()
    assert note.updated_at > NOW
