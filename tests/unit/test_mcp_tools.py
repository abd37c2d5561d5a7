"""Tests for MCP tool core functions."""

from blocknotes.core.database.store import NoteStore
from blocknotes.mcp.server import (
    notes_duplicate_block,
    notes_list,
    notes_read,
    notes_search,
)
from blocknotes.models.enums import BlockType
from blocknotes.models.note import Note


def test_notes_search_returns_results_with_metadata(populated_store: NoteStore) -> None:
    result = notes_search(populated_store, query="budget")
    assert result["count"] == 1
    assert result["total"] == 1
    first = result["results"][0]
    assert first["title"] == "Project plan"
    assert first["category"] == "Work"
    assert first["tags"] == ["planning"]
    assert first["preview"] == "Intro"
    assert result["has_more"] is False


def test_notes_search_empty_query_is_error(populated_store: NoteStore) -> None:
    result = notes_search(populated_store, query="  ")
    assert "error" in result
    assert result["results"] == []


def test_notes_search_paginates(populated_store: NoteStore) -> None:
    result = notes_search(populated_store, query="o", limit=1, include_deleted=True)
    assert result["count"] == 1
    assert result["has_more"] is True
    assert result["next_offset"] == 1


def test_notes_list_all_and_by_status(populated_store: NoteStore) -> None:
    assert notes_list(populated_store)["count"] == 4
    deleted = notes_list(populated_store, status="deleted")
    assert [n["title"] for n in deleted["notes"]] == ["Old python notes"]


def test_notes_list_unknown_status_is_error(populated_store: NoteStore) -> None:
    assert "error" in notes_list(populated_store, status="archived")


def test_notes_read_outline(populated_store: NoteStore, sample_note: Note) -> None:
    result = notes_read(populated_store, note_id=sample_note.id)
    assert "error" not in result
    blocks = result["blocks"]
    assert [b["type"] for b in blocks] == ["text", "table", "accordion", "bookmark", "reminder"]
    accordion = blocks[2]
    assert accordion["heading"] == "Details"
    assert accordion["blocks"][0]["text"] == "Steps a b"
    columns = accordion["blocks"][1]["columns"]
    assert [c["blocks"][0]["text"] for c in columns] == ["left side", "right side"]


def test_notes_read_json(populated_store: NoteStore, sample_note: Note) -> None:
    result = notes_read(populated_store, note_id=sample_note.id, output_format="json")
    assert result["record"]["id"] == sample_note.id


def test_notes_read_single_block_with_breadcrumbs(
    populated_store: NoteStore, sample_note: Note
) -> None:
    accordion = next(b for b in sample_note.blocks if b.type is BlockType.ACCORDION)
    list_block = accordion.payload.blocks[0]
    result = notes_read(populated_store, note_id=sample_note.id, block_id=list_block.id)
    assert result["block"]["text"] == "Steps a b"
    assert [c["name"] for c in result["breadcrumbs"]] == ["Accordion"]


def test_notes_read_missing(populated_store: NoteStore, sample_note: Note) -> None:
    assert "error" in notes_read(populated_store, note_id="missing")
    assert "error" in notes_read(populated_store, note_id=sample_note.id, block_id="missing")


def test_notes_duplicate_block(populated_store: NoteStore, sample_note: Note) -> None:
    table_block = next(b for b in sample_note.blocks if b.type is BlockType.TABLE)
    result = notes_duplicate_block(
        populated_store, note_id=sample_note.id, block_id=table_block.id
    )
    assert "error" not in result
    assert result["order_index"] == table_block.order_index + 1

    reread = notes_read(populated_store, note_id=sample_note.id)
    types = [b["type"] for b in reread["blocks"]]
    assert types[:3] == ["text", "table", "table"]


def test_notes_duplicate_block_missing(populated_store: NoteStore, sample_note: Note) -> None:
    result = notes_duplicate_block(populated_store, note_id=sample_note.id, block_id="nope")
    assert "error" in result
    assert "error" in notes_duplicate_block(populated_store, note_id="nope", block_id="x")
