"""Tests for full-text extraction and note search."""

from datetime import timedelta

from blocknotes.core.search.extractor import TextExtractor, search_notes
from blocknotes.models.blocks import (
    AccordionData,
    Block,
    CodeData,
    ColumnData,
    FilePathData,
    ImageData,
    ListData,
    QuoteData,
)
from blocknotes.models.enums import BlockType
from blocknotes.models.note import Note
from blocknotes.models.rich_text import RichText
from blocknotes.models.table import TableData
from tests.unit.samples import T0, make_text


def test_accordion_list_order_is_preserved() -> None:
    items = ListData()
    items.add_item("a")
    items.add_item("b")
    accordion = AccordionData(heading=RichText.of("Heading"))
    accordion.append_block(Block.of(items))
    note = Note()
    note.append_block(Block.of(accordion))

    text = TextExtractor().extract_note(note)
    assert text.index("Heading") < text.index("a") < text.index("b")


def test_note_metadata_comes_first(sample_note: Note) -> None:
    text = TextExtractor().extract_note(sample_note)
    assert text.startswith("Project plan Work planning Intro")


def test_sample_note_full_extraction(sample_note: Note) -> None:
    text = TextExtractor().extract_note(sample_note)
    assert text == (
        "Project plan Work planning Intro Budget Item 42 Details Steps a b "
        "left side right side Example https://example.com/page Call Bob"
    )


def test_extraction_is_deterministic(sample_note: Note) -> None:
    extractor = TextExtractor()
    assert extractor.extract_note(sample_note) == extractor.extract_note(sample_note)


def test_blocks_are_visited_by_order_index_not_insertion() -> None:
    note = Note(blocks=[make_text("second", order_index=5), make_text("first", order_index=1)])
    assert TextExtractor().extract_note(note) == "first second"


def test_columns_visited_in_column_order() -> None:
    data = ColumnData.with_columns(2)
    left, right = data.sorted_columns()
    left.order_index, right.order_index = 1, 0
    left.append_block(make_text("L"))
    right.append_block(make_text("R"))
    assert TextExtractor().extract_block(Block.of(data)) == "R L"


def test_leaf_variants() -> None:
    extractor = TextExtractor()
    assert extractor.extract_block(Block.of(CodeData(code="print(1)"))) == "print(1)"
    assert extractor.extract_block(Block.of(QuoteData(text=RichText.of("q")))) == "q"
    assert extractor.extract_block(Block.of(ImageData(url="https://x/y.png"))) == ""
    path = FilePathData(path="/a/b.txt", display_name="B")
    assert extractor.extract_block(Block.of(path)) == "/a/b.txt B"


def test_table_title_and_cells() -> None:
    table = TableData(title="T")
    table.set_cell(2, 2, "z")
    table.set_cell(0, 1, "y")
    assert TextExtractor().extract_block(Block.of(table)) == "T y z"


def test_missing_payload_emits_nothing_and_siblings_survive() -> None:
    note = Note()
    note.append_block(Block(type=BlockType.LIST, payload=None))
    note.append_block(make_text("kept"))
    assert TextExtractor().extract_note(note) == "kept"


def test_matches_is_case_insensitive_substring(sample_note: Note) -> None:
    extractor = TextExtractor()
    assert extractor.matches(sample_note, "RIGHT SI")
    assert extractor.matches(sample_note, "budget item")
    assert not extractor.matches(sample_note, "nowhere")
    assert extractor.matches(sample_note, "   ")


def test_preview_uses_top_level_text_blocks(sample_note: Note) -> None:
    assert TextExtractor().preview_text(sample_note) == "Intro"


def test_search_notes_orders_pinned_then_recent() -> None:
    old = Note(title="python old", updated_at=T0)
    new = Note(title="python new", updated_at=T0 + timedelta(days=1))
    pinned = Note(title="python pinned", is_pinned=True, updated_at=T0 - timedelta(days=5))
    other = Note(title="rust")
    result = search_notes([old, new, other, pinned], "Python")
    assert [n.title for n in result] == ["python pinned", "python new", "python old"]
