"""Tests for block payloads and the block node."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from blocknotes.models.blocks import (
    AccordionData,
    Block,
    BookmarkData,
    Column,
    ColumnData,
    FilePathData,
    ListData,
    ParentRef,
    QuoteData,
    TextData,
)
from blocknotes.models.enums import BlockType, CodeLanguage, HeadingLevel, ListType, NoteStatus
from blocknotes.models.metadata import FileMetadata, UrlMetadata, stat_file
from blocknotes.models.rich_text import RichText
from blocknotes.models.table import TableData


def test_block_of_takes_tag_from_payload() -> None:
    block = Block.of(TableData())
    assert block.type is BlockType.TABLE
    assert block.parent is None


def test_block_rejects_mismatched_payload() -> None:
    with pytest.raises(ValueError, match="quote"):
        Block(type=BlockType.QUOTE, payload=TextData())


def test_block_rejects_mismatched_payload_assignment() -> None:
    block = Block.of(TextData())
    with pytest.raises(ValueError, match="TableData"):
        block.payload = TableData()
    assert isinstance(block.payload, TextData)
    with pytest.raises(ValueError, match="quote"):
        block.type = BlockType.QUOTE
    assert block.type is BlockType.TEXT


def test_block_accepts_matching_payload_assignment() -> None:
    block = Block.of(TextData())
    replacement = TextData()
    block.payload = replacement
    block.payload = None
    block.payload = replacement
    assert block.payload is replacement


def test_block_allows_missing_payload() -> None:
    block = Block(type=BlockType.CODE, payload=None)
    assert block.display_name == "Code Block"


@pytest.mark.parametrize(
    ("payload", "name"),
    [
        (TextData(), "Text Block"),
        (QuoteData(), "Quote"),
        (FilePathData(), "File Link"),
        (ListData(list_type=ListType.CHECKBOX), "Checkbox List"),
        (ListData(list_type=ListType.NUMBERED), "Numbered List"),
    ],
)
def test_display_name_depends_on_tag_and_list_kind(payload: object, name: str) -> None:
    assert Block.of(payload).display_name == name  # type: ignore[arg-type]


def test_accordion_sets_back_reference_on_children() -> None:
    child = Block.of(TextData())
    accordion = AccordionData(blocks=[child])
    assert child.parent == ParentRef(kind="accordion", id=accordion.id)


def test_container_append_assigns_next_order_index() -> None:
    accordion = AccordionData()
    first = accordion.append_block(Block.of(TextData()))
    second = accordion.append_block(Block.of(TextData()))
    assert (first.order_index, second.order_index) == (0, 1)
    assert second.parent == accordion.child_ref()


def test_sorted_blocks_orders_by_index_with_gaps() -> None:
    a = Block.of(TextData(text=RichText.of("a")), order_index=7)
    b = Block.of(TextData(text=RichText.of("b")), order_index=2)
    column = Column(blocks=[a, b])
    assert column.sorted_blocks() == [b, a]
    assert column.next_order_index() == 8


def test_detach_unknown_block_raises_key_error() -> None:
    with pytest.raises(KeyError):
        AccordionData().detach("missing")


def test_detach_clears_back_reference() -> None:
    column = Column()
    block = column.append_block(Block.of(TextData()))
    assert column.detach(block.id) is block
    assert block.parent is None
    assert column.blocks == []


def test_column_data_factory_creates_equal_columns() -> None:
    data = ColumnData.with_columns(3)
    assert data.column_count == 3
    assert [c.order_index for c in data.sorted_columns()] == [0, 1, 2]
    assert {c.width_ratio for c in data.columns} == {1.0}
    assert all(c.column_data_id == data.id for c in data.columns)


def test_list_items_keep_order_and_owner() -> None:
    data = ListData()
    data.add_item("one")
    data.add_item(RichText.of("two"), is_checked=True)
    items = data.sorted_items()
    assert [i.text.plain_text() for i in items] == ["one", "two"]
    assert items[1].is_checked
    assert all(i.list_id == data.id for i in items)


def test_bookmark_display_title_fallbacks() -> None:
    assert BookmarkData(url="https://docs.python.org/3/", title="Docs").display_title == "Docs"
    assert BookmarkData(url="https://docs.python.org/3/").display_title == "docs.python.org"
    assert BookmarkData(url="not a url").display_title == "not a url"


def test_bookmark_update_copies_metadata() -> None:
    bookmark = BookmarkData(url="https://example.com")
    now = datetime(2024, 5, 1, tzinfo=UTC)
    bookmark.update(
        UrlMetadata(url="https://example.com", title="Ex", og_image_url="https://example.com/i.png"),
        now=now,
    )
    assert bookmark.title == "Ex"
    assert bookmark.og_image_url == "https://example.com/i.png"
    assert bookmark.fetched_at == now


def test_file_path_properties() -> None:
    data = FilePathData(path="/home/me/Report.PDF")
    assert data.display_title == "Report.PDF"
    assert data.file_extension == "pdf"
    assert data.parent_directory == "/home/me"
    assert FilePathData().display_title == "Unknown File"


def test_file_path_from_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("hello")
    data = FilePathData.from_path(str(target))
    assert data.exists()
    assert data.display_name == "notes.txt"
    assert data.file_size == 5
    assert data.is_directory is False
    assert data.fetched_at is not None


def test_file_path_refresh_missing_file_changes_nothing(tmp_path: Path) -> None:
    data = FilePathData(path=str(tmp_path / "gone.txt"), file_size=10)
    assert data.refresh() is False
    assert data.file_size == 10
    assert not data.exists()


def test_file_path_update_copies_metadata() -> None:
    data = FilePathData(path="/tmp/x")
    data.update(FileMetadata(path="/tmp/x", file_size=3, is_directory=True))
    assert data.file_size == 3
    assert data.is_directory


def test_stat_file_reports_directories(tmp_path: Path) -> None:
    metadata = stat_file(tmp_path)
    assert metadata is not None
    assert metadata.is_directory
    assert stat_file(tmp_path / "missing") is None


def test_rich_text_lengths() -> None:
    text = RichText(plain="héllo", data=b"\x00\x01\x02")
    assert len(text) == 5
    assert text.byte_length == 3
    assert RichText.of("  ").is_blank()


@pytest.mark.parametrize(
    ("enum", "raw", "expected"),
    [
        (BlockType, "bogus", BlockType.TEXT),
        (BlockType, None, BlockType.TEXT),
        (BlockType, "filePath", BlockType.FILE_PATH),
        (ListType, "stars", ListType.BULLET),
        (HeadingLevel, "h9", HeadingLevel.H1),
        (CodeLanguage, "cobol", CodeLanguage.PLAIN_TEXT),
        (NoteStatus, "archived", NoteStatus.SAVED),
    ],
)
def test_enum_parse_falls_back(enum: type, raw: str | None, expected: object) -> None:
    assert enum.parse(raw) is expected
