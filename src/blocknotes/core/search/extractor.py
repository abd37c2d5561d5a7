"""Full-text extraction of notes for substring search.

Fragments are collected in ascending order at every level and joined with
single spaces, so the same tree always yields the same string.
"""

from collections.abc import Iterable

from loguru import logger

from blocknotes.models.blocks import (
    AccordionData,
    Block,
    BookmarkData,
    CodeData,
    ColumnData,
    FilePathData,
    ImageData,
    ListData,
    QuoteData,
    ReminderData,
    TextData,
)
from blocknotes.models.note import Note
from blocknotes.models.table import TableData


def _join(parts: Iterable[str]) -> str:
    return " ".join(p for p in parts if p)


class TextExtractor:
    """Flattens block trees into search strings."""

    def extract_block(self, block: Block) -> str:
        """Searchable text of one block and everything nested in it."""
        return _join(self._block_fragments(block))

    def extract_note(self, note: Note) -> str:
        """Title, category, tag names, then every top-level block in order."""
        parts: list[str] = [note.title]
        if note.category:
            parts.append(note.category.name)
        parts.extend(tag.name for tag in note.tags)
        parts.extend(self.extract_block(b) for b in note.sorted_blocks())
        return _join(parts)

    def matches(self, note: Note, query: str) -> bool:
        """Case-insensitive substring match against the note's text.

        An empty or blank query matches every note.
        """
        needle = query.strip().casefold()
        if not needle:
            return True
        return needle in self.extract_note(note).casefold()

    def preview_text(self, note: Note) -> str:
        """Plain text of the top-level text blocks, in order."""
        return _join(
            b.payload.text.plain_text()
            for b in note.sorted_blocks()
            if isinstance(b.payload, TextData)
        )

    def _block_fragments(self, block: Block) -> list[str]:
        payload = block.payload
        match payload:
            case None:
                logger.warning("Block {} ({}) has no payload, skipping", block.id, block.type)
                return []
            case TextData() | QuoteData():
                return [payload.text.plain_text()]
            case TableData():
                return [payload.title, *(cell.content for cell in payload.iter_cells())]
            case CodeData():
                return [payload.code]
            case ListData():
                return [payload.title or "", *(i.text.plain_text() for i in payload.sorted_items())]
            case AccordionData():
                return [
                    payload.heading.plain_text(),
                    *(self.extract_block(b) for b in payload.sorted_blocks()),
                ]
            case ColumnData():
                return [
                    self.extract_block(b)
                    for column in payload.sorted_columns()
                    for b in column.sorted_blocks()
                ]
            case BookmarkData():
                return [payload.title or "", payload.description or "", payload.url]
            case FilePathData():
                return [payload.path, payload.display_name or ""]
            case ReminderData():
                return [payload.title]
            case ImageData():
                return []
        return []


def search_notes(
    notes: Iterable[Note],
    query: str,
    *,
    extractor: TextExtractor | None = None,
) -> list[Note]:
    """Return the notes whose extracted text contains ``query``.

    Pinned notes come first, then most recently updated.
    """
    extractor = extractor or TextExtractor()
    hits = [n for n in notes if extractor.matches(n, query)]
    return sorted(hits, key=lambda n: (not n.is_pinned, -n.updated_at.timestamp()))
