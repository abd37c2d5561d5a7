"""Block-tree notes: content model, duplication, search and undo history."""

from blocknotes.core.copy.cloner import BlockCloner
from blocknotes.core.database.store import NoteStore
from blocknotes.core.history.undo import UndoManager
from blocknotes.core.search.extractor import TextExtractor
from blocknotes.models.blocks import Block
from blocknotes.models.note import Note
from blocknotes.models.table import TableData
from blocknotes.protocols import StoreProtocol

__all__ = [
    "Block",
    "BlockCloner",
    "Note",
    "NoteStore",
    "StoreProtocol",
    "TableData",
    "TextExtractor",
    "UndoManager",
]
