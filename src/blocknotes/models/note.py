"""Note aggregate: metadata plus the ordered top-level blocks."""

from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from blocknotes.models.blocks import Block, BlockContainer
from blocknotes.models.enums import NoteStatus
from blocknotes.models.ids import new_id, utc_now

__all__ = ["Category", "Note", "NoteStatus", "Tag"]

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class Category:
    name: str
    hex_color: str = "8E8E93"


@dataclass(frozen=True)
class Tag:
    name: str
    hex_color: str = "007AFF"


@dataclass(eq=False)
class Note(BlockContainer):
    """A note owning a forest of blocks.

    ``moved_to_deleted_at`` is set exactly when ``status`` is DELETED;
    ``repair`` restores that invariant on records that break it.
    """

    title: str = ""
    status: NoteStatus = NoteStatus.SAVED
    is_pinned: bool = False
    category: Category | None = None
    tags: list[Tag] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    moved_to_deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        for block in self.blocks:
            block.parent = None

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else UNCATEGORIZED

    def touch(self, *, now: datetime | None = None) -> None:
        self.updated_at = now or utc_now()

    def mark_deleted(self, *, now: datetime | None = None) -> None:
        self.status = NoteStatus.DELETED
        self.moved_to_deleted_at = now or utc_now()

    def restore(self, *, status: NoteStatus = NoteStatus.SAVED) -> None:
        """Bring a deleted note back with the given status."""
        if status is NoteStatus.DELETED:
            msg = "Cannot restore a note into the deleted status"
            raise ValueError(msg)
        self.status = status
        self.moved_to_deleted_at = None

    def repair(self, *, now: datetime | None = None) -> bool:
        """Fix the deleted-timestamp invariant. Returns True if anything changed."""
        if self.status is NoteStatus.DELETED and self.moved_to_deleted_at is None:
            logger.debug("Note {} is deleted without a timestamp, setting it", self.id)
            self.moved_to_deleted_at = now or utc_now()
            return True
        if self.status is not NoteStatus.DELETED and self.moved_to_deleted_at is not None:
            logger.debug("Note {} is not deleted but has a deleted timestamp, clearing it", self.id)
            self.moved_to_deleted_at = None
            return True
        return False

    def has_tag(self, name: str) -> bool:
        return any(t.name == name for t in self.tags)
