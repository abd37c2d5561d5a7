"""Block tree: payload variants, the block node and its containers.

A block carries exactly one payload whose class matches the block's tag.
Containers (note, accordion, column) own their blocks; a block only keeps a
non-owning ``ParentRef`` naming the accordion or column it sits in.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from typing import ClassVar, Literal
from urllib.parse import urlparse

from blocknotes.models.enums import BlockType, CodeLanguage, HeadingLevel, ListType
from blocknotes.models.ids import new_id, utc_now
from blocknotes.models.metadata import FileMetadata, UrlMetadata, stat_file
from blocknotes.models.rich_text import RichText
from blocknotes.models.table import TableCell, TableData

__all__ = [
    "AccordionData",
    "Block",
    "BlockContainer",
    "BookmarkData",
    "CodeData",
    "Column",
    "ColumnData",
    "FilePathData",
    "ImageData",
    "ListData",
    "ListItem",
    "ParentRef",
    "Payload",
    "QuoteData",
    "ReminderData",
    "TableCell",
    "TableData",
    "TextData",
]


@dataclass(frozen=True)
class ParentRef:
    """Which accordion or column a nested block lives in (lookup only)."""

    kind: Literal["accordion", "column"]
    id: str


class BlockContainer:
    """Ordered, owning list of blocks.

    Sibling order is ascending ``order_index``. Indexes are unique among
    siblings but may have gaps, so always go through ``sorted_blocks``.
    """

    blocks: list["Block"]

    def child_ref(self) -> ParentRef | None:
        return None

    def sorted_blocks(self) -> list["Block"]:
        return sorted(self.blocks, key=lambda b: b.order_index)

    def next_order_index(self) -> int:
        return max((b.order_index for b in self.blocks), default=-1) + 1

    def adopt(self, block: "Block") -> "Block":
        """Take ownership of ``block`` keeping its order index."""
        block.parent = self.child_ref()
        self.blocks.append(block)
        return block

    def append_block(self, block: "Block") -> "Block":
        """Take ownership of ``block`` as the last sibling."""
        block.order_index = self.next_order_index()
        return self.adopt(block)

    def get_block(self, block_id: str) -> "Block | None":
        return next((b for b in self.blocks if b.id == block_id), None)

    def detach(self, block_id: str) -> "Block":
        """Remove a direct child and return it, with its subtree, unowned."""
        block = self.get_block(block_id)
        if block is None:
            raise KeyError(block_id)
        self.blocks.remove(block)
        block.parent = None
        return block


# --- Leaf payloads ---


@dataclass
class TextData:
    block_type: ClassVar[BlockType] = BlockType.TEXT

    text: RichText = field(default_factory=RichText)
    id: str = field(default_factory=new_id, compare=False)


@dataclass
class QuoteData:
    block_type: ClassVar[BlockType] = BlockType.QUOTE

    text: RichText = field(default_factory=RichText)
    id: str = field(default_factory=new_id, compare=False)


@dataclass
class CodeData:
    block_type: ClassVar[BlockType] = BlockType.CODE

    code: str = ""
    language: CodeLanguage = CodeLanguage.SWIFT
    show_line_numbers: bool = True
    theme: str = "default"
    id: str = field(default_factory=new_id, compare=False)


@dataclass
class ImageData:
    block_type: ClassVar[BlockType] = BlockType.IMAGE

    url: str = ""
    width: float | None = None
    height: float | None = None
    alt_text: str | None = None
    is_full_width: bool = False
    offset_x: float = 0.0
    offset_y: float = 0.0
    # 1.0 fits the frame, larger values zoom in
    scale: float = 1.0
    id: str = field(default_factory=new_id, compare=False)


@dataclass
class BookmarkData:
    block_type: ClassVar[BlockType] = BlockType.BOOKMARK

    url: str = ""
    title: str | None = None
    description: str | None = None
    favicon_url: str | None = None
    og_image_url: str | None = None
    fetched_at: datetime | None = None
    id: str = field(default_factory=new_id, compare=False)

    @property
    def display_title(self) -> str:
        """Title, else the URL's host, else the raw URL."""
        if self.title:
            return self.title
        host = urlparse(self.url).hostname
        return host or self.url

    def update(self, metadata: UrlMetadata, *, now: datetime | None = None) -> None:
        """Copy fetched page metadata into the bookmark."""
        self.title = metadata.title
        self.description = metadata.description
        self.favicon_url = metadata.favicon_url
        self.og_image_url = metadata.og_image_url
        self.fetched_at = now or utc_now()


@dataclass
class FilePathData:
    block_type: ClassVar[BlockType] = BlockType.FILE_PATH

    path: str = ""
    display_name: str | None = None
    file_size: int | None = None
    modified_at: datetime | None = None
    is_directory: bool = False
    fetched_at: datetime | None = None
    id: str = field(default_factory=new_id, compare=False)

    @property
    def display_title(self) -> str:
        if self.display_name:
            return self.display_name
        if self.path:
            return PurePath(self.path).name
        return "Unknown File"

    @property
    def file_extension(self) -> str:
        return PurePath(self.path).suffix.removeprefix(".").lower()

    @property
    def parent_directory(self) -> str:
        if not self.path:
            return ""
        return str(PurePath(self.path).parent)

    def exists(self) -> bool:
        return bool(self.path) and stat_file(self.path) is not None

    def update(self, metadata: FileMetadata, *, now: datetime | None = None) -> None:
        """Copy cached filesystem facts into the link."""
        self.file_size = metadata.file_size
        self.modified_at = metadata.modified_at
        self.is_directory = metadata.is_directory
        self.fetched_at = now or utc_now()

    def refresh(self) -> bool:
        """Re-stat the path. Returns False, changing nothing, if it is gone."""
        metadata = stat_file(self.path) if self.path else None
        if metadata is None:
            return False
        self.update(metadata)
        return True

    @classmethod
    def from_path(cls, path: str) -> "FilePathData":
        data = cls(path=path, display_name=PurePath(path).name)
        data.refresh()
        return data


@dataclass
class ReminderData:
    block_type: ClassVar[BlockType] = BlockType.REMINDER

    title: str = "Reminder"
    due_date: datetime | None = None
    is_completed: bool = False
    has_been_viewed: bool = False
    # Binding to a scheduled notification, owned by the notification scheduler
    notification_id: str | None = None
    id: str = field(default_factory=new_id, compare=False)


# --- List ---


@dataclass(eq=False)
class ListItem:
    order_index: int
    text: RichText = field(default_factory=RichText)
    is_checked: bool = False
    id: str = field(default_factory=new_id)
    list_id: str | None = None


@dataclass(eq=False)
class ListData:
    block_type: ClassVar[BlockType] = BlockType.LIST

    title: str | None = None
    list_type: ListType = ListType.BULLET
    items: list[ListItem] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        for item in self.items:
            item.list_id = self.id

    def sorted_items(self) -> list[ListItem]:
        return sorted(self.items, key=lambda i: i.order_index)

    def add_item(self, text: RichText | str, *, is_checked: bool = False) -> ListItem:
        if isinstance(text, str):
            text = RichText.of(text)
        order = max((i.order_index for i in self.items), default=-1) + 1
        item = ListItem(order_index=order, text=text, is_checked=is_checked, list_id=self.id)
        self.items.append(item)
        return item


# --- Recursive containers ---


@dataclass(eq=False)
class AccordionData(BlockContainer):
    block_type: ClassVar[BlockType] = BlockType.ACCORDION

    heading: RichText = field(default_factory=RichText)
    is_expanded: bool = True
    level: HeadingLevel = HeadingLevel.H1
    blocks: list["Block"] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        for block in self.blocks:
            block.parent = self.child_ref()

    def child_ref(self) -> ParentRef:
        return ParentRef(kind="accordion", id=self.id)


@dataclass(eq=False)
class Column(BlockContainer):
    order_index: int = 0
    width_ratio: float = 1.0
    blocks: list["Block"] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    column_data_id: str | None = None

    def __post_init__(self) -> None:
        for block in self.blocks:
            block.parent = self.child_ref()

    def child_ref(self) -> ParentRef:
        return ParentRef(kind="column", id=self.id)


@dataclass(eq=False)
class ColumnData:
    block_type: ClassVar[BlockType] = BlockType.COLUMNS

    columns: list[Column] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        for column in self.columns:
            column.column_data_id = self.id

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def sorted_columns(self) -> list[Column]:
        return sorted(self.columns, key=lambda c: c.order_index)

    def add_column(self, *, width_ratio: float = 1.0) -> Column:
        order = max((c.order_index for c in self.columns), default=-1) + 1
        column = Column(order_index=order, width_ratio=width_ratio, column_data_id=self.id)
        self.columns.append(column)
        return column

    @classmethod
    def with_columns(cls, count: int = 2) -> "ColumnData":
        """Create ``count`` empty, equal-width columns."""
        data = cls()
        for _ in range(max(1, count)):
            data.add_column()
        return data


Payload = (
    TextData
    | QuoteData
    | TableData
    | AccordionData
    | CodeData
    | ImageData
    | ColumnData
    | ListData
    | BookmarkData
    | FilePathData
    | ReminderData
)

_DISPLAY_NAMES: dict[BlockType, str] = {
    BlockType.TEXT: "Text Block",
    BlockType.TABLE: "Table",
    BlockType.ACCORDION: "Accordion",
    BlockType.CODE: "Code Block",
    BlockType.IMAGE: "Image",
    BlockType.COLUMNS: "Columns",
    BlockType.LIST: "List",
    BlockType.QUOTE: "Quote",
    BlockType.BOOKMARK: "Bookmark",
    BlockType.FILE_PATH: "File Link",
    BlockType.REMINDER: "Reminder",
}

_LIST_DISPLAY_NAMES: dict[ListType, str] = {
    ListType.BULLET: "Bullet List",
    ListType.NUMBERED: "Numbered List",
    ListType.CHECKBOX: "Checkbox List",
}


def _check_payload(tag: object, payload: object) -> None:
    if payload is not None and getattr(payload, "block_type", None) is not tag:
        tag_name = tag.value if isinstance(tag, BlockType) else tag
        msg = f"Block tagged {tag_name!r} cannot carry a {type(payload).__name__} payload"
        raise ValueError(msg)


@dataclass(eq=False)
class Block:
    """One node of note content.

    ``payload`` is None only for a damaged record whose payload could not be
    recovered; such nodes are carried along but contribute nothing. The
    tag/payload match is checked on construction and on every later
    assignment to ``type`` or ``payload``.
    """

    type: BlockType
    payload: Payload | None
    order_index: int = 0
    id: str = field(default_factory=new_id)
    parent: ParentRef | None = None

    def __setattr__(self, name: str, value: object) -> None:
        if name == "payload":
            _check_payload(self.type, value)
        elif name == "type" and "payload" in vars(self):
            _check_payload(value, self.payload)
        super().__setattr__(name, value)

    @classmethod
    def of(cls, payload: Payload, *, order_index: int = 0, id: str | None = None) -> "Block":
        """Build a block whose tag is taken from its payload."""
        return cls(
            type=payload.block_type,
            payload=payload,
            order_index=order_index,
            id=id or new_id(),
        )

    @property
    def display_name(self) -> str:
        if self.type is BlockType.LIST and isinstance(self.payload, ListData):
            return _LIST_DISPLAY_NAMES[self.payload.list_type]
        return _DISPLAY_NAMES[self.type]
