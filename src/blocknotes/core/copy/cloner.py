"""Deep copy of blocks for duplication.

Every node of the copy gets a fresh identity; structure, order and content
are preserved and nothing mutable is shared with the source.
"""

from collections.abc import Callable

from loguru import logger

from blocknotes.models.blocks import (
    AccordionData,
    Block,
    BookmarkData,
    CodeData,
    Column,
    ColumnData,
    FilePathData,
    ImageData,
    ListData,
    ListItem,
    Payload,
    QuoteData,
    ReminderData,
    TextData,
)
from blocknotes.models.ids import new_id
from blocknotes.models.table import TableCell, TableData


class BlockCloner:
    """Recursive block copier.

    Args:
        id_factory: Source of new identities (injectable for tests).
    """

    def __init__(self, *, id_factory: Callable[[], str] = new_id) -> None:
        self._new_id = id_factory

    def clone(self, source: Block, *, order_index: int = 0) -> Block:
        """Return an independent copy of ``source`` and everything it owns.

        The copy is unowned (no parent reference); its position among the
        target siblings is the caller's ``order_index``.
        """
        if source.payload is None:
            logger.warning("Block {} ({}) has no payload, copying it empty", source.id, source.type)
            payload = None
        else:
            payload = self._clone_payload(source.payload)
        return Block(type=source.type, payload=payload, order_index=order_index, id=self._new_id())

    def _clone_payload(self, payload: Payload) -> Payload:
        match payload:
            case TextData():
                return TextData(text=payload.text, id=self._new_id())
            case QuoteData():
                return QuoteData(text=payload.text, id=self._new_id())
            case CodeData():
                return CodeData(
                    code=payload.code,
                    language=payload.language,
                    show_line_numbers=payload.show_line_numbers,
                    theme=payload.theme,
                    id=self._new_id(),
                )
            case ImageData():
                return ImageData(
                    url=payload.url,
                    width=payload.width,
                    height=payload.height,
                    alt_text=payload.alt_text,
                    is_full_width=payload.is_full_width,
                    offset_x=payload.offset_x,
                    offset_y=payload.offset_y,
                    scale=payload.scale,
                    id=self._new_id(),
                )
            case BookmarkData():
                return BookmarkData(
                    url=payload.url,
                    title=payload.title,
                    description=payload.description,
                    favicon_url=payload.favicon_url,
                    og_image_url=payload.og_image_url,
                    fetched_at=payload.fetched_at,
                    id=self._new_id(),
                )
            case FilePathData():
                return FilePathData(
                    path=payload.path,
                    display_name=payload.display_name,
                    file_size=payload.file_size,
                    modified_at=payload.modified_at,
                    is_directory=payload.is_directory,
                    fetched_at=payload.fetched_at,
                    id=self._new_id(),
                )
            case ReminderData():
                # The copy is not bound to the source's scheduled notification.
                return ReminderData(
                    title=payload.title,
                    due_date=payload.due_date,
                    is_completed=payload.is_completed,
                    id=self._new_id(),
                )
            case TableData():
                return self._clone_table(payload)
            case ListData():
                return self._clone_list(payload)
            case AccordionData():
                return self._clone_accordion(payload)
            case ColumnData():
                return self._clone_columns(payload)
        msg = f"Unknown payload type {type(payload).__name__}"
        raise TypeError(msg)

    def _clone_table(self, source: TableData) -> TableData:
        cells = {
            key: TableCell(row=cell.row, column=cell.column, content=cell.content, id=self._new_id())
            for key, cell in source.cells.items()
        }
        return TableData(
            title=source.title,
            row_count=source.row_count,
            column_count=source.column_count,
            has_header_row=source.has_header_row,
            has_header_column=source.has_header_column,
            show_alternating_row_colors=source.show_alternating_row_colors,
            show_borders=source.show_borders,
            show_title=source.show_title,
            column_widths=list(source.column_widths),
            row_heights=list(source.row_heights),
            cells=cells,
            id=self._new_id(),
        )

    def _clone_list(self, source: ListData) -> ListData:
        items = [
            ListItem(
                order_index=item.order_index,
                text=item.text,
                is_checked=item.is_checked,
                id=self._new_id(),
            )
            for item in source.sorted_items()
        ]
        # ListData re-parents the items to itself on construction.
        return ListData(title=source.title, list_type=source.list_type, items=items, id=self._new_id())

    def _clone_accordion(self, source: AccordionData) -> AccordionData:
        blocks = [self.clone(b, order_index=b.order_index) for b in source.sorted_blocks()]
        return AccordionData(
            heading=source.heading,
            is_expanded=source.is_expanded,
            level=source.level,
            blocks=blocks,
            id=self._new_id(),
        )

    def _clone_columns(self, source: ColumnData) -> ColumnData:
        columns = [
            Column(
                order_index=column.order_index,
                width_ratio=column.width_ratio,
                blocks=[self.clone(b, order_index=b.order_index) for b in column.sorted_blocks()],
                id=self._new_id(),
            )
            for column in source.sorted_columns()
        ]
        return ColumnData(columns=columns, id=self._new_id())
