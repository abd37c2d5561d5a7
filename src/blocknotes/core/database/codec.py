"""Versioned dict encoding of notes and their block trees.

``migrate_note_data`` backfills defaults once, before construction, so the
decoders can read a complete record. Records written before versioning are
treated as version 1.
"""

import base64
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from blocknotes.config import DEFAULT_COLUMN_WIDTH, DEFAULT_ROW_HEIGHT
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
from blocknotes.models.enums import BlockType, CodeLanguage, HeadingLevel, ListType, NoteStatus
from blocknotes.models.note import Category, Note, Tag
from blocknotes.models.rich_text import RichText
from blocknotes.models.table import TableCell, TableData

FORMAT_VERSION = 2


# --- Scalars ---


def _dt_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _dt_from_str(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _rich_to_dict(value: RichText) -> dict[str, str]:
    out = {"plain": value.plain}
    if value.data:
        out["data"] = base64.b64encode(value.data).decode("ascii")
    return out


def _rich_from_dict(data: dict[str, Any] | str | None) -> RichText:
    if data is None:
        return RichText()
    if isinstance(data, str):
        return RichText.of(data)
    raw = data.get("data")
    return RichText(plain=data.get("plain", ""), data=base64.b64decode(raw) if raw else b"")


# --- Migration ---


def _migrate_block(block: dict[str, Any], index: int) -> None:
    block.setdefault("order_index", index)
    payload = block.get("payload")
    if not isinstance(payload, dict):
        return
    block_type = BlockType.parse(block.get("type"))
    if block_type is BlockType.TABLE:
        rows = max(1, int(payload.get("row_count") or 3))
        cols = max(1, int(payload.get("column_count") or 3))
        payload["row_count"] = rows
        payload["column_count"] = cols
        widths = list(payload.get("column_widths") or [])
        heights = list(payload.get("row_heights") or [])
        widths.extend([DEFAULT_COLUMN_WIDTH] * (cols - len(widths)))
        heights.extend([DEFAULT_ROW_HEIGHT] * (rows - len(heights)))
        payload["column_widths"] = widths
        payload["row_heights"] = heights
        payload.setdefault("cells", [])
        for flag in (
            "has_header_row",
            "has_header_column",
            "show_alternating_row_colors",
            "show_borders",
            "show_title",
        ):
            payload.setdefault(flag, True)
    elif block_type is BlockType.LIST:
        payload.setdefault("items", [])
        for i, item in enumerate(payload["items"]):
            item.setdefault("order_index", i)
            item.setdefault("is_checked", False)
    elif block_type is BlockType.ACCORDION:
        payload.setdefault("is_expanded", True)
        payload.setdefault("level", HeadingLevel.H1.value)
        payload.setdefault("blocks", [])
        for i, child in enumerate(payload["blocks"]):
            _migrate_block(child, i)
    elif block_type is BlockType.COLUMNS:
        payload.setdefault("columns", [])
        for i, column in enumerate(payload["columns"]):
            column.setdefault("order_index", i)
            column.setdefault("width_ratio", 1.0)
            column.setdefault("blocks", [])
            for j, child in enumerate(column["blocks"]):
                _migrate_block(child, j)


def migrate_note_data(data: dict[str, Any]) -> dict[str, Any]:
    """Bring a raw note record up to FORMAT_VERSION, filling defaults in place."""
    version = int(data.get("format_version") or 1)
    if version > FORMAT_VERSION:
        logger.warning(
            "Note {} has format version {} (newer than {}), reading best effort",
            data.get("id"), version, FORMAT_VERSION,
        )
    if version < 2:
        data.setdefault("status", NoteStatus.SAVED.value)
        data.setdefault("is_pinned", False)
        data.setdefault("tags", [])
        data.setdefault("blocks", [])
        data.setdefault("title", "")
        for i, block in enumerate(data["blocks"]):
            _migrate_block(block, i)
    data["format_version"] = max(version, FORMAT_VERSION)
    return data


# --- Encoding ---


def _payload_to_dict(payload: Payload) -> dict[str, Any]:
    match payload:
        case TextData() | QuoteData():
            return {"id": payload.id, "text": _rich_to_dict(payload.text)}
        case CodeData():
            return {
                "id": payload.id,
                "code": payload.code,
                "language": payload.language.value,
                "show_line_numbers": payload.show_line_numbers,
                "theme": payload.theme,
            }
        case ImageData():
            return {
                "id": payload.id,
                "url": payload.url,
                "width": payload.width,
                "height": payload.height,
                "alt_text": payload.alt_text,
                "is_full_width": payload.is_full_width,
                "offset_x": payload.offset_x,
                "offset_y": payload.offset_y,
                "scale": payload.scale,
            }
        case BookmarkData():
            return {
                "id": payload.id,
                "url": payload.url,
                "title": payload.title,
                "description": payload.description,
                "favicon_url": payload.favicon_url,
                "og_image_url": payload.og_image_url,
                "fetched_at": _dt_to_str(payload.fetched_at),
            }
        case FilePathData():
            return {
                "id": payload.id,
                "path": payload.path,
                "display_name": payload.display_name,
                "file_size": payload.file_size,
                "modified_at": _dt_to_str(payload.modified_at),
                "is_directory": payload.is_directory,
                "fetched_at": _dt_to_str(payload.fetched_at),
            }
        case ReminderData():
            return {
                "id": payload.id,
                "title": payload.title,
                "due_date": _dt_to_str(payload.due_date),
                "is_completed": payload.is_completed,
                "has_been_viewed": payload.has_been_viewed,
                "notification_id": payload.notification_id,
            }
        case TableData():
            return {
                "id": payload.id,
                "title": payload.title,
                "row_count": payload.row_count,
                "column_count": payload.column_count,
                "has_header_row": payload.has_header_row,
                "has_header_column": payload.has_header_column,
                "show_alternating_row_colors": payload.show_alternating_row_colors,
                "show_borders": payload.show_borders,
                "show_title": payload.show_title,
                "column_widths": list(payload.column_widths),
                "row_heights": list(payload.row_heights),
                "cells": [
                    {"id": c.id, "row": c.row, "column": c.column, "content": c.content}
                    for c in payload.iter_cells()
                ],
                "created_at": _dt_to_str(payload.created_at),
                "updated_at": _dt_to_str(payload.updated_at),
            }
        case ListData():
            return {
                "id": payload.id,
                "title": payload.title,
                "list_type": payload.list_type.value,
                "items": [
                    {
                        "id": item.id,
                        "order_index": item.order_index,
                        "text": _rich_to_dict(item.text),
                        "is_checked": item.is_checked,
                    }
                    for item in payload.sorted_items()
                ],
            }
        case AccordionData():
            return {
                "id": payload.id,
                "heading": _rich_to_dict(payload.heading),
                "is_expanded": payload.is_expanded,
                "level": payload.level.value,
                "blocks": [block_to_dict(b) for b in payload.sorted_blocks()],
            }
        case ColumnData():
            return {
                "id": payload.id,
                "columns": [
                    {
                        "id": column.id,
                        "order_index": column.order_index,
                        "width_ratio": column.width_ratio,
                        "blocks": [block_to_dict(b) for b in column.sorted_blocks()],
                    }
                    for column in payload.sorted_columns()
                ],
            }
    msg = f"Unknown payload type {type(payload).__name__}"
    raise TypeError(msg)


def block_to_dict(block: Block) -> dict[str, Any]:
    return {
        "id": block.id,
        "type": block.type.value,
        "order_index": block.order_index,
        "payload": _payload_to_dict(block.payload) if block.payload is not None else None,
    }


def note_to_dict(note: Note) -> dict[str, Any]:
    return {
        "format_version": FORMAT_VERSION,
        "id": note.id,
        "title": note.title,
        "status": note.status.value,
        "is_pinned": note.is_pinned,
        "created_at": _dt_to_str(note.created_at),
        "updated_at": _dt_to_str(note.updated_at),
        "moved_to_deleted_at": _dt_to_str(note.moved_to_deleted_at),
        "category": (
            {"name": note.category.name, "hex_color": note.category.hex_color}
            if note.category
            else None
        ),
        "tags": [{"name": t.name, "hex_color": t.hex_color} for t in note.tags],
        "blocks": [block_to_dict(b) for b in note.sorted_blocks()],
    }


# --- Decoding ---


def _id_kwargs(data: dict[str, Any]) -> dict[str, str]:
    return {"id": data["id"]} if data.get("id") else {}


def _table_from_dict(data: dict[str, Any]) -> TableData:
    cells = {}
    for raw in data["cells"]:
        cell = TableCell(
            row=int(raw["row"]), column=int(raw["column"]), content=raw.get("content", ""),
            **_id_kwargs(raw),
        )
        cells[(cell.row, cell.column)] = cell
    table = TableData(
        title=data.get("title", "Table"),
        row_count=data["row_count"],
        column_count=data["column_count"],
        has_header_row=data["has_header_row"],
        has_header_column=data["has_header_column"],
        show_alternating_row_colors=data["show_alternating_row_colors"],
        show_borders=data["show_borders"],
        show_title=data["show_title"],
        column_widths=[float(w) for w in data["column_widths"]],
        row_heights=[float(h) for h in data["row_heights"]],
        cells=cells,
        **_id_kwargs(data),
    )
    if created := _dt_from_str(data.get("created_at")):
        table.created_at = created
    if updated := _dt_from_str(data.get("updated_at")):
        table.updated_at = updated
    return table


def _payload_from_dict(block_type: BlockType, data: dict[str, Any]) -> Payload:
    ids = _id_kwargs(data)
    match block_type:
        case BlockType.TEXT:
            return TextData(text=_rich_from_dict(data.get("text")), **ids)
        case BlockType.QUOTE:
            return QuoteData(text=_rich_from_dict(data.get("text")), **ids)
        case BlockType.CODE:
            return CodeData(
                code=data.get("code", ""),
                language=CodeLanguage.parse(data.get("language")),
                show_line_numbers=data.get("show_line_numbers", True),
                theme=data.get("theme", "default"),
                **ids,
            )
        case BlockType.IMAGE:
            return ImageData(
                url=data.get("url", ""),
                width=data.get("width"),
                height=data.get("height"),
                alt_text=data.get("alt_text"),
                is_full_width=data.get("is_full_width", False),
                offset_x=data.get("offset_x", 0.0),
                offset_y=data.get("offset_y", 0.0),
                scale=data.get("scale", 1.0),
                **ids,
            )
        case BlockType.BOOKMARK:
            return BookmarkData(
                url=data.get("url", ""),
                title=data.get("title"),
                description=data.get("description"),
                favicon_url=data.get("favicon_url"),
                og_image_url=data.get("og_image_url"),
                fetched_at=_dt_from_str(data.get("fetched_at")),
                **ids,
            )
        case BlockType.FILE_PATH:
            return FilePathData(
                path=data.get("path", ""),
                display_name=data.get("display_name"),
                file_size=data.get("file_size"),
                modified_at=_dt_from_str(data.get("modified_at")),
                is_directory=data.get("is_directory", False),
                fetched_at=_dt_from_str(data.get("fetched_at")),
                **ids,
            )
        case BlockType.REMINDER:
            return ReminderData(
                title=data.get("title") or "Reminder",
                due_date=_dt_from_str(data.get("due_date")),
                is_completed=data.get("is_completed", False),
                has_been_viewed=data.get("has_been_viewed", False),
                notification_id=data.get("notification_id"),
                **ids,
            )
        case BlockType.TABLE:
            return _table_from_dict(data)
        case BlockType.LIST:
            items = [
                ListItem(
                    order_index=raw["order_index"],
                    text=_rich_from_dict(raw.get("text")),
                    is_checked=raw["is_checked"],
                    **_id_kwargs(raw),
                )
                for raw in data["items"]
            ]
            return ListData(
                title=data.get("title"),
                list_type=ListType.parse(data.get("list_type")),
                items=items,
                **ids,
            )
        case BlockType.ACCORDION:
            return AccordionData(
                heading=_rich_from_dict(data.get("heading")),
                is_expanded=data["is_expanded"],
                level=HeadingLevel.parse(data["level"]),
                blocks=[block_from_dict(b) for b in data["blocks"]],
                **ids,
            )
        case BlockType.COLUMNS:
            columns = [
                Column(
                    order_index=raw["order_index"],
                    width_ratio=float(raw["width_ratio"]),
                    blocks=[block_from_dict(b) for b in raw["blocks"]],
                    **_id_kwargs(raw),
                )
                for raw in data["columns"]
            ]
            return ColumnData(columns=columns, **ids)
    msg = f"Unhandled block type {block_type!r}"
    raise ValueError(msg)


def block_from_dict(data: dict[str, Any]) -> Block:
    """Decode one block.

    Unknown tags read as text. A payload that is missing or unreadable leaves
    the block in place with no payload instead of failing the whole note.
    """
    block_type = BlockType.parse(data.get("type"))
    raw = data.get("payload")
    payload: Payload | None = None
    if isinstance(raw, dict):
        try:
            payload = _payload_from_dict(block_type, raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Unreadable {} payload on block {}", block_type, data.get("id"))
    else:
        logger.warning("Block {} ({}) has no payload", data.get("id"), block_type)
    return Block(
        type=block_type,
        payload=payload,
        order_index=int(data.get("order_index", 0)),
        **_id_kwargs(data),
    )


def note_from_dict(data: dict[str, Any], *, repair: bool = True) -> Note:
    """Decode a note record, migrating it first.

    Unless ``repair`` is False the deleted-timestamp invariant is repaired
    against the wall clock.
    """
    data = migrate_note_data(data)
    category = data.get("category")
    note = Note(
        title=data["title"],
        status=NoteStatus.parse(data["status"]),
        is_pinned=bool(data["is_pinned"]),
        category=(
            Category(name=category["name"], hex_color=category.get("hex_color", "8E8E93"))
            if category
            else None
        ),
        tags=[Tag(name=t["name"], hex_color=t.get("hex_color", "007AFF")) for t in data["tags"]],
        blocks=[block_from_dict(b) for b in data["blocks"]],
        moved_to_deleted_at=_dt_from_str(data.get("moved_to_deleted_at")),
        **_id_kwargs(data),
    )
    if created := _dt_from_str(data.get("created_at")):
        note.created_at = created
    if updated := _dt_from_str(data.get("updated_at")):
        note.updated_at = updated
    if repair:
        note.repair()
    return note
