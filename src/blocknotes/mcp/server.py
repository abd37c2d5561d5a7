"""MCP server exposing note search, reading and block duplication tools."""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from blocknotes.config import DATABASE_FILENAME, resolve_data_directory
from blocknotes.core.database.codec import block_to_dict, note_to_dict
from blocknotes.core.database.store import NoteStore, open_database
from blocknotes.core.search.extractor import TextExtractor
from blocknotes.core.tree.editing import BlockNotFoundError, duplicate_block
from blocknotes.core.tree.navigation import find_block, get_ancestors
from blocknotes.models.blocks import AccordionData, BlockContainer, ColumnData
from blocknotes.models.note import Note, NoteStatus


def _note_summary(note: Note, extractor: TextExtractor) -> dict[str, Any]:
    return {
        "note_id": note.id,
        "title": note.title,
        "status": note.status.value,
        "is_pinned": note.is_pinned,
        "category": note.category_name,
        "tags": [t.name for t in note.tags],
        "updated_at": note.updated_at.isoformat(),
        "preview": extractor.preview_text(note)[:120],
    }


def _outline(container: BlockContainer, extractor: TextExtractor) -> list[dict[str, Any]]:
    entries = []
    for block in container.sorted_blocks():
        entry: dict[str, Any] = {
            "id": block.id,
            "type": block.type.value,
            "name": block.display_name,
        }
        match block.payload:
            case AccordionData():
                entry["heading"] = block.payload.heading.plain_text()
                entry["blocks"] = _outline(block.payload, extractor)
            case ColumnData():
                entry["columns"] = [
                    {"id": c.id, "width_ratio": c.width_ratio, "blocks": _outline(c, extractor)}
                    for c in block.payload.sorted_columns()
                ]
            case _:
                entry["text"] = extractor.extract_block(block)
        entries.append(entry)
    return entries


# --- Core functions (testable without MCP context) ---


def notes_search(
    store: NoteStore,
    *,
    query: str = "",
    include_deleted: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> dict[str, Any]:
    """Search notes by case-insensitive substring over all of their text.

    Args:
        query: Search text.
        include_deleted: Also search notes in the deleted status.
        limit: Max results (1-50, default 20).
        offset: Pagination offset.
    """
    if not query.strip():
        return {"error": "No search query provided.", "results": [], "count": 0, "total": 0}

    limit = max(1, min(limit, 50))
    extractor = TextExtractor()
    notes = store.search(query, include_deleted=include_deleted)
    page = notes[offset : offset + limit]

    output: dict[str, Any] = {
        "results": [_note_summary(n, extractor) for n in page],
        "count": len(page),
        "total": len(notes),
        "has_more": offset + len(page) < len(notes),
    }
    if output["has_more"]:
        output["next_offset"] = offset + limit
    return output


def notes_list(store: NoteStore, *, status: str | None = None) -> dict[str, Any]:
    """List notes, pinned first, optionally restricted to one status."""
    if status is not None and status not in {s.value for s in NoteStatus}:
        return {"error": f"Unknown status '{status}'.", "notes": [], "count": 0}
    extractor = TextExtractor()
    notes = store.list_notes(status=NoteStatus(status) if status else None)
    return {
        "notes": [_note_summary(n, extractor) for n in notes],
        "count": len(notes),
    }


def notes_read(
    store: NoteStore,
    *,
    note_id: str,
    output_format: str = "outline",
    block_id: str | None = None,
) -> dict[str, Any]:
    """Read a note as an outline of its blocks or as the full record.

    Args:
        note_id: Note ID.
        output_format: "outline" (block tree with extracted text) or "json"
            (full encoded record).
        block_id: Restrict the output to this block and its ancestors.
    """
    note = store.get(note_id)
    if note is None:
        return {"error": f"Note '{note_id}' not found."}

    extractor = TextExtractor()
    result: dict[str, Any] = _note_summary(note, extractor)

    if block_id is not None:
        found = find_block(note, block_id)
        if found is None:
            return {"error": f"Block '{block_id}' not found in note."}
        _container, block = found
        result["breadcrumbs"] = [
            {"id": a.id, "name": a.display_name} for a in get_ancestors(note, block_id)
        ]
        result["block"] = block_to_dict(block) if output_format == "json" else {
            "id": block.id,
            "name": block.display_name,
            "text": extractor.extract_block(block),
        }
        return result

    if output_format == "json":
        result["record"] = note_to_dict(note)
    else:
        result["blocks"] = _outline(note, extractor)
    return result


def notes_duplicate_block(store: NoteStore, *, note_id: str, block_id: str) -> dict[str, Any]:
    """Duplicate a block, with everything nested in it, right after itself.

    Args:
        note_id: Note containing the block.
        block_id: Block to duplicate.
    """
    note = store.get(note_id)
    if note is None:
        return {"error": f"Note '{note_id}' not found."}
    try:
        copy = duplicate_block(note, block_id)
    except BlockNotFoundError:
        return {"error": f"Block '{block_id}' not found in note."}
    store.insert(note)
    if not store.save():
        return {"error": "Could not save the note."}
    return {"note_id": note.id, "block_id": copy.id, "order_index": copy.order_index}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    conn: sqlite3.Connection
    store: NoteStore
    data_dir: Path
    write_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open database on startup, close on shutdown."""
    data_dir = resolve_data_directory()
    conn = open_database(data_dir / DATABASE_FILENAME)
    logger.info("Serving notes from {}", data_dir)
    try:
        yield ServerContext(conn=conn, store=NoteStore(conn), data_dir=data_dir)
    finally:
        conn.close()


mcp_server = FastMCP(
    "blocknotes",
    instructions="""\
Notes are made of blocks. Some blocks (accordions and column sets) contain
further blocks, so a note is a tree.

1. Find notes with notes_search_tool (substring match over titles, tags and
   the text of every block, including nested ones).
2. Read a note with notes_read_tool to see its block outline and block ids.
3. Pass a block id to notes_duplicate_block_tool to copy it in place.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def notes_search_tool(
    ctx: Context,
    query: str = "",
    include_deleted: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> dict[str, Any]:
    """Search notes by case-insensitive substring.

    Matches against the note title, category, tag names and the text of
    every block, nested blocks included. Results are pinned notes first,
    then most recently updated.

    Pagination: When has_more is true, use next_offset in a follow-up call.

    Args:
        query: Search text.
        include_deleted: Also search deleted notes.
        limit: Max results (1-50, default 20).
        offset: Pagination offset.
    """
    return notes_search(
        _ctx(ctx).store,
        query=query,
        include_deleted=include_deleted,
        limit=limit,
        offset=offset,
    )


@mcp_server.tool()
async def notes_list_tool(ctx: Context, status: str | None = None) -> dict[str, Any]:
    """List notes with their title, category, tags and a short preview.

    Args:
        status: "saved", "temp" or "deleted" (all when omitted).
    """
    return notes_list(_ctx(ctx).store, status=status)


@mcp_server.tool()
async def notes_read_tool(
    ctx: Context,
    note_id: str,
    output_format: str = "outline",
    block_id: str | None = None,
) -> dict[str, Any]:
    """Read a note's block tree.

    Args:
        note_id: Note ID from search or list results.
        output_format: "outline" (readable tree) or "json" (full record).
        block_id: Only return this block, with its enclosing blocks.
    """
    return notes_read(
        _ctx(ctx).store, note_id=note_id, output_format=output_format, block_id=block_id
    )


@mcp_server.tool()
async def notes_duplicate_block_tool(ctx: Context, note_id: str, block_id: str) -> dict[str, Any]:
    """Duplicate a block right after itself, nested content included.

    Args:
        note_id: Note containing the block.
        block_id: Block to duplicate.
    """
    server_ctx = _ctx(ctx)
    async with server_ctx.write_lock:
        return notes_duplicate_block(server_ctx.store, note_id=note_id, block_id=block_id)


def run_mcp_server() -> None:
    """Start the MCP server on stdio transport."""
    mcp_server.run(transport="stdio")
