"""CLI for blocknotes (import, browse, search, edit blocks, MCP server)."""

import json
import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from blocknotes.config import (
    DATABASE_FILENAME,
    PURGE_AFTER_DAYS,
    TEMP_DURATION_HOURS,
    resolve_data_directory,
)
from blocknotes.core.database.codec import note_from_dict, note_to_dict
from blocknotes.core.database.store import NoteStore, open_database
from blocknotes.core.lifecycle import LifecycleSweeper
from blocknotes.core.search.extractor import TextExtractor
from blocknotes.core.tree.editing import BlockNotFoundError, delete_block, duplicate_block
from blocknotes.core.tree.navigation import child_containers
from blocknotes.logging_config import configure_logging
from blocknotes.models.blocks import AccordionData, Block, BlockContainer, ColumnData
from blocknotes.models.note import Note, NoteStatus

app = typer.Typer(help="Block notes: browse, search and edit your notes.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Notes database directory"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write debug logs to this file"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _db_path(data_dir: Path | None) -> Path:
    return (data_dir or resolve_data_directory()) / DATABASE_FILENAME


def _open_db(data_dir: Path | None) -> sqlite3.Connection:
    """Open the notes database, raising if it doesn't exist."""
    db_path = _db_path(data_dir)
    if not db_path.exists():
        logger.error("Notes database not found: {}. Run 'import' first.", db_path)
        raise typer.Exit(1)
    return open_database(db_path)


def _get_note(store: NoteStore, note_id: str) -> Note:
    note = store.get(note_id)
    if note is None:
        typer.echo(f"Note '{note_id}' not found.")
        raise typer.Exit(1)
    return note


def _save(store: NoteStore) -> None:
    if not store.save():
        logger.error("Could not save changes")
        raise typer.Exit(1)


def _note_line(note: Note) -> str:
    pin = "* " if note.is_pinned else ""
    title = note.title or "(untitled)"
    return f"  {pin}{title} [{note.category_name}] {note.status}  id={note.id}"


def _summary(block: Block, extractor: TextExtractor) -> str:
    match block.payload:
        case AccordionData():
            return block.payload.heading.plain_text()
        case ColumnData():
            return f"{block.payload.column_count} columns"
    return extractor.extract_block(block)


def _outline(container: BlockContainer, extractor: TextExtractor, depth: int = 0) -> list[str]:
    lines = []
    for block in container.sorted_blocks():
        text = _summary(block, extractor)
        summary = f" {text[:60]}" if text else ""
        indent = "  " * depth
        lines.append(f"{indent}- {block.display_name}:{summary}  id={block.id}")
        for child in child_containers(block):
            lines.extend(_outline(child, extractor, depth + 1))
    return lines


@app.command(name="import")
def import_cmd(
    source: Path = typer.Argument(..., help="JSON file with one note or a list of notes"),
    data_dir: DataDirOption = None,
) -> None:
    """Import notes from a JSON export into the database."""
    if not source.exists():
        logger.error("Source file not found: {}", source)
        raise typer.Exit(1)

    try:
        data = json.loads(source.read_text())
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in {}: {}", source, e)
        raise typer.Exit(1) from e
    records = data if isinstance(data, list) else [data]

    conn = open_database(_db_path(data_dir))
    try:
        store = NoteStore(conn)
        imported = 0
        for position, record in enumerate(records):
            try:
                note = note_from_dict(record)
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.exception("Skipping unreadable note at position {}", position)
                continue
            store.insert(note)
            imported += 1
        _save(store)
        logger.info("Imported {} of {} notes from {}", imported, len(records), source)
        typer.echo(f"Imported {imported} notes")
    finally:
        conn.close()


@app.command(name="list")
def list_cmd(
    status: Annotated[
        NoteStatus | None,
        typer.Option("--status", "-s", help="Only notes with this status"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """List notes, pinned first, then most recently updated."""
    conn = _open_db(data_dir)
    try:
        notes = NoteStore(conn).list_notes(status=status)
        typer.echo(f"{len(notes)} notes:\n")
        for note in notes:
            typer.echo(_note_line(note))
    finally:
        conn.close()


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for (case-insensitive)"),
    include_deleted: bool = typer.Option(False, "--deleted", help="Include deleted notes"),
    limit: int = typer.Option(10, "--limit", "-n", help="Max results"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search notes by the text of their title, tags and every block."""
    conn = _open_db(data_dir)
    try:
        notes = NoteStore(conn).search(query, include_deleted=include_deleted)
        shown = notes[:limit]
        extractor = TextExtractor()
        if output_json:
            data = {
                "results": [
                    {
                        "note_id": n.id,
                        "title": n.title,
                        "category": n.category_name,
                        "preview": extractor.preview_text(n)[:120],
                    }
                    for n in shown
                ],
                "total": len(notes),
            }
            typer.echo(json.dumps(data, indent=2))
        else:
            typer.echo(f"Found {len(notes)} results (showing {len(shown)}):\n")
            for note in shown:
                typer.echo(_note_line(note))
                preview = extractor.preview_text(note)
                if preview:
                    typer.echo(f"    {preview[:80]}")
    finally:
        conn.close()


@app.command()
def show(
    note_id: str = typer.Argument(..., help="Note ID to show"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output the full record"),
) -> None:
    """Show a note and the outline of its block tree."""
    conn = _open_db(data_dir)
    try:
        note = _get_note(NoteStore(conn), note_id)
        if output_json:
            typer.echo(json.dumps(note_to_dict(note), indent=2))
            return
        typer.echo(note.title or "(untitled)")
        tags = ", ".join(t.name for t in note.tags)
        typer.echo(f"  {note.category_name}  {note.status}" + (f"  tags: {tags}" if tags else ""))
        typer.echo()
        for line in _outline(note, TextExtractor()):
            typer.echo(line)
    finally:
        conn.close()


@app.command()
def duplicate(
    note_id: str = typer.Argument(..., help="Note containing the block"),
    block_id: str = typer.Argument(..., help="Block to duplicate"),
    data_dir: DataDirOption = None,
) -> None:
    """Duplicate a block (with everything inside it) right after itself."""
    conn = _open_db(data_dir)
    try:
        store = NoteStore(conn)
        note = _get_note(store, note_id)
        try:
            copy = duplicate_block(note, block_id)
        except BlockNotFoundError:
            typer.echo(f"Block '{block_id}' not found in note.")
            raise typer.Exit(1) from None
        store.insert(note)
        _save(store)
        typer.echo(f"Duplicated as {copy.id}")
    finally:
        conn.close()


@app.command(name="delete-block")
def delete_block_cmd(
    note_id: str = typer.Argument(..., help="Note containing the block"),
    block_id: str = typer.Argument(..., help="Block to delete"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a block and everything nested in it."""
    conn = _open_db(data_dir)
    try:
        store = NoteStore(conn)
        note = _get_note(store, note_id)
        try:
            removed = delete_block(note, block_id)
        except BlockNotFoundError:
            typer.echo(f"Block '{block_id}' not found in note.")
            raise typer.Exit(1) from None
        store.insert(note)
        _save(store)
        typer.echo(f"Deleted {removed.display_name} {removed.id}")
    finally:
        conn.close()


@app.command()
def sweep(
    temp_hours: int = typer.Option(
        TEMP_DURATION_HOURS, "--temp-hours", help="Hours before a temp note is deleted"
    ),
    purge_days: int = typer.Option(
        PURGE_AFTER_DAYS, "--purge-days", help="Days before a deleted note is purged"
    ),
    data_dir: DataDirOption = None,
) -> None:
    """Expire temp notes and purge deleted notes past their grace period."""
    conn = _open_db(data_dir)
    try:
        sweeper = LifecycleSweeper(
            NoteStore(conn), temp_duration_hours=temp_hours, purge_after_days=purge_days
        )
        stats = sweeper.run()
        typer.echo(
            f"Expired {stats.expired}, purged {stats.purged}, repaired {stats.repaired}"
        )
    finally:
        conn.close()


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from blocknotes.mcp.server import run_mcp_server

    run_mcp_server()
