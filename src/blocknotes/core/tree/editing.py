"""Structural edits on a note's block tree: insert, delete, duplicate.

Each edit leaves the tree consistent before returning, so the note can be
handed to the store right away.
"""

from loguru import logger

from blocknotes.core.copy.cloner import BlockCloner
from blocknotes.core.tree.navigation import child_containers, find_block, iter_blocks
from blocknotes.models.blocks import Block, BlockContainer
from blocknotes.models.note import Note


class BlockNotFoundError(KeyError):
    """No block with the given id exists in the note."""


def _open_slot(container: BlockContainer, index: int) -> None:
    """Shift siblings at or after ``index`` one position later."""
    for sibling in container.blocks:
        if sibling.order_index >= index:
            sibling.order_index += 1


def insert_block(container: BlockContainer, block: Block, *, index: int | None = None) -> Block:
    """Add ``block`` to ``container`` at ``index`` (appends when None).

    Siblings whose order index is at or after ``index`` move back by one.
    """
    if index is None:
        return container.append_block(block)
    index = max(0, index)
    _open_slot(container, index)
    block.order_index = index
    return container.adopt(block)


def delete_block(note: Note, block_id: str) -> Block:
    """Remove a block, and everything it owns, from wherever it sits in the note.

    Returns the detached block. Remaining siblings keep their order indexes.
    """
    found = find_block(note, block_id)
    if found is None:
        raise BlockNotFoundError(block_id)
    container, block = found
    removed = container.detach(block.id)
    nested = sum(1 for c in child_containers(removed) for _ in iter_blocks(c))
    logger.debug("Deleted block {} ({}) with {} nested blocks", block_id, removed.type, nested)
    note.touch()
    return removed


def duplicate_block(
    note: Note,
    block_id: str,
    *,
    cloner: BlockCloner | None = None,
) -> Block:
    """Deep-copy a block and place the copy right after the source.

    The copy goes into the same container as the source.
    """
    found = find_block(note, block_id)
    if found is None:
        raise BlockNotFoundError(block_id)
    container, source = found
    cloner = cloner or BlockCloner()
    copy = cloner.clone(source)
    insert_block(container, copy, index=source.order_index + 1)
    note.touch()
    logger.debug("Duplicated block {} as {}", source.id, copy.id)
    return copy
