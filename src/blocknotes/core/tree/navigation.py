"""Tree navigation: traversal, lookup by id, ancestors."""

from collections.abc import Iterator

from blocknotes.models.blocks import AccordionData, Block, BlockContainer, ColumnData, ParentRef


def child_containers(block: Block) -> list[BlockContainer]:
    """Containers owned by a block, in visiting order.

    Accordions own one container; column sets own one per column, in
    ascending column order. Every other variant is a leaf.
    """
    payload = block.payload
    if isinstance(payload, AccordionData):
        return [payload]
    if isinstance(payload, ColumnData):
        return list(payload.sorted_columns())
    return []


def iter_blocks(container: BlockContainer) -> Iterator[Block]:
    """Yield every block under a container depth-first, siblings in order."""
    for block in container.sorted_blocks():
        yield block
        for child in child_containers(block):
            yield from iter_blocks(child)


def iter_containers(container: BlockContainer) -> Iterator[BlockContainer]:
    """Yield the container itself and every nested container beneath it."""
    yield container
    for block in container.sorted_blocks():
        for child in child_containers(block):
            yield from iter_containers(child)


def find_block(root: BlockContainer, block_id: str) -> tuple[BlockContainer, Block] | None:
    """Locate a block anywhere under ``root``.

    Returns (owning container, block), or None if not found.
    """
    for container in iter_containers(root):
        block = container.get_block(block_id)
        if block is not None:
            return container, block
    return None


def find_container(root: BlockContainer, ref: ParentRef | None) -> BlockContainer | None:
    """Resolve a back-reference to the container it names.

    A None reference names ``root`` itself.
    """
    if ref is None:
        return root
    for container in iter_containers(root):
        if container.child_ref() == ref:
            return container
    return None


def get_ancestors(root: BlockContainer, block_id: str) -> list[Block]:
    """Blocks enclosing ``block_id``, from the top level down to the immediate parent.

    Returns an empty list for top-level or unknown blocks.
    """

    def walk(container: BlockContainer, trail: list[Block]) -> list[Block] | None:
        for block in container.sorted_blocks():
            if block.id == block_id:
                return trail
            for child in child_containers(block):
                found = walk(child, [*trail, block])
                if found is not None:
                    return found
        return None

    return walk(root, []) or []


def resolve_parent(root: BlockContainer, block: Block) -> BlockContainer | None:
    """The container a block's back-reference names (``root`` for top-level blocks)."""
    return find_container(root, block.parent)
