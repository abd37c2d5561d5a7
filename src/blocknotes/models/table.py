"""Table payload: grid dimensions, size arrays and a sparse cell map."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from loguru import logger

from blocknotes.config import (
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_ROW_HEIGHT,
    DEFAULT_TABLE_COLUMNS,
    DEFAULT_TABLE_ROWS,
    MIN_COLUMN_WIDTH,
    MIN_ROW_HEIGHT,
)
from blocknotes.models.enums import BlockType
from blocknotes.models.ids import new_id, utc_now


@dataclass
class TableCell:
    """Content of one grid slot. A slot without a cell is empty."""

    row: int
    column: int
    content: str = ""
    id: str = field(default_factory=new_id)


def _pad(values: list[float], length: int, default: float) -> list[float]:
    if len(values) < length:
        values.extend([default] * (length - len(values)))
    return values


@dataclass
class TableData:
    """A Numbers-style table.

    Cells are sparse and keyed by ``(row, column)``; every stored cell lies
    within the current bounds. ``column_widths`` and ``row_heights`` are
    padded with defaults when they fall short of the counts and are never
    shrunk implicitly.

    Grid guards are silent: removing the last row/column, or an index that
    is out of range, leaves the table untouched. Callers that need to detect
    a refusal compare ``row_count``/``column_count`` before and after.
    """

    block_type: ClassVar[BlockType] = BlockType.TABLE

    title: str = "Table"
    row_count: int = DEFAULT_TABLE_ROWS
    column_count: int = DEFAULT_TABLE_COLUMNS
    has_header_row: bool = True
    has_header_column: bool = True
    show_alternating_row_colors: bool = True
    show_borders: bool = True
    show_title: bool = True
    column_widths: list[float] = field(default_factory=list)
    row_heights: list[float] = field(default_factory=list)
    cells: dict[tuple[int, int], TableCell] = field(default_factory=dict)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.row_count = max(1, self.row_count)
        self.column_count = max(1, self.column_count)
        _pad(self.column_widths, self.column_count, DEFAULT_COLUMN_WIDTH)
        _pad(self.row_heights, self.row_count, DEFAULT_ROW_HEIGHT)
        for key, cell in list(self.cells.items()):
            if not self._in_bounds(cell.row, cell.column) or key != (cell.row, cell.column):
                logger.warning(
                    "Dropping table cell ({}, {}) outside {}x{} grid",
                    cell.row, cell.column, self.row_count, self.column_count,
                )
                del self.cells[key]

    def _in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.row_count and 0 <= column < self.column_count

    def _touch(self) -> None:
        self.updated_at = utc_now()

    # --- Column width / row height management ---

    def column_width(self, index: int) -> float:
        if 0 <= index < len(self.column_widths):
            return self.column_widths[index]
        return DEFAULT_COLUMN_WIDTH

    def row_height(self, index: int) -> float:
        if 0 <= index < len(self.row_heights):
            return self.row_heights[index]
        return DEFAULT_ROW_HEIGHT

    def set_column_width(self, index: int, width: float) -> None:
        """Set a column width, clamped to MIN_COLUMN_WIDTH."""
        if index < 0:
            logger.debug("Ignoring column width for negative index {}", index)
            return
        _pad(self.column_widths, index + 1, DEFAULT_COLUMN_WIDTH)
        self.column_widths[index] = max(MIN_COLUMN_WIDTH, width)
        self._touch()

    def set_row_height(self, index: int, height: float) -> None:
        """Set a row height, clamped to MIN_ROW_HEIGHT."""
        if index < 0:
            logger.debug("Ignoring row height for negative index {}", index)
            return
        _pad(self.row_heights, index + 1, DEFAULT_ROW_HEIGHT)
        self.row_heights[index] = max(MIN_ROW_HEIGHT, height)
        self._touch()

    # --- Cells ---

    def cell(self, row: int, column: int) -> TableCell | None:
        return self.cells.get((row, column))

    def get_cell(self, row: int, column: int) -> str:
        """Return a slot's content; empty string when no cell exists."""
        found = self.cells.get((row, column))
        return found.content if found else ""

    def set_cell(self, row: int, column: int, content: str) -> None:
        """Write a slot, creating its cell on first write."""
        if not self._in_bounds(row, column):
            msg = f"Cell ({row}, {column}) outside {self.row_count}x{self.column_count} table"
            raise IndexError(msg)
        existing = self.cells.get((row, column))
        if existing:
            existing.content = content
        else:
            self.cells[(row, column)] = TableCell(row=row, column=column, content=content)
        self._touch()

    def iter_cells(self) -> Iterator[TableCell]:
        """Yield stored cells in row-major order."""
        for key in sorted(self.cells):
            yield self.cells[key]

    def is_header_cell(self, row: int, column: int) -> bool:
        return (self.has_header_row and row == 0) or (self.has_header_column and column == 0)

    # --- Grid mutation ---

    def _remap_cells(self, move: Callable[[TableCell], tuple[int, int] | None]) -> None:
        """Rebuild the cell map; ``move`` returns the new slot or None to drop."""
        remapped: dict[tuple[int, int], TableCell] = {}
        for cell in self.cells.values():
            target = move(cell)
            if target is None:
                continue
            cell.row, cell.column = target
            remapped[target] = cell
        self.cells = remapped

    def add_row(self) -> None:
        self.insert_row(self.row_count)

    def add_column(self) -> None:
        self.insert_column(self.column_count)

    def insert_row(self, at: int) -> None:
        """Insert an empty row before ``at``; cells at or below it move down."""
        if not 0 <= at <= self.row_count:
            logger.debug("Refusing to insert row at {} of {}-row table", at, self.row_count)
            return
        self._remap_cells(
            lambda c: (c.row + 1, c.column) if c.row >= at else (c.row, c.column)
        )
        if at <= len(self.row_heights):
            self.row_heights.insert(at, DEFAULT_ROW_HEIGHT)
        else:
            self.row_heights.append(DEFAULT_ROW_HEIGHT)
        self.row_count += 1
        self._touch()

    def insert_column(self, at: int) -> None:
        """Insert an empty column before ``at``; cells at or right of it move right."""
        if not 0 <= at <= self.column_count:
            logger.debug(
                "Refusing to insert column at {} of {}-column table", at, self.column_count
            )
            return
        self._remap_cells(
            lambda c: (c.row, c.column + 1) if c.column >= at else (c.row, c.column)
        )
        if at <= len(self.column_widths):
            self.column_widths.insert(at, DEFAULT_COLUMN_WIDTH)
        else:
            self.column_widths.append(DEFAULT_COLUMN_WIDTH)
        self.column_count += 1
        self._touch()

    def remove_row(self, at: int | None = None) -> None:
        """Remove a row (the last one by default). Never removes the only row."""
        if self.row_count <= 1:
            logger.debug("Refusing to remove the only row of table {}", self.id)
            return
        target = self.row_count - 1 if at is None else at
        if not 0 <= target < self.row_count:
            logger.debug("Refusing to remove row {} of {}-row table", target, self.row_count)
            return

        def move(c: TableCell) -> tuple[int, int] | None:
            if c.row == target:
                return None
            return (c.row - 1, c.column) if c.row > target else (c.row, c.column)

        self._remap_cells(move)
        if target < len(self.row_heights):
            del self.row_heights[target]
        self.row_count -= 1
        self._touch()

    def remove_column(self, at: int | None = None) -> None:
        """Remove a column (the last one by default). Never removes the only column."""
        if self.column_count <= 1:
            logger.debug("Refusing to remove the only column of table {}", self.id)
            return
        target = self.column_count - 1 if at is None else at
        if not 0 <= target < self.column_count:
            logger.debug(
                "Refusing to remove column {} of {}-column table", target, self.column_count
            )
            return

        def move(c: TableCell) -> tuple[int, int] | None:
            if c.column == target:
                return None
            return (c.row, c.column - 1) if c.column > target else (c.row, c.column)

        self._remap_cells(move)
        if target < len(self.column_widths):
            del self.column_widths[target]
        self.column_count -= 1
        self._touch()
