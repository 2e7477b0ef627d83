"""Row and cell layout for RTF tables.

Distances are stored in points. A row records the right edge of every
column (``\\cellxN``); cell widths are derived from consecutive edges minus
the table's cell gap and left margin.
"""

from dataclasses import dataclass, field
from typing import Optional

from rtfdoc.formatting.ir import Section


@dataclass(eq=False)
class Cell:
    """A table cell holding its own sections.

    Attributes:
        row: The row this cell belongs to
        index: Column index within the row
        sections: Formatted sections inside the cell
    """

    row: "Row"
    index: int
    sections: list[Section] = field(default_factory=list)

    @property
    def table(self) -> "Table":
        return self.row.table

    @property
    def plain_text(self) -> str:
        return "".join(section.text for section in self.sections)

    @property
    def width(self) -> Optional[float]:
        """Usable cell width in points, None without a column boundary."""
        positions = self.row.end_positions
        if self.index >= len(positions):
            return None

        end_pos = positions[self.index]
        prev_pos = positions[self.index - 1] if self.index > 0 else 0
        gap = self.table.half_gap
        return (end_pos - prev_pos) - (2 * gap) - self.table.left_margin

    def __repr__(self) -> str:
        return f"Cell(index={self.index}, sections={self.sections!r})"


@dataclass(eq=False)
class Row:
    """A table row.

    Attributes:
        table: The owning table
        end_positions: Right edge of each column, in points
        cells: Cells in column order; the first one exists from the start
    """

    table: "Table"
    end_positions: list[float] = field(default_factory=list)
    cells: list[Cell] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells.append(Cell(row=self, index=0))

    @property
    def current_cell(self) -> Cell:
        return self.cells[-1]

    @property
    def is_full(self) -> bool:
        """Whether every declared column already has a cell."""
        return bool(self.end_positions) and len(self.cells) >= len(self.end_positions)

    @property
    def has_content(self) -> bool:
        return any(cell.sections for cell in self.cells)

    def add_cell(self) -> Cell:
        """Start the next cell, reusing the last one while it is still empty."""
        if not self.current_cell.sections:
            return self.current_cell
        return self.new_cell()

    def new_cell(self) -> Cell:
        self.cells.append(Cell(row=self, index=len(self.cells)))
        return self.current_cell

    def __repr__(self) -> str:
        return f"Row(end_positions={self.end_positions!r}, cells={self.cells!r})"


@dataclass(eq=False)
class Table:
    """A table made of rows of cells.

    Attributes:
        rows: Rows in document order
        half_gap: Half the space between cells (\\trgaphN), in points
        left_margin: Position of the row's left edge (\\trleftN), in points
    """

    rows: list[Row] = field(default_factory=list)
    half_gap: float = 0
    left_margin: float = 0

    def __post_init__(self) -> None:
        if not self.rows:
            self.add_row()

    @property
    def current_row(self) -> Row:
        return self.rows[-1]

    def add_row(self) -> Row:
        self.rows.append(Row(table=self))
        return self.current_row

    def remove_current_row(self) -> None:
        self.rows.pop()

    def __repr__(self) -> str:
        return (
            f"Table(half_gap={self.half_gap!r}, left_margin={self.left_margin!r}, "
            f"rows={self.rows!r})"
        )
