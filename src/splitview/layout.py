"""Near-square grid layout for split views."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GridCell:
    """Position of one file in the grid. `group` is the 1-based editor group."""

    index: int
    row: int
    column: int
    group: int


@dataclass(frozen=True)
class GridLayout:
    rows: int
    columns: int

    @property
    def capacity(self) -> int:
        return self.rows * self.columns

    def cells(self, count: int) -> list[GridCell]:
        """Cells for the first `count` panes, filled row by row."""
        if count > self.capacity:
            raise ValueError(f"{count} panes do not fit a {self.rows}x{self.columns} grid")
        cells: list[GridCell] = []
        for i in range(count):
            row, column = divmod(i, self.columns)
            group = row * self.columns + column + 1
            cells.append(GridCell(index=i, row=row, column=column, group=group))
        return cells

    def to_editor_layout(self) -> dict[str, Any]:
        """
        Layout descriptor for an editor's grid API: horizontal orientation,
        `rows` rows of `columns` equally sized groups.
        """
        return {
            "orientation": 0,
            "groups": [
                {"groups": [{"size": 1} for _ in range(self.columns)]} for _ in range(self.rows)
            ],
        }


def grid_for(count: int) -> GridLayout:
    """
    Smallest near-square grid holding `count` panes:
    `columns = ceil(sqrt(count))`, `rows = ceil(count / columns)`.
    """
    if count < 1:
        raise ValueError(f"A grid needs at least one pane, got {count}")
    columns = math.isqrt(count)
    if columns * columns < count:
        columns += 1
    rows = -(-count // columns)
    return GridLayout(rows=rows, columns=columns)
