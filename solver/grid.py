# solver/grid.py
from __future__ import annotations

from typing import List, Optional, Sequence

from models import CellState, InvalidOccupancyError
from tilemap import OccupancySource


class Grid:
    """
    Dense W × H occupancy grid of :class:`CellState`, addressed ``grid[x, y]``.

    Cells only ever move ``USED -> COVERED``; covering a covered cell again
    is a no-op. Covering an empty cell raises ``ValueError``.
    """

    def __init__(self, width: int, height: int, cells: Optional[Sequence[CellState]] = None):
        if width < 0 or height < 0:
            raise InvalidOccupancyError(f"negative grid size {width}x{height}")
        if cells is None:
            cells = [CellState.EMPTY] * (width * height)
        if len(cells) != width * height:
            raise InvalidOccupancyError(
                f"grid is {width}x{height} but {len(cells)} cells were supplied"
            )
        self.width = width
        self.height = height
        self._cells: List[CellState] = list(cells)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def __getitem__(self, xy) -> CellState:
        x, y = xy
        return self._cells[x + y * self.width]

    def cover(self, x: int, y: int) -> None:
        i = x + y * self.width
        if self._cells[i] is CellState.EMPTY:
            raise ValueError(f"cannot cover empty cell ({x},{y})")
        self._cells[i] = CellState.COVERED

    def count(self, state: CellState) -> int:
        return sum(1 for c in self._cells if c is state)

    def copy(self) -> "Grid":
        return Grid(self.width, self.height, self._cells)

    def dump(self) -> str:
        rows = []
        for y in range(self.height - 1, -1, -1):
            rows.append(" ".join(str(self[x, y].value) for x in range(self.width)))
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, used={self.count(CellState.USED)})"


def build_grid(source: OccupancySource) -> Grid:
    cells = [CellState.EMPTY] * (source.width * source.height)
    for y in range(source.height):
        for x in range(source.width):
            if source.occupied(x, y):
                cells[x + y * source.width] = CellState.USED
    return Grid(source.width, source.height, cells)


__all__ = ["Grid", "build_grid"]
