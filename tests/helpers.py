from typing import List, Set, Tuple

from models import CellState, Rect
from solver.grid import Grid, build_grid
from tilemap import OccupancySource


def grid_from_text(text: str) -> Grid:
    return build_grid(OccupancySource.from_text(text))


def used_cells(grid: Grid) -> Set[Tuple[int, int]]:
    return {
        (x, y)
        for x in range(grid.width)
        for y in range(grid.height)
        if grid[x, y] is CellState.USED
    }


def union(rects: List[Rect]) -> Set[Tuple[int, int]]:
    out: Set[Tuple[int, int]] = set()
    for r in rects:
        out.update(r.cells())
    return out
