# solver/cover.py: greedy maximal-extent rectangle cover
from __future__ import annotations

import logging
from typing import List

from models import CellState, OverlapPolicy, Rect
from solver.grid import Grid, build_grid
from tilemap import OccupancySource

log = logging.getLogger(__name__)


def _claimable(state: CellState, policy: OverlapPolicy) -> bool:
    if state is CellState.USED:
        return True
    return policy is OverlapPolicy.ALLOWED and state is CellState.COVERED


def line_is_available(grid: Grid, y: int, x_min: int, x_max: int, policy: OverlapPolicy) -> bool:
    """Whole span [x_min, x_max] on row y may join the rectangle; no partial rows."""
    for x in range(x_min, x_max + 1):
        if not _claimable(grid[x, y], policy):
            return False
    return True


def _cover_line(grid: Grid, y: int, x_min: int, x_max: int) -> None:
    for x in range(x_min, x_max + 1):
        grid.cover(x, y)


def _extend(grid: Grid, x: int, y: int, policy: OverlapPolicy) -> Rect:
    """
    Grow a rectangle from seed (x, y): first along the row in both directions,
    then the resulting span downward and upward row by row.

    The counters run one past the accepted boundary, so the span is
    [x - x_left + 1, x + x_right - 1].
    """
    x_left = 0
    while grid.in_bounds(x - x_left, y) and _claimable(grid[x - x_left, y], policy):
        grid.cover(x - x_left, y)
        x_left += 1

    x_right = 1
    while grid.in_bounds(x + x_right, y) and _claimable(grid[x + x_right, y], policy):
        grid.cover(x + x_right, y)
        x_right += 1

    x_min = x - x_left + 1
    x_max = x + x_right - 1

    y_down = 1
    while grid.in_bounds(x, y - y_down) and line_is_available(grid, y - y_down, x_min, x_max, policy):
        _cover_line(grid, y - y_down, x_min, x_max)
        y_down += 1

    y_up = 1
    while grid.in_bounds(x, y + y_up) and line_is_available(grid, y + y_up, x_min, x_max, policy):
        _cover_line(grid, y + y_up, x_min, x_max)
        y_up += 1

    return Rect(x_min, y - y_down + 1, x_right + x_left - 1, y_up + y_down - 1)


def solve(grid: Grid, policy: OverlapPolicy = OverlapPolicy.NOT_ALLOWED) -> List[Rect]:
    """
    Cover every USED cell of ``grid`` with rectangles, mutating it in place.

    Scan order is fixed (x ascending, then y ascending) and rectangles are
    returned in discovery order, so identical input gives identical output.
    The cover is greedy, not minimal.
    """
    policy = OverlapPolicy.parse(policy)
    rects: List[Rect] = []
    for x in range(grid.width):
        for y in range(grid.height):
            if grid[x, y] is CellState.USED:
                rects.append(_extend(grid, x, y, policy))

    if log.isEnabledFor(logging.DEBUG):
        log.debug("covered grid %dx%d with %d rects:\n%s", grid.width, grid.height, len(rects), grid.dump())
    return rects


def cover_cells(source: OccupancySource, policy: OverlapPolicy = OverlapPolicy.NOT_ALLOWED) -> List[Rect]:
    """Build a grid from ``source`` and solve it; an empty region short-circuits."""
    if source.is_empty or source.occupied_count == 0:
        return []
    return solve(build_grid(source), policy)


__all__ = ["solve", "cover_cells", "line_is_available"]
