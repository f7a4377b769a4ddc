import pytest

from models import CellState, InvalidOccupancyError
from solver.grid import Grid, build_grid
from tilemap import OccupancySource
from tests.helpers import grid_from_text


def test_build_grid_marks_occupied_cells_used():
    src = OccupancySource.from_flat((4, -2), (3, 2), [1, None, 0, "tile", "tile", None])
    grid = build_grid(src)

    assert (grid.width, grid.height) == (3, 2)
    assert grid[0, 0] is CellState.USED
    assert grid[1, 0] is CellState.EMPTY
    assert grid[2, 0] is CellState.EMPTY
    assert grid[0, 1] is CellState.USED
    assert grid[1, 1] is CellState.USED
    assert grid[2, 1] is CellState.EMPTY
    assert grid.count(CellState.COVERED) == 0


def test_grid_rejects_mismatched_cells():
    with pytest.raises(InvalidOccupancyError):
        Grid(2, 2, [CellState.USED] * 3)
    with pytest.raises(InvalidOccupancyError):
        Grid(-1, 2)


def test_cover_is_monotonic():
    grid = grid_from_text("#.#")
    grid.cover(0, 0)
    assert grid[0, 0] is CellState.COVERED
    grid.cover(0, 0)
    assert grid[0, 0] is CellState.COVERED

    with pytest.raises(ValueError):
        grid.cover(1, 0)
    assert grid[1, 0] is CellState.EMPTY


def test_copy_is_independent():
    grid = grid_from_text("##")
    clone = grid.copy()
    clone.cover(0, 0)
    assert grid[0, 0] is CellState.USED
    assert clone[0, 0] is CellState.COVERED


def test_in_bounds():
    grid = Grid(3, 2)
    assert grid.in_bounds(0, 0)
    assert grid.in_bounds(2, 1)
    assert not grid.in_bounds(3, 0)
    assert not grid.in_bounds(0, -1)


def test_dump_prints_top_row_first():
    grid = grid_from_text("#..\n#..\n###")
    assert grid.dump() == "1 0 0\n1 0 0\n1 1 1"
    grid.cover(2, 0)
    assert grid.dump().splitlines()[-1] == "1 1 2"


def test_build_grid_matches_source_cells():
    src = OccupancySource.from_flat((0, 0), (2, 2), [0, 1, 1, 0])
    grid = build_grid(src)
    for y in range(2):
        for x in range(2):
            expected = CellState.USED if src.occupied(x, y) else CellState.EMPTY
            assert grid[x, y] is expected
