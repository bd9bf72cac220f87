"""
Tests for the BFS distance field
"""

import itertools

import numpy as np
import pytest

from tomb.ai.distance_field import (
    UNREACHABLE, compute_distances, distance_at, farthest_cell, is_reachable
)
from tomb.levels.layout import Grid
from tomb.levels.maze_generator import generate

OPEN_ROWS = [
    "11111",
    "10001",
    "00001",
    "10001",
    "11111",
]

CORRIDOR_ROWS = [
    "111111111111",
    "000000000011",
    "111111111111",
]


@pytest.fixture
def open_grid():
    return Grid.from_rows(OPEN_ROWS, (0, 2))


@pytest.fixture
def corridor():
    return Grid.from_rows(CORRIDOR_ROWS, (0, 1))


def test_open_grid_from_center(open_grid):
    """Center source: 0 at the source, 1 next to it, corners farthest."""
    field = compute_distances(open_grid, 2, 2)

    assert field[2, 2] == 0
    for x, y in open_grid.floor_neighbors(2, 2):
        assert field[y, x] == 1

    reachable = field[field != UNREACHABLE]
    corners = [(1, 1), (3, 1), (1, 3), (3, 3)]
    assert reachable.max() == max(abs(x - 2) + abs(y - 2) for x, y in corners)
    for x, y in corners:
        assert field[y, x] == 2


def test_walls_are_unreachable(open_grid):
    field = compute_distances(open_grid, 2, 2)
    for y in range(open_grid.height):
        for x in range(open_grid.width):
            if not open_grid.is_floor(x, y):
                assert field[y, x] == UNREACHABLE


def test_corridor_end_to_end(corridor):
    """A straight 10-cell corridor is 9 steps long."""
    field = compute_distances(corridor, 0, 1)
    assert field[1, 9] == 9
    assert list(field[1, :10]) == list(range(10))


def test_wall_source_is_all_unreachable(open_grid):
    field = compute_distances(open_grid, 0, 0)
    assert np.all(field == UNREACHABLE)


@pytest.mark.parametrize("x, y", [(-1, 2), (5, 2), (2, -1), (2, 5), (100, 100)])
def test_off_grid_source_is_all_unreachable(open_grid, x, y):
    """Off-grid sources degrade to an all-unreachable field."""
    field = compute_distances(open_grid, x, y)
    assert field.shape == open_grid.shape
    assert np.all(field == UNREACHABLE)


def test_disconnected_floor_is_unreachable():
    rows = [
        "11111",
        "00101",
        "11111",
    ]
    grid = Grid.from_rows(rows, (0, 1))
    field = compute_distances(grid, 0, 1)
    assert field[1, 1] == 1
    assert field[1, 3] == UNREACHABLE


def test_distance_symmetry():
    """dist(A -> B) equals dist(B -> A)."""
    grid = generate(13, 13, seed=21)
    cells = grid.floor_cells()[::7]

    fields = {cell: compute_distances(grid, *cell) for cell in cells}
    for a, b in itertools.combinations(cells, 2):
        assert fields[a][b[1], b[0]] == fields[b][a[1], a[0]]


def test_fresh_read_only_field(open_grid):
    """Each call returns a new array that cannot be mutated."""
    first = compute_distances(open_grid, 2, 2)
    second = compute_distances(open_grid, 2, 2)

    assert first is not second
    assert np.array_equal(first, second)
    with pytest.raises(ValueError):
        first[2, 2] = 5


def test_neighbor_distances_differ_by_at_most_one():
    grid = generate(17, 17, seed=8)
    field = compute_distances(grid, *grid.entrance)
    for x, y in grid.floor_cells():
        for nx, ny in grid.floor_neighbors(x, y):
            assert abs(int(field[y, x]) - int(field[ny, nx])) == 1


def test_farthest_cell(corridor):
    field = compute_distances(corridor, 0, 1)
    assert farthest_cell(field) == (9, 1)


def test_farthest_cell_ties_row_major(open_grid):
    # From the center, (1, 1) is the first distance-2 cell in row-major order
    assert farthest_cell(compute_distances(open_grid, 2, 2)) == (1, 1)


def test_farthest_cell_none_when_unreachable(open_grid):
    assert farthest_cell(compute_distances(open_grid, 0, 0)) is None


def test_distance_helpers(corridor):
    field = compute_distances(corridor, 0, 1)
    assert distance_at(field, 4, 1) == 4
    assert distance_at(field, -1, 1) == UNREACHABLE
    assert is_reachable(field, 4, 1)
    assert not is_reachable(field, 4, 0)
    assert not is_reachable(field, 50, 50)
