"""
Breadth-first distance field used for pursuer spawn placement and
per-tick pursuit.
"""
from collections import deque
from typing import Optional, Tuple

import numpy as np

from tomb.core.constants import CellType
from tomb.levels.layout import Grid

UNREACHABLE: int = int(np.iinfo(np.int32).max)  # no real distance hits this

_FLOOR = CellType.FLOOR.value


def compute_distances(grid: Grid, source_x: int, source_y: int) -> np.ndarray:
    """
    Step distance from (source_x, source_y) to every cell of the grid.

    Args:
        grid: Maze layout
        source_x: Source column
        source_y: Source row

    Returns:
        Read-only int32 array indexed [y, x]. Walls, cells cut off from the
        source, and every cell when the source is a wall or off-grid hold
        UNREACHABLE.
    """
    height, width = grid.shape
    field = np.full((height, width), UNREACHABLE, dtype=np.int32)

    if grid.is_floor(source_x, source_y):
        cells = grid.cells
        field[source_y, source_x] = 0
        frontier = deque([(source_x, source_y)])

        while frontier:
            x, y = frontier.popleft()
            next_dist = field[y, x] + 1
            for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
                if 0 <= nx < width and 0 <= ny < height:
                    if cells[ny, nx] == _FLOOR and field[ny, nx] == UNREACHABLE:
                        field[ny, nx] = next_dist
                        frontier.append((nx, ny))

    field.flags.writeable = False
    return field


def is_reachable(field: np.ndarray, x: int, y: int) -> bool:
    """False off-grid or where the field holds the sentinel."""
    height, width = field.shape
    if not (0 <= x < width and 0 <= y < height):
        return False
    return int(field[y, x]) != UNREACHABLE


def distance_at(field: np.ndarray, x: int, y: int) -> int:
    """Distance at (x, y), UNREACHABLE when off-grid."""
    height, width = field.shape
    if not (0 <= x < width and 0 <= y < height):
        return UNREACHABLE
    return int(field[y, x])


def farthest_cell(field: np.ndarray) -> Optional[Tuple[int, int]]:
    """
    Reachable cell with the greatest distance.

    Ties go to the first cell in row-major order. Returns None when no cell
    is reachable.
    """
    reachable = field != UNREACHABLE
    if not reachable.any():
        return None
    masked = np.where(reachable, field, -1)
    y, x = np.unravel_index(int(np.argmax(masked)), field.shape)
    return (int(x), int(y))
