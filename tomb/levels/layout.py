"""
Tomb Hunt - Grid Model
Immutable wall/floor layout shared by generation, classification and pathing
"""

from typing import Iterator, List, Sequence, Tuple

import numpy as np

from tomb.core.constants import CellType, CELL_CHARS
from tomb.utils.grid import DIRECTIONS


class OutOfBoundsError(IndexError):
    """Raised when a grid query falls outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Cell ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y


class Grid:
    """
    Rectangular maze layout.

    Cells are stored row-major in a read-only numpy array indexed [y, x]
    holding CellType values. The entrance is a floor cell on the boundary.
    """

    def __init__(self, cells: np.ndarray, entrance: Tuple[int, int]):
        cells = np.array(cells, dtype=np.uint8)
        if cells.ndim != 2 or cells.shape[0] == 0 or cells.shape[1] == 0:
            raise ValueError(f"Grid cells must be a non-empty 2-D array, got shape {cells.shape}")
        allowed = {CellType.WALL.value, CellType.FLOOR.value}
        if not set(np.unique(cells).tolist()) <= allowed:
            raise ValueError("Grid cells must be WALL or FLOOR")
        cells.flags.writeable = False

        self.cells = cells
        self.height, self.width = cells.shape

        ex, ey = entrance
        if not self.in_bounds(ex, ey):
            raise ValueError(f"Entrance {entrance} is outside the grid")
        if not (ex in (0, self.width - 1) or ey in (0, self.height - 1)):
            raise ValueError(f"Entrance {entrance} is not on the grid boundary")
        if not self.is_floor(ex, ey):
            raise ValueError(f"Entrance {entrance} is not a floor cell")
        self.entrance = (ex, ey)

    @classmethod
    def from_rows(cls, rows: Sequence[str], entrance: Tuple[int, int]) -> 'Grid':
        """Build a grid from text rows of '1' (wall) and '0' (floor)."""
        if not rows:
            raise ValueError("Grid needs at least one row")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("Grid rows must all have the same length")

        lookup = {char: cell_type.value for cell_type, char in CELL_CHARS.items()}
        try:
            data = [[lookup[char] for char in row] for row in rows]
        except KeyError as e:
            raise ValueError(f"Unknown cell character {e.args[0]!r}") from None
        return cls(np.array(data, dtype=np.uint8), entrance)

    def to_rows(self) -> List[str]:
        """Text rows, inverse of from_rows."""
        chars = {cell_type.value: char for cell_type, char in CELL_CHARS.items()}
        return ["".join(chars[v] for v in row) for row in self.cells.tolist()]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> CellType:
        """Cell state at (x, y); raises OutOfBoundsError off-grid."""
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        return CellType(int(self.cells[y, x]))

    def is_floor(self, x: int, y: int) -> bool:
        """True for in-bounds floor cells, False everywhere else."""
        return self.in_bounds(x, y) and self.cells[y, x] == CellType.FLOOR.value

    def neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        """Orthogonal neighbours of (x, y) that lie inside the grid."""
        for direction in DIRECTIONS:
            nx, ny = direction.step(x, y)
            if self.in_bounds(nx, ny):
                yield (nx, ny)

    def floor_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        for nx, ny in self.neighbors(x, y):
            if self.cells[ny, nx] == CellType.FLOOR.value:
                yield (nx, ny)

    def outside_entrance(self) -> Tuple[int, int]:
        """Off-grid cell just beyond the entrance."""
        ex, ey = self.entrance
        if ex == 0:
            return (-1, ey)
        if ex == self.width - 1:
            return (self.width, ey)
        if ey == 0:
            return (ex, -1)
        return (ex, self.height)

    def floor_cells(self) -> List[Tuple[int, int]]:
        ys, xs = np.nonzero(self.cells == CellType.FLOOR.value)
        return list(zip(xs.tolist(), ys.tolist()))

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return False
        return self.entrance == other.entrance and np.array_equal(self.cells, other.cells)

    def __hash__(self):
        return hash((self.entrance, self.cells.tobytes()))

    def __repr__(self):
        return f"Grid({self.width}x{self.height}, entrance={self.entrance})"

    def __str__(self) -> str:
        return "\n".join(self.to_rows())
