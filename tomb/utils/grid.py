"""
Grid utilities for cell positions and the grid/world coordinate convention
"""

import math
from enum import Enum
from typing import Tuple


class Direction(Enum):
    """Orthogonal step on the grid, stored as (dx, dy)."""
    EAST = (1, 0)
    WEST = (-1, 0)
    SOUTH = (0, 1)
    NORTH = (0, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def step(self, x: int, y: int) -> Tuple[int, int]:
        return (x + self.dx, y + self.dy)


# Default scan order for neighbour checks
DIRECTIONS = (Direction.EAST, Direction.WEST, Direction.SOUTH, Direction.NORTH)


def grid_to_world(x: int, y: int, width: int, height: int) -> Tuple[float, float]:
    """Center of cell (x, y) in world space, grid centered on the origin."""
    return (x - width / 2 + 0.5, y - height / 2 + 0.5)


def world_to_grid(world_x: float, world_z: float, width: int, height: int) -> Tuple[int, int]:
    """Cell containing a world position. May fall outside the grid."""
    return (math.floor(world_x + width / 2), math.floor(world_z + height / 2))


def world_distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Euclidean distance between two world points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])
