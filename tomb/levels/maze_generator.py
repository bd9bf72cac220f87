"""
Tomb Hunt - Procedural Maze Generator
Seeded recursive backtracking with optional braiding
"""

import random
import time
from typing import List, Optional, Tuple

import numpy as np

from tomb.ai.distance_field import UNREACHABLE, compute_distances
from tomb.core.constants import CellType, LOOP_CHANCE, MIN_DUNGEON_SIZE
from tomb.core.logger import get_logger
from tomb.levels.layout import Grid


class InvalidDimensionsError(ValueError):
    """Raised when a maze is too small for a wall border and one floor cell."""


class MazeGenerationError(RuntimeError):
    """Raised when a generated maze breaks the connectivity guarantee."""


class MazeGenerator:
    """
    Carves a maze into a wall-filled grid.

    Lattice cells sit on odd coordinates inside the border; the walk opens
    the wall between a lattice cell and an unvisited lattice neighbour two
    steps away, so every lattice cell ends up joined in one spanning tree.
    The entrance is opened on the west edge at the middle row.
    """

    def __init__(self, width: int, height: int, seed: Optional[int] = None,
                 loop_chance: float = LOOP_CHANCE):
        if width < MIN_DUNGEON_SIZE or height < MIN_DUNGEON_SIZE:
            raise InvalidDimensionsError(
                f"Maze must be at least {MIN_DUNGEON_SIZE}x{MIN_DUNGEON_SIZE}, "
                f"got {width}x{height}"
            )
        if not 0.0 <= loop_chance <= 1.0:
            raise ValueError(f"loop_chance must be within [0, 1], got {loop_chance}")

        self.width = width
        self.height = height
        self.loop_chance = loop_chance

        # Time-derived seed when none is given, kept so the run can be replayed
        if seed is None:
            seed = time.time_ns() & 0xFFFFFFFF
        self.seed = seed
        self.rng = random.Random(seed)

        self.entrance: Tuple[int, int] = (0, height // 2)
        self.cells = np.full((height, width), CellType.WALL.value, dtype=np.uint8)

    def generate(self) -> Grid:
        """Carve the maze and return it as an immutable Grid."""
        self.cells.fill(CellType.WALL.value)

        self._carve_backtracking()
        if self.loop_chance > 0:
            self._braid()
        self._open_entrance()

        grid = Grid(self.cells, self.entrance)
        self._verify_connectivity(grid)

        get_logger().info(
            f"Generated {self.width}x{self.height} maze (seed={self.seed}, "
            f"loop_chance={self.loop_chance})"
        )
        return grid

    # =========================================================================
    # RECURSIVE BACKTRACKING
    # =========================================================================

    def _carve_backtracking(self):
        """Depth-first carve over the odd lattice with an explicit stack."""
        start_x = self.rng.randrange(1, self.width - 1, 2)
        start_y = self.rng.randrange(1, self.height - 1, 2)

        stack = [(start_x, start_y)]
        self._set_floor(start_x, start_y)

        while stack:
            x, y = stack[-1]

            # Unvisited lattice neighbours (2 cells away)
            neighbors = []
            for dx, dy in [(0, -2), (0, 2), (-2, 0), (2, 0)]:
                nx, ny = x + dx, y + dy
                if 1 <= nx < self.width - 1 and 1 <= ny < self.height - 1:
                    if self.cells[ny, nx] == CellType.WALL.value:
                        neighbors.append((nx, ny, dx // 2, dy // 2))

            if neighbors:
                nx, ny, dx, dy = self.rng.choice(neighbors)
                self._set_floor(x + dx, y + dy)
                self._set_floor(nx, ny)
                stack.append((nx, ny))
            else:
                stack.pop()

    # =========================================================================
    # BRAIDING
    # =========================================================================

    def _braid(self):
        """Give some dead ends a second opening to form loops."""
        for x, y in self._lattice_dead_ends():
            if self.rng.random() >= self.loop_chance:
                continue

            # Walls between this cell and another lattice cell
            candidates = []
            for dx, dy in [(0, -1), (0, 1), (-1, 0), (1, 0)]:
                wx, wy = x + dx, y + dy
                lx, ly = x + 2 * dx, y + 2 * dy
                if not (1 <= lx < self.width - 1 and 1 <= ly < self.height - 1):
                    continue
                if self.cells[wy, wx] == CellType.WALL.value:
                    candidates.append((wx, wy))

            if candidates:
                self._set_floor(*self.rng.choice(candidates))

    def _lattice_dead_ends(self) -> List[Tuple[int, int]]:
        dead_ends = []
        for y in range(1, self.height - 1, 2):
            for x in range(1, self.width - 1, 2):
                open_sides = sum(
                    1 for dx, dy in [(0, -1), (0, 1), (-1, 0), (1, 0)]
                    if self.cells[y + dy, x + dx] == CellType.FLOOR.value
                )
                if open_sides == 1:
                    dead_ends.append((x, y))
        return dead_ends

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _open_entrance(self):
        """Open the west edge at the middle row plus the cell just inside."""
        ex, ey = self.entrance
        self._set_floor(ex, ey)
        # (1, ey) is a lattice cell or sits between two of them
        self._set_floor(ex + 1, ey)

    def _set_floor(self, x: int, y: int):
        self.cells[y, x] = CellType.FLOOR.value

    def _verify_connectivity(self, grid: Grid):
        """Ensure all floor cells are reachable from the entrance."""
        field = compute_distances(grid, *grid.entrance)
        floor = grid.cells == CellType.FLOOR.value
        stranded = int(np.count_nonzero(floor & (field == UNREACHABLE)))
        if stranded:
            get_logger().error(
                f"Maze seed={self.seed} has {stranded} floor cells cut off from the entrance"
            )
            raise MazeGenerationError(
                f"{stranded} floor cells unreachable from entrance {grid.entrance}"
            )


def generate(width: int, height: int, seed: Optional[int] = None,
             loop_chance: float = LOOP_CHANCE) -> Grid:
    """Factory function to create a new maze grid."""
    return MazeGenerator(width, height, seed, loop_chance).generate()
