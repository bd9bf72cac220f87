"""
Runner - the hunted target's kinematic state
"""

import math
from typing import Tuple

from tomb.core.constants import RUNNER_SPEED, GateState
from tomb.levels.layout import Grid
from tomb.utils.grid import grid_to_world, world_to_grid


class Runner:
    """
    Moves through the maze on an intended direction.

    Walls block movement one axis at a time so the runner slides along them.
    The entrance cell is blocked while the gate is closed, and the single
    cell outside the entrance is walkable whenever it is not.
    """

    def __init__(self, x: float, z: float, speed: float = RUNNER_SPEED):
        self.x = float(x)
        self.z = float(z)
        self.speed = speed
        self.velocity = (0.0, 0.0)

    @classmethod
    def outside(cls, grid: Grid, **kwargs) -> 'Runner':
        """Runner waiting just outside the entrance."""
        cx, cy = grid.outside_entrance()
        x, z = grid_to_world(cx, cy, grid.width, grid.height)
        return cls(x, z, **kwargs)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.z)

    def cell(self, grid: Grid) -> Tuple[int, int]:
        return world_to_grid(self.x, self.z, grid.width, grid.height)

    def can_stand(self, grid: Grid, gate: GateState, x: float, z: float) -> bool:
        cell = world_to_grid(x, z, grid.width, grid.height)
        if cell in (grid.outside_entrance(), grid.entrance):
            return gate != GateState.CLOSED
        return grid.is_floor(*cell)

    def move(self, direction: Tuple[float, float], dt: float, grid: Grid, gate: GateState):
        """Move along `direction` (any length, normalized here) for dt seconds."""
        dx, dz = direction
        length = math.hypot(dx, dz)
        if length == 0:
            self.velocity = (0.0, 0.0)
            return

        vx = dx / length * self.speed
        vz = dz / length * self.speed
        self.velocity = (vx, vz)

        new_x = self.x + vx * dt
        if self.can_stand(grid, gate, new_x, self.z):
            self.x = new_x
        new_z = self.z + vz * dt
        if self.can_stand(grid, gate, self.x, new_z):
            self.z = new_z

    def __repr__(self):
        return f"Runner({self.x:.2f}, {self.z:.2f})"
