"""
Tomb Hunt - Pursuer
The hunter that tracks the runner through the maze every tick
"""

import random
from typing import Optional, Tuple

from tomb.ai.distance_field import compute_distances
from tomb.ai.pursuit import HOLD, PursuitStep, choose_pursuit_step
from tomb.core.constants import CATCH_RADIUS
from tomb.levels.layout import Grid
from tomb.utils.grid import grid_to_world, world_distance, world_to_grid


class Pursuer:
    """
    Agent controller for the pursuer.

    Owns position and velocity in world space. Each update recomputes the
    distance field from the target's current cell and lets the pursuit
    policy pick the move; no path is kept between ticks.
    """

    def __init__(self, x: float, z: float, speed_multiplier: float = 1.0,
                 rng: Optional[random.Random] = None):
        self.x = float(x)
        self.z = float(z)
        self.velocity: Tuple[float, float] = (0.0, 0.0)
        self.speed_multiplier = speed_multiplier

        # Only used to break ties between equally good neighbours
        self.rng = rng

        self.last_step: PursuitStep = HOLD

    @classmethod
    def spawn_at(cls, cell: Tuple[int, int], grid: Grid, **kwargs) -> 'Pursuer':
        """Place a pursuer at the center of a grid cell."""
        x, z = grid_to_world(cell[0], cell[1], grid.width, grid.height)
        return cls(x, z, **kwargs)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.z)

    def cell(self, grid: Grid) -> Tuple[int, int]:
        return world_to_grid(self.x, self.z, grid.width, grid.height)

    def update(self, dt: float, grid: Grid, target_pos: Tuple[float, float]) -> PursuitStep:
        """Advance one tick toward target_pos."""
        target_cell = world_to_grid(target_pos[0], target_pos[1], grid.width, grid.height)
        field = compute_distances(grid, *target_cell)

        step = choose_pursuit_step(
            self.cell(grid), target_cell, field,
            pursuer_pos=self.position, target_pos=target_pos, rng=self.rng
        )

        vx, vz = step.velocity(self.position)
        self.velocity = (vx * self.speed_multiplier, vz * self.speed_multiplier)
        self.x += self.velocity[0] * dt
        self.z += self.velocity[1] * dt

        self.last_step = step
        return step

    def catches(self, target_pos: Tuple[float, float], radius: float = CATCH_RADIUS) -> bool:
        return world_distance(self.position, target_pos) <= radius

    def __repr__(self):
        return f"Pursuer({self.x:.2f}, {self.z:.2f}, {self.last_step.action.name})"
