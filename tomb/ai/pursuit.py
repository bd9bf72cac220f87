"""
Pursuit policy: picks the pursuer's movement for one tick from a fresh
distance field seeded at the target's cell.
"""
import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from tomb.ai.distance_field import UNREACHABLE, distance_at
from tomb.core.constants import (
    ARRIVE_EPSILON, ARRIVE_GAIN, ARRIVE_MAX_SPEED,
    STEER_BASE_SPEED, STEER_GAIN, STEER_MAX_SPEED, StepAction
)
from tomb.utils.grid import DIRECTIONS, Direction, grid_to_world, world_distance

Cell = Tuple[int, int]
Point = Tuple[float, float]


@dataclass(frozen=True)
class PursuitStep:
    """Decision for a single tick."""
    action: StepAction
    target: Optional[Point] = None
    speed: float = 0.0
    direction: Optional[Direction] = None

    @property
    def is_hold(self) -> bool:
        return self.action == StepAction.HOLD

    def velocity(self, from_pos: Point) -> Point:
        """(vx, vz) that moves from_pos toward the target at the speed hint."""
        if self.target is None or self.speed <= 0.0:
            return (0.0, 0.0)
        dx = self.target[0] - from_pos[0]
        dz = self.target[1] - from_pos[1]
        length = math.hypot(dx, dz)
        if length <= ARRIVE_EPSILON:
            return (0.0, 0.0)
        return (dx / length * self.speed, dz / length * self.speed)


HOLD = PursuitStep(StepAction.HOLD)


def arrive_speed(remaining: float) -> float:
    """Slows down as the pursuer closes in."""
    if remaining <= ARRIVE_EPSILON:
        return 0.0
    return min(ARRIVE_MAX_SPEED, ARRIVE_GAIN * remaining)


def steer_speed(remaining: float) -> float:
    return min(STEER_MAX_SPEED, STEER_BASE_SPEED + STEER_GAIN * remaining)


def choose_pursuit_step(pursuer_cell: Cell, target_cell: Cell, field: np.ndarray,
                        pursuer_pos: Optional[Point] = None,
                        target_pos: Optional[Point] = None,
                        rng: Optional[random.Random] = None) -> PursuitStep:
    """
    Select the pursuer's move for this tick.

    Args:
        pursuer_cell: Pursuer's grid cell
        target_cell: Target's grid cell, the source of `field`
        field: Distance field seeded at target_cell
        pursuer_pos: Pursuer's world position (defaults to its cell center)
        target_pos: Target's world position (defaults to its cell center)
        rng: When given, shuffles the neighbour scan so ties break randomly

    Returns:
        HOLD when the target is off-grid or on a wall, when the pursuer
        cannot reach it, or on a plateau; ARRIVE within one step; otherwise
        STEER toward the downhill neighbour.
    """
    height, width = field.shape

    # Target outside the maze (or not yet entered): its own cell is not 0
    if distance_at(field, *target_cell) != 0:
        return HOLD

    here = distance_at(field, *pursuer_cell)
    if here == UNREACHABLE:
        return HOLD

    if pursuer_pos is None:
        pursuer_pos = grid_to_world(pursuer_cell[0], pursuer_cell[1], width, height)
    if target_pos is None:
        target_pos = grid_to_world(target_cell[0], target_cell[1], width, height)

    # Close range: cell stepping can miss the contact, go straight for it
    if here <= 1:
        remaining = world_distance(pursuer_pos, target_pos)
        return PursuitStep(StepAction.ARRIVE, target_pos, arrive_speed(remaining))

    directions = list(DIRECTIONS)
    if rng is not None:
        rng.shuffle(directions)

    best_dir = None
    best_dist = here
    for direction in directions:
        nx, ny = direction.step(*pursuer_cell)
        d = distance_at(field, nx, ny)
        if d < best_dist:
            best_dist = d
            best_dir = direction

    if best_dir is None:
        return HOLD

    bx, by = best_dir.step(*pursuer_cell)
    waypoint = grid_to_world(bx, by, width, height)
    remaining = world_distance(pursuer_pos, waypoint)
    return PursuitStep(StepAction.STEER, waypoint, steer_speed(remaining), best_dir)
