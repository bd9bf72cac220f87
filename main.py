"""
Tomb Hunt - Main Entry Point
Headless run: an autopilot runner hunts for artifacts while the pursuer hunts it
"""

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tomb.ai.distance_field import compute_distances
from tomb.ai.pursuit import choose_pursuit_step
from tomb.core.constants import DEBUG_MODE
from tomb.core.logger import init_logger
from tomb.core.session import Session
from tomb.core.settings_manager import SettingsManager
from tomb.utils.grid import grid_to_world

MAX_TICKS = 20000


def autopilot(session: Session):
    """Direction for the runner: nearest artifact first, then the way out."""
    grid = session.grid
    runner = session.runner
    cell = runner.cell(grid)

    if not grid.in_bounds(*cell):
        # Waiting outside: walk in
        ex, ey = grid.entrance
        ox, oy = grid.outside_entrance()
        return (ex - ox, ey - oy)

    remaining = session.progress.remaining
    goal = min(remaining, key=lambda c: abs(c[0] - cell[0]) + abs(c[1] - cell[1])) \
        if remaining else grid.entrance

    if cell == goal == grid.entrance:
        ox, oy = grid.outside_entrance()
        return (ox - cell[0], oy - cell[1])

    field = compute_distances(grid, *goal)
    goal_pos = grid_to_world(goal[0], goal[1], grid.width, grid.height)
    step = choose_pursuit_step(cell, goal, field, runner.position, goal_pos)
    return step.velocity(runner.position)


def main():
    init_logger(log_level=logging.DEBUG if DEBUG_MODE else logging.INFO)
    session = Session.from_settings(SettingsManager())
    print(session.dungeon)

    while not session.is_over and session.ticks < MAX_TICKS:
        session.tick(autopilot(session))

    print(f"Outcome: {session.outcome.name} after {session.ticks} ticks "
          f"({session.elapsed:.1f}s), artifacts: {session.progress.collected_count}")
    print(session.progress.flash_text)


if __name__ == "__main__":
    main()
