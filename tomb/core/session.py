"""
Tomb Hunt - Session
Headless tick loop wiring the dungeon, progress, runner and pursuer
"""

import random
from typing import Optional, Tuple

from tomb.core.constants import CATCH_RADIUS, TICK_DT, GateState, Outcome
from tomb.core.game_state import DungeonProgress
from tomb.core.logger import get_logger
from tomb.core.settings_manager import SettingsManager
from tomb.entities.pursuer import Pursuer
from tomb.entities.runner import Runner
from tomb.levels.level import Dungeon


class Session:
    """
    One run through a dungeon.

    The caller drives it with tick(), passing the runner's intended move
    direction; rendering and input stay with the caller.
    """

    def __init__(self, dungeon: Dungeon, speed_multiplier: float = 1.0,
                 catch_radius: float = CATCH_RADIUS, randomize_ties: bool = False):
        self.dungeon = dungeon
        self.grid = dungeon.grid
        self.catch_radius = catch_radius

        self.progress = DungeonProgress(dungeon.objectives)
        self.runner = Runner.outside(self.grid)

        tie_rng = random.Random(dungeon.seed) if randomize_ties else None
        self.pursuer = Pursuer.spawn_at(
            dungeon.pursuer_spawn, self.grid,
            speed_multiplier=speed_multiplier, rng=tie_rng
        )

        self.ticks = 0
        self.elapsed = 0.0

        get_logger().set_context(seed=dungeon.seed, size=f"{dungeon.width}x{dungeon.height}")
        get_logger().info(
            f"Session started on {dungeon.width}x{dungeon.height} dungeon "
            f"(seed={dungeon.seed}, artifacts={len(dungeon.objectives)})"
        )

    @classmethod
    def from_settings(cls, settings: Optional[SettingsManager] = None) -> 'Session':
        settings = settings or SettingsManager()
        dungeon = Dungeon.from_settings(settings)
        return cls(
            dungeon,
            speed_multiplier=settings.get("pursuer", "speed_multiplier"),
            catch_radius=settings.get("pursuer", "catch_radius"),
            randomize_ties=settings.get("pursuer", "randomize_ties"),
        )

    @property
    def outcome(self) -> Outcome:
        return self.progress.outcome

    @property
    def is_over(self) -> bool:
        return self.progress.is_over

    def tick(self, direction: Tuple[float, float] = (0.0, 0.0), dt: float = TICK_DT) -> Outcome:
        """Advance the simulation by one tick."""
        if self.is_over:
            return self.outcome

        self.ticks += 1
        self.elapsed += dt

        # Runner
        self.runner.move(direction, dt, self.grid, self.progress.gate)
        self._check_triggers(self.runner.cell(self.grid))

        # Pursuer
        if not self.is_over:
            self.pursuer.update(dt, self.grid, self.runner.position)
            if self.pursuer.catches(self.runner.position, self.catch_radius):
                self.progress.mark_caught()

        if self.is_over:
            get_logger().info(
                f"Session ended: {self.outcome.name} after {self.ticks} ticks "
                f"({self.elapsed:.1f}s)"
            )
        return self.outcome

    def _check_triggers(self, cell: Tuple[int, int]):
        progress = self.progress
        grid = self.grid

        if progress.gate == GateState.NEVER_OPENED:
            if grid.is_floor(*cell) and cell != grid.entrance:
                progress.enter()

        if cell in progress.remaining:
            progress.collect(cell)

        if progress.gate == GateState.OPEN and cell == grid.outside_entrance():
            progress.mark_escaped()
