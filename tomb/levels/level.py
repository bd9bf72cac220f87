"""
Tomb Hunt - Dungeon Level
Bundles a generated maze with its artifacts and pursuer spawn
"""

import json
import os
import random
from typing import List, Optional, Tuple

import numpy as np

from tomb.ai.distance_field import compute_distances, farthest_cell
from tomb.core.constants import ARTIFACT_COUNT, LOOP_CHANCE
from tomb.core.logger import get_logger
from tomb.levels.dead_ends import classify_dead_ends, select_objectives
from tomb.levels.layout import Grid
from tomb.levels.maze_generator import MazeGenerator


def find_pursuer_spawn(grid: Grid) -> Tuple[int, int]:
    """Reachable cell farthest from the cell just inside the entrance."""
    ex, ey = grid.entrance
    ox, oy = grid.outside_entrance()
    inner = (2 * ex - ox, 2 * ey - oy)
    if not grid.is_floor(*inner):
        inner = (ex, ey)
    spawn = farthest_cell(compute_distances(grid, *inner))
    if spawn is None:
        spawn = inner
    return spawn


class Dungeon:
    """
    Represents one dungeon: maze layout, dead ends, artifacts and spawns.
    """

    def __init__(self, grid: Grid, objectives: List[Tuple[int, int]],
                 seed: Optional[int] = None,
                 pursuer_spawn: Optional[Tuple[int, int]] = None):
        self.grid = grid
        self.width = grid.width
        self.height = grid.height
        self.entrance = grid.entrance
        self.seed = seed

        self.dead_ends: np.ndarray = classify_dead_ends(grid)
        self.objectives = [tuple(c) for c in objectives]
        self.pursuer_spawn = tuple(pursuer_spawn) if pursuer_spawn else find_pursuer_spawn(grid)

        self.name = "Unnamed Dungeon"

    @classmethod
    def generate(cls, width: int, height: int, seed: Optional[int] = None,
                 artifact_count: int = ARTIFACT_COUNT,
                 loop_chance: float = LOOP_CHANCE) -> 'Dungeon':
        """Create a new procedurally generated dungeon."""
        generator = MazeGenerator(width, height, seed, loop_chance)
        grid = generator.generate()

        # Artifact placement draws from its own stream derived from the maze seed
        rng = random.Random(generator.seed + 1)
        objectives = select_objectives(grid, classify_dead_ends(grid), artifact_count, rng)

        dungeon = cls(grid, objectives, seed=generator.seed)
        get_logger().debug(f"Pursuer spawn at {dungeon.pursuer_spawn}")
        return dungeon

    @classmethod
    def from_settings(cls, settings) -> 'Dungeon':
        """Create a dungeon from a SettingsManager's 'dungeon' category."""
        return cls.generate(
            width=settings.get("dungeon", "width"),
            height=settings.get("dungeon", "height"),
            seed=settings.get("dungeon", "seed"),
            artifact_count=settings.get("dungeon", "artifact_count"),
            loop_chance=settings.get("dungeon", "loop_chance"),
        )

    @classmethod
    def load_from_file(cls, path: str) -> 'Dungeon':
        """Load dungeon from JSON file."""
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            get_logger().error(f"Dungeon file not found: {path}")
            raise
        except json.JSONDecodeError as e:
            get_logger().error(f"Invalid JSON in dungeon file {path}: {e}")
            raise

        try:
            grid = Grid.from_rows(data["rows"], tuple(data["entrance"]))
            objectives = [tuple(p) for p in data.get("objectives", [])]
            spawn = data.get("pursuer_spawn")
            for x, y in objectives + ([tuple(spawn)] if spawn else []):
                if not grid.is_floor(x, y):
                    raise ValueError(f"({x}, {y}) is not a floor cell")
        except (KeyError, TypeError, ValueError) as e:
            get_logger().error(f"Malformed dungeon file {path}: {e}", exc_info=True)
            raise

        dungeon = cls(grid, objectives, seed=data.get("seed"),
                      pursuer_spawn=tuple(spawn) if spawn else None)
        dungeon.name = data.get("name", "Custom Dungeon")
        return dungeon

    def to_dict(self) -> dict:
        """Serialize dungeon to dictionary."""
        return {
            "name": self.name,
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "entrance": list(self.entrance),
            "rows": self.grid.to_rows(),
            "objectives": [list(p) for p in self.objectives],
            "pursuer_spawn": list(self.pursuer_spawn),
        }

    def save_to_file(self, path: str):
        """Save dungeon to JSON file."""
        try:
            os.makedirs(os.path.dirname(path) if os.path.dirname(path) else '.', exist_ok=True)
            with open(path, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)
            get_logger().info(f"Saved to {path}")
        except OSError as e:
            get_logger().error(f"Failed to write dungeon file {path}: {e}", exc_info=True)
            raise

    def is_dead_end(self, x: int, y: int) -> bool:
        return self.grid.in_bounds(x, y) and bool(self.dead_ends[y, x])

    def render(self, marks: Optional[dict] = None) -> str:
        """ASCII map: '#' wall, ' ' floor, E entrance, A artifact, P pursuer spawn."""
        rows = [['#' if c == '1' else ' ' for c in row] for row in self.grid.to_rows()]
        ex, ey = self.entrance
        rows[ey][ex] = 'E'
        for x, y in self.objectives:
            rows[y][x] = 'A'
        px, py = self.pursuer_spawn
        rows[py][px] = 'P'
        for (x, y), char in (marks or {}).items():
            if self.grid.in_bounds(x, y):
                rows[y][x] = char
        return "\n".join("".join(row) for row in rows)

    def __str__(self) -> str:
        lines = [f"Dungeon: {self.name} ({self.width}x{self.height}, seed={self.seed})"]
        lines.append(f"Entrance: {self.entrance}, Pursuer spawn: {self.pursuer_spawn}")
        lines.append(f"Dead ends: {int(self.dead_ends.sum())}, Artifacts: {len(self.objectives)}")
        lines.append(self.render())
        return "\n".join(lines)
