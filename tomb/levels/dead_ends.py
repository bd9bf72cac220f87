"""
Dead-end classification and artifact placement
"""

import random
from typing import List, Optional, Tuple

import numpy as np

from tomb.core.constants import ARTIFACT_COUNT, CellType
from tomb.core.logger import get_logger
from tomb.levels.layout import Grid


def classify_dead_ends(grid: Grid) -> np.ndarray:
    """
    Flag floor cells with exactly one floor neighbour.

    The entrance is never flagged. Returns a read-only bool array indexed
    [y, x], same shape as the grid.
    """
    floor = grid.cells == CellType.FLOOR.value

    # Count open orthogonal neighbours by shifting a zero-padded floor mask
    padded = np.pad(floor, 1, constant_values=False).astype(np.uint8)
    open_count = (
        padded[:-2, 1:-1] + padded[2:, 1:-1] +
        padded[1:-1, :-2] + padded[1:-1, 2:]
    )

    flags = floor & (open_count == 1)
    ex, ey = grid.entrance
    flags[ey, ex] = False
    flags.flags.writeable = False
    return flags


def select_objectives(grid: Grid, flags: Optional[np.ndarray] = None,
                      count: int = ARTIFACT_COUNT,
                      rng: Optional[random.Random] = None) -> List[Tuple[int, int]]:
    """
    Pick up to `count` dead ends to hold artifacts.

    Dead ends on the entrance row are skipped. When fewer than `count`
    candidates exist, all of them are returned.
    """
    if count < 0:
        raise ValueError(f"Objective count must be non-negative, got {count}")
    if flags is None:
        flags = classify_dead_ends(grid)
    rng = rng or random.Random()

    entrance_row = grid.entrance[1]
    ys, xs = np.nonzero(flags)
    candidates = [(x, y) for x, y in zip(xs.tolist(), ys.tolist()) if y != entrance_row]

    rng.shuffle(candidates)
    picks = candidates[:count]

    if len(picks) < count:
        get_logger().warning(
            f"Only {len(picks)} dead ends available for {count} artifacts"
        )
    get_logger().debug(f"Artifacts placed at {picks}")
    return picks
