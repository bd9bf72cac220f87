"""
Tomb Hunt - Dungeon Generator Tool
Generates seeded dungeons, checks them and saves them as JSON.

Usage: python tools/generate_dungeons.py [count] [size]
"""

import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tomb.ai.distance_field import UNREACHABLE, compute_distances
from tomb.core.constants import DUNGEON_WIDTH
from tomb.levels.level import Dungeon


def describe(dungeon):
    """Connectivity and spread stats for a dungeon."""
    grid = dungeon.grid
    field = compute_distances(grid, *grid.entrance)
    floor = grid.floor_cells()
    stranded = sum(1 for x, y in floor if field[y, x] == UNREACHABLE)
    sx, sy = dungeon.pursuer_spawn
    return {
        "floor_cells": len(floor),
        "dead_ends": int(dungeon.dead_ends.sum()),
        "artifacts": len(dungeon.objectives),
        "spawn_distance": int(field[sy, sx]),
        "stranded": stranded,
    }


def generate_dungeons(count: int = 10, size: int = DUNGEON_WIDTH):
    print(f"Generating {count} dungeons ({size}x{size})...")
    out_dir = os.path.join(project_root, "dungeons")
    os.makedirs(out_dir, exist_ok=True)

    for i in range(1, count + 1):
        dungeon = Dungeon.generate(size, size, seed=i * 1000)
        dungeon.name = f"Crypt {i}"

        stats = describe(dungeon)
        if stats["stranded"]:
            print(f"  Crypt {i}: FAILED, {stats['stranded']} stranded floor cells")
            continue

        print(f"  Crypt {i}: seed={dungeon.seed} floor={stats['floor_cells']} "
              f"dead_ends={stats['dead_ends']} artifacts={stats['artifacts']} "
              f"spawn_distance={stats['spawn_distance']}")

        dungeon.save_to_file(os.path.join(out_dir, f"crypt_{i}.json"))

    print("Generation Complete.")


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 10
    size = int(sys.argv[2]) if len(sys.argv) > 2 else DUNGEON_WIDTH
    generate_dungeons(count, size)
