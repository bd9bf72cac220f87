"""
Tomb Hunt - Game Constants and Configuration
A maze crawl with a relentless hunter
"""

from enum import Enum, auto

# =============================================================================
# DUNGEON SETTINGS
# =============================================================================
DUNGEON_WIDTH = 30
DUNGEON_HEIGHT = 30

# Smallest maze that still has a wall border and one interior floor cell
MIN_DUNGEON_SIZE = 3

# Artifacts hidden in dead ends
ARTIFACT_COUNT = 3

# Chance that a dead end gets an extra opening (0.0 = perfect maze)
LOOP_CHANCE = 0.0


class CellType(Enum):
    FLOOR = 0
    WALL = 1


# Text form of a layout row ('1' wall, '0' floor)
CELL_CHARS = {
    CellType.WALL: "1",
    CellType.FLOOR: "0",
}

# =============================================================================
# PURSUER SETTINGS
# =============================================================================
# Close range "arrive" steering, speed shrinks with remaining distance
ARRIVE_MAX_SPEED = 1.5
ARRIVE_GAIN = 2.0
ARRIVE_EPSILON = 1e-3

# Corridor steering toward the next downhill cell center
STEER_MAX_SPEED = 1.5
STEER_BASE_SPEED = 0.6
STEER_GAIN = 1.0

# Contact distance (world units) that counts as a catch
CATCH_RADIUS = 0.5


class StepAction(Enum):
    HOLD = auto()    # Zero velocity
    ARRIVE = auto()  # Direct steering at the target's exact position
    STEER = auto()   # Move toward a neighbouring cell center


# =============================================================================
# RUNNER SETTINGS
# =============================================================================
RUNNER_SPEED = 1.2  # Tiles per second

# =============================================================================
# GAME PROGRESS
# =============================================================================
class GateState(Enum):
    NEVER_OPENED = auto()  # Runner has not stepped inside yet
    CLOSED = auto()        # Sealed behind the runner
    OPEN = auto()          # Every artifact collected, escape possible


class Outcome(Enum):
    IN_PROGRESS = auto()
    CAUGHT = auto()
    ESCAPED = auto()


FLASH_ENTERED = "Find the artifacts... do not get caught."
FLASH_PASSAGE_OPEN = "The passage is open. Escape."
FLASH_CAUGHT = "This will be your tomb"
FLASH_ESCAPED = "You escaped the tomb."

# =============================================================================
# SIMULATION
# =============================================================================
TICK_RATE = 60
TICK_DT = 1.0 / TICK_RATE

# =============================================================================
# REINFORCEMENT LEARNING SETTINGS
# =============================================================================
RL_CONFIG = {
    "observation_size": 7,  # Local wall view around the runner, in tiles
    "dungeon_size": (15, 15),
    "ticks_per_step": 6,

    # Rewards
    "reward_artifact": 10.0,
    "reward_escape": 100.0,
    "reward_progress": 0.05,
    "penalty_caught": -100.0,
    "penalty_time": -0.01,  # Per step

    "max_steps_per_episode": 1500,
}

# =============================================================================
# DEBUG SETTINGS
# =============================================================================
DEBUG_MODE = False
LOG_DIR = "logs"
SETTINGS_FILE = "settings.json"
