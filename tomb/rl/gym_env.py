"""
Tomb Hunt - Gymnasium RL Environment
The agent plays the runner: collect the artifacts, escape, avoid the pursuer
"""

import math
from typing import Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from tomb.core.constants import RL_CONFIG, TICK_DT, GateState, Outcome
from tomb.core.logger import get_logger
from tomb.core.session import Session
from tomb.levels.level import Dungeon
from tomb.utils.grid import world_to_grid

# Action -> (dx, dz) direction
ACTION_DIRECTIONS = {
    0: (0.0, 0.0),   # Stay
    1: (0.0, -1.0),  # North
    2: (0.0, 1.0),   # South
    3: (-1.0, 0.0),  # West
    4: (1.0, 0.0),   # East
}


class TombHuntEnv(gym.Env):
    """
    Gymnasium-compatible environment for Tomb Hunt.

    Observation Space:
    - Runner position (normalized x, z)
    - Pursuer position relative to the runner (normalized)
    - Fraction of artifacts remaining, gate open flag
    - Nearest remaining artifact relative to the runner (normalized)
    - Local wall view (grid around the runner, 1.0 wall / 0.0 floor)

    Action Space:
    - 0: Stay
    - 1: North
    - 2: South
    - 3: West
    - 4: East
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 10}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 dungeon_size: Tuple[int, int] = None,
                 max_steps: int = None,
                 seed: Optional[int] = None):
        super().__init__()

        self.render_mode = render_mode
        self.dungeon_width, self.dungeon_height = dungeon_size or RL_CONFIG["dungeon_size"]
        self.max_steps = max_steps or RL_CONFIG["max_steps_per_episode"]
        self.ticks_per_step = RL_CONFIG["ticks_per_step"]
        self._seed = seed

        self.view_radius = RL_CONFIG["observation_size"] // 2
        self.view_size = self.view_radius * 2 + 1

        self.action_space = spaces.Discrete(len(ACTION_DIRECTIONS))

        obs_size = (
            2 +  # Runner: x, z
            2 +  # Pursuer: rel_x, rel_z
            2 +  # Artifacts remaining, gate open
            2 +  # Nearest artifact: rel_x, rel_z
            self.view_size * self.view_size  # Local map
        )
        self.observation_space = spaces.Box(
            low=-1.0,
            high=1.0,
            shape=(obs_size,),
            dtype=np.float32
        )

        self.session: Optional[Session] = None
        self.steps = 0
        self.total_reward = 0.0
        self.episode_count = 0
        self._prev_goal_distance = float('inf')

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, dict]:
        """Reset the environment."""
        super().reset(seed=seed)

        if seed is not None:
            self._seed = seed
        # Fresh maze each episode unless pinned by a seed
        maze_seed = self._seed if self._seed is not None else int(self.np_random.integers(0, 2**31))

        dungeon = Dungeon.generate(self.dungeon_width, self.dungeon_height, seed=maze_seed)
        self.session = Session(dungeon)

        self.steps = 0
        self.total_reward = 0.0
        self.episode_count += 1
        self._prev_goal_distance = self._goal_distance()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, dict]:
        """Execute one step in the environment."""
        if isinstance(action, np.ndarray):
            action = int(action.item())
        if action not in ACTION_DIRECTIONS:
            raise ValueError(f"Invalid action {action}")

        self.steps += 1
        reward = RL_CONFIG["penalty_time"]
        progress = self.session.progress
        collected_before = progress.collected_count

        direction = ACTION_DIRECTIONS[action]
        for _ in range(self.ticks_per_step):
            self.session.tick(direction, TICK_DT)
            if self.session.is_over:
                break

        reward += RL_CONFIG["reward_artifact"] * (progress.collected_count - collected_before)

        goal_distance = self._goal_distance()
        if goal_distance < self._prev_goal_distance:
            reward += RL_CONFIG["reward_progress"]
        self._prev_goal_distance = goal_distance

        terminated = False
        if self.session.outcome == Outcome.CAUGHT:
            reward += RL_CONFIG["penalty_caught"]
            terminated = True
        elif self.session.outcome == Outcome.ESCAPED:
            reward += RL_CONFIG["reward_escape"]
            terminated = True

        truncated = not terminated and self.steps >= self.max_steps

        self.total_reward += reward
        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def _goal_distance(self) -> float:
        """Distance to the nearest remaining artifact, or to the exit once all are found."""
        goal = self._current_goal()
        if goal is None:
            return 0.0
        runner = self.session.runner
        return math.hypot(goal[0] - runner.x, goal[1] - runner.z)

    def _current_goal(self) -> Optional[Tuple[float, float]]:
        grid = self.session.grid
        runner = self.session.runner
        remaining = self.session.progress.remaining

        if remaining:
            targets = remaining
        elif self.session.progress.gate == GateState.OPEN:
            targets = [grid.outside_entrance()]
        else:
            return None

        points = [(x - grid.width / 2 + 0.5, y - grid.height / 2 + 0.5) for x, y in targets]
        return min(points, key=lambda p: math.hypot(p[0] - runner.x, p[1] - runner.z))

    def _get_observation(self) -> np.ndarray:
        """Build observation array."""
        session = self.session
        grid = session.grid
        runner = session.runner
        pursuer = session.pursuer
        progress = session.progress
        w, h = grid.width, grid.height

        obs = [
            runner.x / w * 2,
            runner.z / h * 2,
            (pursuer.x - runner.x) / w,
            (pursuer.z - runner.z) / h,
            len(progress.remaining) / max(1, len(progress.objectives)),
            1.0 if progress.gate == GateState.OPEN else 0.0,
        ]

        goal = self._current_goal()
        if goal is None:
            obs.extend([0.0, 0.0])
        else:
            obs.extend([(goal[0] - runner.x) / w, (goal[1] - runner.z) / h])

        # Local map view
        cx, cy = world_to_grid(runner.x, runner.z, w, h)
        padded = np.pad(grid.cells, self.view_radius + 1, constant_values=1)
        top = cy + 1
        left = cx + 1
        window = padded[top:top + self.view_size, left:left + self.view_size]
        view = np.ones((self.view_size, self.view_size), dtype=np.float32)
        view[:window.shape[0], :window.shape[1]] = window
        obs.extend(view.ravel().tolist())

        return np.clip(np.array(obs, dtype=np.float32), -1.0, 1.0)

    def _get_info(self) -> dict:
        """Get additional info for debugging."""
        progress = self.session.progress
        return {
            "steps": self.steps,
            "total_reward": self.total_reward,
            "runner_pos": self.session.runner.position,
            "pursuer_pos": self.session.pursuer.position,
            "artifacts_collected": progress.collected_count,
            "gate": progress.gate.name,
            "outcome": progress.outcome.name,
            "seed": self.session.dungeon.seed,
        }

    def render(self):
        """Render the environment."""
        if self.render_mode == "ansi":
            return self._ansi_render()
        return None

    def _ansi_render(self) -> str:
        session = self.session
        grid = session.grid
        marks = {cell: 'A' for cell in session.progress.remaining}
        marks[session.pursuer.cell(grid)] = 'P'
        marks[session.runner.cell(grid)] = 'R'

        # Collected artifacts are cleared from the base map
        dungeon = session.dungeon
        for cell in session.progress.collected:
            marks.setdefault(cell, ' ')

        text = dungeon.render(marks)
        get_logger().debug(
            f"Step: {self.steps}, Runner: {session.runner}, Pursuer: {session.pursuer}, "
            f"Reward: {self.total_reward:.2f}"
        )
        return text

    def close(self):
        """Clean up resources."""
        self.session = None


def make_env(dungeon_size: Tuple[int, int] = None, seed: int = None):
    """Create environment instance."""
    return TombHuntEnv(dungeon_size=dungeon_size, seed=seed)
