"""
Tests for the Gymnasium environment
"""

import numpy as np
import pytest

from tomb.rl import TombHuntEnv, make_env


@pytest.fixture
def env():
    environment = TombHuntEnv(render_mode="ansi", dungeon_size=(11, 11), max_steps=50, seed=3)
    yield environment
    environment.close()


def test_reset_observation(env):
    """Test observation shape and bounds."""
    obs, info = env.reset()

    assert obs.shape == env.observation_space.shape
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["seed"] == 3
    assert info["gate"] == "NEVER_OPENED"


def test_step_returns_gym_tuple(env):
    env.reset()
    obs, reward, terminated, truncated, info = env.step(4)

    assert env.observation_space.contains(obs)
    assert isinstance(reward, float)
    assert isinstance(terminated, bool)
    assert isinstance(truncated, bool)
    assert info["steps"] == 1


def test_numpy_action_accepted(env):
    env.reset()
    env.step(np.array(2))


def test_invalid_action(env):
    env.reset()
    with pytest.raises(ValueError):
        env.step(9)


def test_truncates_at_max_steps(env):
    env.reset()
    truncated = terminated = False
    steps = 0
    while not (truncated or terminated):
        _, _, terminated, truncated, _ = env.step(0)
        steps += 1
    # Standing outside the entrance is safe, so the episode runs out
    assert truncated
    assert steps == 50


def test_seeded_reset_is_reproducible():
    a = make_env((11, 11), seed=5)
    b = make_env((11, 11), seed=5)
    obs_a, _ = a.reset()
    obs_b, _ = b.reset()
    assert np.array_equal(obs_a, obs_b)


def test_ansi_render(env):
    env.reset()
    text = env.render()
    lines = text.splitlines()
    assert len(lines) == 11
    assert 'P' in text
