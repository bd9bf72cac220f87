"""
Tomb Hunt - Reinforcement Learning Module
"""

from tomb.rl.gym_env import TombHuntEnv, make_env

__all__ = ["TombHuntEnv", "make_env"]
