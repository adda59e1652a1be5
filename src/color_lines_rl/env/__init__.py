"""Gymnasium environments for Color Lines RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register default Color Lines environment
register(
    id="ColorLines-9x9-v0",
    entry_point="color_lines_rl.env.color_lines_env:ColorLinesEnv",
)

__all__ = ["ColorLines-9x9-v0"]
