from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from color_lines_rl.game import Color, ColorLinesGame, GameConfig
from color_lines_rl.game.colors import rgb_for
from color_lines_rl.game.core import outcome_summary


def _compute_action_mask(game: ColorLinesGame, moves: Optional[List[Tuple[int, int, int, int]]] = None) -> np.ndarray:
    size = game.grid.size
    mask = np.zeros((size, size, size, size), dtype=np.bool_)
    if moves is None:
        moves = game.legal_moves()
    for fr, fc, tr, tc in moves:
        mask[fr, fc, tr, tc] = True
    return mask


class ColorLinesEnv(gym.Env):
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = ColorLinesGame(config)
        self.render_mode = render_mode

        # Reward shaping parameters
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "cleared": 1.0,   # reward per cell cleared by the move
            "spawn_cleared": 0.5,  # runs completed by spawned markers
            "fill": 0.0,      # penalize board fill ratio
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        size = self.game.config.grid_size
        k = self.game.config.ball_count

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(Color), shape=(size, size), dtype=np.int8),
                "next_colors": spaces.Box(low=1, high=len(Color), shape=(k,), dtype=np.int8),
            }
        )

        # Action: (from_row, from_col, to_row, to_col)
        self.action_space = spaces.MultiDiscrete((size, size, size, size))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.ball_count
        next_colors = np.ones((k,), dtype=np.int8)
        for i, c in enumerate(self.game.peek_next_colors()[:k]):
            next_colors[i] = int(c)
        return {
            "grid": self.game.grid.clone_state().astype(np.int8),
            "next_colors": next_colors,
        }

    def _get_info(self) -> Dict[str, Any]:
        moves = self.game.legal_moves()
        return {
            "action_mask": _compute_action_mask(self.game, moves),
            "valid_actions": moves,
            "score": self.game.score,
            "steps": self.game.step_count,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        info = self._get_info()
        self._last_obs = obs
        return obs, info

    def _is_legal(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        if (fr, fc) == (tr, tc):
            return False
        grid = self.game.grid
        if not (grid.is_inside(fr, fc) and grid.is_inside(tr, tc)):
            return False
        if grid.is_empty((fr, fc)) or not grid.is_empty((tr, tc)):
            return False
        return self.game.preview_path((fr, fc), (tr, tc)).found

    def step(self, action: np.ndarray | Tuple[int, int, int, int]):
        fr, fc, tr, tc = map(int, action)

        terminated = False
        truncated = False
        reward_components: Dict[str, float] = {}
        gained = 0
        summary: Dict[str, Any] = {}

        if not self.game.terminal and self._is_legal(fr, fc, tr, tc):
            self.game.select((fr, fc))
            outcome = self.game.target((tr, tc), resolve=True)
            summary = outcome_summary(outcome)
            gained = outcome.score_delta
            reward_components["cleared"] = self.reward_weights["cleared"] * float(len(outcome.cleared))
            reward_components["spawn_cleared"] = self.reward_weights["spawn_cleared"] * float(len(outcome.spawn_cleared))
            reward_components["fill"] = -self.reward_weights["fill"] * self.game.grid.get_filled_ratio()
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        reward_components["step"] = self.step_penalty
        terminated = bool(self.game.terminal)
        self._steps += 1
        if self._steps >= self.game.config.max_episode_steps:
            truncated = True
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(gained)
        info["outcome"] = summary
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs["grid"] if self._last_obs is not None else self.game.grid.grid
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = rgb_for(int(grid[y, x]))
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
