from __future__ import annotations

import argparse
import random
from dataclasses import dataclass, field
from typing import List, Optional

import gymnasium as gym

import color_lines_rl.env  # noqa: F401


@dataclass
class RandomRunResult:
    total_reward: float = 0.0
    episode_scores: List[int] = field(default_factory=list)
    episode_moves: List[int] = field(default_factory=list)
    resets: int = 0

    @property
    def mean_score(self) -> float:
        return sum(self.episode_scores) / max(1, len(self.episode_scores))


def run_random(steps: int = 200, seed: Optional[int] = None, max_episode_steps: Optional[int] = None) -> RandomRunResult:
    """Play uniformly random legal moves for ``steps`` env steps.

    Finished or truncated episodes record their engine score and move count;
    the episode still running when ``steps`` is reached is not recorded.
    """
    rng = random.Random(seed)
    kwargs = {} if max_episode_steps is None else {"max_episode_steps": max_episode_steps}
    env = gym.make("ColorLines-9x9-v0", **kwargs)
    result = RandomRunResult()
    obs, info = env.reset(seed=seed)
    moves = 0
    for _ in range(steps):
        valid = info["valid_actions"]
        if not valid:
            # every marker is boxed in; start over
            result.episode_scores.append(int(info["score"]))
            result.episode_moves.append(moves)
            obs, info = env.reset()
            result.resets += 1
            moves = 0
            continue
        obs, reward, terminated, truncated, info = env.step(rng.choice(valid))
        result.total_reward += float(reward)
        moves += 1
        if terminated or truncated:
            result.episode_scores.append(int(info["score"]))
            result.episode_moves.append(moves)
            obs, info = env.reset()
            result.resets += 1
            moves = 0
    env.close()
    return result


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()

    result = run_random(args.steps, args.seed)
    for i, (score, moves) in enumerate(zip(result.episode_scores, result.episode_moves)):
        print(f"Episode {i + 1}: score={score} moves={moves}")
    print(f"Random agent total reward: {result.total_reward:.2f}  mean score: {result.mean_score:.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
