from __future__ import annotations

import argparse

import gymnasium as gym
import pygame

from color_lines_rl.rl.train_ppo import make_env
from color_lines_rl.visualization.renderer import Renderer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=4)
    return p


def main() -> None:
    args = build_parser().parse_args()
    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    env: gym.Env = make_env(resample=(args.algo == "ppo"))
    model = Algo.load(args.model, device="auto")
    renderer = Renderer()

    pygame.init()
    try:
        game = env.unwrapped.game
        screen = pygame.display.set_mode(renderer.window_size(game.grid.size))
        pygame.display.set_caption("Color Lines - Agent Eval")
        font = pygame.font.SysFont(None, 24)
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            if args.algo == "maskable":
                mask = env.get_action_mask()
                action, _ = model.predict(obs, deterministic=True, action_masks=mask)
            else:
                action, _ = model.predict(obs, deterministic=True)

            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                print(f"Episode finished with score {info['score']}")
                obs, info = env.reset()

            renderer.draw(screen, env.unwrapped.game)
            txt = font.render(f"step {steps}/{args.steps}  reward {total_reward:.1f}", True, (230, 230, 230))
            screen.blit(txt, (renderer.margin, 2))
            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
