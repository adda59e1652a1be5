from __future__ import annotations

import argparse
from typing import List, Optional

import pygame

from color_lines_rl.game import ColorLinesGame, Coordinate, GameConfig, MoveOutcome
from .renderer import Renderer


# Input stays locked this long after a move before clears/spawns are applied.
RESOLVE_DELAY_MS = 750


def run(seed: Optional[int] = None) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = ColorLinesGame(GameConfig(random_seed=seed, auto_resolve=False))
        game.reset(seed)
        renderer = Renderer()

        screen = pygame.display.set_mode(renderer.window_size(game.grid.size))
        pygame.display.set_caption("Color Lines - Human Play")

        trail: List[Coordinate] = []
        cleared: List[Coordinate] = []
        resolve_at: Optional[int] = None
        flash_until = 0

        running = True
        while running:
            now = pygame.time.get_ticks()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_n:
                        game.reset()
                        trail, cleared, resolve_at = [], [], None
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if game.input_locked or game.terminal:
                        continue
                    cell = renderer.cell_at(event.pos, game.grid.size)
                    if cell is None:
                        continue
                    outcome = game.click(cell)
                    if isinstance(outcome, MoveOutcome) and outcome.moved:
                        trail = list(outcome.path)
                        resolve_at = now + RESOLVE_DELAY_MS

            # Deferred resolution once the move delay has elapsed
            if resolve_at is not None and now >= resolve_at:
                result = game.resolve()
                cleared = list(result.cleared | result.spawn_cleared)
                flash_until = now + RESOLVE_DELAY_MS
                trail, resolve_at = [], None
            if cleared and now >= flash_until:
                cleared = []

            hover: List[Coordinate] = []
            if game.selection is not None and not game.input_locked:
                cell = renderer.cell_at(pygame.mouse.get_pos(), game.grid.size)
                if cell is not None:
                    preview = game.preview_path(game.selection, cell)
                    if preview.found and len(preview.path) > 1:
                        hover = preview.path

            renderer.draw(screen, game, hover_path=hover, trail=trail, cleared=cleared)
            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    run(args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
