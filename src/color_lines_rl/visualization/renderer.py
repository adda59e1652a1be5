from __future__ import annotations

from typing import Iterable, Optional, Tuple

import pygame

from color_lines_rl.game import ColorLinesGame, Coordinate
from color_lines_rl.game.colors import rgb_for


BACKGROUND = (15, 15, 20)
CELL_BG = (46, 46, 46)
PATH_PREVIEW = (40, 130, 40)
TRAIL = (90, 90, 90)
CLEARED = (140, 40, 40)
SELECTED_OUTLINE = (255, 255, 255)
TEXT = (230, 230, 230)


class Renderer:
    def __init__(self, cell_size: int = 48, margin: int = 20, panel_width: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, grid_size: int) -> Tuple[int, int]:
        board = grid_size * self.cell_size
        return self.margin * 3 + board + self.panel_width, self.margin * 2 + board

    def cell_at(self, pos: Tuple[int, int], grid_size: int) -> Optional[Coordinate]:
        """Board coordinate under a pixel position, or None outside the board."""
        x, y = pos
        col = (x - self.margin) // self.cell_size
        row = (y - self.margin) // self.cell_size
        if x < self.margin or y < self.margin or not (0 <= row < grid_size and 0 <= col < grid_size):
            return None
        return int(row), int(col)

    def _rect(self, row: int, col: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + col * self.cell_size,
            self.margin + row * self.cell_size,
            self.cell_size - 2,
            self.cell_size - 2,
        )

    def _font_obj(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        return self._font

    def draw(
        self,
        screen: pygame.Surface,
        game: ColorLinesGame,
        hover_path: Iterable[Coordinate] = (),
        trail: Iterable[Coordinate] = (),
        cleared: Iterable[Coordinate] = (),
    ) -> None:
        size = game.grid.size
        screen.fill(BACKGROUND)

        tint = {}
        for cell in trail:
            tint[cell] = TRAIL
        for cell in hover_path:
            tint[cell] = PATH_PREVIEW
        for cell in cleared:
            tint[cell] = CLEARED

        radius = self.cell_size // 2 - 6
        for row in range(size):
            for col in range(size):
                rect = self._rect(row, col)
                pygame.draw.rect(screen, tint.get((row, col), CELL_BG), rect)
                value = int(game.grid.grid[row, col])
                if value:
                    r = radius + 4 if game.selection == (row, col) else radius
                    pygame.draw.circle(screen, rgb_for(value), rect.center, r)
                if game.selection == (row, col):
                    pygame.draw.rect(screen, SELECTED_OUTLINE, rect, 2)

        self._draw_panel(screen, game)

    def _draw_panel(self, screen: pygame.Surface, game: ColorLinesGame) -> None:
        font = self._font_obj()
        x0 = self.margin * 2 + game.grid.size * self.cell_size
        y0 = self.margin
        screen.blit(font.render(f"Score: {game.score}", True, TEXT), (x0, y0))
        screen.blit(font.render("Next:", True, TEXT), (x0, y0 + 36))
        small = self.cell_size // 3
        for i, color in enumerate(game.peek_next_colors()):
            center = (x0 + small + i * (small * 2 + 8), y0 + 80)
            pygame.draw.circle(screen, rgb_for(int(color)), center, small)
        help_lines = ["Click: select / move", "N: new game", "ESC: quit"]
        for i, txt in enumerate(help_lines):
            screen.blit(font.render(txt, True, TEXT), (x0, y0 + 130 + i * 22))
        if game.terminal:
            over = font.render(f"Game over - {game.score} points. Press N", True, (255, 100, 100))
            screen.blit(over, (self.margin, 2))
