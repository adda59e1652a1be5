from __future__ import annotations

from typing import Iterable

from color_lines_rl.game import Color, Coordinate, GameGrid


def pattern_color(row: int, col: int) -> Color:
    # Neighbours along every run direction differ, so the pattern holds no runs.
    return Color((row * 3 + col) % 7 + 1)


def fill_pattern(grid: GameGrid, skip: Iterable[Coordinate] = ()) -> None:
    skipped = set(skip)
    for row in range(grid.size):
        for col in range(grid.size):
            if (row, col) in skipped:
                grid.set((row, col), None)
            else:
                grid.set((row, col), pattern_color(row, col))
