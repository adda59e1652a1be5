from __future__ import annotations

from typing import Set

from .grid import Coordinate, GameGrid


# horizontal, vertical, diagonal down-right, diagonal down-left
RUN_DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


def detect_runs(grid: GameGrid, run_length: int = 5) -> Set[Coordinate]:
    """Cells belonging to a same-colored run of at least ``run_length``.

    Every occupied cell starts a window of ``run_length`` cells in each
    direction. A run longer than the window is still covered in full since
    each of its inner offsets starts its own qualifying window.
    """
    board = grid.grid
    size = grid.size
    to_clear: Set[Coordinate] = set()
    for row in range(size):
        for col in range(size):
            color = board[row, col]
            if color == 0:
                continue
            for dr, dc in RUN_DIRECTIONS:
                end_r = row + dr * (run_length - 1)
                end_c = col + dc * (run_length - 1)
                if not grid.is_inside(end_r, end_c):
                    continue
                window = [(row + i * dr, col + i * dc) for i in range(run_length)]
                if all(board[r, c] == color for r, c in window):
                    to_clear.update(window)
    return to_clear
