from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from .colors import Color
from .grid import Coordinate, GameGrid


@dataclass
class SpawnOutcome:
    placed: List[Tuple[Coordinate, Color]] = field(default_factory=list)
    exhausted: bool = False


def draw_colors(rng: np.random.Generator, palette: Sequence[Color], count: int) -> List[Color]:
    """Draw ``count`` colors uniformly from ``palette``."""
    idx = rng.integers(0, len(palette), size=count)
    return [Color(palette[int(i)]) for i in idx]


def _pick_empty_cell(grid: GameGrid, rng: np.random.Generator) -> Coordinate | None:
    size = grid.size
    # Random probing is cheap on a sparse board; after size**2 misses fall
    # back to a direct choice among the cells that are still empty.
    for _ in range(size * size):
        row, col = (int(v) for v in rng.integers(0, size, size=2))
        if grid.grid[row, col] == 0:
            return row, col
    empty = grid.empty_cells()
    if not empty:
        return None
    return empty[int(rng.integers(0, len(empty)))]


def spawn(
    grid: GameGrid,
    count: int,
    queue: List[Color],
    rng: np.random.Generator,
    palette: Sequence[Color] = tuple(Color),
) -> SpawnOutcome:
    """Place up to ``count`` new markers on distinct empty cells.

    Colors are taken from the front of ``queue``, which is consumed in place.
    If the board fills up before ``count`` markers are placed the outcome is
    flagged ``exhausted``. Refilling the queue is left to the caller.
    """
    outcome = SpawnOutcome()
    for _ in range(count):
        cell = _pick_empty_cell(grid, rng)
        if cell is None:
            outcome.exhausted = True
            break
        color = queue.pop(0) if queue else draw_colors(rng, palette, 1)[0]
        grid.set(cell, color)
        outcome.placed.append((cell, color))
    return outcome
