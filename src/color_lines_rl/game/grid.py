from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .colors import Color


Coordinate = Tuple[int, int]


class OutOfBoundsError(IndexError):
    """Raised when a coordinate falls outside [0, size) on either axis."""

    def __init__(self, coord: Coordinate, size: int) -> None:
        super().__init__(f"coordinate {coord} outside {size}x{size} grid")
        self.coord = coord
        self.size = size


@dataclass(frozen=True)
class Cell:
    color: Optional[Color] = None

    @property
    def occupied(self) -> bool:
        return self.color is not None


class GameGrid:
    """Square 2D board of colored markers.

    The grid uses 0 for empty cells and the ``Color`` value for occupied ones.
    Coordinates are (row, col). Every accessor validates its coordinate and
    raises ``OutOfBoundsError`` without touching the board.
    """

    def __init__(self, size: int) -> None:
        self.size = int(size)
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_within_bounds(self, coord: Coordinate) -> bool:
        row, col = coord
        return self.is_inside(row, col)

    def _check(self, coord: Coordinate) -> Tuple[int, int]:
        row, col = int(coord[0]), int(coord[1])
        if not self.is_inside(row, col):
            raise OutOfBoundsError((row, col), self.size)
        return row, col

    def get(self, coord: Coordinate) -> Cell:
        return Cell(self.color_at(coord))

    def color_at(self, coord: Coordinate) -> Optional[Color]:
        row, col = self._check(coord)
        value = int(self.grid[row, col])
        return Color(value) if value else None

    def is_empty(self, coord: Coordinate) -> bool:
        row, col = self._check(coord)
        return bool(self.grid[row, col] == 0)

    def set(self, coord: Coordinate, color: Optional[Color]) -> None:
        row, col = self._check(coord)
        self.grid[row, col] = 0 if color is None else int(Color(color))

    def move(self, src: Coordinate, dst: Coordinate) -> None:
        """Relocate the marker at ``src`` to ``dst``. A zero-length move is a no-op."""
        color = self.color_at(src)
        self._check(dst)
        self.set(src, None)
        self.set(dst, color)

    def count_empty(self) -> int:
        return int(np.count_nonzero(self.grid == 0))

    def count_occupied(self) -> int:
        return int(np.count_nonzero(self.grid))

    def empty_cells(self) -> List[Coordinate]:
        rows, cols = np.nonzero(self.grid == 0)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def get_filled_ratio(self) -> float:
        return self.count_occupied() / float(self.size * self.size)

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.size)
        new_grid.grid = self.grid.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def snapshot(self) -> Tuple[Tuple[Optional[Color], ...], ...]:
        return tuple(
            tuple(Color(int(v)) if v else None for v in row)
            for row in self.grid
        )
