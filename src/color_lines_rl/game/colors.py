from __future__ import annotations

from enum import IntEnum
from typing import Dict, Tuple


class Color(IntEnum):
    BLACK = 1
    WHITE = 2
    RED = 3
    LIME = 4
    BLUE = 5
    ORANGE = 6
    YELLOW = 7


DEFAULT_COLORS: Tuple[Color, ...] = tuple(Color)


PALETTE: Dict[Color, Tuple[int, int, int]] = {
    Color.BLACK: (10, 10, 10),
    Color.WHITE: (245, 245, 245),
    Color.RED: (230, 30, 30),
    Color.LIME: (0, 230, 0),
    Color.BLUE: (30, 60, 240),
    Color.ORANGE: (255, 165, 0),
    Color.YELLOW: (250, 230, 20),
}


def rgb_for(value: int) -> Tuple[int, int, int]:
    """RGB for a raw grid value; 0 (empty) maps to the board background."""
    if value == 0:
        return (46, 46, 46)
    return PALETTE.get(Color(value), (200, 200, 200))
