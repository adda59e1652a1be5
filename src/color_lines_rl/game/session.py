"""Functional entry points for hosts that hold a session handle.

Each function forwards to the matching :class:`ColorLinesGame` method, so a
host can keep several independent sessions side by side.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .colors import DEFAULT_COLORS, Color
from .core import (
    ColorLinesGame,
    GameConfig,
    MoveOutcome,
    ResolutionOutcome,
    SelectionOutcome,
    SessionState,
)
from .grid import Coordinate
from .pathfinding import PathResult


Session = ColorLinesGame


def new_session(
    size: int = 9,
    colors: Sequence[Color] = DEFAULT_COLORS,
    ball_count: int = 3,
    seed: Optional[int] = None,
    auto_resolve: bool = True,
) -> Session:
    """Create a session on an empty board. Raises ``ValueError`` on bad config."""
    config = GameConfig(
        grid_size=size,
        colors=tuple(colors),
        ball_count=ball_count,
        random_seed=seed,
        auto_resolve=auto_resolve,
    )
    return ColorLinesGame(config)


def select(session: Session, coord: Coordinate) -> SelectionOutcome:
    return session.select(coord)


def target(session: Session, coord: Coordinate) -> MoveOutcome:
    return session.target(coord)


def resolve(session: Session) -> ResolutionOutcome:
    return session.resolve()


def preview_path(session: Session, src: Coordinate, dst: Coordinate) -> PathResult:
    return session.preview_path(src, dst)


def peek_next_colors(session: Session) -> List[Color]:
    return session.peek_next_colors()


def state(session: Session) -> SessionState:
    return session.session_state()
