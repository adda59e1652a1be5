"""Game module for Color Lines RL.

Exports the core game engine and supporting classes:
- GameGrid: Board representation
- find_path / PathResult: Shortest-path move legality
- detect_runs: Five-in-a-row detection
- spawn / SpawnOutcome: Random marker placement
- ScoringRules: Scoring configuration
- ColorLinesGame: Turn state machine and session state
"""

from .colors import Color, DEFAULT_COLORS
from .grid import Cell, Coordinate, GameGrid, OutOfBoundsError
from .pathfinding import PathResult, find_path, is_movable
from .runs import detect_runs
from .spawner import SpawnOutcome, draw_colors, spawn
from .rules import ScoringRules
from .core import (
    ColorLinesGame,
    ErrorKind,
    GameConfig,
    MoveOutcome,
    ResolutionOutcome,
    SelectionOutcome,
    SelectionStatus,
    SessionState,
    TurnState,
)
from .session import new_session

__all__ = [
    "Color",
    "DEFAULT_COLORS",
    "Cell",
    "Coordinate",
    "GameGrid",
    "OutOfBoundsError",
    "PathResult",
    "find_path",
    "is_movable",
    "detect_runs",
    "SpawnOutcome",
    "draw_colors",
    "spawn",
    "ScoringRules",
    "ColorLinesGame",
    "ErrorKind",
    "GameConfig",
    "MoveOutcome",
    "ResolutionOutcome",
    "SelectionOutcome",
    "SelectionStatus",
    "SessionState",
    "TurnState",
    "new_session",
]
