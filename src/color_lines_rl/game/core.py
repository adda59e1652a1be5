from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import numpy as np

from .colors import DEFAULT_COLORS, Color
from .grid import Coordinate, GameGrid
from .pathfinding import PathResult, find_path, is_movable, reachable_cells
from .rules import ScoringRules
from .runs import detect_runs
from .spawner import SpawnOutcome, draw_colors, spawn

logger = logging.getLogger(__name__)


class TurnState(IntEnum):
    IDLE = 0
    SELECTED = 1
    RESOLVING = 2
    TERMINAL = 3


class ErrorKind(Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    INVALID_SELECTION = "invalid_selection"
    ILLEGAL_MOVE = "illegal_move"
    SESSION_TERMINAL = "session_terminal"
    INPUT_LOCKED = "input_locked"


class SelectionStatus(Enum):
    SELECTED = "selected"
    DESELECTED = "deselected"
    REJECTED = "rejected"


@dataclass
class GameConfig:
    grid_size: int = 9
    colors: Tuple[Color, ...] = DEFAULT_COLORS
    ball_count: int = 3
    random_seed: Optional[int] = None
    auto_resolve: bool = True
    max_episode_steps: int = 10000

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if not self.colors:
            raise ValueError("at least one color is required")
        self.colors = tuple(Color(c) for c in self.colors)
        if not 0 < self.ball_count < self.grid_size * self.grid_size:
            raise ValueError(
                f"ball_count must be in (0, {self.grid_size * self.grid_size}), got {self.ball_count}"
            )


@dataclass
class SelectionOutcome:
    status: SelectionStatus
    coord: Optional[Coordinate] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.status is not SelectionStatus.REJECTED


@dataclass
class ResolutionOutcome:
    cleared: Set[Coordinate] = field(default_factory=set)
    spawned: List[Tuple[Coordinate, Color]] = field(default_factory=list)
    spawn_cleared: Set[Coordinate] = field(default_factory=set)
    score_delta: int = 0
    exhausted: bool = False
    terminal: bool = False


@dataclass
class MoveOutcome:
    moved: bool = False
    path: List[Coordinate] = field(default_factory=list)
    cleared: Set[Coordinate] = field(default_factory=set)
    score_delta: int = 0
    spawned: List[Tuple[Coordinate, Color]] = field(default_factory=list)
    spawn_cleared: Set[Coordinate] = field(default_factory=set)
    terminal: bool = False
    resolved: bool = False
    error: Optional[ErrorKind] = None

    def absorb(self, resolution: ResolutionOutcome) -> None:
        self.cleared = resolution.cleared
        self.spawned = resolution.spawned
        self.spawn_cleared = resolution.spawn_cleared
        self.score_delta = resolution.score_delta
        self.terminal = resolution.terminal
        self.resolved = True


@dataclass(frozen=True)
class SessionState:
    score: int
    terminal: bool
    grid_snapshot: Tuple[Tuple[Optional[Color], ...], ...]
    selection: Optional[Coordinate] = None
    input_locked: bool = False


class ColorLinesGame:
    """Turn engine for one color-lines session.

    Owns the grid, the score, the lookahead color queue and the RNG. Hosts
    drive it with ``select``/``target`` (or ``click``); when resolution is
    deferred the host calls ``resolve`` once its move animation is over.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = np.random.default_rng(self.config.random_seed)
        self.grid = GameGrid(self.config.grid_size)
        self.score = 0
        self.selection: Optional[Coordinate] = None
        self.turn_state = TurnState.IDLE
        self.next_colors: List[Color] = self._draw_queue()
        self.total_cleared = 0
        self.moves_made = 0
        self.step_count = 0

    # ---------- Setup ----------
    def _draw_queue(self) -> List[Color]:
        return draw_colors(self.rng, self.config.colors, self.config.ball_count)

    def reset(self, seed: Optional[int] = None) -> None:
        """Start a new game: empty board, fresh queue, opening spawn."""
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self.grid.reset()
        self.score = 0
        self.selection = None
        self.turn_state = TurnState.IDLE
        self.next_colors = self._draw_queue()
        self.total_cleared = 0
        self.moves_made = 0
        self.step_count = 0
        self._spawn_batch()
        self._finish_turn()

    # ---------- Reads ----------
    @property
    def terminal(self) -> bool:
        return self.turn_state == TurnState.TERMINAL

    @property
    def input_locked(self) -> bool:
        return self.turn_state == TurnState.RESOLVING

    def peek_next_colors(self) -> List[Color]:
        return list(self.next_colors)

    def preview_path(self, src: Coordinate, dst: Coordinate) -> PathResult:
        return find_path(self.grid, src, dst)

    def legal_destinations(self, src: Coordinate) -> List[Coordinate]:
        if self.turn_state in (TurnState.TERMINAL, TurnState.RESOLVING):
            return []
        if not self.grid.is_within_bounds(src) or self.grid.is_empty(src):
            return []
        return reachable_cells(self.grid, src)

    def legal_moves(self) -> List[Tuple[int, int, int, int]]:
        """All (from_row, from_col, to_row, to_col) moves that change the board."""
        moves: List[Tuple[int, int, int, int]] = []
        if self.turn_state in (TurnState.TERMINAL, TurnState.RESOLVING):
            return moves
        size = self.grid.size
        for row in range(size):
            for col in range(size):
                if self.grid.grid[row, col] == 0 or not is_movable(self.grid, (row, col)):
                    continue
                for dst in reachable_cells(self.grid, (row, col)):
                    moves.append((row, col, dst[0], dst[1]))
        return moves

    def session_state(self) -> SessionState:
        return SessionState(
            score=self.score,
            terminal=self.terminal,
            grid_snapshot=self.grid.snapshot(),
            selection=self.selection,
            input_locked=self.input_locked,
        )

    def get_state(self) -> dict:
        return {
            "grid": self.grid.clone_state(),
            "next_colors": [int(c) for c in self.next_colors],
            "selection": self.selection,
            "turn_state": self.turn_state.name,
            "score": self.score,
            "total_cleared": self.total_cleared,
            "moves_made": self.moves_made,
            "step_count": self.step_count,
            "game_over": self.terminal,
            "filled_ratio": self.grid.get_filled_ratio(),
        }

    def get_game_stats(self) -> dict:
        return {
            "final_score": self.score,
            "moves_made": self.moves_made,
            "cells_cleared": self.total_cleared,
            "steps_taken": self.step_count,
            "final_fill_ratio": self.grid.get_filled_ratio(),
            "avg_score_per_move": self.score / max(1, self.moves_made),
        }

    # ---------- Actions ----------
    def _locked_error(self) -> Optional[ErrorKind]:
        if self.turn_state == TurnState.TERMINAL:
            return ErrorKind.SESSION_TERMINAL
        if self.turn_state == TurnState.RESOLVING:
            return ErrorKind.INPUT_LOCKED
        return None

    def select(self, coord: Coordinate) -> SelectionOutcome:
        error = self._locked_error()
        if error is not None:
            return SelectionOutcome(SelectionStatus.REJECTED, coord, error)
        coord = (int(coord[0]), int(coord[1]))
        if not self.grid.is_within_bounds(coord):
            return SelectionOutcome(SelectionStatus.REJECTED, coord, ErrorKind.OUT_OF_BOUNDS)

        if self.selection == coord:
            self.selection = None
            self.turn_state = TurnState.IDLE
            return SelectionOutcome(SelectionStatus.DESELECTED, coord)

        if self.grid.is_empty(coord) or not is_movable(self.grid, coord):
            return SelectionOutcome(SelectionStatus.REJECTED, coord, ErrorKind.INVALID_SELECTION)

        self.selection = coord
        self.turn_state = TurnState.SELECTED
        return SelectionOutcome(SelectionStatus.SELECTED, coord)

    def _deselect(self) -> None:
        self.selection = None
        self.turn_state = TurnState.IDLE

    def target(self, coord: Coordinate, resolve: Optional[bool] = None) -> MoveOutcome:
        error = self._locked_error()
        if error is not None:
            return MoveOutcome(error=error, terminal=self.terminal)
        coord = (int(coord[0]), int(coord[1]))
        if not self.grid.is_within_bounds(coord):
            return MoveOutcome(error=ErrorKind.OUT_OF_BOUNDS)
        if self.selection is None:
            return MoveOutcome(error=ErrorKind.ILLEGAL_MOVE)

        src = self.selection
        result = find_path(self.grid, src, coord)
        if not result.found:
            self._deselect()
            return MoveOutcome(error=ErrorKind.ILLEGAL_MOVE)

        self.grid.move(src, coord)
        self.selection = None
        self.turn_state = TurnState.RESOLVING
        self.moves_made += 1
        self.step_count += 1
        logger.debug("moved %s -> %s in %d steps", src, coord, result.length)

        outcome = MoveOutcome(moved=True, path=result.path)
        if resolve is None:
            resolve = self.config.auto_resolve
        if resolve:
            outcome.absorb(self.resolve())
        return outcome

    def click(self, coord: Coordinate) -> Union[SelectionOutcome, MoveOutcome]:
        """Route a board click: occupied cells select, empty cells are move targets."""
        if (
            self.selection is not None
            and self.grid.is_within_bounds(coord)
            and self.grid.is_empty(coord)
        ):
            return self.target(coord)
        return self.select(coord)

    def resolve(self) -> ResolutionOutcome:
        """Clear runs left by the last move, or spawn new markers if there were none."""
        if self.turn_state != TurnState.RESOLVING:
            raise RuntimeError(f"nothing to resolve in state {self.turn_state.name}")
        outcome = ResolutionOutcome()
        outcome.cleared, outcome.score_delta = self._clear_runs()
        if not outcome.cleared:
            spawned, spawn_cleared, delta = self._spawn_batch()
            outcome.spawned = spawned.placed
            outcome.exhausted = spawned.exhausted
            outcome.spawn_cleared = spawn_cleared
            outcome.score_delta += delta
        outcome.terminal = self._finish_turn()
        return outcome

    # ---------- Internals ----------
    def _clear_runs(self) -> Tuple[Set[Coordinate], int]:
        to_clear = detect_runs(self.grid, self.rules.run_length)
        for cell in to_clear:
            self.grid.set(cell, None)
        gained = self.rules.score_for_clear(len(to_clear))
        if to_clear:
            self.score += gained
            self.total_cleared += len(to_clear)
            logger.debug("cleared %d cells, score now %d", len(to_clear), self.score)
        return to_clear, gained

    def _spawn_batch(self) -> Tuple[SpawnOutcome, Set[Coordinate], int]:
        outcome = spawn(self.grid, self.config.ball_count, self.next_colors, self.rng, self.config.colors)
        if not outcome.exhausted:
            self.next_colors = self._draw_queue()
        logger.debug("spawned %d markers (exhausted=%s)", len(outcome.placed), outcome.exhausted)
        cleared, gained = self._clear_runs()
        return outcome, cleared, gained

    def _finish_turn(self) -> bool:
        if self.grid.count_empty() == 0:
            self.turn_state = TurnState.TERMINAL
            self.selection = None
            logger.info("game over with score %d after %d moves", self.score, self.moves_made)
            return True
        self.turn_state = TurnState.IDLE
        return False


def outcome_summary(outcome: Union[SelectionOutcome, MoveOutcome]) -> Dict[str, Any]:
    """Flat dict view of an outcome, for logging and env info."""
    if isinstance(outcome, SelectionOutcome):
        return {
            "status": outcome.status.value,
            "coord": outcome.coord,
            "error": outcome.error.value if outcome.error else None,
        }
    return {
        "moved": outcome.moved,
        "path_length": max(0, len(outcome.path) - 1),
        "cleared": len(outcome.cleared) + len(outcome.spawn_cleared),
        "spawned": len(outcome.spawned),
        "score_delta": outcome.score_delta,
        "terminal": outcome.terminal,
        "error": outcome.error.value if outcome.error else None,
    }
