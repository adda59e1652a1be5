import random

import pytest

from color_lines_rl.game import (
    Color,
    ColorLinesGame,
    ErrorKind,
    GameConfig,
    MoveOutcome,
    SelectionOutcome,
    SelectionStatus,
    TurnState,
)
from color_lines_rl.game.pathfinding import reachable_cells

from tests.helpers import fill_pattern, pattern_color


def _game(**kwargs) -> ColorLinesGame:
    kwargs.setdefault("random_seed", 0)
    return ColorLinesGame(GameConfig(**kwargs))


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(grid_size=3, ball_count=9)
    with pytest.raises(ValueError):
        GameConfig(ball_count=0)
    with pytest.raises(ValueError):
        GameConfig(colors=())


def test_reset_performs_opening_spawn():
    game = _game()
    assert game.grid.count_occupied() == 0
    game.reset(seed=3)
    assert game.grid.count_occupied() == 3
    assert len(game.peek_next_colors()) == 3
    assert game.turn_state == TurnState.IDLE
    assert game.score == 0


def test_select_rules():
    game = _game()
    out = game.select((0, 0))
    assert out.status is SelectionStatus.REJECTED
    assert out.error is ErrorKind.INVALID_SELECTION

    game.grid.set((4, 4), Color.RED)
    game.grid.set((1, 1), Color.BLUE)
    assert game.select((4, 4)).status is SelectionStatus.SELECTED
    assert game.turn_state == TurnState.SELECTED

    # another movable marker replaces the selection
    assert game.select((1, 1)).status is SelectionStatus.SELECTED
    assert game.selection == (1, 1)

    # same marker again deselects
    assert game.select((1, 1)).status is SelectionStatus.DESELECTED
    assert game.selection is None
    assert game.turn_state == TurnState.IDLE

    assert game.select((9, 0)).error is ErrorKind.OUT_OF_BOUNDS


def test_immovable_marker_cannot_be_selected():
    game = _game()
    fill_pattern(game.grid, skip=[(8, 8)])
    out = game.select((0, 0))
    assert out.error is ErrorKind.INVALID_SELECTION
    assert game.selection is None
    assert game.select((8, 7)).status is SelectionStatus.SELECTED
    # a rejected selection keeps the current one
    game.select((0, 0))
    assert game.selection == (8, 7)


def test_target_without_selection_is_illegal():
    game = _game()
    out = game.target((4, 4))
    assert not out.moved
    assert out.error is ErrorKind.ILLEGAL_MOVE


def test_unreachable_target_deselects():
    game = _game()
    game.grid.set((0, 0), Color.RED)
    game.grid.set((8, 7), Color.BLUE)
    game.grid.set((7, 8), Color.BLUE)
    game.select((0, 0))
    out = game.target((8, 8))
    assert not out.moved
    assert out.error is ErrorKind.ILLEGAL_MOVE
    assert game.selection is None
    assert game.turn_state == TurnState.IDLE
    assert game.grid.color_at((0, 0)) is Color.RED


def test_out_of_bounds_target_keeps_selection():
    game = _game()
    game.grid.set((0, 0), Color.RED)
    game.select((0, 0))
    out = game.target((0, 9))
    assert out.error is ErrorKind.OUT_OF_BOUNDS
    assert game.selection == (0, 0)


def test_move_completing_run_clears_and_scores_without_spawn():
    game = _game()
    for c in range(4):
        game.grid.set((0, c), Color.RED)
    game.grid.set((3, 4), Color.RED)
    queue_before = game.peek_next_colors()

    game.select((3, 4))
    out = game.target((0, 4))
    assert out.moved
    assert out.path == [(3, 4), (2, 4), (1, 4), (0, 4)]
    assert out.cleared == {(0, c) for c in range(5)}
    assert out.score_delta == 5
    assert out.spawned == []
    assert game.score == 5
    assert game.grid.count_occupied() == 0
    assert game.peek_next_colors() == queue_before
    assert game.turn_state == TurnState.IDLE


def test_non_clearing_move_spawns_queued_colors():
    game = _game()
    game.grid.set((4, 4), Color.RED)
    queued = game.peek_next_colors()
    game.select((4, 4))
    out = game.target((6, 6))
    assert out.moved and out.resolved
    assert out.cleared == set()
    assert [color for _, color in out.spawned] == queued
    assert game.grid.count_occupied() == 4
    assert len(game.peek_next_colors()) == 3
    assert game.grid.color_at((6, 6)) is Color.RED
    assert game.grid.is_empty((4, 4))


def test_zero_length_move_is_accepted():
    game = _game()
    game.grid.set((4, 4), Color.RED)
    game.select((4, 4))
    out = game.target((4, 4))
    assert out.moved
    assert out.path == [(4, 4)]
    assert len(out.spawned) == 3


def test_deferred_resolution_locks_input():
    game = _game(auto_resolve=False)
    game.grid.set((4, 4), Color.RED)
    game.grid.set((0, 0), Color.BLUE)
    game.select((4, 4))
    out = game.target((4, 5))
    assert out.moved and not out.resolved
    assert out.spawned == []
    assert game.input_locked
    assert game.turn_state == TurnState.RESOLVING

    assert game.select((0, 0)).error is ErrorKind.INPUT_LOCKED
    assert game.target((1, 1)).error is ErrorKind.INPUT_LOCKED

    result = game.resolve()
    assert len(result.spawned) == 3
    assert not game.input_locked
    assert game.turn_state == TurnState.IDLE
    with pytest.raises(RuntimeError):
        game.resolve()


def test_spawned_markers_completing_a_run_are_cleared():
    game = _game(ball_count=2)
    fill_pattern(game.grid, skip=[(0, 4), (8, 8)])
    for c in range(4):
        game.grid.set((0, c), Color.RED)
    game.next_colors = [Color.RED, Color.RED]

    game.select((8, 7))
    out = game.target((8, 8))
    assert out.moved
    assert out.cleared == set()
    assert {cell for cell, _ in out.spawned} == {(0, 4), (8, 7)}
    assert out.spawn_cleared == {(0, c) for c in range(5)}
    assert out.score_delta == 5
    assert game.score == 5
    assert not out.terminal
    assert game.grid.count_empty() == 5


def test_board_filling_up_ends_the_game():
    game = _game()
    fill_pattern(game.grid, skip=[(8, 8)])
    game.select((7, 8))
    out = game.target((8, 8))
    assert out.moved
    assert len(out.spawned) == 1
    assert out.terminal
    assert game.terminal
    assert game.grid.count_empty() == 0
    assert game.grid.color_at((8, 8)) is pattern_color(7, 8)

    assert game.select((0, 0)).error is ErrorKind.SESSION_TERMINAL
    assert game.target((0, 0)).error is ErrorKind.SESSION_TERMINAL
    assert game.legal_moves() == []


def test_legal_moves_match_reachability():
    game = _game()
    fill_pattern(game.grid, skip=[(0, 1), (0, 2)])
    moves = set(game.legal_moves())
    assert moves == {
        (0, 0, 0, 1), (0, 0, 0, 2),
        (1, 1, 0, 1), (1, 1, 0, 2),
        (1, 2, 0, 1), (1, 2, 0, 2),
        (0, 3, 0, 1), (0, 3, 0, 2),
    }


def test_random_play_keeps_invariants():
    game = _game(random_seed=11)
    game.reset(11)
    rng = random.Random(11)
    area = game.grid.size ** 2
    for _ in range(300):
        moves = game.legal_moves()
        if game.terminal or not moves:
            break
        fr, fc, tr, tc = rng.choice(moves)
        assert game.select((fr, fc)).status is SelectionStatus.SELECTED
        score_before = game.score
        out = game.target((tr, tc))
        assert out.moved
        assert game.grid.count_empty() + game.grid.count_occupied() == area
        assert out.score_delta == len(out.cleared) + len(out.spawn_cleared)
        assert game.score == score_before + out.score_delta
        if not out.cleared:
            # fewer markers only when the board ran out of cells
            assert len(out.spawned) == 3 or out.terminal or out.spawn_cleared
        else:
            assert out.spawned == []
        assert out.terminal == (game.grid.count_empty() == 0)


def test_legal_destinations_empty_while_locked_or_over():
    game = _game(auto_resolve=False)
    game.grid.set((4, 4), Color.RED)
    game.grid.set((0, 0), Color.BLUE)
    assert len(game.legal_destinations((0, 0))) == 79
    game.select((4, 4))
    game.target((4, 5))
    assert game.input_locked
    assert game.legal_moves() == []
    assert game.legal_destinations((0, 0)) == []
    game.resolve()
    assert game.legal_destinations((0, 0)) == reachable_cells(game.grid, (0, 0))

    over = _game()
    fill_pattern(over.grid, skip=[(8, 8)])
    over.select((7, 8))
    over.target((8, 8))
    assert over.terminal
    assert over.legal_destinations((7, 8)) == []


def test_legal_destinations_of_empty_or_outside_cell():
    game = _game()
    assert game.legal_destinations((4, 4)) == []
    assert game.legal_destinations((9, 9)) == []


def test_click_routes_to_select_or_target():
    game = _game()
    game.grid.set((4, 4), Color.RED)
    game.grid.set((0, 0), Color.BLUE)

    out = game.click((4, 4))
    assert isinstance(out, SelectionOutcome)
    assert out.status is SelectionStatus.SELECTED

    # occupied cell while selected re-selects
    out = game.click((0, 0))
    assert isinstance(out, SelectionOutcome)
    assert game.selection == (0, 0)

    # the selected cell again deselects
    out = game.click((0, 0))
    assert out.status is SelectionStatus.DESELECTED
    assert game.selection is None

    # empty cell without a selection is a rejected selection, not a move
    out = game.click((2, 2))
    assert isinstance(out, SelectionOutcome)
    assert out.error is ErrorKind.INVALID_SELECTION

    game.click((4, 4))
    out = game.click((4, 6))
    assert isinstance(out, MoveOutcome)
    assert out.moved
    assert out.path == [(4, 4), (4, 5), (4, 6)]
    assert game.grid.color_at((4, 6)) is Color.RED

    out = game.click((9, 0))
    assert out.error is ErrorKind.OUT_OF_BOUNDS


def test_get_state_and_game_stats():
    game = _game()
    for c in range(4):
        game.grid.set((0, c), Color.RED)
    game.grid.set((3, 4), Color.RED)
    game.grid.set((8, 8), Color.BLUE)
    game.select((3, 4))
    game.target((0, 4))

    snapshot = game.get_state()
    assert set(snapshot) == {
        "grid", "next_colors", "selection", "turn_state", "score", "total_cleared",
        "moves_made", "step_count", "game_over", "filled_ratio",
    }
    assert snapshot["grid"].shape == (9, 9)
    assert snapshot["grid"][8, 8] == int(Color.BLUE)
    assert len(snapshot["next_colors"]) == 3
    assert snapshot["selection"] is None
    assert snapshot["turn_state"] == "IDLE"
    assert snapshot["score"] == 5
    assert snapshot["total_cleared"] == 5
    assert snapshot["moves_made"] == 1
    assert snapshot["step_count"] == 1
    assert snapshot["game_over"] is False
    assert snapshot["filled_ratio"] == pytest.approx(1 / 81)

    # returned grid is a copy
    snapshot["grid"][0, 0] = 1
    assert game.grid.is_empty((0, 0))

    stats = game.get_game_stats()
    assert stats == {
        "final_score": 5,
        "moves_made": 1,
        "cells_cleared": 5,
        "steps_taken": 1,
        "final_fill_ratio": pytest.approx(1 / 81),
        "avg_score_per_move": 5.0,
    }


def test_is_empty_returns_plain_bool():
    game = _game()
    assert type(game.grid.is_empty((0, 0))) is bool
    game.grid.set((0, 0), Color.RED)
    assert game.grid.is_empty((0, 0)) is False
