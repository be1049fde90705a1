"""State machine behaviour of the targeting engine."""

import pytest

from conftest import mark
from salvo.battleship import Board, Orientation, ShipType
from salvo.bot_logic import TargetingEngine, TargetState


def _hit(engine: TargetingEngine, view: Board, x: int, y: int) -> None:
    mark(view, [(x, y)], hit=True)
    engine.record_shot_result(x, y, True)


def _miss(engine: TargetingEngine, view: Board, x: int, y: int) -> None:
    mark(view, [(x, y)], hit=False)
    engine.record_shot_result(x, y, False)


def test_starts_hunting(engine, board):
    assert engine.phase is TargetState.HUNTING
    assert engine.targeting_move(board) is None
    assert engine.state.parity in (0, 1)


def test_single_hit_probes_orthogonal_neighbour(engine, board):
    _hit(engine, board, 3, 3)
    assert engine.phase is TargetState.TRACKING_SINGLE
    assert engine.targeting_move(board) in {(2, 3), (4, 3), (3, 2), (3, 4)}


def test_single_hit_skips_resolved_and_off_board_neighbours(engine, board):
    _hit(engine, board, 0, 0)
    _miss(engine, board, 1, 0)
    assert engine.targeting_move(board) == (0, 1)


def test_single_hit_prefers_direction_with_more_room(engine, board):
    _hit(engine, board, 5, 5)
    # Right of the hit: one open cell then a miss; the other sides are wide open
    _miss(engine, board, 7, 5)
    move = engine.targeting_move(board)
    assert move in {(4, 5), (5, 6), (5, 4)}


@pytest.mark.parametrize(
    "first, second, direction",
    [
        ((2, 2), (3, 2), Orientation.HORIZONTAL),
        ((3, 2), (2, 2), Orientation.HORIZONTAL),
        ((4, 1), (4, 2), Orientation.VERTICAL),
        ((4, 2), (4, 1), Orientation.VERTICAL),
    ],
)
def test_direction_inferred_from_first_two_hits(engine, board, first, second, direction):
    _hit(engine, board, *first)
    _hit(engine, board, *second)
    assert engine.hit_direction is direction
    assert engine.phase is TargetState.TRACKING_DIRECTIONAL
    axis = 0 if direction is Orientation.HORIZONTAL else 1
    assert [c[axis] for c in engine.hit_chain] == sorted(c[axis] for c in engine.hit_chain)


def test_directional_chain_extends_forward_then_backward(engine, board):
    _hit(engine, board, 2, 2)
    _hit(engine, board, 3, 2)
    assert engine.targeting_move(board) == (4, 2)

    _miss(engine, board, 4, 2)
    assert engine.targeting_move(board) == (1, 2)


def test_out_of_order_hits_keep_a_stable_forward_sense(engine, board):
    _hit(engine, board, 5, 2)
    _hit(engine, board, 4, 2)
    _hit(engine, board, 6, 2)
    assert engine.hit_chain == [(4, 2), (5, 2), (6, 2)]
    assert engine.targeting_move(board) == (7, 2)


def test_blocked_chain_probes_perpendicular(engine, board):
    _hit(engine, board, 4, 4)
    _hit(engine, board, 5, 4)
    _miss(engine, board, 6, 4)
    _miss(engine, board, 3, 4)

    move = engine.targeting_move(board)
    assert engine.phase is TargetState.BLOCKED
    assert move in {(4, 3), (4, 5), (5, 3), (5, 5)}
    assert set(engine.perpendicular_moves(board)) == {(4, 3), (4, 5), (5, 3), (5, 5)}


def test_perpendicular_probe_prefers_higher_position_value(engine, board):
    _hit(engine, board, 4, 4)
    _hit(engine, board, 5, 4)
    _miss(engine, board, 6, 4)
    _miss(engine, board, 3, 4)
    # A miss next to (4, 3) makes it less promising than its siblings
    _miss(engine, board, 4, 2)
    assert engine.targeting_move(board) != (4, 3)


def test_degenerate_tracking_returns_none(engine, board):
    _hit(engine, board, 0, 0)
    _hit(engine, board, 1, 0)
    _miss(engine, board, 2, 0)
    _miss(engine, board, 0, 1)
    _miss(engine, board, 1, 1)
    assert engine.targeting_move(board) is None


def test_sunk_clears_chain_and_returns_to_hunting(engine, board):
    _hit(engine, board, 2, 2)
    _hit(engine, board, 3, 2)
    engine.notify_ship_sunk(ShipType.DESTROYER)
    assert engine.phase is TargetState.HUNTING
    assert engine.hit_chain == []
    assert engine.hit_direction is None
    assert ShipType.DESTROYER in engine.state.sunk_ships
    assert 2 not in engine.state.remaining_sizes()


def test_candidates_next_to_sunk_ship_are_excluded(engine, board):
    mark(board, [(2, 2), (3, 2)], hit=True, ship=ShipType.DESTROYER, sunk=True)
    engine.notify_ship_sunk(ShipType.DESTROYER)
    for x in range(1, 5):
        for y in range(1, 4):
            if not board.cell(x, y).is_hit:
                assert not engine.is_candidate(board, x, y)
    assert engine.is_candidate(board, 5, 5)


def test_chase_move_follows_line_without_perpendicular_probes(engine, board):
    _hit(engine, board, 4, 4)
    _hit(engine, board, 5, 4)
    assert engine.chase_move(board) == (6, 4)
    _miss(engine, board, 6, 4)
    assert engine.chase_move(board) == (3, 4)
    _miss(engine, board, 3, 4)
    assert engine.chase_move(board) is None


def test_out_of_bounds_results_are_ignored(engine):
    engine.record_shot_result(10, 3, True)
    engine.record_shot_result(-1, 0, False)
    assert engine.hit_chain == []
    assert engine.state.shots == set()


def test_duplicate_hit_reports_do_not_grow_chain(engine, board):
    _hit(engine, board, 3, 3)
    engine.record_shot_result(3, 3, True)
    assert engine.hit_chain == [(3, 3)]


def test_debug_state_snapshot(engine, board):
    _hit(engine, board, 3, 3)
    snapshot = engine.debug_state()
    assert snapshot["phase"] == "tracking-single"
    assert snapshot["hit_chain"] == [(3, 3)]
    assert snapshot["direction"] is None
    assert snapshot["parity_hunting"] is False


@pytest.mark.parametrize("seed", range(40))
def test_chase_move_skips_cells_next_to_sunk_ship(seed, board):
    engine = TargetingEngine(10, seed=seed)
    mark(board, [(2, 2), (3, 2)], hit=True, ship=ShipType.DESTROYER, sunk=True)
    engine.notify_ship_sunk(ShipType.DESTROYER)
    _hit(engine, board, 5, 3)
    # (4, 3) touches the destroyer diagonally
    assert engine.chase_move(board) in {(6, 3), (5, 2), (5, 4)}
