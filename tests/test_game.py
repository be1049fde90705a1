"""Unit tests for the core board model."""

from __future__ import annotations

import pytest

from salvo.battleship import FLEET_CELLS, SHIPS, Board, Orientation, ShipType
from salvo.coord_utils import format_coord, neighbours


def test_format_coord_uses_row_letter() -> None:
    """Letter is the row, number the column."""
    assert format_coord(0, 0) == "A1"
    assert format_coord(9, 2) == "C10"


def test_fleet_catalogue() -> None:
    assert [s.size for s in SHIPS] == [5, 4, 3, 3, 2]
    assert FLEET_CELLS == 17
    assert ShipType.parse("Carrier") is ShipType.CARRIER


def test_corner_neighbours_stay_on_board() -> None:
    assert sorted(neighbours(0, 0, 10)) == [(0, 1), (1, 0)]
    assert len(list(neighbours(0, 0, 10, diagonal=True))) == 3


@pytest.mark.parametrize("coord", [(0, 0), (2, 1), (9, 9)])
def test_fire_at_any_coord(fleet_board, coord) -> None:
    """Firing at any valid coordinate should yield a sensible result."""
    board = fleet_board()
    x, y = coord
    result, _ = board.fire_at(x, y)
    assert result in {"hit", "miss"}
    assert board.fire_at(x, y) == ("already_shot", None)


def test_sinking_marks_every_cell(fleet_board) -> None:
    board = fleet_board()
    assert board.fire_at(3, 8) == ("hit", None)
    assert board.fire_at(4, 8) == ("hit", ShipType.DESTROYER)
    assert board.cell(3, 8).is_sunk_ship and board.cell(4, 8).is_sunk_ship


def test_all_ships_sunk(fleet_board) -> None:
    board = fleet_board()

    # Brute-force fire at every cell to guarantee victory.
    for y in range(board.size):
        for x in range(board.size):
            board.fire_at(x, y)
    assert board.all_ships_sunk()


def test_view_hides_unrevealed_ships(fleet_board) -> None:
    board = fleet_board()
    board.fire_at(0, 0)  # carrier hit, not sunk
    board.fire_at(5, 5)  # miss
    board.fire_at(3, 8)
    board.fire_at(4, 8)  # destroyer sunk

    view = board.view()
    assert not view.cell(1, 0).has_ship  # unhit carrier cell stays hidden
    assert view.cell(0, 0).is_ship_hit and view.cell(0, 0).ship_type is None
    assert view.cell(5, 5).is_miss
    assert view.cell(3, 8).ship_type is ShipType.DESTROYER
    assert view.cell(3, 8).is_sunk_ship
    # The view is a copy
    view.cell(9, 9).is_hit = True
    assert not board.cell(9, 9).is_hit


def test_ship_ids_are_optional_until_placed(board: Board) -> None:
    assert board.cell(2, 2).ship_id is None and board.cell(2, 2).ship_type is None
    board.do_place_ship(2, 2, ShipType.CRUISER, Orientation.VERTICAL)
    assert board.cell(2, 4).ship_id == "cruiser-2-2"
    assert board.ship_cell_count() == 3


def test_render_shows_letters_only_when_asked(fleet_board) -> None:
    board = fleet_board()
    board.fire_at(5, 5)
    hidden = board.render()
    revealed = board.render(show_hidden_board=True)
    assert "A" not in hidden.splitlines()[1][2:]
    assert "A" in revealed.splitlines()[1][2:]
    assert "o" in hidden
