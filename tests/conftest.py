import logging
from typing import Iterable, Optional, Tuple

import pytest

from salvo.battleship import Board, Orientation, ShipType
from salvo.bot_logic import TargetingEngine
from salvo.opponent import ComputerOpponent

# Suppress INFO & DEBUG logs from the engine during tests
logging.basicConfig(level=logging.WARNING)


def mark(board: Board, coords: Iterable[Tuple[int, int]], *, hit: bool, ship: Optional[ShipType] = None, sunk: bool = False) -> Board:
    """Write shot outcomes straight into a view-like board."""
    for x, y in coords:
        cell = board.cell(x, y)
        cell.is_hit = True
        cell.has_ship = hit
        if ship is not None:
            cell.ship_type = ship
        cell.is_sunk_ship = sunk
    return board


@pytest.fixture
def board() -> Board:
    return Board(10)


@pytest.fixture
def engine() -> TargetingEngine:
    return TargetingEngine(10, seed=1234)


@pytest.fixture
def opponent_factory() -> callable:
    """Factory for seeded opponents of any difficulty."""

    def _factory(difficulty: str = "hard", seed: int = 1234) -> ComputerOpponent:
        return ComputerOpponent(difficulty, board_size=10, seed=seed)

    return _factory


@pytest.fixture
def fleet_board() -> callable:
    """Factory that lays out a known, non-touching fleet on a fresh board."""

    layout = [
        (ShipType.CARRIER, 0, 0, Orientation.HORIZONTAL),
        (ShipType.BATTLESHIP, 0, 2, Orientation.VERTICAL),
        (ShipType.CRUISER, 4, 4, Orientation.HORIZONTAL),
        (ShipType.SUBMARINE, 9, 5, Orientation.VERTICAL),
        (ShipType.DESTROYER, 3, 8, Orientation.HORIZONTAL),
    ]

    def _factory() -> Board:
        b = Board(10)
        for ship, x, y, orientation in layout:
            assert b.can_place_ship(x, y, ship.size, orientation)
            b.do_place_ship(x, y, ship, orientation)
        return b

    return _factory
