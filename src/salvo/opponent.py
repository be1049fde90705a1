"""Computer opponent as seen by the game orchestrator.

    ai = ComputerOpponent("hard", seed=7)
    own_board = ai.place_fleet()
    x, y = ai.choose_shot(enemy_board.view())
    ai.record_shot_result(x, y, was_hit)
    ai.notify_ship_sunk("destroyer")

One instance per match. Calls are strictly sequential and every decision
resolves into a legal move; degraded situations are logged, not raised.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from . import config as _cfg
from .analysis import is_adjacent_to_sunk_ship, is_isolated
from .battleship import Board, ShipType
from .bot_logic import TargetingEngine
from .coord_utils import Coord, format_coord
from .placement import PlacementResult, place_fleet

logger = logging.getLogger(__name__)


class SalvoError(Exception):
    """Base class for errors raised by the engine."""


class BoardExhaustedError(SalvoError):
    """Raised when a shot is requested but every cell has already been fired at."""


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union["Difficulty", str]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown difficulty {value!r}; expected easy, medium or hard") from None


class ComputerOpponent:
    """
    Difficulty policy over the shared engine machinery.

      easy   – uniform random over cells that can still hold a ship
      medium – chase a hit chain, otherwise easy
      hard   – full targeting engine, probability map, parity and
               sunk-ship / isolation pruning, strategic fleet placement
    """

    def __init__(
        self,
        difficulty: Union[Difficulty, str] = Difficulty.HARD,
        *,
        board_size: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.difficulty = Difficulty.parse(difficulty)
        self.board_size = board_size or _cfg.BOARD_SIZE
        self.rng = random.Random(seed if seed is not None else _cfg.SEED)
        self.engine = TargetingEngine(self.board_size, rng=self.rng)
        self.last_placement: Optional[PlacementResult] = None

    # ------------------------------------------------------------------ #
    # Fleet
    # ------------------------------------------------------------------ #
    def place_fleet(self) -> Board:
        """Return a freshly populated own board (best effort, never raises)."""
        board = Board(self.board_size)
        result = place_fleet(board, strategic=self.difficulty is Difficulty.HARD, rng=self.rng)
        if not result.complete:
            logger.error(
                "Fleet placed without %s", ", ".join(ship.value for ship in result.unplaced)
            )
        self.last_placement = result
        return result.board

    # ------------------------------------------------------------------ #
    # Shots
    # ------------------------------------------------------------------ #
    def choose_shot(self, view: Board) -> Coord:
        """Return an unhit in-bounds (x, y) on the opponent *view*."""
        if self.difficulty is Difficulty.HARD:
            move = self.engine.targeting_move(view) or self.engine.hunt_move(view)
        elif self.difficulty is Difficulty.MEDIUM:
            move = self.engine.chase_move(view) or self._random_move(view)
        else:
            move = self._random_move(view)

        if move is None or not self._legal(view, move):
            if move is not None:
                logger.warning("Discarding illegal move %s", move)
            move = self._last_resort(view)
        logger.debug("%s shot at %s (%s)", self.difficulty.value, format_coord(*move), self.engine.phase.value)
        return move

    def _legal(self, view: Board, move: Coord) -> bool:
        x, y = move
        return view.in_bounds(x, y) and not view.grid[y][x].is_hit

    def _random_move(self, view: Board) -> Optional[Coord]:
        sizes = self.engine.state.remaining_sizes()
        sunk = self.engine.state.sunk_ships
        open_cells = [
            (cell.x, cell.y)
            for cell in view.cells()
            if not cell.is_hit and not is_isolated(view, cell.x, cell.y, sizes)
        ]
        preferred = [rc for rc in open_cells if not is_adjacent_to_sunk_ship(view, rc[0], rc[1], sunk)]
        pool: List[Coord] = preferred or open_cells
        if not pool:
            return None
        return self.rng.choice(pool)

    def _last_resort(self, view: Board) -> Coord:
        unhit = view.unhit_cells()
        if not unhit:
            raise BoardExhaustedError("no unhit cell left on the opponent board")
        return self.rng.choice(unhit)

    # ------------------------------------------------------------------ #
    # Feedback
    # ------------------------------------------------------------------ #
    def record_shot_result(self, x: int, y: int, was_hit: bool) -> None:
        self.engine.record_shot_result(x, y, was_hit)

    def notify_ship_sunk(self, ship_type: Union[ShipType, str]) -> None:
        try:
            ship = ShipType.parse(ship_type)
        except ValueError:
            logger.warning("Unknown ship type %r reported sunk; resetting targeting only", ship_type)
            self.engine.reset_targeting()
            return
        self.engine.notify_ship_sunk(ship)

    def debug_state(self) -> Dict[str, Any]:
        state = self.engine.debug_state()
        state["difficulty"] = self.difficulty.value
        return state
