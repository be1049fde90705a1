"""Fleet placement for the computer opponent.

    result = place_fleet(board, strategic=True, rng=rng)

Every ship gets at most ``max_attempts`` candidates under the strict rule
(no two ships touching, diagonals included) and the same number under the
relaxed overlap-only rule. A ship that still does not fit is left off the
board and reported in ``result.unplaced``; nothing here raises.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple

from . import config as _cfg
from .battleship import SHIPS, Board, Orientation, ShipType
from .coord_utils import Coord

logger = logging.getLogger(__name__)

Candidate = Tuple[int, int, Orientation]


@dataclass
class PlacementResult:
    board: Board
    placed: Dict[ShipType, Set[Coord]] = field(default_factory=dict)
    unplaced: List[ShipType] = field(default_factory=list)
    relaxed: List[ShipType] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """False is the placement-failed signal: at least one ship is missing."""
        return not self.unplaced


def place_fleet(
    board: Board,
    *,
    strategic: bool = False,
    rng: Optional[random.Random] = None,
    max_attempts: int = _cfg.PLACEMENT_ATTEMPTS,
    ships: Tuple[ShipType, ...] = SHIPS,
    patterns: Optional[Mapping[str, float]] = None,
) -> PlacementResult:
    """Place *ships* onto *board* (expected empty) and return what happened."""
    rng = rng or random.Random()
    placer = _StrategicPlacer(board, rng, patterns) if strategic else _RandomPlacer(board, rng)
    result = PlacementResult(board)

    order = sorted(ships, key=lambda s: s.size, reverse=True) if strategic else list(ships)
    for ship in order:
        candidate = _first_fit(board, ship, max_attempts, placer.candidate, strict=True)
        if candidate is None:
            logger.warning(
                "Could not place %s after %d attempts, trying with relaxed rules", ship.value, max_attempts
            )
            candidate = _first_fit(board, ship, max_attempts, placer.fallback, strict=False)
            if candidate is None:
                logger.error("Failed to place %s even with relaxed rules", ship.value)
                result.unplaced.append(ship)
                continue
            result.relaxed.append(ship)

        x, y, orientation = candidate
        result.placed[ship] = board.do_place_ship(x, y, ship, orientation)
        placer.remember(x, y, ship, orientation)
        logger.debug("Placed %s at (%d, %d) %s", ship.value, x, y, orientation.value)

    return result


def _first_fit(board: Board, ship: ShipType, max_attempts: int, draw, *, strict: bool) -> Optional[Candidate]:
    for _ in range(max_attempts):
        x, y, orientation = draw(ship)
        if board.can_place_ship(x, y, ship.size, orientation, strict=strict):
            return x, y, orientation
    return None


class _RandomPlacer:
    """Uniform candidates over every start cell that keeps the ship on the board."""

    def __init__(self, board: Board, rng: random.Random) -> None:
        self.size = board.size
        self.rng = rng

    def _orientation(self) -> Orientation:
        return Orientation.HORIZONTAL if self.rng.random() > 0.5 else Orientation.VERTICAL

    def candidate(self, ship: ShipType) -> Candidate:
        orientation = self._orientation()
        span = max(self.size - ship.size, 0)
        if orientation is Orientation.HORIZONTAL:
            return self.rng.randint(0, span), self.rng.randint(0, self.size - 1), orientation
        return self.rng.randint(0, self.size - 1), self.rng.randint(0, span), orientation

    fallback = candidate

    def remember(self, x: int, y: int, ship: ShipType, orientation: Orientation) -> None:
        pass


class _StrategicPlacer(_RandomPlacer):
    """
    Biased candidates for the hard tier.

    Each draw picks a pattern by weight:
      edge    – one row/column in from the border
      center  – inside the middle 30 %..70 % band of the board
      cluster – offset ±1 from an already placed ship (edge if none yet)
    The fallback stays uniform like _RandomPlacer.
    """

    def __init__(self, board: Board, rng: random.Random, patterns: Optional[Mapping[str, float]]) -> None:
        super().__init__(board, rng)
        weights = patterns if patterns is not None else _cfg.PLACEMENT_PATTERNS
        self.patterns: List[Tuple[str, float]] = list(weights.items())
        self.placed: List[Candidate] = []

    def choose_pattern(self) -> str:
        total = sum(weight for _, weight in self.patterns)
        pick = self.rng.random() * total
        for name, weight in self.patterns:
            if pick < weight:
                return name
            pick -= weight
        return self.patterns[0][0]

    def candidate(self, ship: ShipType) -> Candidate:
        pattern = self.choose_pattern()
        if pattern == "center":
            return self._center(ship)
        if pattern == "cluster" and self.placed:
            return self._cluster()
        return self._edge(ship)

    fallback = _RandomPlacer.candidate

    def remember(self, x: int, y: int, ship: ShipType, orientation: Orientation) -> None:
        self.placed.append((x, y, orientation))

    def _edge(self, ship: ShipType) -> Candidate:
        orientation = self._orientation()
        along = 1 + self.rng.randrange(max(self.size - ship.size - 2, 1))
        across = 1 if self.rng.random() > 0.5 else self.size - 2
        if orientation is Orientation.HORIZONTAL:
            return along, across, orientation
        return across, along, orientation

    def _center(self, ship: ShipType) -> Candidate:
        orientation = self._orientation()
        low = int(self.size * 0.3)
        high = int(self.size * 0.7)
        spread = max(high - low - ship.size + 1, 1)
        return low + self.rng.randrange(spread), low + self.rng.randrange(spread), orientation

    def _cluster(self) -> Candidate:
        ref_x, ref_y, _ = self.rng.choice(self.placed)
        orientation = self._orientation()
        offset = self.rng.randrange(3) - 1
        side = 1 if self.rng.random() > 0.5 else -1
        if orientation is Orientation.HORIZONTAL:
            return ref_x + offset, ref_y + side, orientation
        return ref_x + side, ref_y + offset, orientation
