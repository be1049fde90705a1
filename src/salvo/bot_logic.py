from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from . import config as _cfg
from .analysis import is_adjacent_to_sunk_ship, is_isolated, position_value
from .battleship import Board, Orientation, ShipType
from .coord_utils import ORTHOGONAL, Coord, format_coord
from .probability import ProbabilityModel
from .state import TargetingState

logger = logging.getLogger(__name__)


class TargetState(Enum):
    HUNTING = "hunting"
    TRACKING_SINGLE = "tracking-single"
    TRACKING_DIRECTIONAL = "tracking-directional"
    BLOCKED = "blocked"


class TargetingEngine:
    """
    Hunt / target / sink state machine.

    1. Hunting: no open hit chain; shots come from the probability map
       restricted to one checkerboard colour.
    2. Tracking a single hit: probe its four orthogonal neighbours, the one
       with the most free water behind it first.
    3. Tracking a direction: once two hits line up, extend the chain past its
       last cell, then past its first cell.
    4. Blocked: both ends are resolved, so probe perpendicular to the chain,
       best position value first.
    5. Resolved: notify_ship_sunk() clears the chain and we hunt again.

    The orchestrator feeds outcomes back through record_shot_result() and
    notify_ship_sunk(); nothing else touches ``self.state``.
    """

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    def __init__(
        self,
        size: int = _cfg.BOARD_SIZE,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        boosts: Optional[Mapping[str, float]] = None,
        density_model: Optional[ProbabilityModel] = None,
    ) -> None:
        self.size = size
        self.rng = rng if rng is not None else random.Random(seed)
        self.boosts = dict(boosts if boosts is not None else _cfg.PROBABILITY_BOOSTS)
        self.density_model = density_model or ProbabilityModel(size, boosts=self.boosts)
        self.state = TargetingState(parity=self.rng.randrange(2))

    # ------------------------------------------------------------------ #
    # Helper utilities
    # ------------------------------------------------------------------ #
    @property
    def phase(self) -> TargetState:
        chain = self.state.hit_chain
        if not chain:
            return TargetState.HUNTING
        if len(chain) == 1:
            return TargetState.TRACKING_SINGLE
        if self.state.blocked:
            return TargetState.BLOCKED
        return TargetState.TRACKING_DIRECTIONAL

    @property
    def hit_chain(self) -> List[Coord]:
        return list(self.state.hit_chain)

    @property
    def hit_direction(self) -> Optional[Orientation]:
        return self.state.hit_direction

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_candidate(self, view: Board, x: int, y: int) -> bool:
        """Inside board, never fired at, and still able to hold a ship."""
        if not self.in_bounds(x, y) or view.grid[y][x].is_hit:
            return False
        if is_adjacent_to_sunk_ship(view, x, y, self.state.sunk_ships):
            return False
        return not is_isolated(view, x, y, self.state.remaining_sizes())

    def position_value(self, view: Board, x: int, y: int) -> float:
        return position_value(view, x, y, self.boosts)

    # ------------------------------------------------------------------ #
    # Shot selection
    # ------------------------------------------------------------------ #
    def targeting_move(self, view: Board) -> Optional[Coord]:
        """
        Full chain follow-up used by the hard tier.

        1. Forward past the last chain cell.
        2. Backward past the first chain cell.
        3. Best perpendicular probe around any chain cell.
        4. With a single hit, its neighbours ordered by free space.
        Returns None when nothing applies; the caller then hunts.
        """
        chain = self.state.hit_chain
        if len(chain) >= 2 and self.state.hit_direction is not None:
            move = self._continue_chain(view)
            if move is not None:
                return move

            if not self.state.blocked:
                logger.debug("Both ends of chain %s closed, probing perpendicular", chain)
            self.state.blocked = True
            probes = self.perpendicular_moves(view)
            if probes:
                # sort is stable: equal values keep chain order
                probes.sort(key=lambda rc: self.position_value(view, *rc), reverse=True)
                return probes[0]

        if len(chain) == 1:
            hx, hy = chain[0]
            ranked = sorted(
                ORTHOGONAL,
                key=lambda d: self._space(view, hx + d[0], hy + d[1], d[0], d[1]),
                reverse=True,
            )
            for dx, dy in ranked:
                if self.is_candidate(view, hx + dx, hy + dy):
                    return hx + dx, hy + dy

        return None

    def chase_move(self, view: Board) -> Optional[Coord]:
        """
        Medium-tier follow-up: extend a lined-up chain or poke around a
        single hit in random order. No perpendicular probing.
        """
        chain = self.state.hit_chain
        if len(chain) >= 2 and self.state.hit_direction is not None:
            move = self._continue_chain(view)
            if move is not None:
                return move

        if len(chain) == 1:
            hx, hy = chain[0]
            directions = list(ORTHOGONAL)
            self.rng.shuffle(directions)
            for dx, dy in directions:
                if self.is_candidate(view, hx + dx, hy + dy):
                    return hx + dx, hy + dy

        return None

    def hunt_move(self, view: Board) -> Optional[Coord]:
        """Best cell of the probability map, parity pruned while hunting."""
        density = self.density_model.density(view, self.state)
        return self.density_model.select(density, view, self.state)

    def perpendicular_moves(self, view: Board) -> List[Coord]:
        """Legal cells beside every chain cell, across the chain's axis."""
        if self.state.hit_direction is Orientation.HORIZONTAL:
            offsets = ((0, -1), (0, 1))
        elif self.state.hit_direction is Orientation.VERTICAL:
            offsets = ((-1, 0), (1, 0))
        else:
            return []

        moves: List[Coord] = []
        for hx, hy in self.state.hit_chain:
            for dx, dy in offsets:
                rc = (hx + dx, hy + dy)
                if rc not in moves and self.is_candidate(view, *rc):
                    moves.append(rc)
        return moves

    def _continue_chain(self, view: Board) -> Optional[Coord]:
        chain = self.state.hit_chain
        first, last = chain[0], chain[-1]
        if self.state.hit_direction is Orientation.HORIZONTAL:
            step = (_sign(last[0] - first[0]), 0)
        else:
            step = (0, _sign(last[1] - first[1]))

        forward = (last[0] + step[0], last[1] + step[1])
        if self.is_candidate(view, *forward):
            return forward

        backward = (first[0] - step[0], first[1] - step[1])
        if self.is_candidate(view, *backward):
            return backward
        return None

    def _space(self, view: Board, x: int, y: int, dx: int, dy: int) -> int:
        if not self.in_bounds(x, y):
            return 0
        return self.density_model.available_space(view, x, y, dx, dy, self.state)

    # ------------------------------------------------------------------ #
    # Result handling
    # ------------------------------------------------------------------ #
    def record_shot_result(self, x: int, y: int, was_hit: bool) -> None:
        """
        Record the outcome of firing at (x, y).

        A hit joins the chain; the second hit fixes the direction and from
        then on the chain stays sorted along that axis so that its first and
        last cells are the two ends.
        """
        if not self.in_bounds(x, y):
            logger.warning("Ignoring shot result outside the board: (%d, %d)", x, y)
            return

        rc = (x, y)
        self.state.shots.add(rc)
        if not was_hit:
            if self.state.hit_chain:
                logger.debug("Miss at %s while tracking %s", format_coord(x, y), self.state.hit_chain)
            return

        chain = self.state.hit_chain
        if rc in chain:
            return
        chain.append(rc)
        self.state.blocked = False

        if len(chain) == 1:
            logger.debug("First hit at %s, leaving parity hunt", format_coord(x, y))

        if self.state.hit_direction is None and len(chain) >= 2:
            (x0, y0), (x1, y1) = chain[0], chain[1]
            if x0 != x1:
                self.state.hit_direction = Orientation.HORIZONTAL
            elif y0 != y1:
                self.state.hit_direction = Orientation.VERTICAL
            logger.debug("Chain direction inferred: %s", self.state.hit_direction)

        if self.state.hit_direction is Orientation.HORIZONTAL:
            chain.sort(key=lambda rc: (rc[0], rc[1]))
        elif self.state.hit_direction is Orientation.VERTICAL:
            chain.sort(key=lambda rc: (rc[1], rc[0]))

    def notify_ship_sunk(self, ship_type: ShipType) -> None:
        """Mark *ship_type* destroyed and go back to hunting."""
        self.state.sunk_ships.add(ship_type)
        logger.info(
            "Marked %s as sunk. Sunk ships: %s",
            ship_type.value,
            ", ".join(sorted(s.value for s in self.state.sunk_ships)),
        )
        self.reset_targeting()

    def reset_targeting(self) -> None:
        """Clear all transient state after a ship is fully resolved."""
        self.state.clear_chain()
        self.density_model.clear()

    # ------------------------------------------------------------------ #
    # Debug
    # ------------------------------------------------------------------ #
    def debug_state(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "hit_chain": list(self.state.hit_chain),
            "direction": self.state.hit_direction.value if self.state.hit_direction else None,
            "sunk_ships": sorted(s.value for s in self.state.sunk_ships),
            "parity": self.state.parity,
            "parity_hunting": self.state.parity_hunting,
            "shots": len(self.state.shots),
        }


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)
