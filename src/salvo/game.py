"""Local self-play: one ComputerOpponent firing at a populated board.

This stands in for the real game orchestrator during development and tests.
It owns turn order and sink detection, exactly like the orchestrator would,
and reports progress through an EventRouter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .battleship import Board, ShipType
from .coord_utils import format_coord
from .events import Category, Event, EventRouter
from .opponent import ComputerOpponent

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    shots: int = 0
    hits: int = 0
    sunk: List[ShipType] = field(default_factory=list)
    won: bool = False


class SelfPlayMatch:
    def __init__(
        self,
        opponent: ComputerOpponent,
        target: Board,
        *,
        router: Optional[EventRouter] = None,
    ) -> None:
        self.opponent = opponent
        self.target = target
        self.router = router or EventRouter()

    def _emit(self, category: Category, type_: str, **payload) -> None:
        self.router.route_event(Event(category, type_, payload))

    def play(self) -> MatchResult:
        """Fire until every ship is sunk or the board runs out of cells."""
        result = MatchResult()
        self._emit(Category.SYSTEM, "started", difficulty=self.opponent.difficulty.value)

        for _ in range(self.target.size * self.target.size):
            if self.target.all_ships_sunk():
                break
            x, y = self.opponent.choose_shot(self.target.view())
            outcome, sunk = self.target.fire_at(x, y)
            if outcome == "already_shot":
                # Not expected from the engine; count it and carry on
                logger.error("Engine fired twice at %s", format_coord(x, y))
                result.shots += 1
                continue

            was_hit = outcome == "hit"
            result.shots += 1
            result.hits += was_hit
            self.opponent.record_shot_result(x, y, was_hit)
            self._emit(Category.TURN, "shot", x=x, y=y, hit=was_hit, shot=result.shots)

            if sunk is not None:
                result.sunk.append(sunk)
                self.opponent.notify_ship_sunk(sunk)
                self._emit(Category.TURN, "sunk", ship=sunk.value, shot=result.shots)

        result.won = self.target.all_ships_sunk()
        self._emit(Category.SYSTEM, "finished", shots=result.shots, won=result.won)
        return result
