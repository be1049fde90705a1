"""Mutable per-match memory of the targeting engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from .battleship import SHIPS, Orientation, ShipType
from .coord_utils import Coord


@dataclass
class TargetingState:
    """Everything the engine remembers between turns.

    Owned by exactly one TargetingEngine; nothing else mutates it.
    """

    parity: int = 0
    hit_chain: List[Coord] = field(default_factory=list)
    hit_direction: Optional[Orientation] = None
    sunk_ships: Set[ShipType] = field(default_factory=set)
    shots: Set[Coord] = field(default_factory=set)
    # Both chain ends found unreachable on the last decision.
    blocked: bool = False

    @property
    def parity_hunting(self) -> bool:
        return not self.hit_chain

    def remaining_sizes(self) -> List[int]:
        return [ship.size for ship in SHIPS if ship not in self.sunk_ships]

    def clear_chain(self) -> None:
        self.hit_chain.clear()
        self.hit_direction = None
        self.blocked = False
