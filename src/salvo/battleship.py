"""
battleship.py

Contains the core data structures for the grid-combat board, including:
 - ShipType / Orientation enums and the fixed fleet catalogue
 - Cell, one square of the grid with its hit / ship / sunk flags
 - Board class for storing ship positions, hits and misses, and for producing
   the partial view an opponent is allowed to see
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from . import config as _cfg
from .coord_utils import Coord, format_coord, in_bounds, neighbours

BOARD_SIZE = _cfg.BOARD_SIZE


class ShipType(str, Enum):
    CARRIER = "carrier"
    BATTLESHIP = "battleship"
    CRUISER = "cruiser"
    SUBMARINE = "submarine"
    DESTROYER = "destroyer"

    @property
    def size(self) -> int:
        return SHIP_SIZES[self]

    @classmethod
    def parse(cls, value: "ShipType | str") -> "ShipType":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def step(self) -> Coord:
        return (1, 0) if self is Orientation.HORIZONTAL else (0, 1)


SHIP_SIZES: Dict[ShipType, int] = {
    ShipType.CARRIER: 5,
    ShipType.BATTLESHIP: 4,
    ShipType.CRUISER: 3,
    ShipType.SUBMARINE: 3,
    ShipType.DESTROYER: 2,
}

# Standard fleet, in placement order.
SHIPS: Tuple[ShipType, ...] = tuple(SHIP_SIZES)

FLEET_CELLS = sum(SHIP_SIZES.values())

# Unique single-char symbols for each ship
SHIP_LETTERS = {
    ShipType.CARRIER: "A",  # Aircraft carrier (avoid clash with Cruiser)
    ShipType.BATTLESHIP: "B",
    ShipType.CRUISER: "C",
    ShipType.SUBMARINE: "S",
    ShipType.DESTROYER: "D",
}


@dataclass
class Cell:
    """One grid square.

    ``ship_type`` is ``None`` for open water *and* for a ship whose type is
    not known to the viewer; ``is_sunk_ship`` is only ever set on hit cells of
    a ship that has been fully destroyed.
    """

    x: int
    y: int
    is_hit: bool = False
    has_ship: bool = False
    ship_type: Optional[ShipType] = None
    ship_id: Optional[str] = None
    is_sunk_ship: bool = False

    @property
    def is_miss(self) -> bool:
        return self.is_hit and not self.has_ship

    @property
    def is_ship_hit(self) -> bool:
        return self.is_hit and self.has_ship


class Board:
    """
    Represents a single board of N×N cells.

    Each player owns one board holding its fleet. The opponent only ever
    receives ``board.view()``: a copy where unhit cells carry no ship
    information and ship types are revealed for sunk ships only.

      - self.grid[y][x]: the Cell at column x, row y
      - self.placed_ships: ShipType -> set of (x, y) still afloat, used to
        determine when a specific ship has been fully sunk
      - self.ship_cells: ShipType -> every (x, y) the ship occupies
    """

    def __init__(self, size: int = BOARD_SIZE):
        """Initialise an empty *size*×*size* board with no ships placed."""
        self.size = size
        self.grid: List[List[Cell]] = [[Cell(x, y) for x in range(size)] for y in range(size)]
        self.placed_ships: Dict[ShipType, Set[Coord]] = {}
        self.ship_cells: Dict[ShipType, Set[Coord]] = {}

    def reset(self) -> None:
        """Remove every ship and shot."""
        self.__init__(size=self.size)

    def cell(self, x: int, y: int) -> Cell:
        return self.grid[y][x]

    def cells(self):
        for row in self.grid:
            yield from row

    def in_bounds(self, x: int, y: int) -> bool:
        return in_bounds(x, y, self.size)

    # ------------------------------------------------------------------ #
    # Placement
    # ------------------------------------------------------------------ #
    def ship_footprint(self, x: int, y: int, size: int, orientation: Orientation) -> List[Coord]:
        dx, dy = orientation.step
        return [(x + i * dx, y + i * dy) for i in range(size)]

    def can_place_ship(
        self, x: int, y: int, size: int, orientation: Orientation, *, strict: bool = True
    ) -> bool:
        """Return `True` if a ship of *size* fits at (*x*,*y*).

        The strict rule also refuses any footprint touching another ship,
        diagonals included; the relaxed rule only refuses overlap.
        """
        for cx, cy in self.ship_footprint(x, y, size, orientation):
            if not self.in_bounds(cx, cy):
                return False
            if self.grid[cy][cx].has_ship:
                return False
            if strict:
                for nx, ny in neighbours(cx, cy, self.size, diagonal=True):
                    if self.grid[ny][nx].has_ship:
                        return False
        return True

    def do_place_ship(self, x: int, y: int, ship_type: ShipType, orientation: Orientation) -> Set[Coord]:
        """Mutating helper that writes ship cells into the grid and returns the occupied set."""
        ship_id = f"{ship_type.value}-{x}-{y}"
        occupied = set()
        for cx, cy in self.ship_footprint(x, y, ship_type.size, orientation):
            cell = self.grid[cy][cx]
            cell.has_ship = True
            cell.ship_type = ship_type
            cell.ship_id = ship_id
            occupied.add((cx, cy))
        self.placed_ships[ship_type] = set(occupied)
        self.ship_cells[ship_type] = set(occupied)
        return occupied

    def ship_cell_count(self) -> int:
        return sum(1 for cell in self.cells() if cell.has_ship)

    # ------------------------------------------------------------------ #
    # Firing
    # ------------------------------------------------------------------ #
    def fire_at(self, x: int, y: int) -> Tuple[str, Optional[ShipType]]:
        """Process a shot at (*x*,*y*) and return (result, sunk_ship)."""
        cell = self.grid[y][x]
        if cell.is_hit:
            return ("already_shot", None)
        cell.is_hit = True
        if not cell.has_ship:
            return ("miss", None)
        if sunk := self._mark_hit_and_check_sunk(x, y):
            return ("hit", sunk)
        return ("hit", None)

    def _mark_hit_and_check_sunk(self, x: int, y: int) -> Optional[ShipType]:
        for ship_type, afloat in self.placed_ships.items():
            if (x, y) in afloat:
                afloat.remove((x, y))
                if not afloat:
                    for sx, sy in self.ship_cells[ship_type]:
                        self.grid[sy][sx].is_sunk_ship = True
                    return ship_type
                break
        return None

    def all_ships_sunk(self) -> bool:
        """Return True if every ship on this board has been sunk."""
        return all(not afloat for afloat in self.placed_ships.values())

    def unhit_cells(self) -> List[Coord]:
        return [(cell.x, cell.y) for cell in self.cells() if not cell.is_hit]

    # ------------------------------------------------------------------ #
    # Opponent view
    # ------------------------------------------------------------------ #
    def view(self) -> "Board":
        """Return the partial board an opponent may see."""
        seen = Board(self.size)
        for cell in self.cells():
            if not cell.is_hit:
                continue
            if cell.has_ship and cell.is_sunk_ship:
                seen.grid[cell.y][cell.x] = replace(cell)
            else:
                seen.grid[cell.y][cell.x] = Cell(cell.x, cell.y, is_hit=True, has_ship=cell.has_ship)
        return seen

    # ------------------------------------------------------------------ #
    # Display
    # ------------------------------------------------------------------ #
    def render(self, show_hidden_board: bool = False) -> str:
        """Text grid: '.' water, 'o' miss, 'X' hit, '#' sunk, ship letters if *show_hidden_board*."""
        lines = ["  " + "".join(str(i + 1).rjust(3) for i in range(self.size))]
        for y, row in enumerate(self.grid):
            symbols = []
            for cell in row:
                if cell.is_hit:
                    symbol = ("#" if cell.is_sunk_ship else "X") if cell.has_ship else "o"
                elif show_hidden_board and cell.has_ship and cell.ship_type is not None:
                    symbol = SHIP_LETTERS[cell.ship_type]
                else:
                    symbol = "."
                symbols.append(symbol.rjust(3))
            lines.append(f"{chr(ord('A') + y):2}" + "".join(symbols))
        return "\n".join(lines)

    def print_display_grid(self, show_hidden_board: bool = False) -> None:
        """Pretty-print the board (or full board if *show_hidden_board*)."""
        print(self.render(show_hidden_board))


__all__ = [
    "BOARD_SIZE",
    "Board",
    "Cell",
    "Coord",
    "FLEET_CELLS",
    "Orientation",
    "SHIPS",
    "SHIP_LETTERS",
    "SHIP_SIZES",
    "ShipType",
    "format_coord",
]
