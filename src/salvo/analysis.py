"""Read-only questions asked about an opponent board view.

All helpers take the partial ``Board`` returned by ``Board.view()``; they
never look at unrevealed ship positions.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from .battleship import Board, Cell, ShipType
from .coord_utils import ORTHOGONAL, neighbours


def board_pattern(view: Board) -> str:
    """Row-major string with 'H' for ship hits, 'M' for misses, 'U' for unresolved."""
    return "".join(
        ("H" if cell.has_ship else "M") if cell.is_hit else "U" for cell in view.cells()
    )


def is_sunk_cell(cell: Cell, sunk_ships: Iterable[ShipType]) -> bool:
    if not cell.is_ship_hit:
        return False
    return cell.is_sunk_ship or (cell.ship_type is not None and cell.ship_type in sunk_ships)


def is_adjacent_to_sunk_ship(view: Board, x: int, y: int, sunk_ships: Iterable[ShipType]) -> bool:
    """True if any of the 8 neighbours belongs to a sunk ship.

    Ships may not touch, so such a cell cannot hold an undiscovered ship.
    """
    sunk = set(sunk_ships)
    return any(is_sunk_cell(view.grid[ny][nx], sunk) for nx, ny in neighbours(x, y, view.size, diagonal=True))


def _open_run(view: Board, x: int, y: int, dx: int, dy: int, limit: int) -> int:
    run = 0
    for step in range(1, limit + 1):
        nx, ny = x + step * dx, y + step * dy
        if not view.in_bounds(nx, ny) or view.grid[ny][nx].is_miss:
            break
        run += 1
    return run


def is_isolated(view: Board, x: int, y: int, remaining_sizes: Sequence[int]) -> bool:
    """True if no remaining ship fits through the unresolved cell (x, y).

    Runs extend over anything that is not a confirmed miss; the cell is
    isolated when both the horizontal and the vertical run are shorter than
    the smallest remaining ship.
    """
    if view.grid[y][x].is_hit or not remaining_sizes:
        return False
    smallest = min(remaining_sizes)
    horizontal = 1 + _open_run(view, x, y, -1, 0, smallest) + _open_run(view, x, y, 1, 0, smallest)
    vertical = 1 + _open_run(view, x, y, 0, -1, smallest) + _open_run(view, x, y, 0, 1, smallest)
    return horizontal < smallest and vertical < smallest


def free_run(view: Board, x: int, y: int, dx: int, dy: int, sunk_ships: Iterable[ShipType]) -> int:
    """Count unhit, non-sunk-adjacent cells from (x, y) onwards in direction (dx, dy)."""
    sunk = set(sunk_ships)
    space = 0
    while (
        view.in_bounds(x, y)
        and not view.grid[y][x].is_hit
        and not is_adjacent_to_sunk_ship(view, x, y, sunk)
    ):
        space += 1
        x += dx
        y += dy
    return space


def position_value(view: Board, x: int, y: int, boosts: Mapping[str, float]) -> float:
    """Heuristic promise of an unresolved cell, used to rank probes and break ties."""
    if not view.in_bounds(x, y) or view.grid[y][x].is_hit:
        return -1
    last = view.size - 1
    on_x_edge = x in (0, last)
    on_y_edge = y in (0, last)

    value = 0.0
    # Players often hug the border
    if on_x_edge:
        value += boosts["edge"]
    if on_y_edge:
        value += boosts["edge"]
    if on_x_edge and on_y_edge:
        value += boosts["corner"]

    for nx, ny in neighbours(x, y, view.size):
        cell = view.grid[ny][nx]
        if cell.is_ship_hit:
            value += 5
        elif cell.is_miss:
            value -= 1

    # Hits on both opposite sides: the cell closes a line
    for (dx1, dy1), (dx2, dy2) in (ORTHOGONAL[0:2], ORTHOGONAL[2:4]):
        a = (x + dx1, y + dy1)
        b = (x + dx2, y + dy2)
        if view.in_bounds(*a) and view.in_bounds(*b):
            if view.grid[a[1]][a[0]].is_ship_hit and view.grid[b[1]][b[0]].is_ship_hit:
                value += 10
    return value
