"""Coordinate helpers shared by the board, the placer and the targeting code.

Coordinates are ``(x, y)`` tuples: *x* is the column, *y* the row. The label
used in logs is row letter plus 1-based column, so ``(0, 0)`` is ``A1`` and
``(9, 2)`` is ``C10``.
"""

from typing import Iterator, Tuple

Coord = Tuple[int, int]

# Right, left, down, up
ORTHOGONAL: Tuple[Coord, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

NEIGHBOURS_8: Tuple[Coord, ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


def format_coord(x: int, y: int) -> str:
    """
    Convert zero-based (x, y) to coordinate string like 'A1'.
    """
    return f"{chr(ord('A') + y)}{x + 1}"


def in_bounds(x: int, y: int, size: int) -> bool:
    return 0 <= x < size and 0 <= y < size

def neighbours(x: int, y: int, size: int, *, diagonal: bool = False) -> Iterator[Coord]:
    """Yield in-bounds neighbours of (x, y), orthogonal only unless *diagonal*."""
    for dx, dy in NEIGHBOURS_8 if diagonal else ORTHOGONAL:
        nx, ny = x + dx, y + dy
        if in_bounds(nx, ny, size):
            yield nx, ny
