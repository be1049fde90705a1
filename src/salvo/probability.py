"""Probability density map for the hard tier.

Every placement window of every ship still afloat that avoids confirmed
misses and the surroundings of sunk ships votes ``2 × size`` into the cells
it covers. The hit chain then adds directional boosts, parity pruning
halves the hunting area, and isolated cells are forced to zero.

Maps are returned as ``numpy`` float arrays of shape ``(size, size)``
indexed ``[y, x]``.

Caching
=======
A map is keyed by a signature of the view and the engine state. An exact
match returns the stored map; a signature that only differs from the
previous one in a few cells (same chain, direction, sunk set, sizes and
parity) reuses the previous map. Once the cache grows past its cap it is
flushed completely.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from . import config as _cfg
from .analysis import (
    board_pattern,
    free_run,
    is_adjacent_to_sunk_ship,
    is_isolated,
    is_sunk_cell,
    position_value,
)
from .battleship import Board, Orientation
from .coord_utils import NEIGHBOURS_8, Coord
from .state import TargetingState

logger = logging.getLogger(__name__)


class ProbabilityModel:
    def __init__(
        self,
        size: int = _cfg.BOARD_SIZE,
        *,
        boosts: Optional[Mapping[str, float]] = None,
        cache_size: int = _cfg.PROBABILITY_CACHE_SIZE,
        space_cache_size: int = _cfg.SPACE_CACHE_SIZE,
        similarity_threshold: int = _cfg.SIMILARITY_THRESHOLD,
    ) -> None:
        self.size = size
        self.boosts = dict(boosts if boosts is not None else _cfg.PROBABILITY_BOOSTS)
        self.cache_size = cache_size
        self.space_cache_size = space_cache_size
        self.similarity_threshold = similarity_threshold

        self._cache: Dict[str, np.ndarray] = {}
        self._last_key: Optional[str] = None
        self._last_map: Optional[np.ndarray] = None
        self._space_cache: Dict[Tuple[str, int, int, int, int], int] = {}

        # Counters, mostly for tests and debug output
        self.cache_hits = 0
        self.cache_reuses = 0
        self.computations = 0

    # ------------------------------------------------------------------ #
    # Cache management
    # ------------------------------------------------------------------ #
    def clear(self) -> None:
        self._cache.clear()
        self._space_cache.clear()
        self._last_key = None
        self._last_map = None

    @property
    def cache_len(self) -> int:
        return len(self._cache)

    @staticmethod
    def signature(view: Board, state: TargetingState) -> str:
        chain = ";".join(f"{x},{y}" for x, y in state.hit_chain)
        direction = state.hit_direction.value if state.hit_direction else "N"
        sunk = ",".join(sorted(ship.value for ship in state.sunk_ships))
        sizes = ",".join(str(s) for s in state.remaining_sizes())
        hunting = "P" if state.parity_hunting else "N"
        return "|".join((board_pattern(view), chain, direction, sunk, sizes, hunting, str(state.parity)))

    def _similar(self, old_key: str, new_key: str) -> bool:
        old_pattern, *old_rest = old_key.split("|")
        new_pattern, *new_rest = new_key.split("|")
        if old_rest != new_rest or len(old_pattern) != len(new_pattern):
            return False
        differences = 0
        for old, new in zip(old_pattern, new_pattern):
            if old != new:
                differences += 1
                if differences > self.similarity_threshold:
                    return False
        return True

    def _store(self, key: str, density: np.ndarray) -> None:
        self._cache[key] = density
        self._last_key = key
        self._last_map = density
        if len(self._cache) > self.cache_size:
            logger.debug("Probability cache over %d entries, flushing", self.cache_size)
            self._cache.clear()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    @staticmethod
    def adapt_parity(state: TargetingState) -> None:
        """Snap the hunting parity when every remaining ship length shares one parity."""
        sizes = state.remaining_sizes()
        if not sizes:
            return
        if all(size % 2 == 1 for size in sizes):
            state.parity = 1
        elif all(size % 2 == 0 for size in sizes):
            state.parity = 0

    def density(self, view: Board, state: TargetingState) -> np.ndarray:
        """Return the weight map for *view*; the caller may mutate the result freely."""
        if state.parity_hunting:
            self.adapt_parity(state)
        key = self.signature(view, state)

        if key in self._cache:
            self.cache_hits += 1
            base = self._cache[key]
        elif (
            self._last_key is not None
            and self._last_map is not None
            and self._similar(self._last_key, key)
        ):
            self.cache_reuses += 1
            base = self._last_map
        else:
            self.computations += 1
            base = self._compute(view, state)
            self._store(key, base)

        density = base.copy()
        density[self.isolation_mask(view, state)] = 0.0
        return density

    def available_space(self, view: Board, x: int, y: int, dx: int, dy: int, state: TargetingState) -> int:
        key = (board_pattern(view), x, y, dx, dy)
        if key in self._space_cache:
            return self._space_cache[key]
        space = free_run(view, x, y, dx, dy, state.sunk_ships)
        self._space_cache[key] = space
        if len(self._space_cache) > self.space_cache_size:
            self._space_cache.clear()
        return space

    def isolation_mask(self, view: Board, state: TargetingState) -> np.ndarray:
        sizes = state.remaining_sizes()
        mask = np.zeros((view.size, view.size), dtype=bool)
        for cell in view.cells():
            if is_isolated(view, cell.x, cell.y, sizes):
                mask[cell.y, cell.x] = True
        return mask

    def select(self, density: np.ndarray, view: Board, state: TargetingState) -> Optional[Coord]:
        """Pick the highest-weight legal cell.

        Ties go to the higher position value, then to row-major order.
        Returns None when no legal cell exists.
        """
        sizes = state.remaining_sizes()
        candidates: List[Coord] = [
            (cell.x, cell.y)
            for cell in view.cells()
            if not cell.is_hit
            and not is_adjacent_to_sunk_ship(view, cell.x, cell.y, state.sunk_ships)
            and not is_isolated(view, cell.x, cell.y, sizes)
        ]
        if not candidates:
            return None
        if state.parity_hunting:
            on_parity = [(x, y) for x, y in candidates if (x + y) % 2 == state.parity]
            if on_parity:
                candidates = on_parity

        def rank(coord: Coord) -> Tuple[float, float, int, int]:
            x, y = coord
            return (-float(density[y, x]), -position_value(view, x, y, self.boosts), y, x)

        return min(candidates, key=rank)

    # ------------------------------------------------------------------ #
    # Computation
    # ------------------------------------------------------------------ #
    def _exclusions(self, view: Board, state: TargetingState) -> np.ndarray:
        """Cells no undiscovered ship may cover: misses and neighbours of sunk ships."""
        n = view.size
        misses = np.zeros((n, n), dtype=bool)
        sunk = np.zeros((n, n), dtype=bool)
        for cell in view.cells():
            misses[cell.y, cell.x] = cell.is_miss
            sunk[cell.y, cell.x] = is_sunk_cell(cell, state.sunk_ships)

        padded = np.pad(sunk, 1)
        near_sunk = np.zeros_like(sunk)
        for dx, dy in NEIGHBOURS_8:
            near_sunk |= padded[1 + dy : 1 + dy + n, 1 + dx : 1 + dx + n]
        return misses | near_sunk

    def _compute(self, view: Board, state: TargetingState) -> np.ndarray:
        n = view.size
        density = np.zeros((n, n), dtype=float)
        blocked = self._exclusions(view, state)

        for size in state.remaining_sizes():
            if size > n:
                continue
            weight = size * 2.0
            # Row windows: valid[y, x] means cells x..x+size-1 of row y are open
            valid = ~sliding_window_view(blocked, size, axis=1).any(axis=2)
            for offset in range(size):
                density[:, offset : offset + n - size + 1] += valid * weight
            # Column windows
            valid = ~sliding_window_view(blocked, size, axis=0).any(axis=2)
            for offset in range(size):
                density[offset : offset + n - size + 1, :] += valid * weight

        if len(state.hit_chain) >= 2 and state.hit_direction is not None:
            self._boost_chain(density, view, state)

        if state.parity_hunting:
            ys, xs = np.indices((n, n))
            density[(xs + ys) % 2 != state.parity] = 0.0

        logger.debug("Computed probability map (max %.1f)", float(density.max(initial=0.0)))
        return density

    def _boost_chain(self, density: np.ndarray, view: Board, state: TargetingState) -> None:
        hit_chain = self.boosts["hit_chain"]
        if state.hit_direction is Orientation.HORIZONTAL:
            main, cross = ((1, 0), (-1, 0)), ((0, 1), (0, -1))
        else:
            main, cross = ((0, 1), (0, -1)), ((1, 0), (-1, 0))

        def open_cell(x: int, y: int) -> bool:
            return (
                view.in_bounds(x, y)
                and not view.grid[y][x].is_hit
                and not is_adjacent_to_sunk_ship(view, x, y, state.sunk_ships)
            )

        for hx, hy in state.hit_chain:
            for dx, dy in main:
                nx, ny = hx + dx, hy + dy
                if open_cell(nx, ny):
                    space = self.available_space(view, nx, ny, dx, dy, state)
                    density[ny, nx] += hit_chain + space * self.boosts["available_space"]

                fx, fy = hx + 2 * dx, hy + 2 * dy
                if open_cell(fx, fy):
                    if view.grid[ny][nx].is_ship_hit:
                        density[fy, fx] += self.boosts["line_formation"]
                    else:
                        density[fy, fx] += hit_chain / 3

            if len(state.hit_chain) <= 2:
                for dx, dy in cross:
                    nx, ny = hx + dx, hy + dy
                    if open_cell(nx, ny):
                        density[ny, nx] += hit_chain / 5
