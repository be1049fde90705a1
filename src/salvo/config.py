"""Central configuration for runtime-tunable parameters.

All constants can be overridden via environment variables so that the
engine runs with the standard rules by default, while the automated
test-suite or the self-play CLI can shrink caches or pin seeds if necessary.
"""

from __future__ import annotations

import os
from typing import Optional


# ===========================================================================
# Game Constants
# ===========================================================================
# SALVO_BOARD_SIZE: Defines the width and height of the game board.
#   Defaults to 10 (for a 10x10 grid).
#   Example: export SALVO_BOARD_SIZE=8
BOARD_SIZE: int = int(os.getenv("SALVO_BOARD_SIZE", "10"))


# ===========================================================================
# Ship Placement
# ===========================================================================
# SALVO_PLACEMENT_ATTEMPTS: Random candidates tried per ship under each rule
#   (strict, then relaxed) before the ship is left unplaced.
#   Defaults to 500.
PLACEMENT_ATTEMPTS: int = int(os.getenv("SALVO_PLACEMENT_ATTEMPTS", "500"))

# Relative weights of the strategic (hard tier) placement patterns.
PLACEMENT_PATTERNS = {
    "edge": 0.4,
    "center": 0.3,
    "cluster": 0.3,
}


# ===========================================================================
# Probability Map
# ===========================================================================
# SALVO_PROBABILITY_CACHE_SIZE: Number of probability maps kept before the
#   whole cache is flushed. Defaults to 100.
PROBABILITY_CACHE_SIZE: int = int(os.getenv("SALVO_PROBABILITY_CACHE_SIZE", "100"))

# SALVO_SPACE_CACHE_SIZE: Number of free-run lengths kept before the cache is
#   flushed. Defaults to 1000.
SPACE_CACHE_SIZE: int = int(os.getenv("SALVO_SPACE_CACHE_SIZE", "1000"))

# SALVO_SIMILARITY_THRESHOLD: Maximum number of differing cells for which the
#   previous probability map is reused instead of recomputed. Defaults to 3.
SIMILARITY_THRESHOLD: int = int(os.getenv("SALVO_SIMILARITY_THRESHOLD", "3"))

# Score boosts superimposed on the placement counts.
PROBABILITY_BOOSTS = {
    "hit_chain": 15.0,
    "available_space": 5.0,
    "edge": 1.0,
    "corner": 1.0,
    "line_formation": 10.0,
}


# ===========================================================================
# Determinism
# ===========================================================================
# SALVO_SEED: Optional integer seed for every engine created without an
#   explicit seed. Unset means fresh randomness per engine.
#   Example: export SALVO_SEED=1234
SEED: Optional[int] = int(os.environ["SALVO_SEED"]) if os.getenv("SALVO_SEED") else None


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SALVO_DEBUG: If "1", enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
#   Example: export SALVO_DEBUG=1
DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"
