"""Self-play entry point: let the computer opponent clear freshly placed fleets.

    salvo-bot --difficulty hard --games 50 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import random
import statistics

from . import config as _cfg
from .battleship import Board
from .events import Event, EventRouter
from .game import SelfPlayMatch
from .opponent import ComputerOpponent, Difficulty
from .placement import place_fleet

logger = logging.getLogger(__name__)


def _log_sunk(ev: Event) -> None:
    logger.info("Sunk %s on shot %d", ev.payload["ship"], ev.payload["shot"])


def main() -> None:  # pragma: no cover – CLI entry
    parser = argparse.ArgumentParser(description="Salvo self-play runner")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.HARD.value,
    )
    parser.add_argument("--games", type=int, default=10, help="Number of matches to play")
    parser.add_argument("--seed", type=int, default=_cfg.SEED, help="Seed for fleets and engines")
    parser.add_argument("--show-board", action="store_true", help="Print the final board of every match")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug or _cfg.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    seeds = random.Random(args.seed)
    router = EventRouter()
    router.register_handler("sunk", _log_sunk)

    shots = []
    for game in range(1, args.games + 1):
        target = Board()
        place_fleet(target, rng=random.Random(seeds.randrange(2**32)))
        opponent = ComputerOpponent(args.difficulty, seed=seeds.randrange(2**32))
        result = SelfPlayMatch(opponent, target, router=router).play()
        shots.append(result.shots)
        logger.info("Game %d: %s in %d shots", game, "won" if result.won else "lost", result.shots)
        if args.show_board:
            target.print_display_grid(show_hidden_board=True)

    if shots:
        logger.info(
            "%s: %d games, mean %.1f shots (min %d, max %d)",
            args.difficulty,
            len(shots),
            statistics.mean(shots),
            min(shots),
            max(shots),
        )


if __name__ == "__main__":
    main()
