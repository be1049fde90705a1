"""Lightweight event model used by SelfPlayMatch to decouple the match loop from its observers.

The goal is to emit strongly-typed events that subscribers (logging, the CLI
board printer, tests) can consume without parsing free-text strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class Category(Enum):
    """High-level event categories."""

    TURN = auto()  # per-shot lifecycle (shot, sunk)
    SYSTEM = auto()  # match start / finish


@dataclass(frozen=True)
class Event:
    """Immutable event emitted by SelfPlayMatch."""

    category: Category
    type: str  # finer-grained identifier, e.g. "shot", "sunk", "finished"
    payload: Dict[str, Any]


class EventRouter:
    def __init__(self) -> None:
        self.handlers: Dict[str, List[Callable[[Event], None]]] = {}

    def register_handler(self, event_type: str, handler: Callable[[Event], None]) -> None:
        self.handlers.setdefault(event_type, []).append(handler)

    def route_event(self, event: Event) -> None:
        handlers = self.handlers.get(event.type)
        if not handlers:
            logger.debug("No handler for event type: %s", event.type)
            return
        for handler in handlers:
            handler(event)
