"""Feedback events.

The engine announces what happened with abstract tags; an audio or haptic
layer may subscribe and map them to effects. Nothing in the engine depends
on whether a listener exists or what it does.
"""

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class FeedbackEvent(Enum):
    """Abstract feedback tags."""

    CARD_SELECTED = "card-selected"
    CHIP_TALLY = "chip-tally"
    SCORE = "score"
    ROUND_WON = "round-won"
    ROUND_LOST = "round-lost"
    SHUFFLE = "shuffle"


FeedbackListener = Callable[[FeedbackEvent], None]


class FeedbackBus:
    """Fan out feedback events to subscribed listeners."""

    def __init__(self):
        self._listeners: list[FeedbackListener] = []

    def subscribe(self, listener: FeedbackListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: FeedbackListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: FeedbackEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                # A failing effect must never change game state
                logger.error(f"Feedback listener failed on {event.value}: {e}")
