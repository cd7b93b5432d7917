"""Draw pile for a single round.

A round starts from a fresh, uniformly shuffled 52-card deck and only ever
shrinks until the next round rebuilds it.
"""

import random
from dataclasses import dataclass, field
from typing import Self

from balatro_core.models import Card, create_standard_deck


@dataclass
class Deck:
    """Ordered draw pile. The top of the deck is the end of ``cards``."""

    cards: list[Card] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def new_shuffled(cls, rng: random.Random | None = None) -> Self:
        """Build all 52 (suit, rank) combinations and shuffle them."""
        deck = cls(cards=create_standard_deck(), rng=rng or random.Random())
        deck.shuffle()
        return deck

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)

    def shuffle(self) -> None:
        """Re-randomize the order in place (Fisher-Yates via ``random.shuffle``)."""
        self.rng.shuffle(self.cards)

    def draw(self, n: int) -> list[Card]:
        """Remove and return up to ``n`` cards from the top.

        Returns fewer cards when the deck runs out; an exhausted deck is not
        an error.
        """
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards: {n}")

        drawn: list[Card] = []
        for _ in range(n):
            if not self.cards:
                break
            drawn.append(self.cards.pop())
        return drawn
