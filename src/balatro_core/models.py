"""Core value types for the poker rules engine: suits, ranks, cards and hand types."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Self
from uuid import UUID, uuid4


class Suit(Enum):
    """Card suits."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"

    def __str__(self) -> str:
        symbols = {"S": "♠", "H": "♥", "C": "♣", "D": "♦"}
        return symbols[self.value]

    @property
    def color(self) -> str:
        """Display color. Never used by scoring logic."""
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return "red"
        return "black"

    @property
    def blurred(self) -> "Suit":
        """Suit class when red and black suits are merged.

        Hearts and diamonds collapse to hearts, spades and clubs to spades.
        """
        if self == Suit.DIAMONDS:
            return Suit.HEARTS
        if self == Suit.CLUBS:
            return Suit.SPADES
        return self


class Rank(IntEnum):
    """Card ranks with numeric values for comparison (ace high)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {11: "J", 12: "Q", 13: "K", 14: "A"}[self.value]

    @property
    def chip_value(self) -> int:
        """Base chip value for scoring."""
        if self.value <= 10:
            return self.value
        if self.value == 14:  # Ace
            return 11
        return 10  # Face cards


class HandType(IntEnum):
    """Poker hand types ordered by base strength.

    Royal flush is not a separate type; it classifies as a straight flush.
    """

    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9

    @property
    def display_name(self) -> str:
        names = {
            HandType.HIGH_CARD: "High Card",
            HandType.PAIR: "Pair",
            HandType.TWO_PAIR: "Two Pair",
            HandType.THREE_OF_A_KIND: "Three of a Kind",
            HandType.STRAIGHT: "Straight",
            HandType.FLUSH: "Flush",
            HandType.FULL_HOUSE: "Full House",
            HandType.FOUR_OF_A_KIND: "Four of a Kind",
            HandType.STRAIGHT_FLUSH: "Straight Flush",
        }
        return names[self]

    @property
    def base_chips(self) -> int:
        """Base chip value for this hand type."""
        return _BASE_SCORES[self][0]

    @property
    def base_mult(self) -> int:
        """Base multiplier for this hand type."""
        return _BASE_SCORES[self][1]

    def contains(self, other: "HandType") -> bool:
        """Check whether this hand type structurally includes ``other``.

        A full house (3 + 2) is built from a pair and three of a kind, so a
        joker keyed on "contains a pair" fires for it. A straight flush is made
        of distinct ranks and therefore never contains a pair.
        """
        if self == other or other == HandType.HIGH_CARD:
            return True
        return other in _CONTAINED_TYPES.get(self, frozenset())


_BASE_SCORES: dict[HandType, tuple[int, int]] = {
    HandType.HIGH_CARD: (5, 1),
    HandType.PAIR: (10, 2),
    HandType.TWO_PAIR: (20, 2),
    HandType.THREE_OF_A_KIND: (30, 3),
    HandType.STRAIGHT: (30, 4),
    HandType.FLUSH: (35, 4),
    HandType.FULL_HOUSE: (40, 4),
    HandType.FOUR_OF_A_KIND: (60, 7),
    HandType.STRAIGHT_FLUSH: (100, 8),
}

# Lower types each hand type is composed of (itself and HIGH_CARD are implicit)
_CONTAINED_TYPES: dict[HandType, frozenset[HandType]] = {
    HandType.STRAIGHT_FLUSH: frozenset({HandType.FLUSH, HandType.STRAIGHT}),
    HandType.FOUR_OF_A_KIND: frozenset({HandType.THREE_OF_A_KIND, HandType.PAIR}),
    HandType.FULL_HOUSE: frozenset(
        {HandType.THREE_OF_A_KIND, HandType.TWO_PAIR, HandType.PAIR}
    ),
    HandType.THREE_OF_A_KIND: frozenset({HandType.PAIR}),
    HandType.TWO_PAIR: frozenset({HandType.PAIR}),
}


@dataclass(frozen=True, slots=True, eq=False)
class Card:
    """A playing card.

    Equality and hashing go through ``id`` only: two cards showing the same
    rank and suit are still different cards for selection and removal.
    """

    rank: Rank
    suit: Suit
    id: UUID = field(default_factory=uuid4)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank!s}{self.suit!s})"

    @property
    def chips(self) -> int:
        return self.rank.chip_value

    def same_face(self, other: "Card") -> bool:
        """True if both cards show the same rank and suit."""
        return self.rank == other.rank and self.suit == other.suit

    @classmethod
    def from_string(cls, s: str) -> Self:
        """Parse card from string like 'AS' (Ace of Spades) or '10H' (Ten of Hearts)."""
        s = s.upper().strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card: {s!r}")
        suit_char = s[-1]
        rank_str = s[:-1]

        suit_map = {"S": Suit.SPADES, "H": Suit.HEARTS, "C": Suit.CLUBS, "D": Suit.DIAMONDS}
        rank_map = {str(r): r for r in Rank}

        if suit_char not in suit_map:
            raise ValueError(f"Invalid suit: {suit_char}")
        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")

        return cls(rank=rank_map[rank_str], suit=suit_map[suit_char])


def create_standard_deck() -> list[Card]:
    """Create a standard 52-card deck, one card per (suit, rank), unshuffled."""
    return [Card(rank=rank, suit=suit) for suit in Suit for rank in Rank]
