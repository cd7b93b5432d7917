"""Poker hand classification.

Identifies the best poker hand in a set of played cards and splits the cards
into the ones that score and the ones that do not.

Two knobs come from jokers:
- ``min_run_length``: cards needed for a straight or a flush (5, or 4 with Four Fingers)
- ``blur_suits``: hearts/diamonds and spades/clubs count as one suit, for flushes only
"""

from collections import Counter
from dataclasses import dataclass, field

from balatro_core.models import Card, HandType, Rank, Suit

# Tie-break between equal ranks so the scoring partition does not depend on input order
_SUIT_ORDER = {Suit.SPADES: 3, Suit.HEARTS: 2, Suit.DIAMONDS: 1, Suit.CLUBS: 0}


@dataclass
class HandEvaluation:
    """Result of hand classification."""

    hand_type: HandType
    scoring_cards: list[Card]  # Cards that make up the hand type
    other_cards: list[Card] = field(default_factory=list)  # Played but not scoring

    @property
    def played_cards(self) -> list[Card]:
        return self.scoring_cards + self.other_cards

    @property
    def base_chips(self) -> int:
        """Hand type chips plus the chip value of every scoring card."""
        return self.hand_type.base_chips + sum(c.chips for c in self.scoring_cards)

    @property
    def base_mult(self) -> int:
        return self.hand_type.base_mult

    @property
    def base_score(self) -> int:
        """Base score before joker effects: chips * mult."""
        return self.base_chips * self.base_mult


def classify(
    cards: list[Card],
    min_run_length: int = 5,
    blur_suits: bool = False,
) -> HandEvaluation:
    """Classify played cards into the best matching hand type.

    Args:
        cards: Cards to evaluate, in any order
        min_run_length: Minimum cards for a straight or flush
        blur_suits: Merge red suits and black suits for flush detection

    Returns:
        HandEvaluation with the hand type and the scoring/non-scoring partition
    """
    if min_run_length < 1:
        raise ValueError(f"min_run_length must be positive, got {min_run_length}")

    if not cards:
        return HandEvaluation(HandType.HIGH_CARD, [], [])

    sorted_cards = sorted(cards, key=_sort_key, reverse=True)
    rank_counts = Counter(card.rank for card in sorted_cards)
    suit_classes = _group_by_suit_class(sorted_cards, blur_suits)

    # Suit classes large enough for a flush, biggest first
    flush_classes = [
        members for members in suit_classes.values() if len(members) >= min_run_length
    ]
    flush_classes.sort(key=len, reverse=True)

    # Straight flush: the run must come from a single suit class
    for members in flush_classes:
        run = _find_run(members, min_run_length)
        if run:
            return _result(HandType.STRAIGHT_FLUSH, run, sorted_cards)

    # Four of a kind (not affected by min_run_length)
    quads = _ranks_with_at_least(rank_counts, 4)
    if quads:
        return _result(HandType.FOUR_OF_A_KIND, _take(sorted_cards, quads[0], 4), sorted_cards)

    # Full house: three of one rank, two of a different rank
    trips = _ranks_with_at_least(rank_counts, 3)
    if trips:
        pairs = [r for r in _ranks_with_at_least(rank_counts, 2) if r != trips[0]]
        if pairs:
            scoring = _take(sorted_cards, trips[0], 3) + _take(sorted_cards, pairs[0], 2)
            return _result(HandType.FULL_HOUSE, scoring, sorted_cards)

    # Flush: every card of the suit class scores
    if flush_classes:
        return _result(HandType.FLUSH, flush_classes[0], sorted_cards)

    run = _find_run(sorted_cards, min_run_length)
    if run:
        return _result(HandType.STRAIGHT, run, sorted_cards)

    if trips:
        return _result(HandType.THREE_OF_A_KIND, _take(sorted_cards, trips[0], 3), sorted_cards)

    pairs = _ranks_with_at_least(rank_counts, 2)
    if len(pairs) >= 2:
        scoring = _take(sorted_cards, pairs[0], 2) + _take(sorted_cards, pairs[1], 2)
        return _result(HandType.TWO_PAIR, scoring, sorted_cards)

    if pairs:
        return _result(HandType.PAIR, _take(sorted_cards, pairs[0], 2), sorted_cards)

    # High card - every played card scores
    return HandEvaluation(HandType.HIGH_CARD, sorted_cards, [])


def contained_rank_types(cards: list[Card]) -> frozenset[HandType]:
    """Rank-only hand types present among ``cards``, ignoring suits and runs.

    Used by jokers that fire when the played cards contain a pair, three of a
    kind, etc., even if the winning classification is something else.
    """
    types = {HandType.HIGH_CARD}
    counts = Counter(card.rank for card in cards).values()

    pairs = sum(1 for c in counts if c >= 2)
    trips = sum(1 for c in counts if c >= 3)
    quads = sum(1 for c in counts if c >= 4)

    if pairs >= 1:
        types.add(HandType.PAIR)
    if pairs >= 2:
        types.add(HandType.TWO_PAIR)
    if trips >= 1:
        types.add(HandType.THREE_OF_A_KIND)
    if quads >= 1:
        types.add(HandType.FOUR_OF_A_KIND)
    # One rank with three, plus a second rank with at least two
    if trips >= 1 and pairs >= 2:
        types.add(HandType.FULL_HOUSE)

    return frozenset(types)


def _sort_key(card: Card) -> tuple[int, int]:
    return card.rank.value, _SUIT_ORDER[card.suit]


def _group_by_suit_class(cards: list[Card], blur_suits: bool) -> dict[Suit, list[Card]]:
    classes: dict[Suit, list[Card]] = {}
    for card in cards:
        key = card.suit.blurred if blur_suits else card.suit
        classes.setdefault(key, []).append(card)
    return classes


def _ranks_with_at_least(rank_counts: Counter[Rank], n: int) -> list[Rank]:
    """Ranks appearing at least ``n`` times, highest first."""
    return sorted((r for r, c in rank_counts.items() if c >= n), reverse=True)


def _take(sorted_cards: list[Card], rank: Rank, n: int) -> list[Card]:
    return [c for c in sorted_cards if c.rank == rank][:n]


def _find_run(sorted_cards: list[Card], length: int) -> list[Card]:
    """Find the highest run of ``length`` consecutive distinct ranks.

    ``sorted_cards`` must be sorted by descending rank. The ace may also play
    low, completing a wheel (A-5-4-3-2, or A-4-3-2 for a four card run).

    Returns the cards forming the run, or an empty list.
    """
    # One card per rank, keeping the first (highest suit) of each
    unique: list[Card] = []
    seen: set[Rank] = set()
    for card in sorted_cards:
        if card.rank not in seen:
            seen.add(card.rank)
            unique.append(card)

    if len(unique) < length:
        return []

    for i in range(len(unique) - length + 1):
        window = unique[i : i + length]
        if all(window[k].rank - window[k + 1].rank == 1 for k in range(length - 1)):
            return window

    # Wheel: ace plus the lowest (length - 1) ranks
    if length >= 2 and Rank.ACE in seen:
        low_ranks = set(range(2, length + 1))
        if low_ranks <= {r.value for r in seen}:
            return [c for c in unique if c.rank == Rank.ACE or c.rank.value in low_ranks]

    return []


def _result(hand_type: HandType, scoring: list[Card], sorted_cards: list[Card]) -> HandEvaluation:
    scoring_ids = {c.id for c in scoring}
    others = [c for c in sorted_cards if c.id not in scoring_ids]
    return HandEvaluation(hand_type, list(scoring), others)
