"""Scoring engine.

Folds joker effects over the base score of a classified hand.

CRITICAL: Effect order matters! The sequence is:
1. Base hand chips (hand type + scoring card chips) and base hand mult
2. For each joker in acquisition order, if its condition holds:
   a. Add chips or add mult
   b. Record a trace step with the running chips × mult
3. Final score = chips × mult after the last triggering joker

Jokers that do not trigger leave the score untouched and add no trace step.
The trace is returned in full; pacing its display is up to the caller.
"""

import logging
from dataclasses import dataclass, field

from balatro_core.hand_evaluation import HandEvaluation, contained_rank_types
from balatro_core.jokers import (
    AllowFourCardHands,
    BlurredSuits,
    GlobalMult,
    JokerInstance,
    SuitChips,
    TypeChips,
    TypeMult,
)
from balatro_core.models import HandType, Suit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringStep:
    """One observable point in the scoring sequence."""

    chips: int
    mult: int
    total: int
    description: str


@dataclass
class ScoringBreakdown:
    """Detailed breakdown of how a score was calculated."""

    hand_type: HandType
    base_chips: int
    base_mult: int

    # Joker contributions in order: (joker_name, chips_added, mult_added)
    joker_effects: list[tuple[str, int, int]] = field(default_factory=list)

    # Base step, one step per triggered joker, then the total
    trace: list[ScoringStep] = field(default_factory=list)

    final_chips: int = 0
    final_mult: int = 0
    final_score: int = 0

    @property
    def triggered_jokers(self) -> list[str]:
        return [name for name, _, _ in self.joker_effects]


def calculate_score(
    evaluation: HandEvaluation,
    jokers: list[JokerInstance],
    suit_chips_use_blurred_suits: bool = False,
) -> ScoringBreakdown:
    """Calculate the score for a classified hand.

    Args:
        evaluation: Classifier output for the played cards
        jokers: Jokers in acquisition order (ORDER MATTERS!)
        suit_chips_use_blurred_suits: Suit jokers match by blurred suit class

    Returns:
        ScoringBreakdown with final values and the ordered trace
    """
    chips = evaluation.base_chips
    mult = evaluation.base_mult

    breakdown = ScoringBreakdown(
        hand_type=evaluation.hand_type,
        base_chips=chips,
        base_mult=mult,
    )
    breakdown.trace.append(
        ScoringStep(chips, mult, chips * mult, evaluation.hand_type.display_name)
    )

    # Rank-based hand types in the played cards, independent of the winning type
    rank_types = contained_rank_types(evaluation.played_cards)

    for joker in jokers:
        add_chips = 0
        add_mult = 0
        triggered = False

        match joker.effect:
            case GlobalMult(value=value):
                add_mult, triggered = value, True
            case SuitChips(suit=suit, value=value):
                if _has_suit(evaluation, suit, suit_chips_use_blurred_suits):
                    add_chips, triggered = value, True
            case TypeMult(hand_type=hand_type, value=value):
                if _contains_type(evaluation.hand_type, rank_types, hand_type):
                    add_mult, triggered = value, True
            case TypeChips(hand_type=hand_type, value=value):
                if _contains_type(evaluation.hand_type, rank_types, hand_type):
                    add_chips, triggered = value, True
            case AllowFourCardHands() | BlurredSuits():
                # Already applied during classification
                pass

        if not triggered:
            continue

        chips += add_chips
        mult += add_mult
        if isinstance(joker.effect, (GlobalMult, TypeMult)):
            label = f"+ {add_mult} Mult"
        else:
            label = f"+ {add_chips} Chips"
        breakdown.joker_effects.append((joker.name, add_chips, add_mult))
        breakdown.trace.append(ScoringStep(chips, mult, chips * mult, f"{joker.name}: {label}"))
        logger.debug(f"{joker.name} triggered: {label} -> {chips} x {mult}")

    breakdown.final_chips = chips
    breakdown.final_mult = mult
    breakdown.final_score = chips * mult
    breakdown.trace.append(ScoringStep(chips, mult, breakdown.final_score, "Total"))

    return breakdown


def quick_score(evaluation: HandEvaluation, jokers: list[JokerInstance] | None = None) -> int:
    """Quick score calculation returning just the final score."""
    return calculate_score(evaluation, jokers or []).final_score


def _has_suit(evaluation: HandEvaluation, suit: Suit, use_blurred: bool) -> bool:
    if use_blurred:
        return any(c.suit.blurred == suit.blurred for c in evaluation.scoring_cards)
    return any(c.suit == suit for c in evaluation.scoring_cards)


def _contains_type(
    winning: HandType, rank_types: frozenset[HandType], wanted: HandType
) -> bool:
    return winning.contains(wanted) or wanted in rank_types
