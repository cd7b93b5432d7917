"""Joker definitions and effect vocabulary.

CRITICAL: Joker order matters for effect resolution. Effects are applied in
the order jokers were acquired.

Each joker carries exactly one effect from a closed set:
- GlobalMult: flat +Mult, always triggers
- SuitChips: +Chips if any scoring card has the suit
- TypeMult / TypeChips: +Mult / +Chips if the hand contains a hand type
- AllowFourCardHands: straights and flushes need only 4 cards (passive)
- BlurredSuits: red suits and black suits merge for flushes (passive)

Passive effects never fire during scoring; they only change how the hand is
classified (see ``classifier_settings``).
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from uuid import UUID, uuid4

from balatro_core.config import DEFAULT_RULES, RulesConfig
from balatro_core.models import HandType, Suit


class JokerRarity(Enum):
    """Joker rarity tiers."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"


# =============================================================================
# Effect variants
# =============================================================================


@dataclass(frozen=True)
class GlobalMult:
    value: int


@dataclass(frozen=True)
class SuitChips:
    suit: Suit
    value: int


@dataclass(frozen=True)
class TypeMult:
    hand_type: HandType
    value: int


@dataclass(frozen=True)
class TypeChips:
    hand_type: HandType
    value: int


@dataclass(frozen=True)
class AllowFourCardHands:
    pass


@dataclass(frozen=True)
class BlurredSuits:
    pass


JokerEffect = GlobalMult | SuitChips | TypeMult | TypeChips | AllowFourCardHands | BlurredSuits

PASSIVE_EFFECTS = (AllowFourCardHands, BlurredSuits)


# =============================================================================
# Jokers
# =============================================================================


@dataclass(frozen=True)
class JokerDefinition:
    """Static definition of a joker type."""

    id: str
    name: str
    description: str
    rarity: JokerRarity
    base_cost: int
    effect: JokerEffect

    def create_instance(self) -> "JokerInstance":
        """Create a new instance of this joker with a fresh identity."""
        return JokerInstance(definition=self)


@dataclass(frozen=True)
class JokerInstance:
    """A specific joker owned by the player or offered in the shop.

    Two instances of the same definition are different jokers; the shop and
    the sell action look them up by ``uid``.
    """

    definition: JokerDefinition
    uid: UUID = field(default_factory=uuid4)

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def cost(self) -> int:
        return self.definition.base_cost

    @property
    def rarity(self) -> JokerRarity:
        return self.definition.rarity

    @property
    def effect(self) -> JokerEffect:
        return self.definition.effect

    @property
    def is_passive(self) -> bool:
        return isinstance(self.effect, PASSIVE_EFFECTS)

    def with_new_identity(self) -> "JokerInstance":
        """Copy of this joker under a new ``uid`` (used on acquisition)."""
        return replace(self, uid=uuid4())

    def __repr__(self) -> str:
        return f"JokerInstance({self.name!r})"


# =============================================================================
# Joker Definitions Registry
# =============================================================================

JOKERS: dict[str, JokerDefinition] = {
    # Common
    "joker": JokerDefinition(
        id="joker", name="Joker", description="+4 Mult",
        rarity=JokerRarity.COMMON, base_cost=2, effect=GlobalMult(4),
    ),
    "greedy_joker": JokerDefinition(
        id="greedy_joker", name="Greedy Joker",
        description="+50 Chips if a scoring card is a Heart",
        rarity=JokerRarity.COMMON, base_cost=3, effect=SuitChips(Suit.HEARTS, 50),
    ),
    "lusty_joker": JokerDefinition(
        id="lusty_joker", name="Lusty Joker",
        description="+50 Chips if a scoring card is a Diamond",
        rarity=JokerRarity.COMMON, base_cost=3, effect=SuitChips(Suit.DIAMONDS, 50),
    ),
    "wrathful_joker": JokerDefinition(
        id="wrathful_joker", name="Wrathful Joker",
        description="+50 Chips if a scoring card is a Spade",
        rarity=JokerRarity.COMMON, base_cost=3, effect=SuitChips(Suit.SPADES, 50),
    ),
    "gluttonous_joker": JokerDefinition(
        id="gluttonous_joker", name="Gluttonous Joker",
        description="+50 Chips if a scoring card is a Club",
        rarity=JokerRarity.COMMON, base_cost=3, effect=SuitChips(Suit.CLUBS, 50),
    ),
    # Uncommon
    "the_duo": JokerDefinition(
        id="the_duo", name="The Duo",
        description="+10 Mult if played hand contains a Pair",
        rarity=JokerRarity.UNCOMMON, base_cost=4, effect=TypeMult(HandType.PAIR, 10),
    ),
    "the_trio": JokerDefinition(
        id="the_trio", name="The Trio",
        description="+300 Chips if played hand contains a Three of a Kind",
        rarity=JokerRarity.UNCOMMON, base_cost=6,
        effect=TypeChips(HandType.THREE_OF_A_KIND, 300),
    ),
    # Rare
    "the_family": JokerDefinition(
        id="the_family", name="The Family",
        description="+50 Mult if played hand contains a Four of a Kind",
        rarity=JokerRarity.RARE, base_cost=8, effect=TypeMult(HandType.FOUR_OF_A_KIND, 50),
    ),
    "four_fingers": JokerDefinition(
        id="four_fingers", name="Four Fingers",
        description="All Flushes and Straights can be made with 4 cards",
        rarity=JokerRarity.RARE, base_cost=10, effect=AllowFourCardHands(),
    ),
    "smeared_joker": JokerDefinition(
        id="smeared_joker", name="Smeared Joker",
        description="Hearts and Diamonds count as the same suit, Spades and Clubs count as the same suit",
        rarity=JokerRarity.RARE, base_cost=10, effect=BlurredSuits(),
    ),
}


def create_joker(joker_id: str) -> JokerInstance:
    """Create a joker instance by ID."""
    if joker_id not in JOKERS:
        raise ValueError(f"Unknown joker: {joker_id}")
    return JOKERS[joker_id].create_instance()


def get_all_joker_ids() -> list[str]:
    """Get all joker IDs in catalog order."""
    return list(JOKERS.keys())


def get_jokers_by_rarity(rarity: JokerRarity) -> list[JokerDefinition]:
    return [j for j in JOKERS.values() if j.rarity == rarity]


def classifier_settings(
    jokers: list[JokerInstance], rules: RulesConfig = DEFAULT_RULES
) -> tuple[int, bool]:
    """Derive classifier configuration from owned jokers.

    Returns:
        Tuple of (min_run_length, blur_suits)
    """
    min_run_length = rules.default_min_run_length
    blur_suits = False
    for joker in jokers:
        match joker.effect:
            case AllowFourCardHands():
                min_run_length = rules.four_finger_run_length
            case BlurredSuits():
                blur_suits = True
    return min_run_length, blur_suits
