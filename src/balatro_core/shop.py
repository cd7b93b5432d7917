"""Shop and economy rules.

The shop appears after every won round and offers:
- 2 jokers drawn from the common/uncommon pool, never one already owned
- 1 booster pack holding 3 jokers from the full pool (any rarity)

Money comes from the round reward: a base amount, $1 per unused hand, and
interest of $1 per $5 held, capped at $5.
"""

import random
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from balatro_core.config import DEFAULT_RULES, RulesConfig
from balatro_core.jokers import JOKERS, JokerDefinition, JokerInstance, JokerRarity

# Rarities that may appear as single shop cards; the rest come only from packs
SHOP_CARD_RARITIES = frozenset({JokerRarity.COMMON, JokerRarity.UNCOMMON})


@dataclass(frozen=True)
class RoundReward:
    """Money awarded for winning a round."""

    base: int
    hands_bonus: int
    interest: int

    @property
    def total(self) -> int:
        return self.base + self.hands_bonus + self.interest


@dataclass
class BoosterPack:
    """A sealed pack; its contents become a single pick once bought."""

    name: str
    cost: int
    contents: list[JokerInstance] = field(default_factory=list)
    uid: UUID = field(default_factory=uuid4)


@dataclass
class ShopInventory:
    """What the shop currently offers."""

    jokers: list[JokerInstance] = field(default_factory=list)
    booster_pack: BoosterPack | None = None

    def find_joker(self, uid: UUID) -> JokerInstance | None:
        for joker in self.jokers:
            if joker.uid == uid:
                return joker
        return None


def calculate_interest(money: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Interest earned at end of round: $1 per ``interest_step`` held, capped."""
    if money <= 0:
        return 0
    return min(rules.interest_cap, money // rules.interest_step)


def calculate_round_reward(
    hands_remaining: int, money: int, rules: RulesConfig = DEFAULT_RULES
) -> RoundReward:
    """Calculate the reward for winning a round.

    Interest is computed on the money held before the reward is paid out.
    """
    return RoundReward(
        base=rules.base_reward,
        hands_bonus=hands_remaining,
        interest=calculate_interest(money, rules),
    )


def calculate_sell_value(cost: int) -> int:
    """Sell value: half the buy cost rounded down, never less than $1."""
    return max(1, cost // 2)


def next_target_score(target: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Target score for the next round, truncated to an integer."""
    return int(target * rules.target_growth)


def generate_shop_inventory(
    owned: list[JokerInstance],
    rng: random.Random,
    rules: RulesConfig = DEFAULT_RULES,
    catalog: dict[str, JokerDefinition] = JOKERS,
) -> ShopInventory:
    """Roll a fresh shop.

    Args:
        owned: Jokers the player already holds (excluded by name)
        rng: Random source; sampling is uniform without replacement
        rules: Slot counts and pack settings
        catalog: Joker definitions to draw from

    Returns:
        ShopInventory with the joker offers and one booster pack
    """
    owned_names = {j.name for j in owned}
    pool = [
        d for d in catalog.values()
        if d.rarity in SHOP_CARD_RARITIES and d.name not in owned_names
    ]
    picks = rng.sample(pool, k=min(rules.shop_joker_slots, len(pool)))

    return ShopInventory(
        jokers=[d.create_instance() for d in picks],
        booster_pack=generate_booster_pack(rng, rules, catalog),
    )


def generate_booster_pack(
    rng: random.Random,
    rules: RulesConfig = DEFAULT_RULES,
    catalog: dict[str, JokerDefinition] = JOKERS,
) -> BoosterPack:
    """Roll a booster pack from the full pool, any rarity, no duplicates."""
    pool = list(catalog.values())
    picks = rng.sample(pool, k=min(rules.pack_size, len(pool)))
    return BoosterPack(
        name=rules.pack_name,
        cost=rules.pack_cost,
        contents=[d.create_instance() for d in picks],
    )
