"""Tests for shop generation and economy formulas."""

import random
from collections import Counter

import numpy as np
import pytest

from balatro_core.config import RulesConfig
from balatro_core.jokers import JOKERS, JokerRarity, create_joker
from balatro_core.shop import (
    SHOP_CARD_RARITIES,
    calculate_interest,
    calculate_round_reward,
    calculate_sell_value,
    generate_booster_pack,
    generate_shop_inventory,
    next_target_score,
)


class TestEconomy:
    @pytest.mark.parametrize(
        "money,interest",
        [(0, 0), (4, 0), (5, 1), (10, 2), (24, 4), (25, 5), (100, 5), (-3, 0)],
    )
    def test_interest(self, money, interest):
        assert calculate_interest(money) == interest

    def test_round_reward(self):
        """2 hands left and $10: 4 base + 2 hands + 2 interest = 8."""
        reward = calculate_round_reward(hands_remaining=2, money=10)
        assert reward.base == 4
        assert reward.hands_bonus == 2
        assert reward.interest == 2
        assert reward.total == 8

    def test_round_reward_interest_capped(self):
        assert calculate_round_reward(hands_remaining=0, money=999).total == 9

    def test_custom_interest_cap(self):
        rules = RulesConfig(interest_cap=10)
        assert calculate_interest(60, rules) == 10

    @pytest.mark.parametrize("cost,value", [(1, 1), (2, 1), (3, 1), (4, 2), (10, 5), (11, 5)])
    def test_sell_value(self, cost, value):
        assert calculate_sell_value(cost) == value

    @pytest.mark.parametrize("target,expected", [(300, 450), (450, 675), (675, 1012), (1012, 1518)])
    def test_target_growth_truncates(self, target, expected):
        assert next_target_score(target) == expected


class TestShopInventory:
    def test_offers_two_common_or_uncommon(self):
        shop = generate_shop_inventory([], random.Random(1))
        assert len(shop.jokers) == 2
        assert all(j.rarity in SHOP_CARD_RARITIES for j in shop.jokers)
        assert len({j.name for j in shop.jokers}) == 2

    def test_excludes_owned_by_name(self):
        owned = [create_joker(jid) for jid in ("joker", "greedy_joker", "lusty_joker", "the_duo")]
        for seed in range(50):
            shop = generate_shop_inventory(owned, random.Random(seed))
            names = {j.name for j in shop.jokers}
            assert not names & {j.name for j in owned}

    def test_small_pool_offers_fewer(self):
        owned = [
            create_joker(jid) for jid, d in JOKERS.items()
            if d.rarity in SHOP_CARD_RARITIES and jid != "the_trio"
        ]
        shop = generate_shop_inventory(owned, random.Random(0))
        assert [j.name for j in shop.jokers] == ["The Trio"]

    def test_empty_pool(self):
        owned = [create_joker(jid) for jid, d in JOKERS.items() if d.rarity in SHOP_CARD_RARITIES]
        shop = generate_shop_inventory(owned, random.Random(0))
        assert shop.jokers == []
        assert shop.booster_pack is not None

    def test_offers_get_fresh_identities(self):
        a = generate_shop_inventory([], random.Random(3))
        b = generate_shop_inventory([], random.Random(3))
        assert [j.name for j in a.jokers] == [j.name for j in b.jokers]
        assert {j.uid for j in a.jokers}.isdisjoint({j.uid for j in b.jokers})

    def test_find_joker(self):
        shop = generate_shop_inventory([], random.Random(1))
        target = shop.jokers[1]
        assert shop.find_joker(target.uid) is target
        assert shop.find_joker(create_joker("joker").uid) is None

    def test_shop_sampling_is_uniform(self):
        """Each eligible joker is offered about equally often."""
        rng = random.Random(99)
        trials = 7000
        counts = Counter()
        for _ in range(trials):
            for joker in generate_shop_inventory([], rng).jokers:
                counts[joker.id] += 1

        eligible = [jid for jid, d in JOKERS.items() if d.rarity in SHOP_CARD_RARITIES]
        assert set(counts) == set(eligible)
        observed = np.array([counts[jid] for jid in eligible], dtype=float)
        frequencies = observed / trials
        # Two of seven offered each time
        np.testing.assert_allclose(frequencies, 2 / 7, atol=0.03)


class TestBoosterPack:
    def test_pack_contents(self):
        pack = generate_booster_pack(random.Random(5))
        assert pack.name == "Standard Pack"
        assert pack.cost == 4
        assert len(pack.contents) == 3
        assert len({j.id for j in pack.contents}) == 3

    def test_pack_can_contain_rare(self):
        seen = set()
        rng = random.Random(11)
        for _ in range(200):
            seen.update(j.rarity for j in generate_booster_pack(rng).contents)
        assert JokerRarity.RARE in seen

    def test_pack_ignores_ownership(self):
        owned = [create_joker(jid) for jid in JOKERS]
        shop = generate_shop_inventory(owned, random.Random(2))
        assert len(shop.booster_pack.contents) == 3
