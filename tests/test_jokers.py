"""Tests for joker definitions and classifier settings."""

import pytest

from balatro_core.config import RulesConfig
from balatro_core.jokers import (
    JOKERS,
    AllowFourCardHands,
    BlurredSuits,
    GlobalMult,
    JokerRarity,
    SuitChips,
    TypeChips,
    TypeMult,
    classifier_settings,
    create_joker,
    get_all_joker_ids,
    get_jokers_by_rarity,
)
from balatro_core.models import HandType, Suit


class TestJokerRegistry:
    def test_catalog_size(self):
        assert len(JOKERS) == 10
        assert get_all_joker_ids()[0] == "joker"

    def test_definitions_match_their_keys(self):
        for joker_id, definition in JOKERS.items():
            assert definition.id == joker_id
            assert definition.name
            assert definition.base_cost > 0

    def test_rarity_spread(self):
        assert len(get_jokers_by_rarity(JokerRarity.COMMON)) == 5
        assert len(get_jokers_by_rarity(JokerRarity.UNCOMMON)) == 2
        assert len(get_jokers_by_rarity(JokerRarity.RARE)) == 3
        assert get_jokers_by_rarity(JokerRarity.LEGENDARY) == []

    @pytest.mark.parametrize(
        "joker_id,effect",
        [
            ("joker", GlobalMult(4)),
            ("greedy_joker", SuitChips(Suit.HEARTS, 50)),
            ("lusty_joker", SuitChips(Suit.DIAMONDS, 50)),
            ("wrathful_joker", SuitChips(Suit.SPADES, 50)),
            ("gluttonous_joker", SuitChips(Suit.CLUBS, 50)),
            ("the_duo", TypeMult(HandType.PAIR, 10)),
            ("the_trio", TypeChips(HandType.THREE_OF_A_KIND, 300)),
            ("the_family", TypeMult(HandType.FOUR_OF_A_KIND, 50)),
            ("four_fingers", AllowFourCardHands()),
            ("smeared_joker", BlurredSuits()),
        ],
    )
    def test_effects(self, joker_id, effect):
        assert JOKERS[joker_id].effect == effect

    def test_unknown_joker(self):
        with pytest.raises(ValueError):
            create_joker("not_a_joker")


class TestJokerInstance:
    def test_instances_are_distinct(self):
        a = create_joker("joker")
        b = create_joker("joker")
        assert a.uid != b.uid
        assert a != b
        assert a.name == b.name

    def test_new_identity_keeps_definition(self):
        joker = create_joker("the_duo")
        copy = joker.with_new_identity()
        assert copy.uid != joker.uid
        assert copy.definition is joker.definition
        assert copy.cost == 4

    def test_is_passive(self):
        assert create_joker("four_fingers").is_passive
        assert create_joker("smeared_joker").is_passive
        assert not create_joker("joker").is_passive


class TestClassifierSettings:
    def test_defaults(self):
        assert classifier_settings([]) == (5, False)

    def test_four_fingers(self):
        assert classifier_settings([create_joker("four_fingers")]) == (4, False)

    def test_smeared(self):
        assert classifier_settings([create_joker("smeared_joker")]) == (5, True)

    def test_both(self):
        jokers = [create_joker("joker"), create_joker("smeared_joker"), create_joker("four_fingers")]
        assert classifier_settings(jokers) == (4, True)

    def test_custom_rules(self):
        rules = RulesConfig(default_min_run_length=6, four_finger_run_length=3)
        assert classifier_settings([], rules) == (6, False)
        assert classifier_settings([create_joker("four_fingers")], rules) == (3, False)
