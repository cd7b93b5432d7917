"""Tests for the draw pile."""

import random
from collections import Counter

import numpy as np
import pytest

from balatro_core.deck import Deck
from balatro_core.models import Rank, Suit


class TestNewShuffledDeck:
    def test_full_combination_set(self):
        """Every (suit, rank) pair appears exactly once."""
        deck = Deck.new_shuffled(random.Random(1))
        faces = Counter((c.suit, c.rank) for c in deck)
        assert len(deck) == 52
        assert set(faces) == {(s, r) for s in Suit for r in Rank}
        assert all(count == 1 for count in faces.values())

    def test_seeded_decks_match(self):
        a = Deck.new_shuffled(random.Random(42))
        b = Deck.new_shuffled(random.Random(42))
        assert [(c.suit, c.rank) for c in a] == [(c.suit, c.rank) for c in b]

    def test_different_seeds_differ(self):
        a = Deck.new_shuffled(random.Random(1))
        b = Deck.new_shuffled(random.Random(2))
        assert [(c.suit, c.rank) for c in a] != [(c.suit, c.rank) for c in b]

    def test_shuffle_is_uniform_over_positions(self):
        """Each card lands on the top position about equally often."""
        rng = random.Random(1234)
        trials = 5200
        top_counts = Counter()
        for _ in range(trials):
            deck = Deck.new_shuffled(rng)
            top = deck.cards[-1]
            top_counts[(top.suit, top.rank)] += 1

        observed = np.array([top_counts[(s, r)] for s in Suit for r in Rank], dtype=float)
        expected = trials / 52
        chi_square = float(np.sum((observed - expected) ** 2 / expected))
        # 51 degrees of freedom; the 99.9th percentile is about 88
        assert chi_square < 93


class TestDraw:
    def test_draw_takes_from_top(self):
        deck = Deck.new_shuffled(random.Random(3))
        top_three = list(reversed(deck.cards[-3:]))
        drawn = deck.draw(3)
        assert drawn == top_three
        assert len(deck) == 49

    def test_draw_more_than_available(self):
        """An exhausted deck returns a shorter list, not an error."""
        deck = Deck.new_shuffled(random.Random(3))
        deck.draw(50)
        drawn = deck.draw(5)
        assert len(drawn) == 2
        assert len(deck) == 0
        assert deck.draw(1) == []

    def test_draw_zero(self):
        deck = Deck.new_shuffled(random.Random(3))
        assert deck.draw(0) == []
        assert len(deck) == 52

    def test_draw_negative(self):
        deck = Deck.new_shuffled(random.Random(3))
        with pytest.raises(ValueError):
            deck.draw(-1)

    def test_shuffle_keeps_cards(self):
        deck = Deck.new_shuffled(random.Random(5))
        before = set(deck.cards)
        deck.shuffle()
        assert set(deck.cards) == before
        assert len(deck) == 52
