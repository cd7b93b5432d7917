"""Round state machine.

Drives a run from the menu through rounds of draw/discard/play, into the
shop after each win, and to game over when a round runs out of hands.

Key design decisions:
- Single writer: one caller issues transitions, one at a time
- Every transition checks its guards up front; a failed guard is a no-op
  reported as ``ActionResult(success=False)`` and leaves state untouched
- Scoring is synchronous; the full trace is returned with the result and
  any pacing of its display belongs to the caller
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Self
from uuid import UUID

from balatro_core.config import DEFAULT_RULES, PackPickPolicy, RulesConfig
from balatro_core.deck import Deck
from balatro_core.events import FeedbackBus, FeedbackEvent
from balatro_core.hand_evaluation import classify
from balatro_core.highscores import (
    MAX_ROUND_KEY,
    MAX_TARGET_KEY,
    HighScoreStore,
    InMemoryHighScoreStore,
    record_high_scores,
)
from balatro_core.jokers import JokerInstance, classifier_settings
from balatro_core.models import Card
from balatro_core.scoring import ScoringBreakdown, ScoringStep, calculate_score
from balatro_core.shop import (
    BoosterPack,
    RoundReward,
    ShopInventory,
    calculate_round_reward,
    calculate_sell_value,
    generate_shop_inventory,
    next_target_score,
)

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Current phase of the game."""

    MENU = auto()
    PLAYING = auto()  # Drawing, discarding and playing hands
    SHOPPING = auto()  # Between rounds, after a win
    GAME_OVER = auto()  # Ran out of hands below the target


class SortType(Enum):
    """How the hand is ordered for display."""

    RANK = "rank"
    SUIT = "suit"


@dataclass
class ActionResult:
    """Result of performing an action."""

    success: bool
    message: str
    score: int = 0
    breakdown: ScoringBreakdown | None = None
    reward: RoundReward | None = None
    round_won: bool = False
    game_over: bool = False


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only view of the game for a presentation layer."""

    phase: GamePhase
    money: int
    current_round: int
    target_score: int
    current_score: int
    hands_remaining: int
    discards_remaining: int
    deck_size: int
    hand: tuple[Card, ...]
    selected: frozenset[UUID]
    jokers: tuple[JokerInstance, ...]
    shop_jokers: tuple[JokerInstance, ...]
    booster_pack: BoosterPack | None
    pending_pack: tuple[JokerInstance, ...] | None
    last_trace: tuple[ScoringStep, ...]


@dataclass
class GameSimulator:
    """Round state machine for a single run.

    Not thread-safe: transitions must be serialized by the caller.
    """

    rules: RulesConfig = DEFAULT_RULES
    phase: GamePhase = GamePhase.MENU

    # Economy and jokers (ORDER MATTERS: acquisition order)
    money: int = 0
    jokers: list[JokerInstance] = field(default_factory=list)

    # Progress
    current_round: int = 1
    target_score: int = 300
    current_score: int = 0

    # Round budgets
    hands_remaining: int = 4
    discards_remaining: int = 3

    # Cards
    deck: Deck = field(default_factory=Deck)
    hand: list[Card] = field(default_factory=list)
    selected: set[UUID] = field(default_factory=set)
    sort_type: SortType = SortType.RANK

    # Shop
    shop: ShopInventory = field(default_factory=ShopInventory)
    pending_pack: list[JokerInstance] | None = None

    last_breakdown: ScoringBreakdown | None = None

    # Collaborators
    high_scores: HighScoreStore = field(default_factory=InMemoryHighScoreStore)
    feedback: FeedbackBus = field(default_factory=FeedbackBus)
    rng: random.Random = field(default_factory=random.Random)

    # =========================================================================
    # Run lifecycle
    # =========================================================================

    def start_new_game(self, seed: int | None = None) -> ActionResult:
        """Start a fresh run: no money, no jokers, round 1."""
        if self.phase not in (GamePhase.MENU, GamePhase.GAME_OVER):
            return self._reject("Can only start a new game from the menu or game over")

        if seed is not None:
            self.rng = random.Random(seed)

        self.money = 0
        self.jokers = []
        self.current_round = 1
        self.shop = ShopInventory()
        self.pending_pack = None
        self.reset_round(self.rules.starting_target)
        self.phase = GamePhase.PLAYING

        logger.info(f"New game started. Target {self.target_score}")
        return ActionResult(True, f"New game. Need {self.target_score} to clear round 1.")

    def replay(self) -> ActionResult:
        """Start over after losing."""
        if self.phase != GamePhase.GAME_OVER:
            return self._reject("Not in game over phase")
        return self.start_new_game()

    def return_to_menu(self) -> ActionResult:
        if self.phase != GamePhase.GAME_OVER:
            return self._reject("Not in game over phase")
        self.phase = GamePhase.MENU
        return ActionResult(True, "Returned to menu")

    def reset_round(self, target: int) -> None:
        """Rebuild the deck and deal a fresh hand for a round against ``target``."""
        self.target_score = target
        self.current_score = 0
        self.hands_remaining = self.rules.hands_per_round
        self.discards_remaining = self.rules.discards_per_round

        self.deck = Deck.new_shuffled(self.rng)
        self.feedback.emit(FeedbackEvent.SHUFFLE)

        self.hand = []
        self._draw_to_hand_size()
        self.selected.clear()
        self.last_breakdown = None

    def next_round(self) -> ActionResult:
        """Leave the shop and start the next, harder round."""
        if self.phase != GamePhase.SHOPPING:
            return self._reject("Not in shop phase")

        self.current_round += 1
        self.pending_pack = None
        self.reset_round(next_target_score(self.target_score, self.rules))
        self.phase = GamePhase.PLAYING

        logger.info(f"Round {self.current_round} started. Target {self.target_score}")
        return ActionResult(
            True, f"Round {self.current_round}. Need {self.target_score} chips."
        )

    # =========================================================================
    # Hand management
    # =========================================================================

    def _draw_to_hand_size(self) -> int:
        """Draw cards until hand is at hand_size. Returns number drawn."""
        drawn = self.deck.draw(max(0, self.rules.hand_size - len(self.hand)))
        self.hand.extend(drawn)
        if self.rules.auto_sort_hand:
            self.sort_hand()
        return len(drawn)

    def sort_hand(self) -> None:
        """Order the hand by the current sort type, ascending."""
        if self.sort_type == SortType.RANK:
            self.hand.sort(key=lambda c: (c.rank, c.suit.name))
        else:
            self.hand.sort(key=lambda c: (c.suit.name, c.rank))

    def toggle_sort(self) -> None:
        """Switch between rank and suit ordering and re-sort."""
        self.sort_type = SortType.SUIT if self.sort_type == SortType.RANK else SortType.RANK
        self.sort_hand()
        self.feedback.emit(FeedbackEvent.CARD_SELECTED)

    def select_card(self, card_id: UUID) -> ActionResult:
        """Add a card in hand to the selection (at most ``max_selection``)."""
        if self.phase != GamePhase.PLAYING:
            return self._reject("Not in playing phase")
        if not any(c.id == card_id for c in self.hand):
            return self._reject("Card is not in hand")
        if card_id in self.selected:
            return ActionResult(True, "Card already selected")
        if len(self.selected) >= self.rules.max_selection:
            return self._reject(f"Cannot select more than {self.rules.max_selection} cards")

        self.selected.add(card_id)
        self.feedback.emit(FeedbackEvent.CARD_SELECTED)
        return ActionResult(True, f"{len(self.selected)} cards selected")

    def deselect_card(self, card_id: UUID) -> ActionResult:
        if self.phase != GamePhase.PLAYING:
            return self._reject("Not in playing phase")
        if card_id not in self.selected:
            return self._reject("Card is not selected")

        self.selected.discard(card_id)
        self.feedback.emit(FeedbackEvent.CARD_SELECTED)
        return ActionResult(True, f"{len(self.selected)} cards selected")

    def toggle_selection(self, card_id: UUID) -> ActionResult:
        if card_id in self.selected:
            return self.deselect_card(card_id)
        return self.select_card(card_id)

    @property
    def selected_cards(self) -> list[Card]:
        """Selected cards in hand order."""
        return [c for c in self.hand if c.id in self.selected]

    # =========================================================================
    # Game Actions
    # =========================================================================

    def discard(self) -> ActionResult:
        """Discard the selected cards and draw back up to hand size."""
        if self.phase != GamePhase.PLAYING:
            return self._reject("Not in playing phase")
        if self.discards_remaining <= 0:
            return self._reject("No discards remaining")
        if not self.selected:
            return self._reject("No cards selected")

        discarded = len(self.selected)
        self.feedback.emit(FeedbackEvent.SHUFFLE)
        self.hand = [c for c in self.hand if c.id not in self.selected]
        drawn = self._draw_to_hand_size()
        self.discards_remaining -= 1
        self.selected.clear()

        return ActionResult(
            True,
            f"Discarded {discarded} cards, drew {drawn}. "
            f"{self.discards_remaining} discards left.",
        )

    def play_hand(self) -> ActionResult:
        """Play the selected cards, score them, and resolve the round end."""
        if self.phase != GamePhase.PLAYING:
            return self._reject("Not in playing phase")
        if self.hands_remaining <= 0:
            return self._reject("No hands remaining")
        if not self.selected:
            return self._reject("No cards selected")

        played = self.selected_cards
        min_run_length, blur_suits = classifier_settings(self.jokers, self.rules)
        evaluation = classify(played, min_run_length, blur_suits)

        self.feedback.emit(FeedbackEvent.SCORE)
        breakdown = calculate_score(
            evaluation,
            self.jokers,
            suit_chips_use_blurred_suits=self.rules.suit_chips_use_blurred_suits,
        )
        # One tally per step between the base reveal and the total
        for _ in breakdown.trace[:-1]:
            self.feedback.emit(FeedbackEvent.CHIP_TALLY)
        self.feedback.emit(FeedbackEvent.SCORE)

        self.current_score += breakdown.final_score
        self.last_breakdown = breakdown

        self.hand = [c for c in self.hand if c.id not in self.selected]
        self._draw_to_hand_size()
        self.hands_remaining -= 1
        self.selected.clear()

        return self._check_round_end(breakdown)

    def _check_round_end(self, breakdown: ScoringBreakdown) -> ActionResult:
        """Resolve win, loss, or keep playing after a hand."""
        score = breakdown.final_score

        if self.current_score >= self.target_score:
            reward = calculate_round_reward(self.hands_remaining, self.money, self.rules)
            self.money += reward.total
            logger.info(
                f"Round {self.current_round} won with {self.current_score}/{self.target_score}. "
                f"Reward: base {reward.base} + hands {reward.hands_bonus} "
                f"+ interest {reward.interest} = ${reward.total}"
            )

            record_high_scores(self.high_scores, self.current_round, self.target_score)
            self.shop = generate_shop_inventory(self.jokers, self.rng, self.rules)
            self.pending_pack = None
            self.phase = GamePhase.SHOPPING
            self.feedback.emit(FeedbackEvent.ROUND_WON)

            return ActionResult(
                True,
                f"Scored {score}. ROUND WON! Earned ${reward.total}.",
                score=score,
                breakdown=breakdown,
                reward=reward,
                round_won=True,
            )

        if self.hands_remaining == 0:
            self.phase = GamePhase.GAME_OVER
            self.feedback.emit(FeedbackEvent.ROUND_LOST)
            logger.info(
                f"Game over in round {self.current_round}: "
                f"{self.current_score}/{self.target_score}"
            )
            return ActionResult(
                True,
                f"Scored {score}. Total: {self.current_score}/{self.target_score}. GAME OVER!",
                score=score,
                breakdown=breakdown,
                game_over=True,
            )

        return ActionResult(
            True,
            f"Scored {score}. Total: {self.current_score}/{self.target_score}. "
            f"{self.hands_remaining} hands left.",
            score=score,
            breakdown=breakdown,
        )

    # =========================================================================
    # Shop Actions
    # =========================================================================

    def buy_joker(self, uid: UUID) -> ActionResult:
        """Buy a joker offered in the shop."""
        if self.phase != GamePhase.SHOPPING:
            return self._reject("Not in shop phase")

        joker = self.shop.find_joker(uid)
        if joker is None:
            return self._reject("Joker is not for sale")
        if self.money < joker.cost:
            return self._reject(f"Not enough money (have ${self.money}, need ${joker.cost})")
        if len(self.jokers) >= self.rules.max_jokers:
            return self._reject(
                f"Joker slots full ({self.rules.max_jokers}/{self.rules.max_jokers})"
            )

        self.money -= joker.cost
        self.jokers.append(joker)
        self.shop.jokers.remove(joker)

        return ActionResult(True, f"Bought {joker.name} for ${joker.cost}. ${self.money} remaining.")

    def sell_joker(self, uid: UUID) -> ActionResult:
        """Sell an owned joker for half its cost (at least $1)."""
        if self.phase not in (GamePhase.PLAYING, GamePhase.SHOPPING):
            return self._reject("Cannot sell jokers now")

        joker = self._find_owned(uid)
        if joker is None:
            return self._reject("Joker is not owned")

        self.jokers.remove(joker)
        sell_price = calculate_sell_value(joker.cost)
        self.money += sell_price
        self.feedback.emit(FeedbackEvent.CHIP_TALLY)

        return ActionResult(True, f"Sold {joker.name} for ${sell_price}. ${self.money} total.")

    def buy_booster_pack(self) -> ActionResult:
        """Buy the shop's booster pack and open it for a single pick."""
        if self.phase != GamePhase.SHOPPING:
            return self._reject("Not in shop phase")

        pack = self.shop.booster_pack
        if pack is None:
            return self._reject("No booster pack for sale")
        if self.pending_pack is not None:
            return self._reject("A pack is already open")
        if self.money < pack.cost:
            return self._reject(f"Not enough money (have ${self.money}, need ${pack.cost})")

        self.money -= pack.cost
        self.shop.booster_pack = None
        self.pending_pack = list(pack.contents)

        return ActionResult(True, f"Opened {pack.name}. Pick 1 of {len(pack.contents)}.")

    def select_from_pack(self, uid: UUID) -> ActionResult:
        """Take one joker from the open pack; the rest are lost."""
        if self.pending_pack is None:
            return self._reject("No pack is open")

        joker = next((j for j in self.pending_pack if j.uid == uid), None)
        if joker is None:
            return self._reject("Joker is not in the pack")

        if len(self.jokers) >= self.rules.max_jokers:
            if self.rules.pack_pick_at_capacity == PackPickPolicy.REJECT:
                return self._reject(
                    f"Joker slots full ({self.rules.max_jokers}/{self.rules.max_jokers})"
                )
            oldest = self.jokers.pop(0)
            self.money += calculate_sell_value(oldest.cost)
            logger.info(f"Sold {oldest.name} to make room for {joker.name}")

        self.jokers.append(joker.with_new_identity())
        self.pending_pack = None

        return ActionResult(True, f"Took {joker.name} from the pack")

    def skip_pack(self) -> ActionResult:
        if self.pending_pack is None:
            return self._reject("No pack is open")
        self.pending_pack = None
        return ActionResult(True, "Skipped pack")

    def _find_owned(self, uid: UUID) -> JokerInstance | None:
        for joker in self.jokers:
            if joker.uid == uid:
                return joker
        return None

    # =========================================================================
    # State Queries
    # =========================================================================

    def _reject(self, message: str) -> ActionResult:
        logger.debug(f"Rejected in {self.phase.name}: {message}")
        return ActionResult(False, message)

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def high_score_round(self) -> int:
        return self.high_scores.get(MAX_ROUND_KEY)

    @property
    def high_score_target(self) -> int:
        return self.high_scores.get(MAX_TARGET_KEY)

    def snapshot(self) -> StateSnapshot:
        """Capture everything a presentation layer needs to draw the game."""
        return StateSnapshot(
            phase=self.phase,
            money=self.money,
            current_round=self.current_round,
            target_score=self.target_score,
            current_score=self.current_score,
            hands_remaining=self.hands_remaining,
            discards_remaining=self.discards_remaining,
            deck_size=len(self.deck),
            hand=tuple(self.hand),
            selected=frozenset(self.selected),
            jokers=tuple(self.jokers),
            shop_jokers=tuple(self.shop.jokers),
            booster_pack=self.shop.booster_pack,
            pending_pack=tuple(self.pending_pack) if self.pending_pack is not None else None,
            last_trace=tuple(self.last_breakdown.trace) if self.last_breakdown else (),
        )

    def get_state_summary(self) -> dict:
        """Get a summary of current game state."""
        return {
            "phase": self.phase.name,
            "round": self.current_round,
            "score": f"{self.current_score}/{self.target_score}",
            "hands": self.hands_remaining,
            "discards": self.discards_remaining,
            "money": self.money,
            "hand_size": len(self.hand),
            "deck_size": len(self.deck),
            "jokers": [j.name for j in self.jokers],
        }

    def clone(self) -> Self:
        """Create an independent copy for what-if evaluation.

        Cards and jokers are immutable and shared; containers and the RNG
        state are copied. The clone gets its own feedback bus and an
        in-memory copy of the high scores so it never touches the real store.
        """
        rng = random.Random()
        rng.setstate(self.rng.getstate())
        return GameSimulator(
            rules=self.rules,
            phase=self.phase,
            money=self.money,
            jokers=list(self.jokers),
            current_round=self.current_round,
            target_score=self.target_score,
            current_score=self.current_score,
            hands_remaining=self.hands_remaining,
            discards_remaining=self.discards_remaining,
            deck=Deck(cards=list(self.deck.cards), rng=rng),
            hand=list(self.hand),
            selected=set(self.selected),
            sort_type=self.sort_type,
            shop=ShopInventory(
                jokers=list(self.shop.jokers), booster_pack=self.shop.booster_pack
            ),
            pending_pack=list(self.pending_pack) if self.pending_pack is not None else None,
            last_breakdown=self.last_breakdown,
            high_scores=InMemoryHighScoreStore(
                {
                    MAX_ROUND_KEY: self.high_score_round,
                    MAX_TARGET_KEY: self.high_score_target,
                }
            ),
            feedback=FeedbackBus(),
            rng=rng,
        )
