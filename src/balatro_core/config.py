"""Rule constants for a run.

All numbers that shape a run live here so tests and variants can swap them
without touching the state machine.
"""

from dataclasses import dataclass
from enum import Enum


class PackPickPolicy(Enum):
    """What happens when a booster pack pick arrives with full joker slots."""

    REJECT = "reject"  # Pick refused, pack stays open until the player sells or skips
    REPLACE_OLDEST = "replace_oldest"  # Oldest joker is sold to make room


@dataclass(frozen=True)
class RulesConfig:
    """Configuration for round, scoring and shop rules."""

    # Hand and selection
    hand_size: int = 8
    max_selection: int = 5
    auto_sort_hand: bool = True

    # Per-round budgets
    hands_per_round: int = 4
    discards_per_round: int = 3

    # Target score progression
    starting_target: int = 300
    target_growth: float = 1.5

    # Round reward: base + hands left + interest
    base_reward: int = 4
    interest_step: int = 5  # $1 interest per $5 held
    interest_cap: int = 5

    # Jokers
    max_jokers: int = 5
    default_min_run_length: int = 5
    four_finger_run_length: int = 4

    # Shop
    shop_joker_slots: int = 2
    pack_size: int = 3
    pack_cost: int = 4
    pack_name: str = "Standard Pack"
    pack_pick_at_capacity: PackPickPolicy = PackPickPolicy.REJECT

    # Suit jokers check the blurred suit class instead of the printed suit
    suit_chips_use_blurred_suits: bool = False


DEFAULT_RULES = RulesConfig()
