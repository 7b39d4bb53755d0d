"""Run mechanics: Blinds, Boss Blinds, Antes, and round rewards.

This module defines the progression rules the run state machine follows:
- Blinds: Small, Big, and Boss blinds with chip requirements
- Boss Blinds: each overrides exactly one rule of the round
- Antes: Progression through 8 antes (+ endless scaling)
- Rewards: money earned for beating a blind
"""

from dataclasses import dataclass
from enum import Enum

from balatro_engine.jokers import Joker, end_of_round_money
from balatro_engine.models import Suit


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class RunConfig:
    """Tunable rules of a run."""

    starting_money: int = 4
    hands_per_round: int = 4
    discards_per_round: int = 3
    hand_size: int = 8
    max_jokers: int = 5
    max_consumables: int = 2
    max_selected: int = 5
    max_ante: int = 8  # Win condition
    # Interest: $1 per interest_step held, capped
    interest_step: int = 5
    interest_cap: int = 5
    money_per_remaining_hand: int = 1
    gold_seal_money: int = 3


DEFAULT_RUN_CONFIG = RunConfig()


# =============================================================================
# Blinds
# =============================================================================


class BlindType(Enum):
    """Types of blinds in an ante, in play order."""

    SMALL = "small"
    BIG = "big"
    BOSS = "boss"

    @property
    def index(self) -> int:
        """Position within the ante (0, 1, 2)."""
        return list(BlindType).index(self)


@dataclass(frozen=True)
class Blind:
    """A blind configuration."""

    blind_type: BlindType
    name: str
    chip_multiplier: float  # Multiplier of base ante chips
    reward: int  # Money reward for beating


SMALL_BLIND = Blind(
    blind_type=BlindType.SMALL,
    name="Small Blind",
    chip_multiplier=1.0,
    reward=3,
)

BIG_BLIND = Blind(
    blind_type=BlindType.BIG,
    name="Big Blind",
    chip_multiplier=1.5,
    reward=4,
)

BOSS_REWARD = 5


# =============================================================================
# Boss Blinds
# =============================================================================


class BossEffect(Enum):
    """The single rule a boss blind overrides."""

    DISCARD_RANDOM = "discard_random"
    LARGE_BLIND = "large_blind"
    EXACT_FIVE_CARDS = "exact_five_cards"
    ONE_HAND = "one_hand"
    DEBUFF_SUIT = "debuff_suit"


@dataclass(frozen=True)
class BossBlind:
    """A boss blind with special effects."""

    id: str
    name: str
    description: str
    effect_type: BossEffect
    chip_multiplier: float = 2.0
    debuffed_suit: Suit | None = None

    def __str__(self) -> str:
        return self.name


BOSS_BLINDS: dict[str, BossBlind] = {
    "the_hook": BossBlind(
        id="the_hook",
        name="The Hook",
        description="Discards 2 random cards per hand",
        effect_type=BossEffect.DISCARD_RANDOM,
    ),
    "the_wall": BossBlind(
        id="the_wall",
        name="The Wall",
        description="Extra large blind (4x chips)",
        effect_type=BossEffect.LARGE_BLIND,
        chip_multiplier=4.0,
    ),
    "the_psychic": BossBlind(
        id="the_psychic",
        name="The Psychic",
        description="Must play exactly 5 cards",
        effect_type=BossEffect.EXACT_FIVE_CARDS,
    ),
    "the_needle": BossBlind(
        id="the_needle",
        name="The Needle",
        description="Only 1 hand allowed",
        effect_type=BossEffect.ONE_HAND,
    ),
    "the_club": BossBlind(
        id="the_club",
        name="The Club",
        description="All Club cards are debuffed",
        effect_type=BossEffect.DEBUFF_SUIT,
        debuffed_suit=Suit.CLUBS,
    ),
    "the_goad": BossBlind(
        id="the_goad",
        name="The Goad",
        description="All Spade cards are debuffed",
        effect_type=BossEffect.DEBUFF_SUIT,
        debuffed_suit=Suit.SPADES,
    ),
    "the_window": BossBlind(
        id="the_window",
        name="The Window",
        description="All Diamond cards are debuffed",
        effect_type=BossEffect.DEBUFF_SUIT,
        debuffed_suit=Suit.DIAMONDS,
    ),
    "the_head": BossBlind(
        id="the_head",
        name="The Head",
        description="All Heart cards are debuffed",
        effect_type=BossEffect.DEBUFF_SUIT,
        debuffed_suit=Suit.HEARTS,
    ),
}


def get_all_boss_blind_ids() -> list[str]:
    """Get all boss blind IDs."""
    return list(BOSS_BLINDS.keys())


def blind_name(blind_type: BlindType, boss: BossBlind | None = None) -> str:
    if blind_type == BlindType.SMALL:
        return SMALL_BLIND.name
    if blind_type == BlindType.BIG:
        return BIG_BLIND.name
    return boss.name if boss else "Boss Blind"


# =============================================================================
# Ante Progression
# =============================================================================


BASE_ANTE_CHIPS: dict[int, int] = {
    1: 300,
    2: 800,
    3: 2000,
    4: 5000,
    5: 11000,
    6: 20000,
    7: 35000,
    8: 50000,
}

# Linear endless scaling past the last ante
ENDLESS_CHIPS_PER_ANTE = 25000


def ante_base_chips(ante: int) -> int:
    """Base chip requirement of an ante."""
    if ante in BASE_ANTE_CHIPS:
        return BASE_ANTE_CHIPS[ante]
    if ante < 1:
        return BASE_ANTE_CHIPS[1]
    return BASE_ANTE_CHIPS[8] + (ante - 8) * ENDLESS_CHIPS_PER_ANTE


def blind_chip_multiplier(blind_type: BlindType, boss: BossBlind | None = None) -> float:
    if blind_type == BlindType.SMALL:
        return SMALL_BLIND.chip_multiplier
    if blind_type == BlindType.BIG:
        return BIG_BLIND.chip_multiplier
    return boss.chip_multiplier if boss else 2.0


def calculate_blind_chips(
    ante: int,
    blind_type: BlindType,
    boss_blind: BossBlind | None = None,
) -> int:
    """Calculate chip requirement for a blind.

    Args:
        ante: Current ante number (1-8, or higher for endless)
        blind_type: Small, Big, or Boss
        boss_blind: Boss blind definition (for Boss blinds)

    Returns:
        Required chips to beat the blind, truncated to an integer
    """
    return int(ante_base_chips(ante) * blind_chip_multiplier(blind_type, boss_blind))


def blind_reward(blind_type: BlindType) -> int:
    """Base money reward for beating a blind."""
    if blind_type == BlindType.SMALL:
        return SMALL_BLIND.reward
    if blind_type == BlindType.BIG:
        return BIG_BLIND.reward
    return BOSS_REWARD


# =============================================================================
# Round Rewards
# =============================================================================


@dataclass(frozen=True)
class RewardBreakdown:
    """Money earned for beating a blind, itemized."""

    blind_reward: int
    hands_bonus: int
    interest: int
    golden_joker_bonus: int

    @property
    def total(self) -> int:
        return self.blind_reward + self.hands_bonus + self.interest + self.golden_joker_bonus


def calculate_interest(money: int, config: RunConfig = DEFAULT_RUN_CONFIG) -> int:
    """$1 per ``interest_step`` held, capped at ``interest_cap``."""
    if money <= 0:
        return 0
    return min(money // config.interest_step, config.interest_cap)


def calculate_reward_breakdown(
    blind_type: BlindType,
    hands_remaining: int,
    money: int,
    jokers: list[Joker],
    config: RunConfig = DEFAULT_RUN_CONFIG,
) -> RewardBreakdown:
    """Itemize the reward for beating a blind.

    Interest is computed on the money held before the reward is paid.
    """
    return RewardBreakdown(
        blind_reward=blind_reward(blind_type),
        hands_bonus=hands_remaining * config.money_per_remaining_hand,
        interest=calculate_interest(money, config),
        golden_joker_bonus=end_of_round_money(jokers),
    )
