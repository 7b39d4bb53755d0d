"""Joker definitions and effect resolution.

CRITICAL: Joker order matters. Jokers are resolved in slot order, and
Blueprint copies whatever joker sits in the slot to its right.

Every joker type maps to exactly one effect calculator that inspects a
JokerContext and returns one effect variant:
- AddChips / AddMult: flat bonus
- XMult: multiplicative mult factor
- AddChipsPerCard / AddMultPerCard / AddChipsAndMultPerCard: bonus per
  listed scoring card
- Retrigger: listed scoring cards score an additional time
- NoEffect: nothing this hand (economy jokers act at round end instead)

Economy effects are calculated separately at the end of a round and never
touch scoring math.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from balatro_engine.models import Enhancement, PlayingCard, PokerHand, Rank, Suit

logger = logging.getLogger(__name__)


class JokerRarity(Enum):
    """Joker rarity tiers."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"

    @property
    def base_price(self) -> int:
        prices = {
            JokerRarity.COMMON: 4,
            JokerRarity.UNCOMMON: 6,
            JokerRarity.RARE: 8,
            JokerRarity.LEGENDARY: 20,
        }
        return prices[self]


class JokerType(Enum):
    """Every joker in the catalogue. Values are the joker ids."""

    JOKER = "joker"
    GREEDY_JOKER = "greedy_joker"
    LUSTY_JOKER = "lusty_joker"
    WRATHFUL_JOKER = "wrathful_joker"
    GLUTTONOUS_JOKER = "gluttonous_joker"
    JOLLY_JOKER = "jolly_joker"
    ZANY_JOKER = "zany_joker"
    CRAZY_JOKER = "crazy_joker"
    HALF_JOKER = "half_joker"
    BANNER = "banner"
    ODD_TODD = "odd_todd"
    SCHOLAR = "scholar"
    STEEL_JOKER = "steel_joker"
    BLACKBOARD = "blackboard"
    THE_DUO = "the_duo"
    EGG = "egg"
    GOLDEN_JOKER = "golden_joker"
    HACK = "hack"
    BLUEPRINT = "blueprint"
    THE_TRIO = "the_trio"
    SLY_JOKER = "sly_joker"
    WILY_JOKER = "wily_joker"
    CLEVER_JOKER = "clever_joker"
    MAD_JOKER = "mad_joker"
    DROLL_JOKER = "droll_joker"
    MYSTIC_SUMMIT = "mystic_summit"
    EVEN_STEVEN = "even_steven"
    FIBONACCI = "fibonacci"
    SCARY_FACE = "scary_face"
    SMILEY_FACE = "smiley_face"
    THE_FAMILY = "the_family"
    THE_ORDER = "the_order"
    THE_TRIBE = "the_tribe"
    SOCK_AND_BUSKIN = "sock_and_buskin"

    @property
    def definition(self) -> "JokerDefinition":
        return JOKERS[self.value]

    @property
    def display_name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def rarity(self) -> JokerRarity:
        return self.definition.rarity

    @property
    def price(self) -> int:
        return self.rarity.base_price


@dataclass(frozen=True)
class JokerDefinition:
    """Static definition of a joker type."""

    id: str
    name: str
    description: str
    rarity: JokerRarity


JOKERS: dict[str, JokerDefinition] = {
    definition.id: definition
    for definition in [
        JokerDefinition("joker", "Joker", "+4 Mult", JokerRarity.COMMON),
        JokerDefinition("greedy_joker", "Greedy Joker", "+3 Mult per Diamond", JokerRarity.COMMON),
        JokerDefinition("lusty_joker", "Lusty Joker", "+3 Mult per Heart", JokerRarity.COMMON),
        JokerDefinition("wrathful_joker", "Wrathful Joker", "+3 Mult per Spade", JokerRarity.COMMON),
        JokerDefinition("gluttonous_joker", "Gluttonous Joker", "+3 Mult per Club", JokerRarity.COMMON),
        JokerDefinition("jolly_joker", "Jolly Joker", "+8 Mult if Pair in hand", JokerRarity.COMMON),
        JokerDefinition("zany_joker", "Zany Joker", "+12 Mult if Three of a Kind", JokerRarity.COMMON),
        JokerDefinition("crazy_joker", "Crazy Joker", "+12 Mult if Straight", JokerRarity.COMMON),
        JokerDefinition("half_joker", "Half Joker", "+20 Mult if <=3 cards", JokerRarity.COMMON),
        JokerDefinition("banner", "Banner", "+30 Chips per discard left", JokerRarity.COMMON),
        JokerDefinition("odd_todd", "Odd Todd", "+31 Chips per odd card", JokerRarity.COMMON),
        JokerDefinition("scholar", "Scholar", "+20 Chips, +4 Mult per Ace", JokerRarity.UNCOMMON),
        JokerDefinition("steel_joker", "Steel Joker", "x0.2 Mult per Steel card", JokerRarity.UNCOMMON),
        JokerDefinition("blackboard", "Blackboard", "x3 if held cards all dark", JokerRarity.RARE),
        JokerDefinition("the_duo", "The Duo", "x2 Mult if Pair in hand", JokerRarity.UNCOMMON),
        JokerDefinition("egg", "Egg", "+$3 sell value per round", JokerRarity.COMMON),
        JokerDefinition("golden_joker", "Golden Joker", "+$4 at end of round", JokerRarity.COMMON),
        JokerDefinition("hack", "Hack", "Retrigger 2,3,4,5 cards", JokerRarity.COMMON),
        JokerDefinition("blueprint", "Blueprint", "Copy joker to the right", JokerRarity.RARE),
        JokerDefinition("the_trio", "The Trio", "x3 if Three of a Kind", JokerRarity.UNCOMMON),
        JokerDefinition("sly_joker", "Sly Joker", "+50 Chips if Pair in hand", JokerRarity.COMMON),
        JokerDefinition("wily_joker", "Wily Joker", "+100 Chips if Three of a Kind", JokerRarity.COMMON),
        JokerDefinition("clever_joker", "Clever Joker", "+80 Chips if Two Pair", JokerRarity.COMMON),
        JokerDefinition("mad_joker", "Mad Joker", "+10 Mult if Two Pair", JokerRarity.COMMON),
        JokerDefinition("droll_joker", "Droll Joker", "+10 Mult if Flush", JokerRarity.COMMON),
        JokerDefinition("mystic_summit", "Mystic Summit", "+15 Mult if 0 discards left", JokerRarity.COMMON),
        JokerDefinition("even_steven", "Even Steven", "+4 Mult per even card", JokerRarity.COMMON),
        JokerDefinition("fibonacci", "Fibonacci", "+8 Mult per A,2,3,5,8", JokerRarity.UNCOMMON),
        JokerDefinition("scary_face", "Scary Face", "+30 Chips per face card", JokerRarity.COMMON),
        JokerDefinition("smiley_face", "Smiley Face", "+5 Mult per face card", JokerRarity.COMMON),
        JokerDefinition("the_family", "The Family", "x4 if Four of a Kind", JokerRarity.RARE),
        JokerDefinition("the_order", "The Order", "x3 if Straight", JokerRarity.RARE),
        JokerDefinition("the_tribe", "The Tribe", "x2 if Flush", JokerRarity.RARE),
        JokerDefinition("sock_and_buskin", "Sock and Buskin", "Retrigger face cards", JokerRarity.UNCOMMON),
    ]
}


@dataclass
class Joker:
    """An owned joker.

    ``bonus_sell`` accumulates sell value gained over the run (Egg).
    """

    joker_type: JokerType
    sell_value: int | None = None
    bonus_sell: int = 0

    def __post_init__(self):
        if self.sell_value is None:
            self.sell_value = self.joker_type.price // 2

    @property
    def id(self) -> str:
        return self.joker_type.value

    @property
    def name(self) -> str:
        return self.joker_type.display_name

    @property
    def total_sell_value(self) -> int:
        return self.sell_value + self.bonus_sell

    def copy(self) -> "Joker":
        return Joker(self.joker_type, self.sell_value, self.bonus_sell)


def create_joker(joker_id: str) -> Joker:
    """Create a joker by ID."""
    if joker_id not in JOKERS:
        raise ValueError(f"Unknown joker: {joker_id}")
    return Joker(JokerType(joker_id))


def get_all_joker_ids() -> list[str]:
    """Get list of all joker IDs."""
    return list(JOKERS.keys())


# =============================================================================
# Effect Variants
# =============================================================================


@dataclass
class JokerContext:
    """Everything a joker may inspect when resolving its effect."""

    played_cards: list[PlayingCard]
    scoring_indices: list[int]
    hand_type: PokerHand
    held_cards: list[PlayingCard] = field(default_factory=list)
    discards_remaining: int = 0
    num_played: int = 0


class JokerEffect:
    """Base class of every joker effect variant."""


@dataclass(frozen=True)
class AddChips(JokerEffect):
    chips: int


@dataclass(frozen=True)
class AddMult(JokerEffect):
    mult: int


@dataclass(frozen=True)
class XMult(JokerEffect):
    factor: float


@dataclass(frozen=True)
class AddChipsPerCard(JokerEffect):
    card_indices: tuple[int, ...]
    chips_each: int


@dataclass(frozen=True)
class AddMultPerCard(JokerEffect):
    card_indices: tuple[int, ...]
    mult_each: int


@dataclass(frozen=True)
class AddChipsAndMultPerCard(JokerEffect):
    card_indices: tuple[int, ...]
    chips_each: int
    mult_each: int


@dataclass(frozen=True)
class Retrigger(JokerEffect):
    card_indices: tuple[int, ...]


@dataclass(frozen=True)
class NoEffect(JokerEffect):
    pass


NO_EFFECT = NoEffect()


# =============================================================================
# Helper Functions
# =============================================================================


def _is_even_rank(rank: Rank) -> bool:
    """Check if rank is even (10, 8, 6, 4, 2)."""
    return rank in (Rank.TEN, Rank.EIGHT, Rank.SIX, Rank.FOUR, Rank.TWO)


def _is_odd_rank(rank: Rank) -> bool:
    """Odd rank values: 3, 5, 7, 9, J (11) and K (13). Aces (14) are not odd."""
    return rank.value % 2 == 1


def _is_fibonacci_rank(rank: Rank) -> bool:
    """Check if rank is a Fibonacci number (A, 2, 3, 5, 8)."""
    return rank in (Rank.ACE, Rank.TWO, Rank.THREE, Rank.FIVE, Rank.EIGHT)


def _scoring_matching(
    ctx: JokerContext, predicate: Callable[[PlayingCard], bool]
) -> tuple[int, ...]:
    """Scoring indices whose card satisfies ``predicate``."""
    return tuple(i for i in ctx.scoring_indices if predicate(ctx.played_cards[i]))


def _suit_mult(ctx: JokerContext, suit: Suit, mult_each: int) -> JokerEffect:
    matching = _scoring_matching(ctx, lambda card: card.has_suit(suit))
    if not matching:
        return NO_EFFECT
    return AddMultPerCard(matching, mult_each)


def _hand_at_least(ctx: JokerContext, threshold: PokerHand, effect: JokerEffect) -> JokerEffect:
    if ctx.hand_type >= threshold:
        return effect
    return NO_EFFECT


def _per_card_chips(ctx: JokerContext, predicate, chips_each: int) -> JokerEffect:
    matching = _scoring_matching(ctx, predicate)
    if not matching:
        return NO_EFFECT
    return AddChipsPerCard(matching, chips_each)


def _per_card_mult(ctx: JokerContext, predicate, mult_each: int) -> JokerEffect:
    matching = _scoring_matching(ctx, predicate)
    if not matching:
        return NO_EFFECT
    return AddMultPerCard(matching, mult_each)


# =============================================================================
# Joker Effect Calculators
# =============================================================================


def _joker_effect(_ctx: JokerContext) -> JokerEffect:
    """Joker: +4 Mult"""
    return AddMult(4)


def _half_joker_effect(ctx: JokerContext) -> JokerEffect:
    """Half Joker: +20 Mult if played hand has 3 or fewer cards"""
    if ctx.num_played <= 3:
        return AddMult(20)
    return NO_EFFECT


def _banner_effect(ctx: JokerContext) -> JokerEffect:
    """Banner: +30 Chips for each remaining discard"""
    return AddChips(ctx.discards_remaining * 30)


def _mystic_summit_effect(ctx: JokerContext) -> JokerEffect:
    """Mystic Summit: +15 Mult when 0 discards remaining"""
    if ctx.discards_remaining == 0:
        return AddMult(15)
    return NO_EFFECT


def _scholar_effect(ctx: JokerContext) -> JokerEffect:
    """Scholar: each played Ace gives +20 Chips and +4 Mult"""
    aces = _scoring_matching(ctx, lambda card: card.rank == Rank.ACE)
    if not aces:
        return NO_EFFECT
    return AddChipsAndMultPerCard(aces, chips_each=20, mult_each=4)


def _steel_joker_effect(ctx: JokerContext) -> JokerEffect:
    """Steel Joker: x0.2 Mult for each Steel card held in hand"""
    steel_count = sum(1 for c in ctx.held_cards if c.enhancement == Enhancement.STEEL)
    if steel_count == 0:
        return NO_EFFECT
    return XMult(1.0 + 0.2 * steel_count)


def _blackboard_effect(ctx: JokerContext) -> JokerEffect:
    """Blackboard: x3 Mult if all cards held in hand are Spades or Clubs"""
    if not ctx.held_cards:
        return NO_EFFECT
    all_dark = all(
        c.has_suit(Suit.SPADES) or c.has_suit(Suit.CLUBS) for c in ctx.held_cards
    )
    if all_dark:
        return XMult(3.0)
    return NO_EFFECT


def _no_scoring_effect(_ctx: JokerContext) -> JokerEffect:
    """Economy jokers (Egg, Golden Joker) act at end of round."""
    return NO_EFFECT


def _hack_effect(ctx: JokerContext) -> JokerEffect:
    """Hack: retrigger each played 2, 3, 4 or 5"""
    low = (Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE)
    matching = _scoring_matching(ctx, lambda card: card.rank in low)
    if not matching:
        return NO_EFFECT
    return Retrigger(matching)


def _sock_and_buskin_effect(ctx: JokerContext) -> JokerEffect:
    """Sock and Buskin: retrigger all played face cards"""
    matching = _scoring_matching(ctx, lambda card: card.rank.is_face)
    if not matching:
        return NO_EFFECT
    return Retrigger(matching)


JOKER_CALCULATORS: dict[JokerType, Callable[[JokerContext], JokerEffect]] = {
    JokerType.JOKER: _joker_effect,
    # Suit mult
    JokerType.GREEDY_JOKER: lambda ctx: _suit_mult(ctx, Suit.DIAMONDS, 3),
    JokerType.LUSTY_JOKER: lambda ctx: _suit_mult(ctx, Suit.HEARTS, 3),
    JokerType.WRATHFUL_JOKER: lambda ctx: _suit_mult(ctx, Suit.SPADES, 3),
    JokerType.GLUTTONOUS_JOKER: lambda ctx: _suit_mult(ctx, Suit.CLUBS, 3),
    # Hand-conditional flat bonuses
    JokerType.JOLLY_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.PAIR, AddMult(8)),
    JokerType.ZANY_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.THREE_OF_A_KIND, AddMult(12)),
    JokerType.CRAZY_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.STRAIGHT, AddMult(12)),
    JokerType.MAD_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.TWO_PAIR, AddMult(10)),
    JokerType.DROLL_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.FLUSH, AddMult(10)),
    JokerType.SLY_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.PAIR, AddChips(50)),
    JokerType.WILY_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.THREE_OF_A_KIND, AddChips(100)),
    JokerType.CLEVER_JOKER: lambda ctx: _hand_at_least(ctx, PokerHand.TWO_PAIR, AddChips(80)),
    # Hand-conditional xMult
    JokerType.THE_DUO: lambda ctx: _hand_at_least(ctx, PokerHand.PAIR, XMult(2.0)),
    JokerType.THE_TRIO: lambda ctx: _hand_at_least(ctx, PokerHand.THREE_OF_A_KIND, XMult(3.0)),
    JokerType.THE_FAMILY: lambda ctx: _hand_at_least(ctx, PokerHand.FOUR_OF_A_KIND, XMult(4.0)),
    JokerType.THE_ORDER: lambda ctx: _hand_at_least(ctx, PokerHand.STRAIGHT, XMult(3.0)),
    JokerType.THE_TRIBE: lambda ctx: _hand_at_least(ctx, PokerHand.FLUSH, XMult(2.0)),
    # Game-state conditions
    JokerType.HALF_JOKER: _half_joker_effect,
    JokerType.BANNER: _banner_effect,
    JokerType.MYSTIC_SUMMIT: _mystic_summit_effect,
    # Per-card bonuses
    JokerType.ODD_TODD: lambda ctx: _per_card_chips(ctx, lambda c: _is_odd_rank(c.rank), 31),
    JokerType.SCARY_FACE: lambda ctx: _per_card_chips(ctx, lambda c: c.rank.is_face, 30),
    JokerType.EVEN_STEVEN: lambda ctx: _per_card_mult(ctx, lambda c: _is_even_rank(c.rank), 4),
    JokerType.FIBONACCI: lambda ctx: _per_card_mult(ctx, lambda c: _is_fibonacci_rank(c.rank), 8),
    JokerType.SMILEY_FACE: lambda ctx: _per_card_mult(ctx, lambda c: c.rank.is_face, 5),
    JokerType.SCHOLAR: _scholar_effect,
    # Held cards
    JokerType.STEEL_JOKER: _steel_joker_effect,
    JokerType.BLACKBOARD: _blackboard_effect,
    # Retriggers
    JokerType.HACK: _hack_effect,
    JokerType.SOCK_AND_BUSKIN: _sock_and_buskin_effect,
    # Resolved at end of round / through the next slot
    JokerType.EGG: _no_scoring_effect,
    JokerType.GOLDEN_JOKER: _no_scoring_effect,
    JokerType.BLUEPRINT: _no_scoring_effect,
}


def evaluate_joker(
    joker: Joker, ctx: JokerContext, next_joker_type: JokerType | None = None
) -> JokerEffect:
    """Resolve one joker's effect.

    Blueprint evaluates ``next_joker_type`` (the joker in the next slot)
    instead of itself, and has no effect in the last slot.
    """
    joker_type = joker.joker_type
    if joker_type == JokerType.BLUEPRINT:
        if next_joker_type is None:
            return NO_EFFECT
        joker_type = next_joker_type

    calculator = JOKER_CALCULATORS.get(joker_type, _no_scoring_effect)
    return calculator(ctx)


def evaluate_jokers(jokers: list[Joker], ctx: JokerContext) -> list[JokerEffect]:
    """Resolve every joker in slot order."""
    effects = []
    for i, joker in enumerate(jokers):
        next_type = jokers[i + 1].joker_type if i + 1 < len(jokers) else None
        effects.append(evaluate_joker(joker, ctx, next_type))
    return effects


# =============================================================================
# Economy Effects
# =============================================================================


@dataclass
class EconomyEffect:
    """Result of an economy joker's end-of-round effect."""

    money: int = 0
    sell_value_change: int = 0

    def __bool__(self) -> bool:
        return self.money != 0 or self.sell_value_change != 0


GOLDEN_JOKER_PAYOUT = 4
EGG_SELL_VALUE_GAIN = 3

ECONOMY_CALCULATORS: dict[JokerType, Callable[[Joker], EconomyEffect]] = {
    JokerType.GOLDEN_JOKER: lambda _joker: EconomyEffect(money=GOLDEN_JOKER_PAYOUT),
    JokerType.EGG: lambda _joker: EconomyEffect(sell_value_change=EGG_SELL_VALUE_GAIN),
}


def calculate_economy_effect(joker: Joker) -> EconomyEffect:
    calculator = ECONOMY_CALCULATORS.get(joker.joker_type)
    if calculator:
        return calculator(joker)
    return EconomyEffect()


def end_of_round_money(jokers: list[Joker]) -> int:
    """Money all jokers pay out at the end of a round."""
    return sum(calculate_economy_effect(joker).money for joker in jokers)


def apply_end_of_round_economy(jokers: list[Joker]) -> int:
    """Apply end-of-round sell value changes to ``jokers``.

    Returns the money the jokers pay out. The caller credits it; this only
    mutates joker sell values.
    """
    money = 0
    for joker in jokers:
        effect = calculate_economy_effect(joker)
        if effect.sell_value_change:
            joker.bonus_sell += effect.sell_value_change
            logger.debug(f"{joker.name} sell value now ${joker.total_sell_value}")
        money += effect.money
    return money
