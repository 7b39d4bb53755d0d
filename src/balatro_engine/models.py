"""Core data models: playing cards, their modifiers, and poker hand types.

A PlayingCard is a frozen value type. Modifying a card (tarot enhancement,
boss debuff, rank change) always produces a new card that replaces the old
one in whatever collection owns it.
"""

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Self


class Enhancement(Enum):
    """Card enhancements that modify scoring behavior."""

    NONE = "none"
    BONUS = "bonus"  # +30 Chips when scored
    MULT = "mult"  # +4 Mult when scored
    WILD = "wild"  # Counts as all suits
    GLASS = "glass"  # x2 Mult
    STEEL = "steel"  # Counted by Steel Joker while held
    STONE = "stone"  # 50 Chips, always scores
    GOLD = "gold"
    LUCKY = "lucky"


class Edition(Enum):
    """Card editions that provide bonus effects."""

    BASE = "base"
    FOIL = "foil"  # +50 Chips
    HOLOGRAPHIC = "holo"  # +10 Mult
    POLYCHROME = "polychrome"  # x1.5 Mult


class Seal(Enum):
    """Card seals that trigger secondary effects."""

    NONE = "none"
    GOLD = "gold"  # $3 when played and scores
    RED = "red"  # Retrigger 1 time
    BLUE = "blue"
    PURPLE = "purple"  # Creates Tarot card when discarded


class Suit(Enum):
    """Card suits."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"

    def __str__(self) -> str:
        symbols = {"S": "♠", "H": "♥", "D": "♦", "C": "♣"}
        return symbols[self.value]

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(IntEnum):
    """Card ranks with numeric values for comparison."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return self.short_name

    @property
    def short_name(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {11: "J", 12: "Q", 13: "K", 14: "A"}[self.value]

    @property
    def chip_value(self) -> int:
        """Base chip value when a card of this rank scores."""
        if self.value <= 10:
            return self.value
        if self.value == 14:  # Ace
            return 11
        return 10  # Face cards

    @property
    def is_face(self) -> bool:
        return self in (Rank.JACK, Rank.QUEEN, Rank.KING)

    def next_rank(self) -> "Rank":
        """Rank one step up; Ace wraps around to Two."""
        if self == Rank.ACE:
            return Rank.TWO
        return Rank(self.value + 1)


class PokerHand(IntEnum):
    """Poker hand categories ordered from worst to best.

    The ordering is total and is used directly by hand-conditional jokers
    ("hand contains at least a Pair" is ``hand_type >= PokerHand.PAIR``).
    Five of a Kind, Flush House and Flush Five need duplicated cards.
    """

    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10
    FIVE_OF_A_KIND = 11
    FLUSH_HOUSE = 12
    FLUSH_FIVE = 13

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        if self == PokerHand.THREE_OF_A_KIND:
            return "Three of a Kind"
        if self == PokerHand.FOUR_OF_A_KIND:
            return "Four of a Kind"
        if self == PokerHand.FIVE_OF_A_KIND:
            return "Five of a Kind"
        return self.name.replace("_", " ").title()

    @property
    def base_chips(self) -> int:
        """Base chips for this hand at level 1."""
        chips = {
            PokerHand.HIGH_CARD: 5,
            PokerHand.PAIR: 10,
            PokerHand.TWO_PAIR: 20,
            PokerHand.THREE_OF_A_KIND: 30,
            PokerHand.STRAIGHT: 30,
            PokerHand.FLUSH: 35,
            PokerHand.FULL_HOUSE: 40,
            PokerHand.FOUR_OF_A_KIND: 60,
            PokerHand.STRAIGHT_FLUSH: 100,
            PokerHand.ROYAL_FLUSH: 100,
            PokerHand.FIVE_OF_A_KIND: 120,
            PokerHand.FLUSH_HOUSE: 140,
            PokerHand.FLUSH_FIVE: 160,
        }
        return chips[self]

    @property
    def base_mult(self) -> int:
        """Base mult for this hand at level 1."""
        mults = {
            PokerHand.HIGH_CARD: 1,
            PokerHand.PAIR: 2,
            PokerHand.TWO_PAIR: 2,
            PokerHand.THREE_OF_A_KIND: 3,
            PokerHand.STRAIGHT: 4,
            PokerHand.FLUSH: 4,
            PokerHand.FULL_HOUSE: 4,
            PokerHand.FOUR_OF_A_KIND: 7,
            PokerHand.STRAIGHT_FLUSH: 8,
            PokerHand.ROYAL_FLUSH: 8,
            PokerHand.FIVE_OF_A_KIND: 12,
            PokerHand.FLUSH_HOUSE: 14,
            PokerHand.FLUSH_FIVE: 16,
        }
        return mults[self]

    @property
    def level_up_chips(self) -> int:
        """Chips gained per level up (from Planet cards)."""
        chips = {
            PokerHand.HIGH_CARD: 10,
            PokerHand.PAIR: 15,
            PokerHand.TWO_PAIR: 20,
            PokerHand.THREE_OF_A_KIND: 20,
            PokerHand.STRAIGHT: 30,
            PokerHand.FLUSH: 15,
            PokerHand.FULL_HOUSE: 25,
            PokerHand.FOUR_OF_A_KIND: 30,
            PokerHand.STRAIGHT_FLUSH: 40,
            PokerHand.ROYAL_FLUSH: 40,
            PokerHand.FIVE_OF_A_KIND: 35,
            PokerHand.FLUSH_HOUSE: 40,
            PokerHand.FLUSH_FIVE: 50,
        }
        return chips[self]

    @property
    def level_up_mult(self) -> int:
        """Mult gained per level up (from Planet cards)."""
        mults = {
            PokerHand.HIGH_CARD: 1,
            PokerHand.PAIR: 1,
            PokerHand.TWO_PAIR: 1,
            PokerHand.THREE_OF_A_KIND: 2,
            PokerHand.STRAIGHT: 3,
            PokerHand.FLUSH: 2,
            PokerHand.FULL_HOUSE: 2,
            PokerHand.FOUR_OF_A_KIND: 3,
            PokerHand.STRAIGHT_FLUSH: 4,
            PokerHand.ROYAL_FLUSH: 4,
            PokerHand.FIVE_OF_A_KIND: 3,
            PokerHand.FLUSH_HOUSE: 4,
            PokerHand.FLUSH_FIVE: 3,
        }
        return mults[self]


@dataclass(frozen=True, slots=True)
class PlayingCard:
    """A playing card with rank, suit, and its three modifier layers.

    Card modifiers:
    - enhancement: Bonus, Mult, Wild, Glass, Steel, Stone, Gold, Lucky
    - edition: Base, Foil, Holographic, Polychrome
    - seal: Gold, Red, Blue, Purple

    A debuffed card (boss blind suit debuff) contributes nothing when scored.
    """

    rank: Rank
    suit: Suit
    enhancement: Enhancement = Enhancement.NONE
    edition: Edition = Edition.BASE
    seal: Seal = Seal.NONE
    debuffed: bool = False

    def __str__(self) -> str:
        base = f"{self.rank.short_name}{self.suit!s}"
        modifiers = []
        if self.enhancement != Enhancement.NONE:
            modifiers.append(self.enhancement.value)
        if self.edition != Edition.BASE:
            modifiers.append(self.edition.value)
        if self.seal != Seal.NONE:
            modifiers.append(f"{self.seal.value}-seal")
        if self.debuffed:
            modifiers.append("debuffed")
        if modifiers:
            return f"{base}[{','.join(modifiers)}]"
        return base

    def __repr__(self) -> str:
        return f"PlayingCard({self.rank!s}{self.suit!s})"

    def chip_value(self) -> int:
        """Chips this card adds when it scores."""
        if self.debuffed:
            return 0
        if self.enhancement == Enhancement.STONE:
            chips = 50
        else:
            chips = self.rank.chip_value
        if self.enhancement == Enhancement.BONUS:
            chips += 30
        if self.edition == Edition.FOIL:
            chips += 50
        return chips

    def mult_bonus(self) -> int:
        """Flat mult this card adds when it scores."""
        if self.debuffed:
            return 0
        mult = 0
        if self.enhancement == Enhancement.MULT:
            mult += 4
        if self.edition == Edition.HOLOGRAPHIC:
            mult += 10
        return mult

    def x_mult(self) -> float:
        """Multiplicative mult this card applies when it scores."""
        if self.debuffed:
            return 1.0
        factor = 1.0
        if self.enhancement == Enhancement.GLASS:
            factor *= 2.0
        if self.edition == Edition.POLYCHROME:
            factor *= 1.5
        return factor

    @property
    def is_wild(self) -> bool:
        """Check if card is wild (counts as all suits)."""
        return self.enhancement == Enhancement.WILD

    def always_scores(self) -> bool:
        """Stone cards score their chips even outside the detected hand."""
        return self.enhancement == Enhancement.STONE

    def has_suit(self, suit: Suit) -> bool:
        """Check if card has a specific suit (considering wild)."""
        return self.is_wild or self.suit == suit

    def with_enhancement(self, enhancement: Enhancement) -> "PlayingCard":
        """Return a new card with the given enhancement."""
        return replace(self, enhancement=enhancement)

    def with_edition(self, edition: Edition) -> "PlayingCard":
        """Return a new card with the given edition."""
        return replace(self, edition=edition)

    def with_seal(self, seal: Seal) -> "PlayingCard":
        """Return a new card with the given seal."""
        return replace(self, seal=seal)

    def with_rank(self, rank: Rank) -> "PlayingCard":
        return replace(self, rank=rank)

    def with_suit(self, suit: Suit) -> "PlayingCard":
        return replace(self, suit=suit)

    def with_debuff(self, debuffed: bool) -> "PlayingCard":
        return replace(self, debuffed=debuffed)

    @classmethod
    def from_string(cls, s: str) -> Self:
        """Parse card from string like 'AS' (Ace of Spades) or '10H' (Ten of Hearts)."""
        s = s.upper().strip()
        suit_char = s[-1:]
        rank_str = s[:-1]

        suit_map = {"S": Suit.SPADES, "H": Suit.HEARTS, "D": Suit.DIAMONDS, "C": Suit.CLUBS}
        rank_map = {rank.short_name: rank for rank in Rank}

        if suit_char not in suit_map:
            raise ValueError(f"Invalid suit: {suit_char}")
        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")

        return cls(rank=rank_map[rank_str], suit=suit_map[suit_char])


def create_standard_deck() -> list[PlayingCard]:
    """Create a standard 52-card deck."""
    return [PlayingCard(rank=rank, suit=suit) for suit in Suit for rank in Rank]
