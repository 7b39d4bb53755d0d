"""Consumable cards: Planet and Tarot cards.

Consumables are single-use cards held in the consumable slots:
- Planet cards: Level up a specific poker hand type
- Tarot cards: Enhance or change selected playing cards, create other
  consumables, or grant money

Card-changing tarot effects are pure functions over the selected cards;
effects that touch money or consumable slots are applied by RunState.
"""

from dataclasses import dataclass
from enum import Enum

from balatro_engine.models import Enhancement, PlayingCard, PokerHand

CONSUMABLE_PRICE = 3


class ConsumableType(Enum):
    """Types of consumable cards."""

    PLANET = "planet"
    TAROT = "tarot"


# =============================================================================
# Planet Card Definitions (12 cards)
# =============================================================================


@dataclass(frozen=True)
class PlanetCard:
    """A Planet card definition."""

    id: str
    name: str
    hand_type: PokerHand
    secret: bool = False

    @property
    def description(self) -> str:
        hand = self.hand_type
        return f"Level up {hand.display_name} (+{hand.level_up_chips} Chips, +{hand.level_up_mult} Mult)"


PLANET_CARDS: dict[str, PlanetCard] = {
    "pluto": PlanetCard("pluto", "Pluto", PokerHand.HIGH_CARD),
    "mercury": PlanetCard("mercury", "Mercury", PokerHand.PAIR),
    "uranus": PlanetCard("uranus", "Uranus", PokerHand.TWO_PAIR),
    "venus": PlanetCard("venus", "Venus", PokerHand.THREE_OF_A_KIND),
    "saturn": PlanetCard("saturn", "Saturn", PokerHand.STRAIGHT),
    "jupiter": PlanetCard("jupiter", "Jupiter", PokerHand.FLUSH),
    "earth": PlanetCard("earth", "Earth", PokerHand.FULL_HOUSE),
    "mars": PlanetCard("mars", "Mars", PokerHand.FOUR_OF_A_KIND),
    "neptune": PlanetCard("neptune", "Neptune", PokerHand.STRAIGHT_FLUSH),
    # Secret planets - their hands need duplicated cards
    "planet_x": PlanetCard("planet_x", "Planet X", PokerHand.FIVE_OF_A_KIND, secret=True),
    "ceres": PlanetCard("ceres", "Ceres", PokerHand.FLUSH_HOUSE, secret=True),
    "eris": PlanetCard("eris", "Eris", PokerHand.FLUSH_FIVE, secret=True),
}


# =============================================================================
# Tarot Card Definitions (12 cards)
# =============================================================================


@dataclass(frozen=True)
class TarotCard:
    """A Tarot card definition.

    ``min_select``/``max_select`` bound how many hand cards must be
    selected; (0, 0) means the tarot needs no selection.
    """

    id: str
    name: str
    description: str
    min_select: int = 0
    max_select: int = 0
    # Enhancement applied to every selected card, for enhancing tarots
    enhancement: Enhancement | None = None

    @property
    def cards_needed(self) -> tuple[int, int]:
        return self.min_select, self.max_select


TAROT_CARDS: dict[str, TarotCard] = {
    "the_fool": TarotCard(
        id="the_fool",
        name="The Fool",
        description="Copy last Tarot/Planet used",
    ),
    "the_magician": TarotCard(
        id="the_magician",
        name="The Magician",
        description="Enhance 1-2 cards to Lucky",
        min_select=1,
        max_select=2,
        enhancement=Enhancement.LUCKY,
    ),
    "the_high_priestess": TarotCard(
        id="the_high_priestess",
        name="High Priestess",
        description="Create up to 2 Planet cards",
    ),
    "the_empress": TarotCard(
        id="the_empress",
        name="The Empress",
        description="Enhance 1-2 cards to Mult",
        min_select=1,
        max_select=2,
        enhancement=Enhancement.MULT,
    ),
    "the_emperor": TarotCard(
        id="the_emperor",
        name="The Emperor",
        description="Create up to 2 Tarot cards",
    ),
    "the_hierophant": TarotCard(
        id="the_hierophant",
        name="Hierophant",
        description="Enhance 1-2 cards to Bonus",
        min_select=1,
        max_select=2,
        enhancement=Enhancement.BONUS,
    ),
    "the_lovers": TarotCard(
        id="the_lovers",
        name="The Lover",
        description="Enhance 1 card to Wild",
        min_select=1,
        max_select=1,
        enhancement=Enhancement.WILD,
    ),
    "the_chariot": TarotCard(
        id="the_chariot",
        name="The Chariot",
        description="Enhance 1 card to Steel",
        min_select=1,
        max_select=1,
        enhancement=Enhancement.STEEL,
    ),
    "strength": TarotCard(
        id="strength",
        name="Strength",
        description="Increase rank of 1-2 cards by 1",
        min_select=1,
        max_select=2,
    ),
    "the_hermit": TarotCard(
        id="the_hermit",
        name="The Hermit",
        description="Double money (max $20)",
    ),
    "death": TarotCard(
        id="death",
        name="Death",
        description="Convert left card to right card",
        min_select=2,
        max_select=2,
    ),
    "temperance": TarotCard(
        id="temperance",
        name="Temperance",
        description="Gain $ equal to joker sell value",
    ),
}

HERMIT_MAX_GAIN = 20
TEMPERANCE_MAX_GAIN = 50
CREATED_CONSUMABLES = 2


# =============================================================================
# Consumable Instance
# =============================================================================


@dataclass(frozen=True)
class Consumable:
    """A consumable card held by the player or offered in the shop."""

    consumable_type: ConsumableType
    card_id: str

    @classmethod
    def planet(cls, card_id: str) -> "Consumable":
        return create_consumable(ConsumableType.PLANET, card_id)

    @classmethod
    def tarot(cls, card_id: str) -> "Consumable":
        return create_consumable(ConsumableType.TAROT, card_id)

    @property
    def is_planet(self) -> bool:
        return self.consumable_type == ConsumableType.PLANET

    @property
    def is_tarot(self) -> bool:
        return self.consumable_type == ConsumableType.TAROT

    @property
    def definition(self) -> PlanetCard | TarotCard:
        if self.is_planet:
            return PLANET_CARDS[self.card_id]
        return TAROT_CARDS[self.card_id]

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def price(self) -> int:
        return CONSUMABLE_PRICE

    def __str__(self) -> str:
        return self.name


def create_consumable(consumable_type: ConsumableType, card_id: str) -> Consumable:
    """Create a consumable by type and ID."""
    catalogue = PLANET_CARDS if consumable_type == ConsumableType.PLANET else TAROT_CARDS
    if card_id not in catalogue:
        raise ValueError(f"Unknown {consumable_type.value} card: {card_id}")
    return Consumable(consumable_type, card_id)


def get_all_planet_ids() -> list[str]:
    return list(PLANET_CARDS.keys())


def get_common_planet_ids() -> list[str]:
    """Planets that can appear without duplicated cards (the first nine)."""
    return [pid for pid, planet in PLANET_CARDS.items() if not planet.secret]


def get_all_tarot_ids() -> list[str]:
    return list(TAROT_CARDS.keys())


def get_planet_for_hand_type(hand_type: PokerHand) -> str | None:
    """Get planet card ID that levels up a hand type."""
    for planet_id, planet in PLANET_CARDS.items():
        if planet.hand_type == hand_type:
            return planet_id
    return None


# =============================================================================
# Card-changing Tarot Effects
# =============================================================================


def transform_selected_cards(
    tarot: TarotCard, selected: list[PlayingCard]
) -> list[PlayingCard] | None:
    """Apply a card-changing tarot to the selected cards.

    Args:
        tarot: The tarot being used
        selected: Selected hand cards, in selection order

    Returns:
        The replacement cards, one per selected card and in the same order,
        or None if this tarot does not change cards.
    """
    if tarot.enhancement is not None:
        return [card.with_enhancement(tarot.enhancement) for card in selected]

    if tarot.id == "strength":
        return [card.with_rank(card.rank.next_rank()) for card in selected]

    if tarot.id == "death":
        # Left card becomes a copy of the right card
        left, right = selected
        return [right, right]

    return None
