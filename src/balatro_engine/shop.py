"""Shop generation and pricing.

The shop appears after a blind is beaten and offers 2 random cards:
- Jokers (~70%), uniform over the joker catalogue
- Planets (~15%), uniform over the common planets
- Tarots (~15%), uniform over the tarot catalogue

Rerolling regenerates the offer; every reroll costs $1 more than the last.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from balatro_engine.consumables import (
    CONSUMABLE_PRICE,
    Consumable,
    ConsumableType,
    get_all_tarot_ids,
    get_common_planet_ids,
)
from balatro_engine.jokers import Joker, JokerRarity, JokerType

logger = logging.getLogger(__name__)


class ShopItemType(Enum):
    """Types of items that can appear in the shop."""

    JOKER = "joker"
    TAROT = "tarot"
    PLANET = "planet"


@dataclass(frozen=True)
class ShopConfig:
    """Configuration for shop behavior."""

    card_slots: int = 2

    # Base reroll cost
    base_reroll_cost: int = 5
    reroll_cost_increase: int = 1  # Per reroll

    # Category roll thresholds: roll < joker -> Joker, < planet -> Planet, else Tarot
    joker_threshold: float = 0.70
    planet_threshold: float = 0.85

    # Base prices
    consumable_cost: int = CONSUMABLE_PRICE
    joker_costs: dict[JokerRarity, int] = field(
        default_factory=lambda: {rarity: rarity.base_price for rarity in JokerRarity}
    )

    def joker_price(self, joker: Joker) -> int:
        return self.joker_costs[joker.joker_type.rarity]


DEFAULT_SHOP_CONFIG = ShopConfig()


@dataclass
class ShopItem:
    """A purchasable joker or consumable."""

    item_type: ShopItemType
    price: int
    joker: Joker | None = None
    consumable: Consumable | None = None

    @classmethod
    def for_joker(cls, joker: Joker, config: ShopConfig = DEFAULT_SHOP_CONFIG) -> "ShopItem":
        return cls(ShopItemType.JOKER, config.joker_price(joker), joker=joker)

    @classmethod
    def for_consumable(
        cls, consumable: Consumable, config: ShopConfig = DEFAULT_SHOP_CONFIG
    ) -> "ShopItem":
        item_type = ShopItemType.PLANET if consumable.is_planet else ShopItemType.TAROT
        return cls(item_type, config.consumable_cost, consumable=consumable)

    @property
    def is_joker(self) -> bool:
        return self.item_type == ShopItemType.JOKER

    @property
    def name(self) -> str:
        if self.joker is not None:
            return self.joker.name
        return self.consumable.name

    @property
    def description(self) -> str:
        if self.joker is not None:
            return self.joker.joker_type.description
        return self.consumable.description

    def __str__(self) -> str:
        return f"{self.name} (${self.price})"


@dataclass
class Shop:
    """Items currently on offer and the current reroll cost."""

    items: list[ShopItem] = field(default_factory=list)
    reroll_cost: int = DEFAULT_SHOP_CONFIG.base_reroll_cost
    config: ShopConfig = DEFAULT_SHOP_CONFIG

    @classmethod
    def generate(
        cls, rng: random.Random, ante: int = 1, config: ShopConfig = DEFAULT_SHOP_CONFIG
    ) -> "Shop":
        """Roll a fresh shop.

        ``ante`` does not affect the offer yet; it is logged for context.
        """
        items = [_roll_item(rng, config) for _ in range(config.card_slots)]
        logger.debug(f"Shop generated for ante {ante}: {[str(item) for item in items]}")
        return cls(items=items, reroll_cost=config.base_reroll_cost, config=config)

    def reroll(self, rng: random.Random, ante: int = 1) -> None:
        """Regenerate the offer. The reroll cost increase persists."""
        next_cost = self.reroll_cost + self.config.reroll_cost_increase
        fresh = Shop.generate(rng, ante, self.config)
        self.items = fresh.items
        self.reroll_cost = next_cost

    def buy(self, index: int) -> ShopItem | None:
        """Remove and return the item at ``index``, or None if out of range."""
        if 0 <= index < len(self.items):
            return self.items.pop(index)
        return None

    def copy(self) -> "Shop":
        items = [
            ShopItem(
                item.item_type,
                item.price,
                joker=item.joker.copy() if item.joker else None,
                consumable=item.consumable,
            )
            for item in self.items
        ]
        return Shop(items=items, reroll_cost=self.reroll_cost, config=self.config)


def _roll_item(rng: random.Random, config: ShopConfig) -> ShopItem:
    roll = rng.random()
    if roll < config.joker_threshold:
        joker_type = rng.choice(list(JokerType))
        return ShopItem.for_joker(Joker(joker_type), config)
    if roll < config.planet_threshold:
        planet_id = rng.choice(get_common_planet_ids())
        return ShopItem.for_consumable(Consumable(ConsumableType.PLANET, planet_id), config)
    tarot_id = rng.choice(get_all_tarot_ids())
    return ShopItem.for_consumable(Consumable(ConsumableType.TAROT, tarot_id), config)
