"""Draw and discard piles for a run's playing cards.

The deck knows nothing about game rules. Cards move between the draw pile,
the discard pile and the player's hand; a card is never in two places.
"""

import random
from dataclasses import dataclass, field

from balatro_engine.models import PlayingCard, create_standard_deck


@dataclass
class Deck:
    """Ordered draw pile plus discard pile.

    The top of the draw pile is the end of ``cards``.
    """

    cards: list[PlayingCard] = field(default_factory=list)
    discard_pile: list[PlayingCard] = field(default_factory=list)

    @classmethod
    def standard(cls) -> "Deck":
        """Create an unshuffled 52-card deck."""
        return cls(cards=create_standard_deck())

    @property
    def remaining(self) -> int:
        return len(self.cards)

    @property
    def discard_count(self) -> int:
        return len(self.discard_pile)

    @property
    def total(self) -> int:
        """Cards owned by the deck (draw pile and discard pile)."""
        return len(self.cards) + len(self.discard_pile)

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self.cards)

    def draw(self, n: int) -> list[PlayingCard]:
        """Pop up to ``n`` cards from the top of the draw pile."""
        n = max(0, min(n, len(self.cards)))
        drawn = [self.cards.pop() for _ in range(n)]
        return drawn

    def discard_cards(self, cards: list[PlayingCard]) -> None:
        self.discard_pile.extend(cards)

    def reshuffle_discard(self, rng: random.Random) -> None:
        """Move the discard pile back into the draw pile and shuffle."""
        self.cards.extend(self.discard_pile)
        self.discard_pile.clear()
        self.shuffle(rng)

    def reset_and_shuffle(self, rng: random.Random) -> None:
        """Reunite both piles before a new blind."""
        self.reshuffle_discard(rng)

    def add_card(self, card: PlayingCard) -> None:
        """Add a new card to the draw pile (e.g. a tarot-created copy)."""
        self.cards.append(card)

    def remove_card(self, card: PlayingCard) -> bool:
        """Remove the first card equal to ``card``, searching the draw pile first."""
        for pile in (self.cards, self.discard_pile):
            if card in pile:
                pile.remove(card)
                return True
        return False
