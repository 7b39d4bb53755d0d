"""Poker hand detection.

Classifies a set of played cards into a PokerHand and selects the cards
that score. Wild cards count as every suit for flush detection. Stone
cards are treated as ordinary cards here; the scoring pipeline adds their
chips separately even when they are not part of the detected hand.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from balatro_engine.models import PlayingCard, PokerHand, Rank, Suit

HAND_SIZE = 5
ROYAL_RANKS = frozenset({Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE})
WHEEL_RANKS = [Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.ACE]


@dataclass
class HandResult:
    """Result of hand detection.

    ``scoring_indices`` index into the played cards, ascending.
    """

    hand_type: PokerHand
    scoring_indices: list[int] = field(default_factory=list)

    def scoring_cards(self, played: list[PlayingCard]) -> list[PlayingCard]:
        return [played[i] for i in self.scoring_indices]


def detect_hand(cards: list[PlayingCard]) -> HandResult:
    """Detect the best poker hand in ``cards``.

    Args:
        cards: Played cards, in play order. Any length is tolerated.

    Returns:
        HandResult with the hand type and the indices that score. An empty
        play is a High Card with no scoring cards.
    """
    if not cards:
        return HandResult(PokerHand.HIGH_CARD, [])

    n_cards = len(cards)
    all_indices = list(range(n_cards))

    rank_groups: dict[Rank, list[int]] = defaultdict(list)
    for i, card in enumerate(cards):
        rank_groups[card.rank].append(i)

    # Largest group first, higher rank breaks ties
    groups = sorted(rank_groups.items(), key=lambda g: (len(g[1]), g[0]), reverse=True)
    sizes = [len(indices) for _, indices in groups]

    is_flush = _is_flush(cards)
    is_straight = _is_straight(cards)

    if sizes[0] == 5 and is_flush:
        return HandResult(PokerHand.FLUSH_FIVE, all_indices)

    if sizes[0] == 5:
        return HandResult(PokerHand.FIVE_OF_A_KIND, all_indices)

    if sizes[:2] == [3, 2] and len(sizes) == 2 and is_flush:
        return HandResult(PokerHand.FLUSH_HOUSE, all_indices)

    if is_straight and is_flush:
        if {card.rank for card in cards} == ROYAL_RANKS:
            return HandResult(PokerHand.ROYAL_FLUSH, all_indices)
        return HandResult(PokerHand.STRAIGHT_FLUSH, all_indices)

    if sizes[0] >= 4:
        return HandResult(PokerHand.FOUR_OF_A_KIND, sorted(groups[0][1]))

    if len(sizes) >= 2 and sizes[0] == 3 and sizes[1] >= 2:
        return HandResult(PokerHand.FULL_HOUSE, sorted(groups[0][1] + groups[1][1]))

    if is_flush:
        return HandResult(PokerHand.FLUSH, all_indices)

    if is_straight:
        return HandResult(PokerHand.STRAIGHT, all_indices)

    if sizes[0] >= 3:
        return HandResult(PokerHand.THREE_OF_A_KIND, sorted(groups[0][1]))

    if len(sizes) >= 2 and sizes[1] >= 2:
        return HandResult(PokerHand.TWO_PAIR, sorted(groups[0][1] + groups[1][1]))

    if sizes[0] >= 2:
        return HandResult(PokerHand.PAIR, sorted(groups[0][1]))

    # High card - only the highest card scores (first one on ties)
    best = max(all_indices, key=lambda i: cards[i].rank)
    return HandResult(PokerHand.HIGH_CARD, [best])


def _is_flush(cards: list[PlayingCard]) -> bool:
    """Exactly five cards that all share one suit, wild cards matching any."""
    if len(cards) != HAND_SIZE:
        return False
    return any(all(card.has_suit(suit) for card in cards) for suit in Suit)


def _is_straight(cards: list[PlayingCard]) -> bool:
    """Exactly five distinct consecutive ranks; A-2-3-4-5 counts."""
    if len(cards) != HAND_SIZE:
        return False

    ranks = sorted({card.rank for card in cards})
    if len(ranks) != HAND_SIZE:
        return False

    if ranks[-1] - ranks[0] == 4:
        return True

    return ranks == WHEEL_RANKS
