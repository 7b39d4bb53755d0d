"""Numeric observation encoding of a run.

Turns a RunState into a fixed-size float32 vector, for bots, search and
offline analysis of runs.

Layout of ``StateVector.to_array()``:
- hand cards: 52-dim binary
- joker slots: one-hot per slot over the joker catalogue
- joker sell values: one per slot, normalized
- ante, chips progress, money, hands, discards: normalized scalars
- blind type: one-hot (small, big, boss)
- boss blind: one-hot over the boss catalogue
- hand levels: one per poker hand, normalized
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from balatro_engine.jokers import JokerType
from balatro_engine.models import PokerHand, Suit
from balatro_engine.run_mechanics import BOSS_BLINDS, BlindType

if TYPE_CHECKING:
    from balatro_engine.run_state import RunState


# Card encoding constants
NUM_RANKS = 13  # 2-A
NUM_SUITS = 4  # S, H, C, D
TOTAL_CARDS = 52

# Joker encoding
MAX_JOKERS = 5
NUM_JOKER_TYPES = len(JokerType)
JOKER_ID_MAP = {joker_type.value: i for i, joker_type in enumerate(JokerType)}

NUM_BOSSES = len(BOSS_BLINDS)
BOSS_ID_MAP = {boss_id: i for i, boss_id in enumerate(BOSS_BLINDS)}

NUM_HAND_TYPES = len(PokerHand)

# Normalization scales
MAX_ANTE = 8.0
MONEY_SCALE = 100.0
SELL_VALUE_SCALE = 20.0
LEVEL_SCALE = 5.0


@dataclass
class StateVector:
    """Vectorized run state."""

    # Hand representation (52-dim: 1 if card in hand, 0 otherwise)
    hand_cards: np.ndarray  # shape: (52,)

    # Joker representation (one-hot for each slot)
    joker_ids: np.ndarray  # shape: (MAX_JOKERS, NUM_JOKER_TYPES)
    joker_sell_values: np.ndarray  # shape: (MAX_JOKERS,)

    # Run progress
    ante: float  # normalized (ante / 8)
    blind_type: np.ndarray  # one-hot (3,): small, big, boss
    boss_blind: np.ndarray  # one-hot (NUM_BOSSES,)
    chips_progress: float  # round_score / score_target (capped at 1)

    # Economy
    money: float  # normalized (money / 100, capped)
    hands_remaining: float  # normalized by hands per round
    discards_remaining: float  # normalized by discards per round

    # Hand levels (13 hand types, normalized)
    hand_levels: np.ndarray  # shape: (13,)

    def to_array(self) -> np.ndarray:
        """Flatten into one float32 vector."""
        components = [
            self.hand_cards,
            self.joker_ids.flatten(),
            self.joker_sell_values,
            np.array([self.ante]),
            self.blind_type,
            self.boss_blind,
            np.array([self.chips_progress]),
            np.array([self.money]),
            np.array([self.hands_remaining]),
            np.array([self.discards_remaining]),
            self.hand_levels,
        ]
        return np.concatenate(components).astype(np.float32)

    @staticmethod
    def input_size() -> int:
        """Size of the flattened vector."""
        return (
            TOTAL_CARDS
            + MAX_JOKERS * NUM_JOKER_TYPES
            + MAX_JOKERS
            + 1
            + len(BlindType)
            + NUM_BOSSES
            + 4
            + NUM_HAND_TYPES
        )


def card_to_index(rank_value: int, suit_value: str) -> int:
    """Convert card to index 0-51."""
    suit_map = {"S": 0, "H": 1, "C": 2, "D": 3}
    suit_idx = suit_map[suit_value]
    rank_idx = rank_value - 2  # 2 is rank 0
    return suit_idx * NUM_RANKS + rank_idx


def vectorize_state(run: RunState) -> StateVector:
    """Convert run state to vector representation."""
    # Hand cards (52-dim binary)
    hand_cards = np.zeros(TOTAL_CARDS, dtype=np.float32)
    for card in run.hand:
        hand_cards[card_to_index(card.rank.value, card.suit.value)] = 1.0

    # Joker IDs (one-hot)
    joker_ids = np.zeros((MAX_JOKERS, NUM_JOKER_TYPES), dtype=np.float32)
    joker_sell_values = np.zeros(MAX_JOKERS, dtype=np.float32)
    for i, joker in enumerate(run.jokers[:MAX_JOKERS]):
        joker_ids[i, JOKER_ID_MAP[joker.id]] = 1.0
        joker_sell_values[i] = min(1.0, joker.total_sell_value / SELL_VALUE_SCALE)

    blind_type = np.zeros(len(BlindType), dtype=np.float32)
    blind_type[run.blind_type.index] = 1.0

    boss_blind = np.zeros(NUM_BOSSES, dtype=np.float32)
    boss_blind[BOSS_ID_MAP[run.boss_blind.id]] = 1.0

    hand_levels = np.array(
        [run.hand_levels.get_level(hand) / LEVEL_SCALE for hand in PokerHand],
        dtype=np.float32,
    )

    return StateVector(
        hand_cards=hand_cards,
        joker_ids=joker_ids,
        joker_sell_values=joker_sell_values,
        ante=run.ante / MAX_ANTE,
        blind_type=blind_type,
        boss_blind=boss_blind,
        chips_progress=min(1.0, run.round_score / max(1, run.score_target)),
        money=min(1.0, max(0, run.money) / MONEY_SCALE),
        hands_remaining=run.hands_remaining / max(1, run.config.hands_per_round),
        discards_remaining=run.discards_remaining / max(1, run.config.discards_per_round),
        hand_levels=hand_levels,
    )


def suit_order() -> list[Suit]:
    """Suits in the order their blocks appear in the hand encoding."""
    return [Suit.SPADES, Suit.HEARTS, Suit.CLUBS, Suit.DIAMONDS]
