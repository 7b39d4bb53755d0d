"""Scoring pipeline.

Calculates the final score of a played hand and records every contribution
as an ordered ScoreStep log.

CRITICAL: Step order matters for presentation. The sequence is:
1. BaseHand: chips and mult of the detected hand at its current level
2. For each scoring card (ascending index):
   a. CardChips (rank chips, Stone 50, Bonus +30, Foil +50)
   b. CardMult (Mult +4, Holographic +10)
   c. CardXMult (Glass x2, Polychrome x1.5)
   A Red Seal repeats a-c once more for that card.
3. Stone cards outside the detected hand add their chips
4. For each joker in slot order, its Joker* steps (a Retrigger re-emits
   the named cards' Card* steps at that position)
5. Final score = total_chips x ceil(total_mult)

Replaying the steps in order (chips +, mult +, x_mult *) reproduces the
totals exactly; ScoreResult.replay() does this.
"""

import logging
import math
from dataclasses import dataclass, field

from balatro_engine.hand_evaluation import detect_hand
from balatro_engine.hand_levels import HandLevels
from balatro_engine.jokers import (
    AddChips,
    AddChipsAndMultPerCard,
    AddChipsPerCard,
    AddMult,
    AddMultPerCard,
    Joker,
    JokerContext,
    JokerEffect,
    Retrigger,
    XMult,
    evaluate_jokers,
)
from balatro_engine.models import PlayingCard, PokerHand, Seal

logger = logging.getLogger(__name__)


# =============================================================================
# Score Steps
# =============================================================================


class ScoreStep:
    """One atomic contribution to a score."""

    @property
    def source_index(self) -> int | None:
        """Index of the card or joker that produced this step."""
        return None


@dataclass(frozen=True)
class BaseHand(ScoreStep):
    hand_type: PokerHand
    chips: int
    mult: int


@dataclass(frozen=True)
class CardChips(ScoreStep):
    card_index: int
    chips: int

    @property
    def source_index(self) -> int:
        return self.card_index


@dataclass(frozen=True)
class CardMult(ScoreStep):
    card_index: int
    mult: int

    @property
    def source_index(self) -> int:
        return self.card_index


@dataclass(frozen=True)
class CardXMult(ScoreStep):
    card_index: int
    x_mult: float

    @property
    def source_index(self) -> int:
        return self.card_index


@dataclass(frozen=True)
class JokerChips(ScoreStep):
    joker_index: int
    chips: int

    @property
    def source_index(self) -> int:
        return self.joker_index


@dataclass(frozen=True)
class JokerMult(ScoreStep):
    joker_index: int
    mult: int

    @property
    def source_index(self) -> int:
        return self.joker_index


@dataclass(frozen=True)
class JokerXMult(ScoreStep):
    joker_index: int
    x_mult: float

    @property
    def source_index(self) -> int:
        return self.joker_index


@dataclass
class ScoreResult:
    """Final score of a played hand with the full step log."""

    hand_type: PokerHand
    scoring_indices: list[int]
    steps: list[ScoreStep] = field(default_factory=list)
    total_chips: int = 0
    total_mult: int = 0
    final_score: int = 0

    def replay(self) -> tuple[int, int]:
        """Fold ``steps`` in order and return (total_chips, total_mult)."""
        chips = 0
        mult = 0.0
        for step in self.steps:
            match step:
                case BaseHand():
                    chips = step.chips
                    mult = float(step.mult)
                case CardChips() | JokerChips():
                    chips += step.chips
                case CardMult() | JokerMult():
                    mult += step.mult
                case CardXMult() | JokerXMult():
                    mult *= step.x_mult
        return chips, math.ceil(mult)


# =============================================================================
# Pipeline
# =============================================================================


class _ScoreAccumulator:
    """Running totals plus the step log they were built from."""

    def __init__(self, hand_type: PokerHand, chips: int, mult: int):
        self.steps: list[ScoreStep] = [BaseHand(hand_type, chips, mult)]
        self.chips = chips
        self.mult = float(mult)

    def add(self, step: ScoreStep) -> None:
        self.steps.append(step)
        match step:
            case CardChips() | JokerChips():
                self.chips += step.chips
            case CardMult() | JokerMult():
                self.mult += step.mult
            case CardXMult() | JokerXMult():
                self.mult *= step.x_mult

    def score_card(self, index: int, card: PlayingCard) -> None:
        """Emit one trigger of a card's per-card contributions."""
        chips = card.chip_value()
        if chips > 0:
            self.add(CardChips(index, chips))
        mult = card.mult_bonus()
        if mult > 0:
            self.add(CardMult(index, mult))
        x_mult = card.x_mult()
        if x_mult != 1.0:
            self.add(CardXMult(index, x_mult))

    def apply_joker(
        self, joker_index: int, effect: JokerEffect, played: list[PlayingCard]
    ) -> None:
        match effect:
            case AddChips(chips=chips) if chips > 0:
                self.add(JokerChips(joker_index, chips))
            case AddMult(mult=mult) if mult > 0:
                self.add(JokerMult(joker_index, mult))
            case XMult(factor=factor) if factor != 1.0:
                self.add(JokerXMult(joker_index, factor))
            case AddChipsPerCard(card_indices=indices, chips_each=chips_each):
                for _ in indices:
                    self.add(JokerChips(joker_index, chips_each))
            case AddMultPerCard(card_indices=indices, mult_each=mult_each):
                for _ in indices:
                    self.add(JokerMult(joker_index, mult_each))
            case AddChipsAndMultPerCard(
                card_indices=indices, chips_each=chips_each, mult_each=mult_each
            ):
                for _ in indices:
                    self.add(JokerChips(joker_index, chips_each))
                    self.add(JokerMult(joker_index, mult_each))
            case Retrigger(card_indices=indices):
                for i in sorted(indices):
                    self.score_card(i, played[i])

    def result(self, hand_type: PokerHand, scoring_indices: list[int]) -> ScoreResult:
        total_mult = math.ceil(self.mult)
        return ScoreResult(
            hand_type=hand_type,
            scoring_indices=list(scoring_indices),
            steps=self.steps,
            total_chips=self.chips,
            total_mult=total_mult,
            final_score=self.chips * total_mult,
        )


def _score_cards(
    played_cards: list[PlayingCard], hand_levels: HandLevels
) -> tuple[_ScoreAccumulator, PokerHand, list[int]]:
    """Base hand, scoring cards and always-scoring cards."""
    hand_result = detect_hand(played_cards)
    hand_type = hand_result.hand_type
    scoring_indices = hand_result.scoring_indices

    acc = _ScoreAccumulator(
        hand_type, hand_levels.chips_for(hand_type), hand_levels.mult_for(hand_type)
    )

    for i in scoring_indices:
        card = played_cards[i]
        acc.score_card(i, card)
        if card.seal == Seal.RED and not card.debuffed:
            acc.score_card(i, card)

    # Stone cards score their chips even outside the detected hand
    for i, card in enumerate(played_cards):
        if card.always_scores() and i not in scoring_indices:
            chips = card.chip_value()
            if chips > 0:
                acc.add(CardChips(i, chips))

    return acc, hand_type, scoring_indices


def calculate_score(
    played_cards: list[PlayingCard], hand_levels: HandLevels | None = None
) -> ScoreResult:
    """Score a played hand without jokers.

    Pure function: the same input always yields an identical ScoreResult.
    """
    if hand_levels is None:
        hand_levels = HandLevels()
    acc, hand_type, scoring_indices = _score_cards(played_cards, hand_levels)
    return acc.result(hand_type, scoring_indices)


def calculate_score_with_jokers(
    played_cards: list[PlayingCard],
    hand_levels: HandLevels,
    jokers: list[Joker],
    held_cards: list[PlayingCard] | None = None,
    discards_remaining: int = 0,
) -> ScoreResult:
    """Score a played hand, then resolve jokers in slot order.

    Args:
        played_cards: Cards played, in play order
        hand_levels: Current hand levels
        jokers: Owned jokers in slot order
        held_cards: Cards still in hand (Steel Joker, Blackboard)
        discards_remaining: Discards left this round (Banner, Mystic Summit)
    """
    acc, hand_type, scoring_indices = _score_cards(played_cards, hand_levels)

    ctx = JokerContext(
        played_cards=played_cards,
        scoring_indices=scoring_indices,
        hand_type=hand_type,
        held_cards=list(held_cards or []),
        discards_remaining=discards_remaining,
        num_played=len(played_cards),
    )
    for joker_index, effect in enumerate(evaluate_jokers(jokers, ctx)):
        acc.apply_joker(joker_index, effect, played_cards)

    result = acc.result(hand_type, scoring_indices)
    logger.debug(
        f"{hand_type.display_name}: {result.total_chips} chips x {result.total_mult} mult "
        f"= {result.final_score} ({len(jokers)} jokers)"
    )
    return result
