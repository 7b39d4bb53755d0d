"""Per-hand-type levels raised by Planet cards."""

from dataclasses import dataclass, field

from balatro_engine.models import PokerHand


@dataclass
class HandLevels:
    """Level of every poker hand type.

    Levels start at 1 and only ever go up. Each level past the first adds
    the hand's level-up chips and mult to its base values.
    """

    levels: dict[PokerHand, int] = field(
        default_factory=lambda: {hand: 1 for hand in PokerHand}
    )

    def get_level(self, hand_type: PokerHand) -> int:
        return self.levels.get(hand_type, 1)

    def level_up(self, hand_type: PokerHand) -> None:
        self.levels[hand_type] = self.get_level(hand_type) + 1

    def chips_for(self, hand_type: PokerHand) -> int:
        """Base chips of ``hand_type`` at its current level."""
        return hand_type.base_chips + (self.get_level(hand_type) - 1) * hand_type.level_up_chips

    def mult_for(self, hand_type: PokerHand) -> int:
        """Base mult of ``hand_type`` at its current level."""
        return hand_type.base_mult + (self.get_level(hand_type) - 1) * hand_type.level_up_mult

    def copy(self) -> "HandLevels":
        return HandLevels(levels=dict(self.levels))
