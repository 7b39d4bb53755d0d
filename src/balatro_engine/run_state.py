"""Run state machine.

RunState owns everything that persists through a run (ante, money, deck,
hand, jokers, consumables, hand levels) and advances it through
BlindSelect -> Playing -> Shop -> BlindSelect. Blinds cycle
Small -> Big -> Boss -> (next ante) Small.

Key design decisions:
- Deterministic RNG: the same seed and the same actions reproduce every
  draw, shuffle, shop roll and boss selection
- Game actions never raise; illegal actions return False/None or do nothing
- Played and discarded cards go back to the discard pile with debuffs
  cleared, so no card is ever lost from the deck
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Self

from balatro_engine.consumables import (
    CREATED_CONSUMABLES,
    HERMIT_MAX_GAIN,
    TAROT_CARDS,
    TEMPERANCE_MAX_GAIN,
    Consumable,
    ConsumableType,
    get_all_tarot_ids,
    get_common_planet_ids,
    transform_selected_cards,
)
from balatro_engine.deck import Deck
from balatro_engine.hand_levels import HandLevels
from balatro_engine.jokers import Joker, apply_end_of_round_economy
from balatro_engine.models import PlayingCard, Seal
from balatro_engine.run_mechanics import (
    BOSS_BLINDS,
    DEFAULT_RUN_CONFIG,
    BlindType,
    BossBlind,
    BossEffect,
    RewardBreakdown,
    RunConfig,
    blind_name,
    calculate_blind_chips,
    calculate_reward_breakdown,
)
from balatro_engine.scoring import ScoreResult, calculate_score_with_jokers
from balatro_engine.shop import DEFAULT_SHOP_CONFIG, Shop, ShopConfig

logger = logging.getLogger(__name__)

HOOK_DISCARDS = 2


class AntePhase(Enum):
    """Current phase of the run."""

    BLIND_SELECT = auto()  # Choosing to play or skip blind
    PLAYING = auto()  # Playing hands against a blind
    SHOP = auto()  # Shopping phase between blinds


class BlindOutcome(Enum):
    """What happened to each blind of the current ante."""

    UPCOMING = auto()
    ACTIVE = auto()
    SKIPPED = auto()
    BEATEN = auto()


def _fresh_outcomes() -> list[BlindOutcome]:
    return [BlindOutcome.UPCOMING for _ in BlindType]


@dataclass
class RunState:
    """Complete state of one run.

    Mutated exclusively through its own methods. Build one with
    ``RunState.with_seed(seed)`` (reproducible) or ``RunState.new()``.
    """

    config: RunConfig = DEFAULT_RUN_CONFIG
    shop_config: ShopConfig = DEFAULT_SHOP_CONFIG

    # Progress
    ante: int = 1
    blind_type: BlindType = BlindType.SMALL
    ante_phase: AntePhase = AntePhase.BLIND_SELECT
    boss_blind: BossBlind = BOSS_BLINDS["the_hook"]  # Boss of the current ante
    blinds_beaten: int = 0
    blind_outcomes: list[BlindOutcome] = field(default_factory=_fresh_outcomes)

    # Economy
    money: int = 4

    # Round state
    hands_remaining: int = 4
    discards_remaining: int = 3
    round_score: int = 0
    score_target: int = 300

    # Capacities
    hand_size: int = 8
    max_jokers: int = 5
    max_consumables: int = 2

    # Cards
    deck: Deck = field(default_factory=Deck.standard)
    hand: list[PlayingCard] = field(default_factory=list)
    selected_indices: list[int] = field(default_factory=list)

    # Jokers (ORDER MATTERS)
    jokers: list[Joker] = field(default_factory=list)
    consumables: list[Consumable] = field(default_factory=list)
    last_consumable: Consumable | None = None  # For The Fool

    hand_levels: HandLevels = field(default_factory=HandLevels)
    shop: Shop | None = None

    # RNG
    rng: random.Random = field(default_factory=random.Random)
    seed: int | None = None

    @classmethod
    def with_seed(
        cls,
        seed: int,
        config: RunConfig = DEFAULT_RUN_CONFIG,
        shop_config: ShopConfig = DEFAULT_SHOP_CONFIG,
    ) -> Self:
        """Start a reproducible run."""
        rng = random.Random(seed)
        deck = Deck.standard()
        deck.shuffle(rng)
        boss = _random_boss(rng)

        run = cls(
            config=config,
            shop_config=shop_config,
            boss_blind=boss,
            money=config.starting_money,
            hands_remaining=config.hands_per_round,
            discards_remaining=config.discards_per_round,
            hand_size=config.hand_size,
            max_jokers=config.max_jokers,
            max_consumables=config.max_consumables,
            deck=deck,
            rng=rng,
            seed=seed,
        )
        run.score_target = run._calculate_score_target()
        logger.info(f"New run (seed {seed}), ante 1 boss: {boss.name}")
        return run

    @classmethod
    def new(cls, config: RunConfig = DEFAULT_RUN_CONFIG) -> Self:
        """Start a run from a random seed."""
        return cls.with_seed(random.getrandbits(64), config)

    def clone(self) -> Self:
        """Create a deep copy, RNG state included."""
        cloned = RunState(
            config=self.config,
            shop_config=self.shop_config,
            ante=self.ante,
            blind_type=self.blind_type,
            ante_phase=self.ante_phase,
            boss_blind=self.boss_blind,
            blinds_beaten=self.blinds_beaten,
            blind_outcomes=list(self.blind_outcomes),
            money=self.money,
            hands_remaining=self.hands_remaining,
            discards_remaining=self.discards_remaining,
            round_score=self.round_score,
            score_target=self.score_target,
            hand_size=self.hand_size,
            max_jokers=self.max_jokers,
            max_consumables=self.max_consumables,
            deck=Deck(list(self.deck.cards), list(self.deck.discard_pile)),
            hand=list(self.hand),
            selected_indices=list(self.selected_indices),
            jokers=[j.copy() for j in self.jokers],
            consumables=list(self.consumables),
            last_consumable=self.last_consumable,
            hand_levels=self.hand_levels.copy(),
            shop=self.shop.copy() if self.shop else None,
            rng=random.Random(),
            seed=self.seed,
        )
        # Copy RNG state
        cloned.rng.setstate(self.rng.getstate())
        return cloned

    # =========================================================================
    # Blind Management
    # =========================================================================

    @property
    def active_boss(self) -> BossBlind | None:
        """The boss whose rules are in force, if the current blind is a boss."""
        if self.blind_type == BlindType.BOSS:
            return self.boss_blind
        return None

    def _boss_effect(self) -> BossEffect | None:
        boss = self.active_boss
        return boss.effect_type if boss else None

    @property
    def blind_name(self) -> str:
        return blind_name(self.blind_type, self.boss_blind)

    def _calculate_score_target(self) -> int:
        return calculate_blind_chips(self.ante, self.blind_type, self.boss_blind)

    def current_blind_index(self) -> int:
        """0 for Small, 1 for Big, 2 for Boss."""
        return self.blind_type.index

    def round_number(self) -> int:
        """1-based count of blinds reached so far in the run."""
        return (self.ante - 1) * len(BlindType) + self.current_blind_index() + 1

    def start_blind(self) -> None:
        """Start playing the current blind with a fresh hand."""
        self.ante_phase = AntePhase.PLAYING
        self.shop = None
        self.round_score = 0
        self.hands_remaining = self.config.hands_per_round
        self.discards_remaining = self.config.discards_per_round
        self.selected_indices.clear()
        self.score_target = self._calculate_score_target()
        self.blind_outcomes[self.current_blind_index()] = BlindOutcome.ACTIVE

        if self._boss_effect() == BossEffect.ONE_HAND:
            self.hands_remaining = 1

        # Cards left in hand go back before the reshuffle
        if self.hand:
            self.deck.discard_cards([c.with_debuff(False) for c in self.hand])
            self.hand = []
        self.deck.reset_and_shuffle(self.rng)
        self.hand = self.deck.draw(self.hand_size)
        self._apply_boss_debuffs()
        logger.info(
            f"Started {self.blind_name} (ante {self.ante}), target {self.score_target}"
        )

    def skip_blind(self) -> bool:
        """Skip the current Small or Big blind. Boss blinds cannot be skipped."""
        if self.blind_type == BlindType.BOSS:
            logger.debug("Cannot skip a boss blind")
            return False
        if self.ante_phase != AntePhase.BLIND_SELECT:
            logger.debug(f"Cannot skip blind during {self.ante_phase.name}")
            return False
        self.blind_outcomes[self.current_blind_index()] = BlindOutcome.SKIPPED
        logger.info(f"Skipped {self.blind_name}")
        self._advance_blind()
        return True

    def beat_blind(self) -> RewardBreakdown | None:
        """Collect the reward for the current blind and open the shop.

        Returns None without changing anything unless a blind is being
        played and its score target has been reached.
        """
        if self.ante_phase != AntePhase.PLAYING:
            logger.debug(f"Cannot beat blind during {self.ante_phase.name}")
            return None
        if not self.blind_beaten():
            logger.debug(f"Blind not beaten yet: {self.round_score}/{self.score_target}")
            return None
        breakdown = self.calculate_reward_breakdown()
        self.money += breakdown.total
        self.blinds_beaten += 1
        apply_end_of_round_economy(self.jokers)
        self.blind_outcomes[self.current_blind_index()] = BlindOutcome.BEATEN

        self.ante_phase = AntePhase.SHOP
        self.deck.discard_cards([c.with_debuff(False) for c in self.hand])
        self.hand = []
        self.selected_indices.clear()
        self.shop = Shop.generate(self.rng, self.ante, self.shop_config)
        logger.info(
            f"Beat {self.blind_name} with {self.round_score}/{self.score_target}, "
            f"earned ${breakdown.total} (now ${self.money})"
        )
        return breakdown

    def leave_shop(self) -> bool:
        if self.ante_phase != AntePhase.SHOP:
            logger.debug(f"Cannot leave shop during {self.ante_phase.name}")
            return False
        self.shop = None
        logger.info("Left shop")
        self._advance_blind()
        return True

    def _advance_blind(self) -> None:
        """Move to the next blind, starting a new ante after the boss."""
        match self.blind_type:
            case BlindType.SMALL:
                self.blind_type = BlindType.BIG
            case BlindType.BIG:
                self.blind_type = BlindType.BOSS
            case BlindType.BOSS:
                self.ante += 1
                self.blinds_beaten = 0
                self.boss_blind = _random_boss(self.rng)
                self.blind_type = BlindType.SMALL
                self.blind_outcomes = _fresh_outcomes()
                if self.run_won():
                    logger.info(f"Run won after ante {self.ante - 1}")
                else:
                    logger.info(f"Advanced to ante {self.ante}, boss: {self.boss_blind.name}")
        self.ante_phase = AntePhase.BLIND_SELECT
        self.score_target = self._calculate_score_target()

    def _apply_boss_debuffs(self) -> None:
        boss = self.active_boss
        if boss is None or boss.debuffed_suit is None:
            return
        self.hand = [
            card.with_debuff(True) if card.suit == boss.debuffed_suit else card
            for card in self.hand
        ]

    # =========================================================================
    # Round Progress
    # =========================================================================

    def add_score(self, score: int) -> None:
        self.round_score += max(0, score)

    def use_hand(self) -> None:
        self.hands_remaining = max(0, self.hands_remaining - 1)

    def use_discard(self) -> bool:
        if self.discards_remaining <= 0:
            return False
        self.discards_remaining -= 1
        return True

    def blind_beaten(self) -> bool:
        return self.round_score >= self.score_target

    def round_lost(self) -> bool:
        return self.hands_remaining == 0 and not self.blind_beaten()

    def run_won(self) -> bool:
        return self.ante > self.config.max_ante

    def calculate_reward_breakdown(self) -> RewardBreakdown:
        return calculate_reward_breakdown(
            self.blind_type, self.hands_remaining, self.money, self.jokers, self.config
        )

    def calculate_reward(self) -> int:
        """Total money beating the current blind would pay right now."""
        return self.calculate_reward_breakdown().total

    # =========================================================================
    # Hand Actions
    # =========================================================================

    def toggle_select(self, index: int) -> None:
        """Select or deselect a hand card. Out-of-range indices are ignored."""
        if not 0 <= index < len(self.hand):
            return
        if index in self.selected_indices:
            self.selected_indices.remove(index)
        elif len(self.selected_indices) < self.config.max_selected:
            self.selected_indices.append(index)

    def is_selected(self, index: int) -> bool:
        return index in self.selected_indices

    def selected_cards(self) -> list[PlayingCard]:
        return [self.hand[i] for i in self.selected_indices if 0 <= i < len(self.hand)]

    def can_play(self) -> bool:
        if self.hands_remaining <= 0 or not self.selected_indices:
            return False
        if len(self.selected_indices) > self.config.max_selected:
            return False
        if self._boss_effect() == BossEffect.EXACT_FIVE_CARDS:
            return len(self.selected_indices) == 5
        return True

    def can_discard(self) -> bool:
        return self.discards_remaining > 0 and bool(self.selected_indices)

    def _remove_selected(self) -> list[PlayingCard]:
        """Remove the selected cards from hand, returned in ascending index order."""
        removed = []
        for i in sorted(set(self.selected_indices), reverse=True):
            if 0 <= i < len(self.hand):
                removed.append(self.hand.pop(i))
        removed.reverse()
        self.selected_indices.clear()
        return removed

    def play_selected(self) -> list[PlayingCard]:
        """Remove the selected cards from hand to be scored.

        Does not refill the hand: held cards must stay as they are while
        the play is scored. Call ``draw_to_hand_size`` afterwards.
        """
        return self._remove_selected()

    def draw_to_hand_size(self) -> None:
        need = max(0, self.hand_size - len(self.hand))
        if need > 0:
            self.hand.extend(self.deck.draw(need))
            self._apply_boss_debuffs()

    def discard_selected(self) -> list[PlayingCard]:
        """Discard the selected cards and refill the hand.

        Purple Seals create a Tarot card for each discarded card, while a
        consumable slot is free.
        """
        discarded = self._remove_selected()
        self.deck.discard_cards([c.with_debuff(False) for c in discarded])

        for card in discarded:
            if card.seal == Seal.PURPLE and not card.debuffed:
                self._create_random_consumable(ConsumableType.TAROT)

        self.draw_to_hand_size()
        return discarded

    def discard_hand(self) -> list[PlayingCard] | None:
        """Spend a discard on the selected cards. None if discarding is illegal."""
        if not self.can_discard():
            logger.debug(
                f"Discard rejected: {self.discards_remaining} discards, "
                f"{len(self.selected_indices)} selected"
            )
            return None
        self.use_discard()
        return self.discard_selected()

    def apply_hook_effect(self) -> list[PlayingCard]:
        """The Hook discards 2 random cards from hand."""
        if self._boss_effect() != BossEffect.DISCARD_RANDOM or len(self.hand) <= HOOK_DISCARDS:
            return []
        chosen = self.rng.sample(range(len(self.hand)), HOOK_DISCARDS)
        discarded = [self.hand.pop(i) for i in sorted(chosen, reverse=True)]
        self.deck.discard_cards([c.with_debuff(False) for c in discarded])
        logger.debug(f"The Hook discarded {[str(c) for c in discarded]}")
        return discarded

    def play_hand(self) -> ScoreResult | None:
        """Play the selected cards: score, bank the score, then refill.

        Returns:
            The ScoreResult, or None if playing is currently illegal.
        """
        if not self.can_play():
            logger.debug(
                f"Play rejected: {self.hands_remaining} hands, "
                f"{len(self.selected_indices)} selected"
            )
            return None

        played = self.play_selected()
        result = calculate_score_with_jokers(
            played,
            self.hand_levels,
            self.jokers,
            held_cards=self.hand,
            discards_remaining=self.discards_remaining,
        )
        self.add_score(result.final_score)
        self.use_hand()

        for i in result.scoring_indices:
            card = played[i]
            if card.seal == Seal.GOLD and not card.debuffed:
                self.money += self.config.gold_seal_money

        self.deck.discard_cards([c.with_debuff(False) for c in played])
        self.apply_hook_effect()
        self.draw_to_hand_size()
        logger.debug(
            f"Played {result.hand_type.display_name}: {result.final_score} "
            f"({self.round_score}/{self.score_target})"
        )
        return result

    # =========================================================================
    # Shop Actions
    # =========================================================================

    def buy_shop_item(self, index: int) -> bool:
        if self.shop is None or not 0 <= index < len(self.shop.items):
            return False

        item = self.shop.items[index]
        if self.money < item.price:
            logger.debug(f"Cannot afford {item.name}: ${self.money} < ${item.price}")
            return False
        if item.is_joker and len(self.jokers) >= self.max_jokers:
            logger.debug(f"No joker slot for {item.name}")
            return False
        if not item.is_joker and len(self.consumables) >= self.max_consumables:
            logger.debug(f"No consumable slot for {item.name}")
            return False

        self.shop.buy(index)
        self.money -= item.price
        if item.is_joker:
            self.jokers.append(item.joker)
        else:
            self.consumables.append(item.consumable)
        logger.debug(f"Bought {item.name} for ${item.price}")
        return True

    def sell_joker(self, index: int) -> bool:
        if not 0 <= index < len(self.jokers):
            return False
        joker = self.jokers.pop(index)
        self.money += joker.total_sell_value
        logger.debug(f"Sold {joker.name} for ${joker.total_sell_value}")
        return True

    def reroll_shop(self) -> bool:
        if self.shop is None:
            return False
        cost = self.shop.reroll_cost
        if self.money < cost:
            logger.debug(f"Cannot afford reroll: ${self.money} < ${cost}")
            return False
        self.money -= cost
        self.shop.reroll(self.rng, self.ante)
        return True

    # =========================================================================
    # Consumables
    # =========================================================================

    def _create_random_consumable(self, consumable_type: ConsumableType) -> bool:
        if len(self.consumables) >= self.max_consumables:
            return False
        if consumable_type == ConsumableType.PLANET:
            card_id = self.rng.choice(get_common_planet_ids())
        else:
            card_id = self.rng.choice(get_all_tarot_ids())
        self.consumables.append(Consumable(consumable_type, card_id))
        return True

    def use_planet(self, index: int) -> bool:
        if not 0 <= index < len(self.consumables):
            return False
        consumable = self.consumables[index]
        if not consumable.is_planet:
            return False
        hand_type = consumable.definition.hand_type
        self.hand_levels.level_up(hand_type)
        self.consumables.pop(index)
        self.last_consumable = consumable
        logger.debug(f"{consumable.name}: {hand_type.display_name} now level {self.hand_levels.get_level(hand_type)}")
        return True

    def use_tarot(self, index: int) -> bool:
        """Use a tarot on the current selection.

        Tarots that need cards require between min and max selected cards.
        Returns False (and keeps the tarot) when it cannot be used.
        """
        if not 0 <= index < len(self.consumables):
            return False
        consumable = self.consumables[index]
        if not consumable.is_tarot:
            return False

        tarot = TAROT_CARDS[consumable.card_id]
        min_select, max_select = tarot.cards_needed
        selected = sorted(i for i in self.selected_indices if 0 <= i < len(self.hand))
        if min_select > 0 and not min_select <= len(selected) <= max_select:
            logger.debug(
                f"{tarot.name} needs {min_select}-{max_select} cards, {len(selected)} selected"
            )
            return False
        # The Fool is never recorded as last used, so it cannot copy itself
        if tarot.id == "the_fool" and self.last_consumable is None:
            logger.debug("The Fool has nothing to copy")
            return False

        self.consumables.pop(index)

        replaced = transform_selected_cards(tarot, [self.hand[i] for i in selected])
        if replaced is not None:
            for i, card in zip(selected, replaced):
                self.hand[i] = card
            self._apply_boss_debuffs()
        elif tarot.id == "the_hermit":
            self.money += min(self.money, HERMIT_MAX_GAIN)
        elif tarot.id == "temperance":
            total_sell = sum(j.total_sell_value for j in self.jokers)
            self.money += min(total_sell, TEMPERANCE_MAX_GAIN)
        elif tarot.id == "the_high_priestess":
            for _ in range(CREATED_CONSUMABLES):
                self._create_random_consumable(ConsumableType.PLANET)
        elif tarot.id == "the_emperor":
            for _ in range(CREATED_CONSUMABLES):
                self._create_random_consumable(ConsumableType.TAROT)
        elif tarot.id == "the_fool":
            self.consumables.append(self.last_consumable)

        if tarot.id != "the_fool":
            self.last_consumable = consumable
        logger.debug(f"Used {tarot.name}")
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state_summary(self) -> dict:
        """Get a summary of current run state."""
        return {
            "phase": self.ante_phase.name,
            "ante": self.ante,
            "round": self.round_number(),
            "blind": self.blind_name,
            "boss": self.boss_blind.name,
            "chips": f"{self.round_score}/{self.score_target}",
            "hands": self.hands_remaining,
            "discards": self.discards_remaining,
            "money": self.money,
            "hand_size": len(self.hand),
            "deck_size": self.deck.remaining,
            "jokers": [j.name for j in self.jokers],
            "consumables": [c.name for c in self.consumables],
        }


def _random_boss(rng: random.Random) -> BossBlind:
    return rng.choice(list(BOSS_BLINDS.values()))
