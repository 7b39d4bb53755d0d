"""Tests for the run state machine."""

from balatro_engine.consumables import Consumable
from balatro_engine.jokers import create_joker
from balatro_engine.models import Enhancement, PlayingCard, PokerHand, Seal, Suit
from balatro_engine.run_mechanics import BOSS_BLINDS, BlindType, RunConfig
from balatro_engine.run_state import AntePhase, BlindOutcome, RunState
from balatro_engine.shop import ShopItem


def cards(card_strings: list[str]) -> list[PlayingCard]:
    """Helper to create cards from strings."""
    return [PlayingCard.from_string(s) for s in card_strings]


HAND = ["KS", "KH", "5C", "2D", "3D", "7H", "9S", "JC"]


def started_run(seed: int = 42) -> RunState:
    run = RunState.with_seed(seed)
    run.start_blind()
    return run


def run_with_hand(card_strings: list[str] = HAND) -> RunState:
    """A Small Blind in progress with a known hand."""
    run = started_run()
    run.hand = cards(card_strings)
    return run


def boss_run(boss_id: str, seed: int = 42) -> RunState:
    run = RunState.with_seed(seed)
    run.blind_type = BlindType.BOSS
    run.boss_blind = BOSS_BLINDS[boss_id]
    run.start_blind()
    return run


def select(run: RunState, *indices: int) -> None:
    for i in indices:
        run.toggle_select(i)


def cards_owned(run: RunState) -> int:
    return len(run.hand) + run.deck.total


class TestRunCreation:
    def test_initial_state(self):
        run = RunState.with_seed(1)
        assert run.ante == 1
        assert run.blind_type == BlindType.SMALL
        assert run.ante_phase == AntePhase.BLIND_SELECT
        assert run.money == 4
        assert run.score_target == 300
        assert run.deck.remaining == 52
        assert run.hand == []
        assert run.boss_blind in BOSS_BLINDS.values()

    def test_custom_config(self):
        run = RunState.with_seed(1, RunConfig(starting_money=10, hand_size=5))
        run.start_blind()
        assert run.money == 10
        assert len(run.hand) == 5

    def test_entropy_constructor(self):
        run = RunState.new()
        assert isinstance(run.seed, int)

    def test_summary(self):
        summary = RunState.with_seed(1).get_state_summary()
        assert summary["phase"] == "BLIND_SELECT"
        assert summary["ante"] == 1
        assert summary["round"] == 1
        assert summary["blind"] == "Small Blind"
        assert summary["chips"] == "0/300"


class TestDeterminism:
    """Same seed and same actions reproduce the run exactly."""

    @staticmethod
    def play_sequence(seed: int) -> list:
        run = RunState.with_seed(seed)
        snapshots = [run.boss_blind]
        run.start_blind()
        snapshots.append(list(run.hand))
        select(run, 0, 1)
        run.discard_hand()
        snapshots.append(list(run.hand))
        select(run, 2)
        run.play_hand()
        snapshots.append(list(run.hand))
        run.round_score = run.score_target
        run.beat_blind()
        snapshots.append(run.shop.copy())
        run.reroll_shop()
        snapshots.append(run.shop.copy())
        run.leave_shop()
        run.skip_blind()
        run.start_blind()
        run.round_score = run.score_target
        run.beat_blind()
        run.leave_shop()
        snapshots.append(run.boss_blind)
        return snapshots

    def test_same_seed_same_run(self):
        assert self.play_sequence(7) == self.play_sequence(7)

    def test_different_seed_different_hand(self):
        assert started_run(1).hand != started_run(2).hand

    def test_clone_continues_identically(self):
        run = started_run()
        cloned = run.clone()
        for r in (run, cloned):
            select(r, 0, 1)
            r.play_hand()
        assert run.hand == cloned.hand
        assert run.round_score == cloned.round_score

    def test_clone_is_independent(self):
        run = started_run()
        run.jokers.append(create_joker("egg"))
        cloned = run.clone()
        select(cloned, 0)
        cloned.play_hand()
        cloned.jokers[0].bonus_sell = 6
        assert run.hands_remaining == 4
        assert run.round_score == 0
        assert len(run.hand) == 8
        assert run.jokers[0].bonus_sell == 0


class TestStartBlind:
    def test_draws_full_hand(self):
        run = started_run()
        assert len(run.hand) == 8
        assert run.deck.remaining == 44
        assert run.ante_phase == AntePhase.PLAYING
        assert run.hands_remaining == 4
        assert run.discards_remaining == 3
        assert run.blind_outcomes[0] == BlindOutcome.ACTIVE

    def test_restart_keeps_every_card(self):
        run = started_run()
        run.start_blind()
        assert cards_owned(run) == 52
        assert len(set(run.hand)) == 8


class TestSelection:
    def test_toggle(self):
        run = started_run()
        select(run, 3)
        assert run.is_selected(3)
        select(run, 3)
        assert not run.is_selected(3)

    def test_at_most_five_selected(self):
        run = started_run()
        select(run, 0, 1, 2, 3, 4, 5)
        assert run.selected_indices == [0, 1, 2, 3, 4]

    def test_out_of_range_ignored(self):
        run = started_run()
        select(run, 8, -1)
        assert run.selected_indices == []

    def test_selected_cards_in_selection_order(self):
        run = run_with_hand()
        select(run, 2, 0)
        assert run.selected_cards() == cards(["5C", "KS"])


class TestPlayHand:
    def test_play_pair(self):
        run = run_with_hand()
        select(run, 0, 1)
        result = run.play_hand()
        assert result.hand_type == PokerHand.PAIR
        assert result.final_score == 60
        assert run.round_score == 60
        assert run.hands_remaining == 3
        assert len(run.hand) == 8
        assert run.deck.discard_pile[-2:] == cards(["KS", "KH"])
        assert run.selected_indices == []

    def test_play_selected_does_not_refill(self):
        run = run_with_hand()
        select(run, 0, 1)
        played = run.play_selected()
        assert played == cards(["KS", "KH"])
        assert len(run.hand) == 6
        run.draw_to_hand_size()
        assert len(run.hand) == 8

    def test_illegal_play_changes_nothing(self):
        run = started_run()
        assert run.play_hand() is None
        assert run.hands_remaining == 4

    def test_cannot_play_without_hands(self):
        run = started_run()
        select(run, 0)
        run.hands_remaining = 0
        assert not run.can_play()
        assert run.play_hand() is None

    def test_jokers_see_discards_remaining(self):
        run = run_with_hand()
        run.jokers = [create_joker("banner")]
        select(run, 0, 1)
        # 30 + 3 * 30 = 120 chips, 2 mult
        assert run.play_hand().final_score == 240

    def test_gold_seal_pays_when_scored(self):
        run = run_with_hand()
        run.hand[0] = run.hand[0].with_seal(Seal.GOLD)
        select(run, 0, 1)
        run.play_hand()
        assert run.money == 7

    def test_deck_is_conserved(self):
        run = started_run()
        select(run, 0, 1, 2)
        run.play_hand()
        select(run, 0, 1)
        run.discard_hand()
        assert cards_owned(run) == 52


class TestDiscard:
    def test_discard_refills(self):
        run = started_run()
        select(run, 0, 1)
        discarded = run.discard_hand()
        assert len(discarded) == 2
        assert run.discards_remaining == 2
        assert len(run.hand) == 8
        assert run.deck.discard_count == 2

    def test_no_discards_left(self):
        run = started_run()
        run.discards_remaining = 0
        select(run, 0)
        assert not run.can_discard()
        assert run.discard_hand() is None
        assert len(run.hand) == 8

    def test_purple_seal_creates_tarot(self):
        run = started_run()
        run.hand[0] = run.hand[0].with_seal(Seal.PURPLE)
        select(run, 0)
        run.discard_hand()
        assert len(run.consumables) == 1
        assert run.consumables[0].is_tarot

    def test_purple_seal_needs_free_slot(self):
        run = started_run()
        run.consumables = [Consumable.planet("pluto"), Consumable.planet("mars")]
        run.hand[0] = run.hand[0].with_seal(Seal.PURPLE)
        select(run, 0)
        run.discard_hand()
        assert len(run.consumables) == 2


class TestCounters:
    def test_counters_saturate(self):
        run = started_run()
        run.hands_remaining = 0
        run.use_hand()
        assert run.hands_remaining == 0
        run.discards_remaining = 0
        assert not run.use_discard()
        assert run.discards_remaining == 0

    def test_negative_score_ignored(self):
        run = started_run()
        run.add_score(-50)
        assert run.round_score == 0

    def test_round_lost(self):
        run = started_run()
        run.hands_remaining = 0
        assert run.round_lost()
        run.add_score(300)
        assert run.blind_beaten()
        assert not run.round_lost()

    def test_round_number(self):
        run = RunState.with_seed(1)
        run.ante = 2
        run.blind_type = BlindType.BIG
        assert run.current_blind_index() == 1
        assert run.round_number() == 5


class TestBossBlinds:
    def test_psychic_requires_five_cards(self):
        run = boss_run("the_psychic")
        select(run, 0, 1, 2, 3)
        assert not run.can_play()
        select(run, 4)
        assert run.can_play()

    def test_needle_allows_one_hand(self):
        assert boss_run("the_needle").hands_remaining == 1

    def test_wall_target(self):
        assert boss_run("the_wall").score_target == 1200

    def test_suit_debuff(self):
        run = boss_run("the_club")
        assert all(card.debuffed == (card.suit == Suit.CLUBS) for card in run.hand)

    def test_debuff_applies_to_drawn_cards(self):
        run = boss_run("the_club")
        select(run, 0, 1, 2)
        run.discard_hand()
        assert all(card.debuffed == (card.suit == Suit.CLUBS) for card in run.hand)

    def test_debuffs_cleared_when_cards_leave_hand(self):
        run = boss_run("the_club")
        run.round_score = run.score_target
        run.beat_blind()
        assert not any(card.debuffed for card in run.deck.discard_pile)

    def test_hook_discards_after_play(self):
        run = boss_run("the_hook")
        select(run, 0)
        run.play_hand()
        # 1 played + 2 discarded by The Hook
        assert run.deck.discard_count == 3
        assert len(run.hand) == 8
        assert cards_owned(run) == 52

    def test_hook_only_on_boss(self):
        run = started_run()
        run.boss_blind = BOSS_BLINDS["the_hook"]
        assert run.apply_hook_effect() == []


class TestBlindFlow:
    def test_skip_small_blind(self):
        run = RunState.with_seed(1)
        assert run.skip_blind()
        assert run.blind_type == BlindType.BIG
        assert run.blind_outcomes[0] == BlindOutcome.SKIPPED
        assert run.score_target == 450

    def test_cannot_skip_boss(self):
        run = RunState.with_seed(1)
        run.skip_blind()
        run.skip_blind()
        assert run.blind_type == BlindType.BOSS
        assert not run.skip_blind()

    def test_cannot_skip_while_playing(self):
        run = started_run()
        assert not run.skip_blind()
        assert run.blind_type == BlindType.SMALL

    def test_beat_blind(self):
        run = started_run()
        run.add_score(300)
        breakdown = run.beat_blind()
        # 3 blind + 4 hands + 0 interest on $4
        assert breakdown.total == 7
        assert run.money == 11
        assert run.ante_phase == AntePhase.SHOP
        assert len(run.shop.items) == 2
        assert run.hand == []
        assert run.deck.total == 52
        assert run.blind_outcomes[0] == BlindOutcome.BEATEN
        assert run.blinds_beaten == 1

    def test_interest_uses_money_before_reward(self):
        run = started_run()
        run.money = 20
        assert run.calculate_reward_breakdown().interest == 4
        assert run.calculate_reward() == 3 + 4 + 4

    def test_golden_joker_and_egg_at_round_end(self):
        run = started_run()
        run.jokers = [create_joker("golden_joker"), create_joker("egg")]
        run.add_score(run.score_target)
        breakdown = run.beat_blind()
        assert breakdown.golden_joker_bonus == 4
        assert run.jokers[1].total_sell_value == 5

    def test_leave_shop(self):
        run = started_run()
        run.add_score(run.score_target)
        run.beat_blind()
        assert run.leave_shop()
        assert run.shop is None
        assert run.blind_type == BlindType.BIG
        assert run.ante_phase == AntePhase.BLIND_SELECT
        assert run.score_target == 450

    def test_beat_blind_requires_target_reached(self):
        run = started_run()
        run.add_score(run.score_target - 1)
        assert run.beat_blind() is None
        assert run.money == 4
        assert run.ante_phase == AntePhase.PLAYING
        assert run.shop is None
        assert run.blind_outcomes[0] == BlindOutcome.ACTIVE

    def test_beat_blind_pays_once(self):
        run = started_run()
        run.add_score(run.score_target)
        run.beat_blind()
        money = run.money
        assert run.beat_blind() is None
        assert run.money == money
        assert run.blinds_beaten == 1

    def test_beat_blind_outside_play(self):
        run = RunState.with_seed(1)
        run.round_score = run.score_target
        assert run.beat_blind() is None
        assert run.ante_phase == AntePhase.BLIND_SELECT

    def test_leave_shop_outside_shop(self):
        run = RunState.with_seed(1)
        run.skip_blind()
        run.skip_blind()
        assert not run.skip_blind()
        assert not run.leave_shop()
        assert run.blind_type == BlindType.BOSS
        assert run.ante == 1

    def test_leave_shop_while_playing(self):
        run = started_run()
        assert not run.leave_shop()
        assert run.blind_type == BlindType.SMALL
        assert run.ante_phase == AntePhase.PLAYING

    def test_start_blind_closes_open_shop(self):
        run = started_run()
        run.add_score(run.score_target)
        run.beat_blind()
        run.start_blind()
        assert run.shop is None
        assert run.ante_phase == AntePhase.PLAYING

    def test_full_ante_cycle(self):
        run = RunState.with_seed(3)
        for _ in BlindType:
            run.start_blind()
            run.add_score(run.score_target)
            run.beat_blind()
            run.leave_shop()
        assert run.ante == 2
        assert run.blind_type == BlindType.SMALL
        assert run.blind_outcomes == [BlindOutcome.UPCOMING] * 3
        assert run.score_target == 800

    def test_run_won_after_last_ante(self):
        run = RunState.with_seed(3, RunConfig(max_ante=1))
        assert not run.run_won()
        for _ in BlindType:
            run.start_blind()
            run.add_score(run.score_target)
            run.beat_blind()
            run.leave_shop()
        assert run.run_won()


class TestShopActions:
    @staticmethod
    def shopping_run() -> RunState:
        run = started_run()
        run.add_score(run.score_target)
        run.beat_blind()
        run.shop.items = [
            ShopItem.for_joker(create_joker("joker")),
            ShopItem.for_consumable(Consumable.planet("mercury")),
        ]
        run.money = 10
        return run

    def test_buy_joker(self):
        run = self.shopping_run()
        assert run.buy_shop_item(0)
        assert run.money == 6
        assert [j.id for j in run.jokers] == ["joker"]
        assert len(run.shop.items) == 1

    def test_buy_consumable(self):
        run = self.shopping_run()
        assert run.buy_shop_item(1)
        assert run.consumables == [Consumable.planet("mercury")]

    def test_cannot_afford(self):
        run = self.shopping_run()
        run.money = 3
        assert not run.buy_shop_item(0)
        assert run.money == 3
        assert len(run.shop.items) == 2

    def test_joker_slots_full(self):
        run = self.shopping_run()
        run.jokers = [create_joker("egg") for _ in range(5)]
        assert not run.buy_shop_item(0)

    def test_consumable_slots_full(self):
        run = self.shopping_run()
        run.consumables = [Consumable.planet("pluto"), Consumable.planet("mars")]
        assert not run.buy_shop_item(1)

    def test_bad_index(self):
        run = self.shopping_run()
        assert not run.buy_shop_item(5)
        assert run.money == 10

    def test_sell_joker(self):
        run = self.shopping_run()
        run.jokers = [create_joker("scholar")]
        assert run.sell_joker(0)
        assert run.money == 13
        assert not run.sell_joker(0)

    def test_reroll(self):
        run = self.shopping_run()
        assert run.reroll_shop()
        assert run.money == 5
        assert run.shop.reroll_cost == 6
        assert not run.reroll_shop()

    def test_reroll_without_shop(self):
        assert not started_run().reroll_shop()


class TestConsumables:
    def test_use_planet(self):
        run = started_run()
        run.consumables = [Consumable.planet("mercury")]
        assert run.use_planet(0)
        assert run.hand_levels.get_level(PokerHand.PAIR) == 2
        assert run.consumables == []
        assert run.last_consumable == Consumable.planet("mercury")

    def test_use_planet_rejects_tarot(self):
        run = started_run()
        run.consumables = [Consumable.tarot("the_hermit")]
        assert not run.use_planet(0)
        assert not run.use_planet(3)

    def test_enhancing_tarot(self):
        run = run_with_hand()
        run.consumables = [Consumable.tarot("the_empress")]
        select(run, 0)
        assert run.use_tarot(0)
        assert run.hand[0].enhancement == Enhancement.MULT
        assert run.consumables == []
        assert run.last_consumable == Consumable.tarot("the_empress")

    def test_tarot_needs_right_selection(self):
        run = run_with_hand()
        run.consumables = [Consumable.tarot("the_empress")]
        select(run, 0, 1, 2)
        assert not run.use_tarot(0)
        assert len(run.consumables) == 1
        assert run.hand == cards(HAND)

    def test_death(self):
        run = run_with_hand()
        run.consumables = [Consumable.tarot("death")]
        select(run, 3, 1)
        assert run.use_tarot(0)
        # Left selected card (index 1) becomes the right one (index 3)
        assert run.hand[1] == PlayingCard.from_string("2D")
        assert run.hand[3] == PlayingCard.from_string("2D")

    def test_strength(self):
        run = run_with_hand()
        run.consumables = [Consumable.tarot("strength")]
        select(run, 0)
        run.use_tarot(0)
        assert run.hand[0] == PlayingCard.from_string("AS")

    def test_hermit_doubles_money_up_to_20(self):
        run = started_run()
        run.consumables = [Consumable.tarot("the_hermit"), Consumable.tarot("the_hermit")]
        run.money = 15
        run.use_tarot(0)
        assert run.money == 30
        run.use_tarot(0)
        assert run.money == 50

    def test_temperance(self):
        run = started_run()
        egg = create_joker("egg")
        egg.bonus_sell = 3
        run.jokers = [create_joker("joker"), egg]
        run.consumables = [Consumable.tarot("temperance")]
        run.money = 0
        run.use_tarot(0)
        # 2 + (2 + 3)
        assert run.money == 7

    def test_fool_needs_something_to_copy(self):
        run = started_run()
        run.consumables = [Consumable.tarot("the_fool")]
        assert not run.use_tarot(0)
        assert len(run.consumables) == 1

    def test_fool_copies_last_used(self):
        run = started_run()
        run.consumables = [Consumable.planet("mercury"), Consumable.tarot("the_fool")]
        run.use_planet(0)
        assert run.use_tarot(0)
        assert run.consumables == [Consumable.planet("mercury")]
        assert run.last_consumable == Consumable.planet("mercury")

    def test_high_priestess_creates_planets(self):
        run = started_run()
        run.consumables = [Consumable.tarot("the_high_priestess")]
        run.use_tarot(0)
        assert len(run.consumables) == 2
        assert all(c.is_planet for c in run.consumables)

    def test_emperor_limited_by_free_slots(self):
        run = started_run()
        run.consumables = [Consumable.tarot("the_emperor"), Consumable.planet("mars")]
        run.use_tarot(0)
        assert len(run.consumables) == 2
        assert run.consumables[0] == Consumable.planet("mars")
        assert run.consumables[1].is_tarot

    def test_debuff_survives_enhancement(self):
        run = boss_run("the_club")
        run.hand[0] = PlayingCard.from_string("2C").with_debuff(True)
        run.consumables = [Consumable.tarot("the_chariot")]
        select(run, 0)
        run.use_tarot(0)
        assert run.hand[0].enhancement == Enhancement.STEEL
        assert run.hand[0].debuffed
