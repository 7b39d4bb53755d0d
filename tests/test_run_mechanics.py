"""Tests for blinds, boss blinds, ante scaling and rewards."""

import pytest

from balatro_engine.jokers import create_joker
from balatro_engine.models import Suit
from balatro_engine.run_mechanics import (
    BIG_BLIND,
    BOSS_BLINDS,
    DEFAULT_RUN_CONFIG,
    SMALL_BLIND,
    BlindType,
    BossEffect,
    RunConfig,
    ante_base_chips,
    blind_name,
    blind_reward,
    calculate_blind_chips,
    calculate_interest,
    calculate_reward_breakdown,
    get_all_boss_blind_ids,
)


class TestBlinds:
    """Test blind definitions."""

    def test_small_blind(self):
        assert SMALL_BLIND.chip_multiplier == 1.0
        assert SMALL_BLIND.reward == 3

    def test_big_blind(self):
        assert BIG_BLIND.chip_multiplier == 1.5
        assert BIG_BLIND.reward == 4

    def test_blind_index(self):
        assert [b.index for b in BlindType] == [0, 1, 2]

    def test_blind_names(self):
        assert blind_name(BlindType.SMALL) == "Small Blind"
        assert blind_name(BlindType.BOSS, BOSS_BLINDS["the_wall"]) == "The Wall"


class TestBossBlinds:
    """Test the boss blind catalogue."""

    def test_boss_blind_count(self):
        assert len(BOSS_BLINDS) == 8
        assert get_all_boss_blind_ids()[0] == "the_hook"

    def test_only_the_wall_is_larger(self):
        multipliers = {boss.id: boss.chip_multiplier for boss in BOSS_BLINDS.values()}
        assert multipliers.pop("the_wall") == 4.0
        assert set(multipliers.values()) == {2.0}

    def test_suit_debuff_bosses(self):
        debuffs = {
            boss.debuffed_suit
            for boss in BOSS_BLINDS.values()
            if boss.effect_type == BossEffect.DEBUFF_SUIT
        }
        assert debuffs == set(Suit)

    def test_each_boss_overrides_one_rule(self):
        for boss in BOSS_BLINDS.values():
            assert (boss.debuffed_suit is not None) == (boss.effect_type == BossEffect.DEBUFF_SUIT)


class TestAnteProgression:
    """Test chip requirements."""

    def test_base_ante_chips(self):
        assert ante_base_chips(1) == 300
        assert ante_base_chips(4) == 5000
        assert ante_base_chips(8) == 50000

    def test_endless_scaling(self):
        assert ante_base_chips(9) == 75000
        assert ante_base_chips(10) == 100000

    def test_ante_below_one_uses_first_ante(self):
        assert ante_base_chips(0) == 300

    def test_small_and_big_blind_chips(self):
        assert calculate_blind_chips(1, BlindType.SMALL) == 300
        assert calculate_blind_chips(1, BlindType.BIG) == 450
        assert calculate_blind_chips(2, BlindType.BIG) == 1200

    def test_boss_blind_chips(self):
        assert calculate_blind_chips(1, BlindType.BOSS, BOSS_BLINDS["the_hook"]) == 600
        assert calculate_blind_chips(1, BlindType.BOSS, BOSS_BLINDS["the_wall"]) == 1200

    def test_chip_requirements_increase(self):
        targets = [calculate_blind_chips(ante, BlindType.SMALL) for ante in range(1, 12)]
        assert targets == sorted(targets)


class TestRewards:
    """Test money earned for beating blinds."""

    def test_blind_rewards(self):
        assert blind_reward(BlindType.SMALL) == 3
        assert blind_reward(BlindType.BIG) == 4
        assert blind_reward(BlindType.BOSS) == 5

    @pytest.mark.parametrize(
        "money,interest",
        [(-3, 0), (0, 0), (4, 0), (5, 1), (19, 3), (25, 5), (100, 5)],
    )
    def test_interest(self, money, interest):
        assert calculate_interest(money) == interest

    def test_interest_follows_config(self):
        config = RunConfig(interest_step=2, interest_cap=10)
        assert calculate_interest(9, config) == 4

    def test_reward_breakdown(self):
        breakdown = calculate_reward_breakdown(
            BlindType.SMALL, hands_remaining=2, money=12, jokers=[create_joker("golden_joker")]
        )
        # 3 blind + 2 hands + 2 interest + 4 Golden Joker
        assert breakdown.blind_reward == 3
        assert breakdown.hands_bonus == 2
        assert breakdown.interest == 2
        assert breakdown.golden_joker_bonus == 4
        assert breakdown.total == 11

    def test_reward_without_jokers(self):
        breakdown = calculate_reward_breakdown(BlindType.BOSS, 0, 0, [], DEFAULT_RUN_CONFIG)
        assert breakdown.total == 5
