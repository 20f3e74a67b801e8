import pytest

from destiny.evaluator import HandRank
from destiny.rewards import RewardEntry, Rewards, RewardTable, RewardTier, calculate_reward, tier_for

from .helpers import simple_table


def test_every_hand_rank_has_a_tier():
    assert {tier_for(rank) for rank in HandRank} == set(RewardTier)
    assert tier_for(HandRank.PAIR) == RewardTier.COMMON
    assert tier_for(HandRank.THREE_OF_A_KIND) == RewardTier.UNCOMMON
    assert tier_for(HandRank.FULL_HOUSE) == RewardTier.RARE
    assert tier_for(HandRank.ROYAL_FLUSH) == RewardTier.LEGENDARY


def test_success_scales_linearly_with_margin():
    table = simple_table(margin_cap=50)
    assert calculate_reward(True, HandRank.PAIR, 0, table) == Rewards(xp=10, gold=5)
    assert calculate_reward(True, HandRank.PAIR, 12, table) == Rewards(xp=22, gold=17)


def test_margin_scaling_stops_at_cap():
    table = simple_table(margin_cap=50)
    capped = calculate_reward(True, HandRank.PAIR, 50, table)
    assert calculate_reward(True, HandRank.PAIR, 5_000, table) == capped
    assert capped == Rewards(xp=60, gold=55)


def test_reward_is_monotonic_in_margin():
    table = simple_table(margin_cap=40)
    for rank in HandRank:
        previous = None
        for margin in range(0, 60):
            reward = calculate_reward(True, rank, margin, table)
            if previous is not None:
                assert reward.xp >= previous.xp
                assert reward.gold >= previous.gold
            previous = reward


def test_failure_yields_consolation_without_scaling():
    table = simple_table()
    assert calculate_reward(False, HandRank.HIGH_CARD, -30, table) == Rewards(xp=2)
    assert calculate_reward(False, HandRank.HIGH_CARD, 30, table) == Rewards(xp=2)


def test_missing_entry_pays_nothing():
    table = simple_table()
    assert calculate_reward(False, HandRank.FLUSH, 0, table) == Rewards()
    assert calculate_reward(True, HandRank.FLUSH, 10, RewardTable()) == Rewards()


def test_item_drops_come_from_the_tier_entry():
    table = simple_table()
    assert calculate_reward(True, HandRank.STRAIGHT, 0, table).items == ("rare_pelt",)
    assert calculate_reward(True, HandRank.FOUR_OF_A_KIND, 0, table).items == ("golden_idol",)


def test_reward_entry_validation():
    with pytest.raises(ValueError, match="non-negative"):
        RewardEntry(xp_per_margin=-1)
    with pytest.raises(ValueError, match="margin_cap"):
        RewardTable(margin_cap=-5)
    with pytest.raises(ValueError, match="Invalid reward table key"):
        RewardTable(entries={(True, "COMMON"): RewardEntry()})  # type: ignore[dict-item]


def test_rewards_as_dict():
    assert Rewards(xp=3, gold=4, items=("hide",)).as_dict() == {"xp": 3, "gold": 4, "items": ["hide"]}
