import pytest

from intervium.services.catalog import Tier
from intervium.services.recommendation import FIRST_ATTEMPT_MESSAGE, policy, tier_for_average

TIER_ORDER = [Tier.EASY, Tier.MEDIUM, Tier.HARD, Tier.EXTREME]


def test_empty_history_is_first_attempt():
    decision = policy([])

    assert decision.tier == Tier.EASY
    assert decision.message == FIRST_ATTEMPT_MESSAGE
    assert decision.average is None
    assert decision.rounded_average is None


def test_scores_without_value_count_as_first_attempt():
    decision = policy([{"overallScore": None}, {"overallScore": None}])

    assert decision.tier == Tier.EASY
    assert decision.message == FIRST_ATTEMPT_MESSAGE


@pytest.mark.parametrize(
    "average, expected",
    [
        (100, Tier.EXTREME),
        (80, Tier.EXTREME),
        (79.99, Tier.HARD),
        (65, Tier.HARD),
        (64.5, Tier.MEDIUM),
        (50, Tier.MEDIUM),
        (49.99, Tier.EASY),
        (0, Tier.EASY),
    ],
)
def test_threshold_boundaries(average, expected):
    assert tier_for_average(average) == expected
    assert policy([average]).tier == expected


def test_high_scores_recommend_extreme():
    decision = policy([90, 85, 95])

    assert decision.tier == Tier.EXTREME
    assert decision.rounded_average == 90
    assert "90" in decision.message
    assert "extreme" in decision.message


def test_low_scores_round_half_up():
    decision = policy([{"overallScore": 40}, {"overallScore": 45}])

    assert decision.tier == Tier.EASY
    assert decision.average == 42.5
    assert decision.rounded_average == 43
    assert "43" in decision.message


def test_mean_is_unweighted():
    assert policy([100, 0, 50]).average == 50
    assert policy([100, 0, 50]).tier == Tier.MEDIUM


def test_tier_is_monotonic_in_average():
    previous = Tier.EASY
    for tenth in range(0, 1001):
        tier = policy([tenth / 10]).tier
        assert TIER_ORDER.index(tier) >= TIER_ORDER.index(previous)
        previous = tier


def test_policy_is_deterministic():
    scores = [55, 72, 68]
    assert policy(scores) == policy(list(scores))
