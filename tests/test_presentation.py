import itertools

import pytest

from idea_validator.services.presentation import (
    DisplayTier,
    RiskLevel,
    composite_risk_tier,
    priority_tier,
    recommendation_tier,
    score_tier,
    severity_tier,
)

LEVELS = ["low", "medium", "high"]
RISK_ORDER = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


@pytest.mark.parametrize(
    "probability, impact, expected",
    [
        ("medium", "high", RiskLevel.HIGH),
        ("low", "low", RiskLevel.LOW),
        ("medium", "medium", RiskLevel.MEDIUM),
        ("low", "medium", RiskLevel.LOW),
        ("low", "high", RiskLevel.LOW),
        ("high", "high", RiskLevel.HIGH),
    ],
)
def test_composite_risk_tier_examples(probability, impact, expected):
    assert composite_risk_tier(probability, impact) == expected


@pytest.mark.parametrize("probability, impact", list(itertools.product(LEVELS, repeat=2)))
def test_composite_risk_tier_is_symmetric(probability, impact):
    assert composite_risk_tier(probability, impact) == composite_risk_tier(impact, probability)


def test_composite_risk_tier_is_monotonic():
    for probability, impact in itertools.product(LEVELS, repeat=2):
        current = RISK_ORDER[composite_risk_tier(probability, impact)]
        for higher in LEVELS[LEVELS.index(probability):]:
            assert RISK_ORDER[composite_risk_tier(higher, impact)] >= current
        for higher in LEVELS[LEVELS.index(impact):]:
            assert RISK_ORDER[composite_risk_tier(probability, higher)] >= current


def test_risk_level_display_tiers():
    assert RiskLevel.HIGH.tier == DisplayTier.CRITICAL
    assert RiskLevel.MEDIUM.tier == DisplayTier.CAUTION
    assert RiskLevel.LOW.tier == DisplayTier.POSITIVE


@pytest.mark.parametrize(
    "score, expected",
    [
        (10, DisplayTier.POSITIVE),
        (8, DisplayTier.POSITIVE),
        (7.99, DisplayTier.CAUTION),
        (6, DisplayTier.CAUTION),
        (4, DisplayTier.ELEVATED),
        (3.99, DisplayTier.CRITICAL),
        (1, DisplayTier.CRITICAL),
    ],
)
def test_score_tier_boundaries(score, expected):
    assert score_tier(score) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("low", DisplayTier.POSITIVE),
        ("medium", DisplayTier.CAUTION),
        ("high", DisplayTier.ELEVATED),
        ("critical", DisplayTier.CRITICAL),
        ("rare", DisplayTier.POSITIVE),
        ("occasional", DisplayTier.CAUTION),
        ("frequent", DisplayTier.ELEVATED),
        ("constant", DisplayTier.CRITICAL),
        ("sometimes", DisplayTier.NEUTRAL),
    ],
)
def test_severity_tier(value, expected):
    assert severity_tier(value) == expected


def test_priority_tier_collapses_feature_and_step_priorities():
    assert priority_tier("must-have") == priority_tier("high") == DisplayTier.CRITICAL
    assert priority_tier("should-have") == priority_tier("medium") == DisplayTier.CAUTION
    assert priority_tier("nice-to-have") == priority_tier("low") == DisplayTier.POSITIVE
    assert priority_tier("urgent") == DisplayTier.NEUTRAL


def test_recommendation_tier():
    assert recommendation_tier("proceed") == DisplayTier.POSITIVE
    assert recommendation_tier("proceed-with-caution") == DisplayTier.CAUTION
    assert recommendation_tier("pivot-needed") == DisplayTier.ELEVATED
    assert recommendation_tier("stop") == DisplayTier.CRITICAL
