# idea_validator/services/presentation.py
"""
Maps categorical report fields onto a small set of display tiers.

Pure functions only: no I/O, no state. Unknown values map to NEUTRAL
rather than raising, since rendering should never fail on a label.
"""
from enum import Enum


class DisplayTier(str, Enum):
    POSITIVE = "positive"
    CAUTION = "caution"
    ELEVATED = "elevated"
    CRITICAL = "critical"
    NEUTRAL = "neutral"


class RiskLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def tier(self) -> DisplayTier:
        return _RISK_LEVEL_TIERS[self]


_RISK_LEVEL_TIERS = {
    RiskLevel.HIGH: DisplayTier.CRITICAL,
    RiskLevel.MEDIUM: DisplayTier.CAUTION,
    RiskLevel.LOW: DisplayTier.POSITIVE,
}

_SEVERITY_TIERS = {
    # severity / complexity
    "low": DisplayTier.POSITIVE,
    "medium": DisplayTier.CAUTION,
    "high": DisplayTier.ELEVATED,
    "critical": DisplayTier.CRITICAL,
    # frequency
    "rare": DisplayTier.POSITIVE,
    "occasional": DisplayTier.CAUTION,
    "frequent": DisplayTier.ELEVATED,
    "constant": DisplayTier.CRITICAL,
}

_PRIORITY_TIERS = {
    "must-have": DisplayTier.CRITICAL,
    "high": DisplayTier.CRITICAL,
    "should-have": DisplayTier.CAUTION,
    "medium": DisplayTier.CAUTION,
    "nice-to-have": DisplayTier.POSITIVE,
    "low": DisplayTier.POSITIVE,
}

_RECOMMENDATION_TIERS = {
    "proceed": DisplayTier.POSITIVE,
    "proceed-with-caution": DisplayTier.CAUTION,
    "pivot-needed": DisplayTier.ELEVATED,
    "stop": DisplayTier.CRITICAL,
}

_RISK_WEIGHTS = {"low": 1, "medium": 2, "high": 3}


def severity_tier(value: str) -> DisplayTier:
    """Severity, frequency or complexity label to tier, one-to-one."""
    return _SEVERITY_TIERS.get(value, DisplayTier.NEUTRAL)


def priority_tier(value: str) -> DisplayTier:
    """Feature priority and next-step priority share the same three tiers."""
    return _PRIORITY_TIERS.get(value, DisplayTier.NEUTRAL)


def recommendation_tier(value: str) -> DisplayTier:
    return _RECOMMENDATION_TIERS.get(value, DisplayTier.NEUTRAL)


def composite_risk_tier(probability: str, impact: str) -> RiskLevel:
    """
    Combines probability and impact into one risk level.

    Each axis weighs low=1, medium=2, high=3 (anything else counts as 1).
    A product of at least 6 is High, at least 4 is Medium, otherwise Low.
    """
    total = _RISK_WEIGHTS.get(probability, 1) * _RISK_WEIGHTS.get(impact, 1)
    if total >= 6:
        return RiskLevel.HIGH
    if total >= 4:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def score_tier(score: float) -> DisplayTier:
    """Viability score to tier; each threshold is inclusive."""
    if score >= 8:
        return DisplayTier.POSITIVE
    if score >= 6:
        return DisplayTier.CAUTION
    if score >= 4:
        return DisplayTier.ELEVATED
    return DisplayTier.CRITICAL
