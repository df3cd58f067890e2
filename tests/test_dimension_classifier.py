"""Unit tests for safety_vitals.services.dimension_classifier.

Coverage
--------
    1. percentage conversion on the 0-5 scale
    2. tier boundaries (inclusive upper edge of the lower tier)
    3. input order kept inside each tier
    4. every dimension lands in exactly one tier
"""

import pytest

from safety_vitals.services.dimension_classifier import (
    TIER_AT_RISK,
    TIER_CRITICAL,
    TIER_STRONG,
    DimensionTiers,
    classify_dimensions,
    classify_score,
    to_percentage,
)


@pytest.mark.parametrize("score,expected", [(0, 0.0), (2.5, 50.0), (5, 100.0), (4.2, 84.0)])
def test_to_percentage(score, expected):
    assert to_percentage(score) == pytest.approx(expected)


@pytest.mark.parametrize("score,tier", [
    (2.5, TIER_CRITICAL),
    (3.0, TIER_CRITICAL),
    (3.2, TIER_AT_RISK),
    (3.5, TIER_AT_RISK),
    (3.6, TIER_STRONG),
    (5.0, TIER_STRONG),
])
def test_classify_score_boundaries(score, tier):
    assert classify_score(score, 3.0) == tier


def test_classify_dimensions_keeps_input_order():
    scores = {"Training": 2.0, "Leadership": 4.8, "Communication": 1.5, "PPE": 3.4}
    tiers = classify_dimensions(scores, 3.0)

    assert tiers.critical == ["Training", "Communication"]
    assert tiers.at_risk == ["PPE"]
    assert tiers.strong == ["Leadership"]


def test_classify_dimensions_partitions_every_dimension():
    scores = {f"D{i}": i * 0.25 for i in range(21)}
    tiers = classify_dimensions(scores, 2.75)

    placed = tiers.critical + tiers.at_risk + tiers.strong
    assert sorted(placed) == sorted(scores)
    assert len(placed) == len(set(placed))


def test_classify_dimensions_empty():
    tiers = classify_dimensions({}, 3.0)
    assert tiers.to_dict() == {"critical": [], "at_risk": [], "strong": []}


def test_tier_of():
    tiers = DimensionTiers(critical=["A"], at_risk=["B"], strong=["C"])
    assert tiers.tier_of("B") == TIER_AT_RISK
    assert tiers.tier_of("Z") is None
