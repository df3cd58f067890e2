"""
Dimension classifier — buckets survey dimensions into critical / at-risk / strong.

Scores arrive on the raw 0-5 scale and are compared as percentages
(score / 5 * 100) against the organization's minimum acceptable score:

      pct <= min            → critical
      min < pct <= min+0.5  → at_risk
      pct > min+0.5         → strong

Boundaries are inclusive on the upper edge of the lower bucket, so a
dimension sitting exactly on the threshold is critical.
"""

from dataclasses import dataclass, field
from typing import Mapping

SCALE_MAX = 5
AT_RISK_BAND = 0.5

TIER_CRITICAL = "critical"
TIER_AT_RISK = "at_risk"
TIER_STRONG = "strong"


def to_percentage(score: float) -> float:
    """Convert a 0-5 score to a 0-100 percentage."""
    return (score / SCALE_MAX) * 100


@dataclass
class DimensionTiers:
    critical: list[str] = field(default_factory=list)
    at_risk: list[str] = field(default_factory=list)
    strong: list[str] = field(default_factory=list)

    def tier_of(self, dimension: str) -> str | None:
        for tier, names in self.items():
            if dimension in names:
                return tier
        return None

    def items(self):
        return (
            (TIER_CRITICAL, self.critical),
            (TIER_AT_RISK, self.at_risk),
            (TIER_STRONG, self.strong),
        )

    def to_dict(self) -> dict:
        return {tier: list(names) for tier, names in self.items()}


def classify_score(score: float, threshold: float) -> str:
    """Return the tier name of a single raw score."""
    pct = to_percentage(score)
    if pct <= to_percentage(threshold):
        return TIER_CRITICAL
    if pct <= to_percentage(threshold + AT_RISK_BAND):
        return TIER_AT_RISK
    return TIER_STRONG


def classify_dimensions(scores: Mapping[str, float], threshold: float) -> DimensionTiers:
    """Split ``{dimension: raw score}`` into the three tiers, keeping input order."""
    tiers = DimensionTiers()
    buckets = {
        TIER_CRITICAL: tiers.critical,
        TIER_AT_RISK: tiers.at_risk,
        TIER_STRONG: tiers.strong,
    }
    for name, score in scores.items():
        buckets[classify_score(score, threshold)].append(name)
    return tiers
