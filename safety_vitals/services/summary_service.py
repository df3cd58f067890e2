"""
Response summary — cross-references tiered dimensions with their actions.

Pipeline for GET /api/surveys/<id>/summary:
    compute_survey_stats → classify_dimensions → build_response_summary
                                               → build_action_plan

The summary is derived on every call; nothing here is stored.
"""

import logging

from safety_vitals.models import db
from safety_vitals.models.survey import DEFAULT_MIN_ACCEPTABLE_SCORE, Survey
from safety_vitals.services import action_service
from safety_vitals.services.action_plan import build_action_plan
from safety_vitals.services.dimension_classifier import (
    AT_RISK_BAND,
    DimensionTiers,
    classify_dimensions,
    to_percentage,
)
from safety_vitals.services.survey_stats_service import compute_survey_stats

logger = logging.getLogger(__name__)


def _field(action, name):
    return action.get(name) if isinstance(action, dict) else getattr(action, name, None)


def actions_for(actions, dimension: str, tier: str) -> list:
    """Actions recorded against exactly (dimension, tier), in input order."""
    return [
        a for a in actions
        if _field(a, "dimension") == dimension and _field(a, "tier") == tier
    ]


def build_response_summary(
    respondent_count: int,
    avg_score: float,
    min_acceptable_score: float,
    tiers: DimensionTiers,
    actions,
    dimension_scores: dict | None = None,
) -> dict:
    """Assemble the per-tier dimension summary.

    Strong dimensions are listed with an empty action list: actions only
    carry the critical and at_risk tiers.
    """
    dimension_scores = dimension_scores or {}
    actions = list(actions)

    summary_tiers = {}
    for tier, names in tiers.items():
        rows = []
        for name in names:
            matched = actions_for(actions, name, tier)
            score = dimension_scores.get(name)
            rows.append({
                "dimension": name,
                "score": score,
                "percentage": to_percentage(score) if score is not None else None,
                "action_count": len(matched),
                "actions": matched,
            })
        summary_tiers[tier] = rows

    return {
        "respondent_count": respondent_count,
        "avg_score": avg_score,
        "avg_percentage": to_percentage(avg_score),
        "min_acceptable_score": min_acceptable_score,
        "threshold_percentage": to_percentage(min_acceptable_score),
        "at_risk_ceiling_percentage": to_percentage(min_acceptable_score + AT_RISK_BAND),
        "tiers": summary_tiers,
    }


def resolve_threshold(survey_threshold, override=None) -> float:
    """Pick the minimum acceptable score: explicit override, survey value, default."""
    if override is not None:
        return float(override)
    if survey_threshold is not None:
        return float(survey_threshold)
    return DEFAULT_MIN_ACCEPTABLE_SCORE


def build_survey_dashboard(
    survey_id: str,
    threshold: float | None = None,
    org_id: str | None = None,
) -> dict:
    """Full dashboard payload for one survey.

    Raises:
        NotFoundError: Survey unknown or outside ``org_id``.
    """
    stats = compute_survey_stats(survey_id, org_id=org_id)

    survey = db.session.get(Survey, survey_id)
    min_score = resolve_threshold(survey.min_acceptable_score, threshold)

    tiers = classify_dimensions(stats.dimension_scores, min_score)
    actions = action_service.list_actions_by_survey(survey_id, org_id=org_id)

    summary = build_response_summary(
        stats.respondent_count,
        stats.avg_score,
        min_score,
        tiers,
        actions,
        dimension_scores=stats.dimension_scores,
    )
    plan = build_action_plan(actions)

    logger.info(
        "Dashboard built: critical=%d at_risk=%d strong=%d actions=%d",
        len(tiers.critical), len(tiers.at_risk), len(tiers.strong), len(actions),
        extra={"survey_id": survey_id, "org_id": org_id},
    )
    return {
        "survey": survey.to_dict(),
        "stats": stats.to_dict(),
        "classification": tiers.to_dict(),
        "summary": summary,
        "action_plan": plan.to_dict(),
    }
