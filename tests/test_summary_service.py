"""Tests for the response summary and the survey dashboard payload."""

import pytest

from safety_vitals.core.exceptions import NotFoundError
from safety_vitals.services import action_service
from safety_vitals.services.dimension_classifier import DimensionTiers
from safety_vitals.services.summary_service import (
    actions_for,
    build_response_summary,
    build_survey_dashboard,
    resolve_threshold,
)

from conftest import make_response


def test_actions_for_matches_dimension_and_tier():
    actions = [
        {"id": 1, "dimension": "A", "tier": "critical"},
        {"id": 2, "dimension": "A", "tier": "at_risk"},
        {"id": 3, "dimension": "B", "tier": "critical"},
        {"id": 4, "dimension": "A", "tier": "critical"},
    ]
    assert [a["id"] for a in actions_for(actions, "A", "critical")] == [1, 4]


def test_build_response_summary():
    tiers = DimensionTiers(critical=["A"], at_risk=["B"], strong=["C"])
    actions = [
        {"id": 1, "dimension": "A", "tier": "critical"},
        {"id": 2, "dimension": "B", "tier": "critical"},
    ]
    summary = build_response_summary(
        12, 3.5, 3.0, tiers, actions, dimension_scores={"A": 2.0, "B": 3.4, "C": 4.5},
    )

    assert summary["respondent_count"] == 12
    assert summary["avg_percentage"] == pytest.approx(70.0)
    assert summary["threshold_percentage"] == pytest.approx(60.0)
    assert summary["at_risk_ceiling_percentage"] == pytest.approx(70.0)

    critical = summary["tiers"]["critical"][0]
    assert critical["dimension"] == "A"
    assert critical["percentage"] == pytest.approx(40.0)
    assert critical["action_count"] == 1
    # action filed under the wrong tier is not counted
    assert summary["tiers"]["at_risk"][0]["action_count"] == 0
    assert summary["tiers"]["strong"][0]["actions"] == []


@pytest.mark.parametrize("survey_value,override,expected", [
    (3.5, None, 3.5),
    (3.5, 2.0, 2.0),
    (None, None, 3.0),
])
def test_resolve_threshold(survey_value, override, expected):
    assert resolve_threshold(survey_value, override) == expected


def test_build_survey_dashboard(survey, org):
    q = {question.dimension: question for question in survey.questions}
    make_response(q["1. Leadership"].id, "u1", "2", org_id=org.id)
    make_response(q["2. Communication"].id, "u1", "3.4", org_id=org.id)
    make_response(q["3. Training"].id, "u1", "Strongly Agree (5)", org_id=org.id)

    action_service.create_action(
        {"survey_id": survey.id, "dimension": "1. Leadership", "tier": "critical",
         "title": "Leadership walk-downs", "priority": "high"},
        org_id=org.id,
    )

    data = build_survey_dashboard(survey.id, org_id=org.id)

    assert data["survey"]["id"] == survey.id
    assert data["classification"] == {
        "critical": ["1. Leadership"],
        "at_risk": ["2. Communication"],
        "strong": ["3. Training"],
    }
    assert data["summary"]["tiers"]["critical"][0]["action_count"] == 1
    assert data["action_plan"]["active_count"] == 1
    assert data["stats"]["respondent_count"] == 1


def test_threshold_override_reclassifies(survey, org):
    q = {question.dimension: question for question in survey.questions}
    make_response(q["3. Training"].id, "u1", "4", org_id=org.id)

    data = build_survey_dashboard(survey.id, threshold=4.0, org_id=org.id)
    assert data["classification"]["critical"] == ["3. Training"]
    assert data["summary"]["min_acceptable_score"] == 4.0


def test_dashboard_hidden_from_other_org(survey, other_org):
    with pytest.raises(NotFoundError):
        build_survey_dashboard(survey.id, org_id=other_org.id)
