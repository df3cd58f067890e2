"""Unit tests for safety_vitals.services.survey_stats_service.

Coverage
--------
    1. answer parsing ("Agree (4)", plain numbers, junk)
    2. reverse-scored likert and binary questions
    3. per-dimension means, overall mean, reliability, respondent count
    4. role breakdown with "Unknown" for respondents without a profile
    5. trend against the previous survey of the same company
    6. organization scoping
"""

import pytest

from safety_vitals.core.exceptions import NotFoundError
from safety_vitals.models.survey import SurveyQuestion
from safety_vitals.services.survey_stats_service import (
    compute_survey_stats,
    dimension_sort_key,
    parse_answer,
    score_answer,
)

from conftest import days_ago, make_question, make_response, make_survey, make_user


def _questions(survey):
    return {q.dimension: q for q in survey.questions}


@pytest.mark.parametrize("raw,expected", [
    ("Agree (4)", 4.0),
    ("Strongly Disagree (1)", 1.0),
    ("3.5", 3.5),
    (" 2 ", 2.0),
    ("3 - Agree", 3.0),
    ("4.5 out of 5", 4.5),
    (".5", 0.5),
    ("Agree", None),
    (4, 4.0),
    ("n/a", None),
    ("", None),
    (None, None),
    ("nan", None),
])
def test_parse_answer(raw, expected):
    assert parse_answer(raw) == expected


def test_reverse_scored_likert():
    q = SurveyQuestion(scoring_type="likert", reverse_score=True, min_score=1, max_score=5)
    assert score_answer(q, "Agree (4)") == 2


def test_binary_maps_to_bounds():
    q = SurveyQuestion(scoring_type="binary", min_score=1, max_score=5)
    assert score_answer(q, "1") == 5.0
    assert score_answer(q, "0") == 1.0


def test_text_answers_without_number_are_skipped():
    q = SurveyQuestion(scoring_type="text", min_score=1, max_score=5)
    assert score_answer(q, "More training please") is None


def test_dimension_sort_key_orders_by_numeric_prefix():
    names = ["10. Culture", "2. Communication", "Unnumbered", "1. Leadership"]
    assert sorted(names, key=dimension_sort_key) == [
        "1. Leadership", "2. Communication", "10. Culture", "Unnumbered",
    ]


def test_compute_survey_stats(survey, org):
    q = _questions(survey)
    operator = make_user(role="Operator")
    answers = {
        operator.id: {"1. Leadership": "Agree (4)", "2. Communication": "2",
                      "3. Training": "Strongly Agree (5)"},
        "anonymous": {"1. Leadership": "2", "2. Communication": "Disagree (1)",
                      "3. Training": "n/a"},
    }
    for user_id, by_dimension in answers.items():
        for dimension, answer in by_dimension.items():
            make_response(q[dimension].id, user_id, answer, org_id=org.id)

    stats = compute_survey_stats(survey.id, org_id=org.id)

    assert stats.respondent_count == 2
    assert list(stats.dimension_scores) == ["1. Leadership", "2. Communication", "3. Training"]
    assert stats.dimension_scores["1. Leadership"] == pytest.approx(3.0)
    assert stats.dimension_scores["2. Communication"] == pytest.approx(1.5)
    assert stats.dimension_scores["3. Training"] == pytest.approx(5.0)
    assert stats.avg_score == pytest.approx(2.8)
    assert stats.reliability == 45
    assert stats.trend == 0.0
    assert stats.role_scores["1. Leadership"] == {"Operator": 4.0, "Unknown": 2.0}


def test_stats_without_responses(survey, org):
    stats = compute_survey_stats(survey.id, org_id=org.id)
    assert stats.respondent_count == 0
    assert stats.avg_score == 0.0
    assert stats.reliability == 0
    assert stats.dimension_scores == {}


def test_trend_against_previous_survey(org):
    previous = make_survey(org.id, title="Q1", created_at=days_ago(90))
    current = make_survey(org.id, title="Q2", created_at=days_ago(1))
    make_survey(org.id, title="Other company", target_company="Globex", created_at=days_ago(30))

    q_prev = make_question(previous.id)
    q_curr = make_question(current.id)
    make_response(q_prev.id, "u1", "2", org_id=org.id)
    make_response(q_curr.id, "u1", "Agree (4)", org_id=org.id)

    stats = compute_survey_stats(current.id, org_id=org.id)
    assert stats.trend == pytest.approx(2.0)


def test_to_dict_lists_dimension_scores(survey, org):
    q = _questions(survey)
    make_response(q["1. Leadership"].id, "u1", "3", org_id=org.id)
    data = compute_survey_stats(survey.id, org_id=org.id).to_dict()
    assert data["dimension_scores"] == [{"name": "1. Leadership", "score": 3.0}]


def test_other_org_cannot_read_stats(survey, other_org):
    with pytest.raises(NotFoundError):
        compute_survey_stats(survey.id, org_id=other_org.id)


def test_responses_of_other_orgs_are_excluded(survey, org, other_org):
    q = _questions(survey)
    make_response(q["1. Leadership"].id, "mine", "4", org_id=org.id)
    make_response(q["1. Leadership"].id, "theirs", "1", org_id=other_org.id)

    assert compute_survey_stats(survey.id, org_id=org.id).avg_score == pytest.approx(4.0)
    assert compute_survey_stats(survey.id).respondent_count == 2
