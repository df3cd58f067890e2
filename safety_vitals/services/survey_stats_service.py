"""
Survey statistics — per-dimension scores and headline KPIs for one survey.

Scoring rules per answer:
    "Agree (4)"      → 4   (trailing "(N)" wins)
    "3.5"            → 3.5
    anything else    → skipped
    likert + reverse_score → max_score + 1 - score
    binary           → max_score if score else min_score

Derived figures:
    dimension_scores  mean score per dimension, ordered by numeric prefix
                      ("3. Leadership") then name
    avg_score         mean of every scored answer
    reliability       round(mean((score - min) / (max - min)) * 100)
    trend             avg_score minus the previous survey's avg_score for the
                      same target_company (0.0 when there is none)
    role_scores       {dimension: {respondent role: mean}}, "Unknown" role
                      when the respondent has no profile
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy import select

from safety_vitals.core.exceptions import NotFoundError
from safety_vitals.models import db
from safety_vitals.models.survey import Response, Survey, SurveyQuestion
from safety_vitals.models.user import User

logger = logging.getLogger(__name__)

_TRAILING_SCORE = re.compile(r"\((\d+)\)$")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_DIMENSION_PREFIX = re.compile(r"^(\d+)\.")

UNKNOWN = "Unknown"


@dataclass
class SurveyStats:
    survey_id: str
    respondent_count: int = 0
    avg_score: float = 0.0
    reliability: int = 0
    trend: float = 0.0
    dimension_scores: dict[str, float] = field(default_factory=dict)
    role_scores: dict[str, dict[str, float]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "survey_id": self.survey_id,
            "respondent_count": self.respondent_count,
            "avg_score": self.avg_score,
            "reliability": self.reliability,
            "trend": self.trend,
            "dimension_scores": [
                {"name": name, "score": score} for name, score in self.dimension_scores.items()
            ],
            "role_scores": self.role_scores,
        }


def parse_answer(answer) -> float | None:
    """Numeric value of a stored answer, or None when it has none."""
    if isinstance(answer, bool):
        return float(answer)
    if isinstance(answer, (int, float)):
        return float(answer)
    if not isinstance(answer, str):
        return None
    text = answer.strip()
    match = _TRAILING_SCORE.search(text)
    if match:
        return float(match.group(1))
    # "3 - Agree" scores 3: only the leading number counts
    match = _LEADING_NUMBER.match(text)
    return float(match.group(0)) if match else None


def score_bounds(question: SurveyQuestion) -> tuple[int, int]:
    min_score = question.min_score if question.min_score is not None else 1
    max_score = question.max_score if question.max_score is not None else 5
    return min_score, max_score


def score_answer(question: SurveyQuestion, answer) -> float | None:
    score = parse_answer(answer)
    if score is None:
        return None
    min_score, max_score = score_bounds(question)
    if question.scoring_type == "likert" and question.reverse_score:
        return max_score + 1 - score
    if question.scoring_type == "binary":
        return float(max_score if score else min_score)
    return score


def dimension_sort_key(name: str):
    match = _DIMENSION_PREFIX.match(name)
    return (int(match.group(1)) if match else float("inf"), name)


def _mean(values) -> float:
    return sum(values) / len(values) if values else 0.0


def _scored_rows(survey_id: str, org_id: str | None):
    """Yield (question, response, role) for every response to the survey."""
    stmt = (
        select(SurveyQuestion, Response, User.role)
        .join(Response, Response.question_id == SurveyQuestion.id)
        .outerjoin(User, User.id == Response.user_id)
        .where(SurveyQuestion.survey_id == survey_id)
    )
    if org_id is not None:
        stmt = stmt.where(Response.org_id == org_id)
    return db.session.execute(stmt).all()


def _average_for(survey_id: str, org_id: str | None) -> float:
    scores = []
    for question, response, _role in _scored_rows(survey_id, org_id):
        score = score_answer(question, response.answer)
        if score is not None:
            scores.append(score)
    return _mean(scores)


def _previous_survey(survey: Survey) -> Survey | None:
    if not survey.target_company or survey.created_at is None:
        return None
    stmt = (
        select(Survey)
        .where(
            Survey.target_company == survey.target_company,
            Survey.id != survey.id,
            Survey.created_at < survey.created_at,
        )
        .order_by(Survey.created_at.desc())
        .limit(1)
    )
    return db.session.execute(stmt).scalar_one_or_none()


def compute_survey_stats(survey_id: str, org_id: str | None = None) -> SurveyStats:
    """Aggregate every response of a survey.

    Raises:
        NotFoundError: Survey unknown, or outside ``org_id`` when one is given.
    """
    survey = db.session.get(Survey, survey_id)
    if survey is None or (org_id is not None and survey.org_id not in (org_id, None)):
        raise NotFoundError(resource="Survey", resource_id=survey_id, org_id=org_id)

    respondents: set[str] = set()
    by_dimension: dict[str, list[float]] = defaultdict(list)
    by_role: dict[str, dict[str, list[float]]] = defaultdict(lambda: defaultdict(list))
    normalised: list[float] = []

    for question, response, role in _scored_rows(survey_id, org_id):
        respondents.add(response.user_id)
        score = score_answer(question, response.answer)
        if score is None:
            continue
        dimension = question.dimension or UNKNOWN
        by_dimension[dimension].append(score)
        by_role[dimension][role or UNKNOWN].append(score)

        low, high = score_bounds(question)
        if high != low:
            normalised.append((score - low) / (high - low))

    stats = SurveyStats(survey_id=survey_id, respondent_count=len(respondents))
    stats.dimension_scores = {
        name: _mean(by_dimension[name]) for name in sorted(by_dimension, key=dimension_sort_key)
    }
    stats.avg_score = _mean([s for scores in by_dimension.values() for s in scores])
    stats.reliability = round(_mean(normalised) * 100) if normalised else 0
    stats.role_scores = {
        name: {role: _mean(scores) for role, scores in by_role[name].items()}
        for name in sorted(by_role, key=dimension_sort_key)
    }

    previous = _previous_survey(survey)
    if previous is not None:
        stats.trend = stats.avg_score - _average_for(previous.id, org_id)

    logger.debug(
        "Survey stats computed: respondents=%d dimensions=%d",
        stats.respondent_count, len(stats.dimension_scores),
        extra={"survey_id": survey_id, "org_id": org_id},
    )
    return stats
