#!/usr/bin/env python3
"""
Safety Vitals — Demo Seed.

Creates one demo organization with a paid subscription, the shared default
survey, a follow-up survey for the same company (so the dashboard shows a
trend), five respondents with answers, a few remediation actions and a
platform admin.

Usage:
    python scripts/seed_demo_data.py
    python scripts/seed_demo_data.py --admin-email admin@example.com --admin-password secret
"""

import argparse
import random
import sys
from datetime import date, datetime, timedelta, timezone

sys.path.insert(0, ".")

from safety_vitals import create_app
from safety_vitals.models import db
from safety_vitals.models.action import Action
from safety_vitals.models.organization import Membership, Organization, PlanLimit, Subscription
from safety_vitals.models.survey import (
    DEFAULT_SURVEY_ID,
    Dimension,
    Response,
    Survey,
    SurveyQuestion,
)
from safety_vitals.models.user import AdminUser, User
from safety_vitals.services.admin_session_service import create_admin

_now = datetime.now(timezone.utc)

DIMENSIONS = [
    ("LEAD", "1. Leadership"),
    ("COMM", "2. Communication"),
    ("PPE", "3. Protective Equipment"),
    ("REPORT", "4. Incident Reporting"),
]

QUESTIONS = [
    ("Leaders model safe behaviour on site.", "1. Leadership", "likert", False),
    ("Supervisors cut corners when behind schedule.", "1. Leadership", "likert", True),
    ("Hazards are communicated before each shift.", "2. Communication", "likert", False),
    ("I know who to ask about a safety concern.", "2. Communication", "binary", False),
    ("Protective equipment is available when I need it.", "3. Protective Equipment", "likert", False),
    ("Near misses are reported without fear of blame.", "4. Incident Reporting", "likert", False),
]

LIKERT = ["Strongly disagree (1)", "Disagree (2)", "Neutral (3)", "Agree (4)", "Strongly agree (5)"]

ROLES = ["Operator", "Supervisor", "Engineer", "Contractor", "Operator"]

PLAN_LIMITS = {
    "demo": {"max_surveys": 1, "max_responses_per_survey": 25},
    "paid": {"max_surveys": 50, "max_responses_per_survey": 5000,
             "allow_exports": True, "allow_action_plans": True},
}


def seed_dimensions():
    for code, name in DIMENSIONS:
        if db.session.get(Dimension, code) is None:
            db.session.add(Dimension(code=code, dimension_name=name))


def seed_plan_limits():
    for plan, limits in PLAN_LIMITS.items():
        if db.session.get(PlanLimit, plan) is None:
            db.session.add(PlanLimit(plan=plan, **limits))


def seed_organization():
    org = Organization(name="Petrosphere Demo Plant")
    db.session.add(org)
    db.session.flush()
    db.session.add(Subscription(org_id=org.id, plan="paid", status="active"))
    return org


def _add_questions(survey):
    for index, (text, dimension, scoring_type, reverse) in enumerate(QUESTIONS):
        survey.questions.append(SurveyQuestion(
            question_text=text,
            dimension=dimension,
            scoring_type=scoring_type,
            min_score=0 if scoring_type == "binary" else 1,
            max_score=1 if scoring_type == "binary" else 5,
            reverse_score=reverse,
            order_index=index,
        ))


def seed_surveys(org):
    baseline = db.session.get(Survey, DEFAULT_SURVEY_ID)
    if baseline is None:
        baseline = Survey(
            id=DEFAULT_SURVEY_ID,
            title="Safety Vitals",
            target_company=org.name,
            created_at=_now - timedelta(days=180),
        )
        _add_questions(baseline)
        db.session.add(baseline)

    follow_up = Survey(
        org_id=org.id,
        title="Safety Vitals — Q3 pulse",
        target_company=org.name,
        min_acceptable_score=3.0,
        created_at=_now,
    )
    _add_questions(follow_up)
    db.session.add(follow_up)
    db.session.flush()
    return baseline, follow_up


def seed_respondents(org, surveys, rng):
    for index, role in enumerate(ROLES):
        user = User(
            first_name=f"Demo{index + 1}",
            last_name="Respondent",
            email=f"respondent{index + 1}@example.com",
            role=role,
            department="Operations",
            site="North Yard",
        )
        db.session.add(user)
        db.session.flush()
        db.session.add(Membership(org_id=org.id, user_id=user.id, role="member"))

        for survey in surveys:
            for question in survey.questions:
                if question.scoring_type == "binary":
                    answer = rng.choice(["Yes (1)", "No (0)"])
                else:
                    answer = rng.choice(LIKERT)
                db.session.add(Response(
                    user_id=user.id,
                    question_id=question.id,
                    answer=answer,
                    org_id=org.id,
                ))


def seed_actions(org, survey):
    rows = [
        ("1. Leadership", "critical", "Weekly leadership safety walk", "high", "in_progress"),
        ("3. Protective Equipment", "at_risk", "Restock PPE stations per shift", "medium", "todo"),
        ("2. Communication", "at_risk", "Add hazard briefing to shift handover", "low", "done"),
    ]
    for dimension, tier, title, priority, stage in rows:
        db.session.add(Action(
            survey_id=survey.id,
            org_id=org.id,
            dimension=dimension,
            tier=tier,
            title=title,
            priority=priority,
            workflow_stage=stage,
            is_completed=stage == "done",
            target_date=date.today() + timedelta(days=30),
            evidence_urls=[],
            comments=[],
        ))


def main():
    parser = argparse.ArgumentParser(description="Seed Safety Vitals demo data")
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="change-me")
    parser.add_argument("--seed", type=int, default=7, help="Random seed for answers")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        rng = random.Random(args.seed)
        seed_dimensions()
        seed_plan_limits()
        org = seed_organization()
        baseline, follow_up = seed_surveys(org)
        seed_respondents(org, [baseline, follow_up], rng)
        seed_actions(org, follow_up)
        db.session.commit()

        if AdminUser.query.filter_by(email=args.admin_email.lower()).first() is None:
            create_admin(args.admin_email, args.admin_password, "Demo Admin")

        print(f"Seeded organization {org.name} ({org.id})")
        print(f"  surveys: {baseline.id}, {follow_up.id}")
        print(f"  admin:   {args.admin_email}")


if __name__ == "__main__":
    main()
