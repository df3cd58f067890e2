"""
Shared pytest fixtures for the Safety Vitals test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - org / other_org: Pre-created Organization entities
    - survey: Survey of ``org`` with one likert question per dimension
    - admin: Active AdminUser holding every capability
    - admin_client: test client carrying a signed admin_id cookie

Factory helpers (make_org, make_survey, ...) are plain functions so tests can
build exactly the rows they need.
"""

from datetime import datetime, timedelta, timezone

import pytest

from safety_vitals import create_app
from safety_vitals.models import db as _db
from safety_vitals.models.organization import Organization, Subscription
from safety_vitals.models.survey import Response, Survey, SurveyQuestion
from safety_vitals.models.user import ADMIN_CAPABILITIES, AdminUser, User
from safety_vitals.services.admin_session_service import ADMIN_ID_COOKIE, sign_admin_id
from safety_vitals.utils.crypto import hash_password

ADMIN_PASSWORD = "Admin1234!"


# ── Factory helpers ──────────────────────────────────────────────────────


def make_org(name="Acme Mining", plan=None):
    org = Organization(name=name)
    _db.session.add(org)
    _db.session.flush()
    if plan:
        _db.session.add(Subscription(org_id=org.id, plan=plan, status="active"))
    _db.session.commit()
    return org


def make_survey(org_id, title="Safety Pulse", target_company="Acme Mining",
                created_at=None, survey_id=None, min_acceptable_score=3.0):
    survey = Survey(
        org_id=org_id,
        title=title,
        target_company=target_company,
        min_acceptable_score=min_acceptable_score,
        created_at=created_at or datetime.now(timezone.utc),
    )
    if survey_id:
        survey.id = survey_id
    _db.session.add(survey)
    _db.session.commit()
    return survey


def make_question(survey_id, dimension="1. Leadership", scoring_type="likert",
                  reverse_score=False, min_score=1, max_score=5, order_index=0):
    question = SurveyQuestion(
        survey_id=survey_id,
        question_text=f"How do you rate {dimension}?",
        dimension=dimension,
        scoring_type=scoring_type,
        reverse_score=reverse_score,
        min_score=min_score,
        max_score=max_score,
        order_index=order_index,
    )
    _db.session.add(question)
    _db.session.commit()
    return question


def make_response(question_id, user_id, answer, org_id=None):
    response = Response(question_id=question_id, user_id=user_id, answer=answer, org_id=org_id)
    _db.session.add(response)
    _db.session.commit()
    return response


def make_user(role="Operator", **fields):
    user = User(first_name=fields.pop("first_name", "Test"),
                last_name=fields.pop("last_name", "User"), role=role, **fields)
    _db.session.add(user)
    _db.session.commit()
    return user


def make_admin(email="admin@safetyvitals.test", capabilities=None, is_active=True):
    admin = AdminUser(
        email=email,
        full_name="Platform Admin",
        password_hash=hash_password(ADMIN_PASSWORD),
        capabilities=sorted(ADMIN_CAPABILITIES if capabilities is None else capabilities),
        is_active=is_active,
    )
    _db.session.add(admin)
    _db.session.commit()
    return admin


def login_as(client, admin):
    """Put a signed admin_id cookie for ``admin`` on the test client."""
    client.set_cookie(ADMIN_ID_COOKIE, sign_admin_id(admin.id))
    return client


def days_ago(days):
    return datetime.now(timezone.utc) - timedelta(days=days)


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def org():
    return make_org()


@pytest.fixture()
def other_org():
    return make_org(name="Other Org")


@pytest.fixture()
def survey(org):
    """Survey of ``org`` with one likert question per dimension."""
    s = make_survey(org.id)
    for index, dimension in enumerate(("1. Leadership", "2. Communication", "3. Training")):
        make_question(s.id, dimension=dimension, order_index=index)
    return s


@pytest.fixture()
def admin():
    return make_admin()


@pytest.fixture()
def admin_client(client, admin):
    """Test client with a valid admin session cookie."""
    return login_as(client, admin)
