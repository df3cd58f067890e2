"""
Admin Service — cross-organization reads and organization management.

Provides the queries and mutations behind /api/admin/*. Every function takes
the session to run on explicitly: the blueprint passes the elevated session
(middleware.admin_auth.elevated_session), which is never org-scoped.

Rows are returned as plain dicts in the exact shapes the admin console reads.
"""

import logging

from sqlalchemy import delete, func, select

from safety_vitals.core.exceptions import NotFoundError, ValidationError
from safety_vitals.models.action import Action
from safety_vitals.models.base import utcnow
from safety_vitals.models.organization import (
    LIMIT_DEFAULTS,
    LIMIT_OVERRIDE_FIELDS,
    PLAN_TIERS,
    Membership,
    OrgLimitOverride,
    Organization,
    PlanLimit,
    Subscription,
)
from safety_vitals.models.survey import DEFAULT_SURVEY_ID, Response, Survey, SurveyQuestion
from safety_vitals.models.user import User

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
# Cross-tenant reads
# ═══════════════════════════════════════════════════════════════

def list_organizations(session) -> list[dict]:
    """All organizations as ``{id, name}``, ordered by name."""
    rows = session.execute(
        select(Organization.id, Organization.name).order_by(Organization.name)
    ).all()
    return [{"id": r.id, "name": r.name} for r in rows]


def list_surveys(session) -> list[dict]:
    """All surveys, newest first, each with its organization's name."""
    rows = session.execute(
        select(Survey, Organization.name)
        .outerjoin(Organization, Organization.id == Survey.org_id)
        .order_by(Survey.created_at.desc())
    ).all()
    return [
        {
            "id": survey.id,
            "title": survey.title,
            "target_company": survey.target_company,
            "org_id": survey.org_id,
            "organizations": {"name": org_name} if org_name is not None else None,
        }
        for survey, org_name in rows
    ]


def list_respondents(session, org_id: str | None = None) -> list[dict]:
    """One ``{user_id, org_id}`` row per response, optionally for one org."""
    stmt = select(Response.user_id, Response.org_id)
    if org_id is not None:
        stmt = stmt.where(Response.org_id == org_id)
    return [{"user_id": r.user_id, "org_id": r.org_id} for r in session.execute(stmt)]


def list_responses(session, question_ids: list[str], org_id: str | None = None) -> list[dict]:
    """Responses to the given questions.

    Raises:
        ValidationError: ``question_ids`` is empty.
    """
    if not question_ids:
        raise ValidationError("Question IDs are required")
    stmt = select(Response).where(Response.question_id.in_(question_ids))
    if org_id is not None:
        stmt = stmt.where(Response.org_id == org_id)
    return [r.to_dict() for r in session.execute(stmt).scalars()]


def list_users(session, user_ids: list[str]) -> list[dict]:
    """Respondent profiles for ``user_ids``; no query at all for an empty list."""
    if not user_ids:
        return []
    stmt = select(User).where(User.id.in_(user_ids))
    return [u.to_dict() for u in session.execute(stmt).scalars()]


def organization_stats(session) -> list[dict]:
    """Per-organization plan, membership / survey / unique respondent counts."""
    memberships = dict(session.execute(
        select(Membership.org_id, func.count()).group_by(Membership.org_id)
    ).all())
    surveys = dict(session.execute(
        select(Survey.org_id, func.count()).group_by(Survey.org_id)
    ).all())
    respondents = dict(session.execute(
        select(Response.org_id, func.count(func.distinct(Response.user_id)))
        .group_by(Response.org_id)
    ).all())

    rows = session.execute(
        select(Organization, Subscription.plan, Subscription.status)
        .outerjoin(Subscription, Subscription.org_id == Organization.id)
        .order_by(Organization.name)
    ).all()

    stats = []
    for org, plan, status in rows:
        item = org.to_dict()
        item.update({
            "plan": plan or "none",
            "sub_status": status or "inactive",
            "memberships_count": memberships.get(org.id, 0),
            "surveys_count": surveys.get(org.id, 0),
            "respondents_count": respondents.get(org.id, 0),
        })
        stats.append(item)
    return stats


# ═══════════════════════════════════════════════════════════════
# Organization management
# ═══════════════════════════════════════════════════════════════

def _get_org(session, org_id: str) -> Organization:
    org = session.get(Organization, org_id)
    if org is None:
        raise NotFoundError(resource="Organization", resource_id=org_id)
    return org


def effective_limits(session, org_id: str, *, is_admin: bool = False) -> dict:
    """Resolve an organization's limits: override, then plan, then default.

    The plan is the organization's subscription plan (``demo`` without one);
    platform admins always get ``paid``.

    Returns:
        ``{"plan": str, "limits": {field: value}}``
    """
    org = _get_org(session, org_id)
    if is_admin:
        plan = "paid"
    else:
        plan = org.subscription.plan if org.subscription else "demo"
    plan_row = session.get(PlanLimit, plan)
    override = org.limit_override

    limits = {}
    for field, default in LIMIT_DEFAULTS.items():
        value = getattr(override, field) if override is not None else None
        if value is None and plan_row is not None:
            value = getattr(plan_row, field)
        limits[field] = default if value is None else value
    return {"plan": plan, "limits": limits}


def get_organization(session, org_id: str) -> dict:
    """``{organization, subscription, overrides, plan, limits}`` for one organization."""
    org = _get_org(session, org_id)
    resolved = effective_limits(session, org_id)
    return {
        "organization": org.to_dict(),
        "subscription": org.subscription.to_dict() if org.subscription else None,
        "overrides": org.limit_override.to_dict() if org.limit_override else {},
        "plan": resolved["plan"],
        "limits": resolved["limits"],
    }


def _clean_overrides(overrides) -> dict:
    if not isinstance(overrides, dict):
        raise ValidationError("overrides must be an object")
    unknown = sorted(set(overrides) - set(LIMIT_OVERRIDE_FIELDS) - {"org_id", "updated_at"})
    if unknown:
        raise ValidationError(
            "Unknown override fields", details={f: "unknown field" for f in unknown}
        )
    cleaned = {}
    errors = {}
    for name in LIMIT_OVERRIDE_FIELDS:
        if name not in overrides:
            continue
        value = overrides[name]
        if name.startswith("allow_"):
            if value is not None and not isinstance(value, bool):
                errors[name] = "must be a boolean or null"
                continue
        elif value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            errors[name] = "must be a non-negative integer or null"
            continue
        cleaned[name] = value
    if errors:
        raise ValidationError("Invalid override values", details=errors)
    return cleaned


def update_organization(session, org_id: str, data: dict) -> None:
    """Rename, change plan (subscription upsert) and upsert limit overrides."""
    org = _get_org(session, org_id)

    name = data.get("name")
    if name:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name must be a non-empty string")
        org.name = name.strip()

    plan = data.get("plan")
    if plan:
        if plan not in PLAN_TIERS:
            raise ValidationError(f"plan must be one of {sorted(PLAN_TIERS)}")
        if org.subscription is None:
            org.subscription = Subscription(org_id=org.id, plan=plan)
        else:
            org.subscription.plan = plan
        org.subscription.updated_at = utcnow()

    overrides = data.get("overrides")
    if overrides:
        cleaned = _clean_overrides(overrides)
        if org.limit_override is None:
            org.limit_override = OrgLimitOverride(org_id=org.id)
        for field, value in cleaned.items():
            setattr(org.limit_override, field, value)
        org.limit_override.updated_at = utcnow()

    session.commit()
    logger.info("Organization updated: id=%s fields=%s", org_id,
                sorted(k for k in ("name", "plan", "overrides") if data.get(k)))


def delete_organization(session, org_id: str) -> None:
    """Delete an organization and everything it owns, in one transaction.

    The system default survey is kept and detached (org_id → NULL) instead.
    """
    org = _get_org(session, org_id)
    logger.info("Initiating cascading delete for organization %s", org_id)

    session.execute(delete(Action).where(Action.org_id == org_id))
    session.execute(delete(Response).where(Response.org_id == org_id))

    survey_ids = session.execute(
        select(Survey.id).where(Survey.org_id == org_id, Survey.id != DEFAULT_SURVEY_ID)
    ).scalars().all()
    if survey_ids:
        session.execute(delete(Action).where(Action.survey_id.in_(survey_ids)))
        question_ids = select(SurveyQuestion.id).where(SurveyQuestion.survey_id.in_(survey_ids))
        session.execute(delete(Response).where(Response.question_id.in_(question_ids)))
        session.execute(delete(SurveyQuestion).where(SurveyQuestion.survey_id.in_(survey_ids)))
        session.execute(delete(Survey).where(Survey.id.in_(survey_ids)))

    default_survey = session.get(Survey, DEFAULT_SURVEY_ID)
    if default_survey is not None and default_survey.org_id == org_id:
        default_survey.org_id = None

    session.execute(delete(Membership).where(Membership.org_id == org_id))
    session.execute(delete(Subscription).where(Subscription.org_id == org_id))
    session.execute(delete(OrgLimitOverride).where(OrgLimitOverride.org_id == org_id))
    session.delete(org)
    session.commit()

    logger.info("Deleted organization %s (%d surveys)", org_id, len(survey_ids))
