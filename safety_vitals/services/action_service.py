"""
Action Service — remediation actions attached to survey dimensions.

Business context:
    When a dimension lands in the critical or at-risk tier, the organization
    records remediation actions against (survey, dimension, tier). Each action
    carries a comment thread (newest first) and a list of evidence URLs.

    Invariant: is_completed is True exactly when workflow_stage == "done".
    Whichever of the two an update supplies drives the other; when both are
    supplied the stage wins.

Security:
    Every function takes an optional org_id. When given, actions owned by
    other organizations behave exactly like missing ones (NotFoundError).

Concurrency:
    Plain updates are last-write-wins. append_comment / append_evidence lock
    the row (SELECT ... FOR UPDATE) so concurrent appends never drop entries.
"""

import logging

from sqlalchemy import select

from safety_vitals.core.exceptions import NotFoundError, ValidationError
from safety_vitals.models import db
from safety_vitals.models.action import (
    ACTION_TIERS,
    PRIORITY_LEVELS,
    WORKFLOW_STAGES,
    Action,
    ActionComment,
)
from safety_vitals.models.base import utcnow
from safety_vitals.models.survey import Survey
from safety_vitals.utils.helpers import parse_date_input

logger = logging.getLogger(__name__)

# Fields a caller may set on create / update (id, timestamps and scope are ours)
EDITABLE_FIELDS = (
    "dimension",
    "tier",
    "title",
    "description",
    "priority",
    "assigned_to",
    "target_date",
    "is_completed",
    "workflow_stage",
    "evidence_urls",
    "comments",
    "created_by",
)

_REQUIRED_TEXT = ("dimension", "title")
_OPTIONAL_TEXT = ("description", "assigned_to", "created_by")


# ── Validation ────────────────────────────────────────────────────────────────


def _clean_fields(data: dict, *, partial: bool) -> dict:
    """Validate and normalise editable fields; raises ValidationError."""
    data = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
    errors: dict[str, str] = {}
    cleaned: dict = {}

    for name in _REQUIRED_TEXT:
        if name not in data:
            if not partial:
                errors[name] = "required"
            continue
        value = data[name]
        if not isinstance(value, str) or not value.strip():
            errors[name] = "must be a non-empty string"
        else:
            cleaned[name] = value.strip()

    if "tier" in data or not partial:
        tier = data.get("tier")
        if tier not in ACTION_TIERS:
            errors["tier"] = f"must be one of {sorted(ACTION_TIERS)}"
        else:
            cleaned["tier"] = tier

    if "priority" in data:
        priority = data["priority"] or "medium"
        if priority not in PRIORITY_LEVELS:
            errors["priority"] = f"must be one of {sorted(PRIORITY_LEVELS)}"
        else:
            cleaned["priority"] = priority

    if "workflow_stage" in data:
        stage = data["workflow_stage"]
        if stage is not None and stage not in WORKFLOW_STAGES:
            errors["workflow_stage"] = f"must be one of {sorted(WORKFLOW_STAGES)}"
        else:
            cleaned["workflow_stage"] = stage

    if "is_completed" in data:
        if not isinstance(data["is_completed"], bool):
            errors["is_completed"] = "must be a boolean"
        else:
            cleaned["is_completed"] = data["is_completed"]

    for name in _OPTIONAL_TEXT:
        if name in data:
            value = data[name]
            if value is not None and not isinstance(value, str):
                errors[name] = "must be a string"
            else:
                cleaned[name] = value

    if "target_date" in data:
        try:
            cleaned["target_date"] = parse_date_input(data["target_date"])
        except ValueError as exc:
            errors["target_date"] = str(exc)

    if "evidence_urls" in data:
        urls = data["evidence_urls"]
        if urls is None:
            cleaned["evidence_urls"] = []
        elif not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
            errors["evidence_urls"] = "must be a list of strings"
        else:
            cleaned["evidence_urls"] = list(urls)

    if "comments" in data:
        comments = data["comments"]
        if comments is None:
            cleaned["comments"] = []
        elif not isinstance(comments, list) or not all(isinstance(c, dict) for c in comments):
            errors["comments"] = "must be a list of comment objects"
        else:
            cleaned["comments"] = [ActionComment.from_dict(c).to_dict() for c in comments]

    if errors:
        raise ValidationError("Invalid action fields", details=errors)
    return cleaned


def _sync_completion(action: Action, supplied: dict) -> None:
    """Keep is_completed and workflow_stage consistent after an edit."""
    if "workflow_stage" in supplied:
        action.is_completed = action.workflow_stage == "done"
    elif "is_completed" in supplied:
        if action.is_completed:
            action.workflow_stage = "done"
        elif action.workflow_stage == "done":
            action.workflow_stage = "todo"


# ── Lookups ───────────────────────────────────────────────────────────────────


def _scoped_action(action_id: str, org_id: str | None, *, lock: bool = False) -> Action:
    stmt = select(Action).where(Action.id == action_id)
    if org_id is not None:
        stmt = stmt.where(Action.org_id == org_id)
    if lock:
        stmt = stmt.with_for_update()
    action = db.session.execute(stmt).scalar_one_or_none()
    if action is None:
        raise NotFoundError(resource="Action", resource_id=action_id, org_id=org_id)
    return action


def require_survey(survey_id: str, org_id: str | None = None) -> Survey:
    """Return the survey, or raise NotFoundError when the org may not see it.

    Surveys without an organization (the shared default survey) are visible
    to every organization.
    """
    survey = db.session.get(Survey, survey_id)
    if survey is None or (org_id is not None and survey.org_id not in (org_id, None)):
        raise NotFoundError(resource="Survey", resource_id=survey_id, org_id=org_id)
    return survey


# ── Public service functions ──────────────────────────────────────────────────


def create_action(data: dict, org_id: str | None = None) -> dict:
    """Persist a new action and return it.

    Args:
        data: survey_id plus the EDITABLE_FIELDS; dimension, tier and title
              are required.
        org_id: Caller's organization. Defaults the action's org to the
                survey's org when None.

    Raises:
        ValidationError: Missing / malformed fields.
        NotFoundError: Survey unknown or outside the caller's organization.
    """
    survey_id = data.get("survey_id")
    if not survey_id or not isinstance(survey_id, str):
        raise ValidationError("survey_id is required", details={"survey_id": "required"})
    survey = require_survey(survey_id, org_id)

    fields = _clean_fields(data, partial=False)
    now = utcnow()
    action = Action(
        survey_id=survey.id,
        org_id=org_id or survey.org_id,
        priority="medium",
        is_completed=False,
        evidence_urls=[],
        comments=[],
        created_at=now,
        updated_at=now,
    )
    for name, value in fields.items():
        setattr(action, name, value)
    _sync_completion(action, fields)

    db.session.add(action)
    db.session.commit()

    logger.info(
        "Action created",
        extra={"org_id": action.org_id, "survey_id": action.survey_id},
    )
    return action.to_dict()


def get_action(action_id: str, org_id: str | None = None) -> dict:
    return _scoped_action(action_id, org_id).to_dict()


def list_actions_by_survey(survey_id: str, org_id: str | None = None) -> list[dict]:
    """All actions of a survey, oldest first."""
    stmt = select(Action).where(Action.survey_id == survey_id)
    if org_id is not None:
        stmt = stmt.where(Action.org_id == org_id)
    stmt = stmt.order_by(Action.created_at, Action.id)
    return [a.to_dict() for a in db.session.execute(stmt).scalars()]


def update_action(action_id: str, fields: dict, org_id: str | None = None) -> dict:
    """Merge ``fields`` into the action, bump updated_at and return it.

    List fields (comments, evidence_urls) are replaced wholesale when present.

    Raises:
        NotFoundError: Unknown id or other organization's action.
        ValidationError: Malformed fields.
    """
    action = _scoped_action(action_id, org_id)
    cleaned = _clean_fields(fields, partial=True)

    for name, value in cleaned.items():
        setattr(action, name, value)
    _sync_completion(action, cleaned)
    action.updated_at = utcnow()
    db.session.commit()

    logger.info("Action updated: id=%s fields=%s", action_id, sorted(cleaned))
    return action.to_dict()


def delete_action(action_id: str, org_id: str | None = None) -> bool:
    """Delete an action. Returns False (no error) when there was nothing to delete."""
    stmt = select(Action).where(Action.id == action_id)
    if org_id is not None:
        stmt = stmt.where(Action.org_id == org_id)
    action = db.session.execute(stmt).scalar_one_or_none()
    if action is None:
        return False
    db.session.delete(action)
    db.session.commit()
    logger.info("Action deleted: id=%s", action_id)
    return True


def append_comment(
    action_id: str,
    *,
    user_id: str,
    user_name: str,
    content: str,
    org_id: str | None = None,
) -> dict:
    """Insert a comment at the front of the thread under a row lock."""
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("content is required", details={"content": "required"})
    if not user_id:
        raise ValidationError("user_id is required", details={"user_id": "required"})

    action = _scoped_action(action_id, org_id, lock=True)
    comment = ActionComment(user_id=str(user_id), user_name=user_name or "", content=content.strip())
    # JSON columns only persist on reassignment
    action.comments = [comment.to_dict()] + list(action.comments or [])
    action.updated_at = utcnow()
    db.session.commit()
    return action.to_dict()


def append_evidence(action_id: str, url: str, org_id: str | None = None) -> dict:
    """Append one evidence URL under a row lock."""
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("url is required", details={"url": "required"})

    action = _scoped_action(action_id, org_id, lock=True)
    action.evidence_urls = list(action.evidence_urls or []) + [url.strip()]
    action.updated_at = utcnow()
    db.session.commit()
    return action.to_dict()
