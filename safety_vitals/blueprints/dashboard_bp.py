"""
Dashboard blueprint — survey summary and action plan.

Endpoints:
    GET /api/surveys/<survey_id>/summary?threshold=<0-5>
    GET /api/surveys/<survey_id>/action-plan
"""

import logging

from flask import Blueprint, jsonify, request

from safety_vitals.core.exceptions import ValidationError
from safety_vitals.middleware.admin_auth import resolve_org_scope
from safety_vitals.services import action_service
from safety_vitals.services.action_plan import build_action_plan
from safety_vitals.services.summary_service import build_survey_dashboard
from safety_vitals.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/surveys")
register_error_handlers(dashboard_bp)


def _threshold_arg() -> float | None:
    raw = request.args.get("threshold")
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValidationError("threshold must be a number") from exc
    if not 0 <= value <= 5:
        raise ValidationError("threshold must be between 0 and 5")
    return value


@dashboard_bp.route("/<survey_id>/summary", methods=["GET"])
def survey_summary(survey_id):
    org_id = resolve_org_scope()
    return jsonify(build_survey_dashboard(survey_id, threshold=_threshold_arg(), org_id=org_id))


@dashboard_bp.route("/<survey_id>/action-plan", methods=["GET"])
def action_plan(survey_id):
    org_id = resolve_org_scope()
    action_service.require_survey(survey_id, org_id)
    actions = action_service.list_actions_by_survey(survey_id, org_id=org_id)
    return jsonify(build_action_plan(actions).to_dict())
