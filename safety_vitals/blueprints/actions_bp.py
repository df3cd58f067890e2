"""
Actions blueprint — remediation actions per survey dimension.

Endpoints:
    GET, POST          /api/surveys/<survey_id>/actions
    GET, PATCH, DELETE /api/actions/<action_id>
    POST               /api/actions/<action_id>/comments   {content, user_id?, user_name?}
    POST               /api/actions/<action_id>/evidence   {url}

Callers identify their organization with X-Org-ID; an admin session sees all
organizations. Service layer owns all business logic and commits.
"""

import logging

from flask import Blueprint, jsonify

from safety_vitals.blueprints import json_body
from safety_vitals.middleware.admin_auth import current_admin, resolve_org_scope
from safety_vitals.services import action_service
from safety_vitals.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

actions_bp = Blueprint("actions", __name__, url_prefix="/api")
register_error_handlers(actions_bp)


@actions_bp.route("/surveys/<survey_id>/actions", methods=["GET"])
def list_actions(survey_id):
    org_id = resolve_org_scope()
    action_service.require_survey(survey_id, org_id)
    return jsonify(action_service.list_actions_by_survey(survey_id, org_id=org_id))


@actions_bp.route("/surveys/<survey_id>/actions", methods=["POST"])
def create_action(survey_id):
    org_id = resolve_org_scope()
    data = json_body()
    data["survey_id"] = survey_id
    admin = current_admin()
    if admin is not None and not data.get("created_by"):
        data["created_by"] = admin.id
    return jsonify(action_service.create_action(data, org_id=org_id)), 201


@actions_bp.route("/actions/<action_id>", methods=["GET"])
def get_action(action_id):
    org_id = resolve_org_scope()
    return jsonify(action_service.get_action(action_id, org_id=org_id))


@actions_bp.route("/actions/<action_id>", methods=["PATCH"])
def update_action(action_id):
    org_id = resolve_org_scope()
    return jsonify(action_service.update_action(action_id, json_body(), org_id=org_id))


@actions_bp.route("/actions/<action_id>", methods=["DELETE"])
def delete_action(action_id):
    org_id = resolve_org_scope()
    deleted = action_service.delete_action(action_id, org_id=org_id)
    return jsonify({"success": True, "deleted": deleted})


@actions_bp.route("/actions/<action_id>/comments", methods=["POST"])
def add_comment(action_id):
    org_id = resolve_org_scope()
    data = json_body()
    admin = current_admin()
    user_id = data.get("user_id") or (admin.id if admin else None)
    user_name = data.get("user_name") or (admin.full_name if admin else "")
    action = action_service.append_comment(
        action_id,
        user_id=user_id,
        user_name=user_name,
        content=data.get("content"),
        org_id=org_id,
    )
    return jsonify(action), 201


@actions_bp.route("/actions/<action_id>/evidence", methods=["POST"])
def add_evidence(action_id):
    org_id = resolve_org_scope()
    action = action_service.append_evidence(action_id, json_body().get("url"), org_id=org_id)
    return jsonify(action), 201
