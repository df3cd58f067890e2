"""
Admin override blueprint — cross-organization reads and organization management.

Endpoints (all behind require_admin):
    GET        /api/admin/all-organizations          organizations.read
    GET        /api/admin/all-surveys                surveys.read
    GET, POST  /api/admin/all-respondents            responses.read
    POST       /api/admin/all-responses              responses.read
    POST       /api/admin/all-users                  users.read
    GET        /api/admin/organizations-stats        organizations.read
    GET        /api/admin/organizations/<id>         organizations.read
    PATCH      /api/admin/organizations/<id>         organizations.write
    DELETE     /api/admin/organizations/<id>         organizations.write

Queries run on the elevated session and are never org-scoped.
Store errors are returned with their message (500).
"""

import logging

from flask import Blueprint, jsonify, request

from safety_vitals.blueprints import json_body
from safety_vitals.core.exceptions import ValidationError
from safety_vitals.middleware.admin_auth import elevated_session, require_admin
from safety_vitals.services import admin_service
from safety_vitals.utils.errors import register_error_handlers
from safety_vitals.utils.helpers import parse_id_list, parse_org_filter

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")
register_error_handlers(admin_bp, expose_store_errors=True)


@admin_bp.route("/all-organizations", methods=["GET"])
@require_admin("organizations.read")
def all_organizations():
    with elevated_session() as session:
        return jsonify(admin_service.list_organizations(session))


@admin_bp.route("/all-surveys", methods=["GET"])
@require_admin("surveys.read")
def all_surveys():
    with elevated_session() as session:
        return jsonify(admin_service.list_surveys(session))


@admin_bp.route("/all-respondents", methods=["GET", "POST"])
@require_admin("responses.read")
def all_respondents():
    """Respondent rows, filtered by ``orgId`` from the query string or body."""
    raw_org = request.args.get("orgId")
    if raw_org is None:
        raw_org = json_body().get("orgId")
    org_id = parse_org_filter(raw_org)
    with elevated_session() as session:
        return jsonify(admin_service.list_respondents(session, org_id))


@admin_bp.route("/all-responses", methods=["POST"])
@require_admin("responses.read")
def all_responses():
    data = json_body()
    raw_ids = data.get("questionIds")
    if not raw_ids or not isinstance(raw_ids, list):
        raise ValidationError("Question IDs are required")
    try:
        question_ids = parse_id_list(raw_ids)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    org_id = parse_org_filter(data.get("orgId"))
    with elevated_session() as session:
        return jsonify(admin_service.list_responses(session, question_ids, org_id))


@admin_bp.route("/all-users", methods=["POST"])
@require_admin("users.read")
def all_users():
    raw_ids = json_body().get("userIds")
    if not raw_ids or not isinstance(raw_ids, list):
        return jsonify([])
    try:
        user_ids = parse_id_list(raw_ids)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    with elevated_session() as session:
        return jsonify(admin_service.list_users(session, user_ids))


@admin_bp.route("/organizations-stats", methods=["GET"])
@require_admin("organizations.read")
def organizations_stats():
    with elevated_session() as session:
        return jsonify(admin_service.organization_stats(session))


@admin_bp.route("/organizations/<org_id>", methods=["GET"])
@require_admin("organizations.read")
def get_organization(org_id):
    with elevated_session() as session:
        return jsonify(admin_service.get_organization(session, org_id))


@admin_bp.route("/organizations/<org_id>", methods=["PATCH"])
@require_admin("organizations.write")
def update_organization(org_id):
    with elevated_session() as session:
        admin_service.update_organization(session, org_id, json_body())
    return jsonify({"success": True})


@admin_bp.route("/organizations/<org_id>", methods=["DELETE"])
@require_admin("organizations.write")
def delete_organization(org_id):
    with elevated_session() as session:
        admin_service.delete_organization(session, org_id)
    return jsonify({"success": True})
