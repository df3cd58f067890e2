"""
Organization blueprint — the caller's own organization and its limits.

Endpoints:
    GET /api/organizations/me   (X-Org-ID)  → {org, subscription, limits}
"""

import logging

from flask import Blueprint, jsonify, request

from safety_vitals.core.exceptions import ValidationError
from safety_vitals.middleware.admin_auth import ORG_HEADER, current_admin, resolve_org_scope
from safety_vitals.models import db
from safety_vitals.services import admin_service
from safety_vitals.services.admin_session_service import ADMIN_ID_COOKIE
from safety_vitals.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

organizations_bp = Blueprint("organizations", __name__, url_prefix="/api/organizations")
register_error_handlers(organizations_bp)


@organizations_bp.route("/me", methods=["GET"])
def my_organization():
    """Organization, subscription and effective limits for the caller.

    Platform admins must still name the organization with X-Org-ID; they are
    always resolved against the paid plan.
    """
    org_id = resolve_org_scope()
    if org_id is None:
        raise ValidationError(f"{ORG_HEADER} header is required")
    is_admin = bool(request.cookies.get(ADMIN_ID_COOKIE)) and current_admin() is not None

    detail = admin_service.get_organization(db.session, org_id)
    resolved = admin_service.effective_limits(db.session, org_id, is_admin=is_admin)
    subscription = detail["subscription"] or {}
    return jsonify({
        "org": {"id": detail["organization"]["id"], "name": detail["organization"]["name"]},
        "subscription": {
            "plan": resolved["plan"],
            "status": subscription.get("status", "active"),
        },
        "limits": resolved["limits"],
    })
