"""
Admin session blueprint — login, cookie issue and logout.

Endpoints:
    POST /api/admin-login        {email, password}  → sets admin_token + admin_id
    POST /api/set-admin-cookie   {adminId}          → re-sets admin_id (needs admin_token)
    POST /api/logout                                → clears both cookies
    GET  /api/admin-session                         → current admin profile
"""

import logging

from flask import Blueprint, jsonify, request

from safety_vitals.blueprints import json_body
from safety_vitals.middleware.admin_auth import current_admin, require_admin
from safety_vitals.models import db
from safety_vitals.models.user import AdminUser
from safety_vitals.services import admin_session_service
from safety_vitals.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")
register_error_handlers(auth_bp)


@auth_bp.route("/admin-login", methods=["POST"])
def admin_login():
    data = json_body()
    admin = admin_session_service.authenticate(data.get("email") or "", data.get("password") or "")
    response = jsonify({"success": True, "admin": admin.to_dict()})
    return admin_session_service.set_admin_cookies(response, admin.id)


@auth_bp.route("/set-admin-cookie", methods=["POST"])
def set_admin_cookie():
    """Re-issue the admin_id cookie for the admin holding the current admin_token.

    The caller must already carry a valid gate token for the same admin, so a
    leaked admin id alone never mints a session.
    """
    admin_id = json_body().get("adminId")
    if not admin_id or not isinstance(admin_id, str):
        return jsonify({"error": "Admin ID is required"}), 400

    token = request.cookies.get(admin_session_service.ADMIN_TOKEN_COOKIE)
    token_admin_id = admin_session_service.load_admin_token(token) if token else None
    if token_admin_id != admin_id:
        logger.warning("set-admin-cookie without a matching admin session for id=%s", admin_id)
        return jsonify({"error": "Admin session invalid"}), 401

    admin = db.session.get(AdminUser, admin_id)
    if admin is None or not admin.is_active:
        logger.warning("set-admin-cookie for unknown admin id=%s", admin_id)
        return jsonify({"error": "Admin session invalid"}), 401

    response = jsonify({"success": True})
    return admin_session_service.set_admin_cookies(response, admin.id, include_token=False)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"success": True})
    return admin_session_service.clear_admin_cookies(response)


@auth_bp.route("/admin-session", methods=["GET"])
@require_admin()
def admin_session():
    return jsonify(current_admin().to_dict())
