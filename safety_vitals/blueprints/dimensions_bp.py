"""
Dimension catalog blueprint.

Endpoints:
    GET     /api/dimensions            any caller with an org or admin session
    POST    /api/dimensions            admin, dimensions.write
    PUT     /api/dimensions/<code>     admin, dimensions.write
    DELETE  /api/dimensions/<code>     admin, dimensions.write
"""

from flask import Blueprint, jsonify

from safety_vitals.blueprints import json_body
from safety_vitals.middleware.admin_auth import require_admin, resolve_org_scope
from safety_vitals.services import dimension_service
from safety_vitals.utils.errors import register_error_handlers

dimensions_bp = Blueprint("dimensions", __name__, url_prefix="/api/dimensions")
register_error_handlers(dimensions_bp)


@dimensions_bp.route("", methods=["GET"])
def list_dimensions():
    resolve_org_scope()
    return jsonify(dimension_service.list_dimensions())


@dimensions_bp.route("", methods=["POST"])
@require_admin("dimensions.write")
def create_dimension():
    return jsonify(dimension_service.create_dimension(json_body())), 201


@dimensions_bp.route("/<code>", methods=["PUT"])
@require_admin("dimensions.write")
def update_dimension(code):
    return jsonify(dimension_service.update_dimension(code, json_body()))


@dimensions_bp.route("/<code>", methods=["DELETE"])
@require_admin("dimensions.write")
def delete_dimension(code):
    dimension_service.delete_dimension(code)
    return jsonify({"success": True})
