"""Standardised API error responses.

Usage
-----
    from safety_vitals.utils.errors import api_error, E, register_error_handlers

    return api_error(E.NOT_FOUND, "Survey not found")
    return api_error(E.VALIDATION_INVALID, "threshold must be a number")

    register_error_handlers(actions_bp)   # map core exceptions → JSON
"""

from __future__ import annotations

import logging

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from safety_vitals.core.exceptions import (
    AuthenticationMissing,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from safety_vitals.models import db

logger = logging.getLogger(__name__)


# ── Error code constants ──────────────────────────────────────────────
class E:
    """Machine-readable error code constants (``ERR_`` prefix)."""

    # Validation – HTTP 400
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"

    # Not-found – HTTP 404
    NOT_FOUND = "ERR_NOT_FOUND"

    # Conflict / duplicate – HTTP 409
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"

    # Server – HTTP 500
    DATABASE = "ERR_DATABASE"
    UPSTREAM = "ERR_UPSTREAM"
    CONFIGURATION = "ERR_CONFIGURATION"
    INTERNAL = "ERR_INTERNAL"


# ── Default HTTP status mapping ───────────────────────────────────────
_DEFAULT_STATUS: dict[str, int] = {
    E.VALIDATION_INVALID: 400,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
    E.DATABASE: 500,
    E.UPSTREAM: 500,
    E.CONFIGURATION: 500,
    E.INTERNAL: 500,
}


def api_error(
    code: str,
    message: str,
    *,
    status: int | None = None,
    details=None,
):
    """Return a standard JSON error response.

    Parameters
    ----------
    code : str
        Machine-readable error code (use ``E.*`` constants).
    message : str
        Human-readable explanation, returned as ``error``.
    status : int, optional
        HTTP status override.  Falls back to ``_DEFAULT_STATUS[code]``,
        then to ``400``.
    details : Any, optional
        Extra structured payload (field errors, upstream body, ...).

    Returns
    -------
    tuple[Response, int]
        ``(jsonify(body), http_status)`` – drop-in for Flask views.
    """

    http_status = status or _DEFAULT_STATUS.get(code, 400)

    body: dict = {
        "error": message,
        "code": code,
    }
    if details:
        body["details"] = details

    return jsonify(body), http_status


def register_error_handlers(bp, *, expose_store_errors: bool = False):
    """Attach the core exception → HTTP mapping to a blueprint.

    ``expose_store_errors`` forwards SQLAlchemy error text in the 500 body
    (the admin routes do this); otherwise store failures get a generic message.
    """

    @bp.errorhandler(ValidationError)
    def _handle_validation(error: ValidationError):
        return api_error(E.VALIDATION_INVALID, str(error), details=error.details)

    @bp.errorhandler(AuthenticationMissing)
    def _handle_unauthenticated(error: AuthenticationMissing):
        return jsonify({"error": str(error)}), 401

    @bp.errorhandler(NotFoundError)
    def _handle_not_found(error: NotFoundError):
        logger.info("Not found: %s", error)
        return api_error(E.NOT_FOUND, f"{error.resource} not found")

    @bp.errorhandler(ConflictError)
    def _handle_conflict(error: ConflictError):
        return api_error(E.CONFLICT_DUPLICATE, str(error))

    @bp.errorhandler(ConfigurationError)
    def _handle_configuration(error: ConfigurationError):
        logger.error("Configuration error on %s: %s", request.endpoint, error)
        return api_error(E.CONFIGURATION, str(error), details=error.details)

    @bp.errorhandler(UpstreamError)
    def _handle_upstream(error: UpstreamError):
        logger.error("Upstream failure on %s: %s", request.endpoint, error)
        return api_error(E.UPSTREAM, str(error), details=error.details)

    @bp.errorhandler(SQLAlchemyError)
    def _handle_store(error: SQLAlchemyError):
        logger.exception("Database error in %s", request.endpoint)
        db.session.rollback()
        message = str(getattr(error, "orig", None) or error) if expose_store_errors else "Database error"
        return api_error(E.DATABASE, message)

    @bp.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unexpected error in endpoint=%s", request.endpoint)
        return api_error(E.INTERNAL, "Internal server error")

    return bp
