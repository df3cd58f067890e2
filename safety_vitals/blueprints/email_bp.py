"""
Email blueprint — transactional send through the SMTP relay.

Endpoint:
    POST /api/email/send   {to, subject, html, text, fromName?, fromEmail?}
"""

import logging

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException

from safety_vitals.blueprints import json_body
from safety_vitals.services.email_service import EmailService
from safety_vitals.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

email_bp = Blueprint("email", __name__, url_prefix="/api/email")
register_error_handlers(email_bp)


@email_bp.errorhandler(Exception)
def _handle_send_failure(error: Exception):
    """Unexpected send failures keep the relay error shape: {error, details}."""
    if isinstance(error, HTTPException):
        return error
    logger.exception("Email send failed unexpectedly")
    return jsonify({"error": "Internal Server Error", "details": str(error)}), 500


@email_bp.route("/send", methods=["POST"])
def send():
    data = json_body()
    log = EmailService.send(
        to=data.get("to"),
        subject=data.get("subject"),
        html=data.get("html"),
        text=data.get("text"),
        from_name=data.get("fromName"),
        from_email=data.get("fromEmail"),
    )
    return jsonify({"success": True, "messageId": log.message_id})
