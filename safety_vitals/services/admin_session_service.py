"""
Admin session service — credential check and signed session cookies.

Two cookies make up an admin session:
    admin_token  HttpOnly gate token, 1 hour
    admin_id     client-readable admin identity, 1 day

Both are itsdangerous-signed with SECRET_KEY so a client can read but never
forge them. The admin API policy (middleware.admin_auth) trusts admin_id.
"""

import logging

from flask import current_app
from itsdangerous import BadSignature, URLSafeTimedSerializer

from safety_vitals.core.exceptions import AuthenticationMissing, ValidationError
from safety_vitals.models import db
from safety_vitals.models.base import utcnow
from safety_vitals.models.user import ADMIN_CAPABILITIES, AdminUser
from safety_vitals.utils.crypto import hash_password, verify_password

logger = logging.getLogger(__name__)

ADMIN_ID_COOKIE = "admin_id"
ADMIN_TOKEN_COOKIE = "admin_token"

_ID_SALT = "safety-vitals.admin-id"
_TOKEN_SALT = "safety-vitals.admin-token"


def _serializer(salt: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=salt)


# ── Credentials ──────────────────────────────────────────────────────────────


def authenticate(email: str, password: str) -> AdminUser:
    """Return the active admin matching the credentials.

    Raises AuthenticationMissing with a single generic message for unknown
    email, wrong password and disabled accounts alike.
    """
    if not email or not password:
        raise ValidationError("email and password are required")

    admin = AdminUser.query.filter(
        db.func.lower(AdminUser.email) == email.strip().lower()
    ).first()
    if admin is None or not admin.is_active or not verify_password(password, admin.password_hash):
        logger.warning("Admin login failed for email=%s", email)
        raise AuthenticationMissing("Invalid email or password")

    admin.last_login_at = utcnow()
    db.session.commit()
    logger.info("Admin login: admin_id=%s", admin.id)
    return admin


def create_admin(email: str, password: str, full_name: str = "",
                 capabilities=None) -> AdminUser:
    """Create an admin account (used by the ``create-admin`` CLI command)."""
    if not email or not password:
        raise ValidationError("email and password are required")
    caps = sorted(set(capabilities) if capabilities else ADMIN_CAPABILITIES)
    unknown = set(caps) - ADMIN_CAPABILITIES
    if unknown:
        raise ValidationError(f"Unknown capabilities: {', '.join(sorted(unknown))}")

    admin = AdminUser(
        email=email.strip().lower(),
        full_name=full_name,
        password_hash=hash_password(password),
        capabilities=caps,
    )
    db.session.add(admin)
    db.session.commit()
    return admin


# ── Signed cookie values ─────────────────────────────────────────────────────


def sign_admin_id(admin_id: str) -> str:
    return _serializer(_ID_SALT).dumps(admin_id)


def sign_admin_token(admin_id: str) -> str:
    return _serializer(_TOKEN_SALT).dumps({"admin_id": admin_id})


def load_admin_id(signed_value: str) -> str | None:
    """Unsign an admin_id cookie; None when tampered with or expired."""
    max_age = current_app.config.get("ADMIN_ID_MAX_AGE", 60 * 60 * 24)
    try:
        return _serializer(_ID_SALT).loads(signed_value, max_age=max_age)
    except BadSignature:
        return None


def load_admin_token(signed_value: str) -> str | None:
    """Unsign an admin_token cookie and return the admin id it was issued for."""
    max_age = current_app.config.get("ADMIN_TOKEN_MAX_AGE", 60 * 60)
    try:
        payload = _serializer(_TOKEN_SALT).loads(signed_value, max_age=max_age)
    except BadSignature:
        return None
    if not isinstance(payload, dict):
        return None
    return payload.get("admin_id")


def resolve_admin(signed_value: str) -> AdminUser | None:
    """Return the active admin behind a signed admin_id cookie value."""
    admin_id = load_admin_id(signed_value)
    if not admin_id:
        return None
    admin = db.session.get(AdminUser, admin_id)
    if admin is None or not admin.is_active:
        return None
    return admin


def set_admin_cookies(response, admin_id: str, *, include_token: bool = True):
    """Attach the session cookies to ``response``."""
    cfg = current_app.config
    secure = cfg.get("SESSION_COOKIE_SECURE", False)
    if include_token:
        response.set_cookie(
            ADMIN_TOKEN_COOKIE,
            sign_admin_token(admin_id),
            max_age=cfg.get("ADMIN_TOKEN_MAX_AGE", 60 * 60),
            path="/",
            httponly=True,
            secure=secure,
            samesite="Strict",
        )
    response.set_cookie(
        ADMIN_ID_COOKIE,
        sign_admin_id(admin_id),
        max_age=cfg.get("ADMIN_ID_MAX_AGE", 60 * 60 * 24),
        path="/",
        httponly=False,
        secure=secure,
        samesite="Strict",
    )
    return response


def clear_admin_cookies(response):
    secure = current_app.config.get("SESSION_COOKIE_SECURE", False)
    response.delete_cookie(ADMIN_TOKEN_COOKIE, path="/", httponly=True,
                           secure=secure, samesite="Strict")
    response.delete_cookie(ADMIN_ID_COOKIE, path="/", secure=secure, samesite="Strict")
    return response
