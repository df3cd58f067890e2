"""
Admin authorization policy and request scoping.

    @admin_bp.route("/all-users", methods=["POST"])
    @require_admin("users.read")
    def all_users():
        with elevated_session() as session:
            ...

require_admin outcomes:
    no admin_id cookie              → 401 {"error": "Unauthorized"}
    bad signature / unknown admin   → 401 {"error": "Admin session invalid"}
    capability missing              → 403 {"error": "Permission denied", "required": ...}

Organization routes use resolve_org_scope(): a valid admin session sees every
organization (scope None) unless it narrows itself with X-Org-ID; everyone
else must send X-Org-ID.
"""

import functools
import logging
from contextlib import contextmanager

from flask import g, jsonify, request
from sqlalchemy.orm import Session

from safety_vitals.core.exceptions import AuthenticationMissing
from safety_vitals.models import db
from safety_vitals.services.admin_session_service import ADMIN_ID_COOKIE, resolve_admin

logger = logging.getLogger(__name__)

ORG_HEADER = "X-Org-ID"


def current_admin():
    """The admin behind the request's admin_id cookie, cached on ``g``."""
    if "admin" not in g:
        signed = request.cookies.get(ADMIN_ID_COOKIE)
        g.admin = resolve_admin(signed) if signed else None
    return g.admin


def require_admin(capability: str | None = None):
    """
    Decorator: require a valid admin session, optionally holding ``capability``.
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            if not request.cookies.get(ADMIN_ID_COOKIE):
                return jsonify({"error": "Unauthorized"}), 401

            admin = current_admin()
            if admin is None:
                logger.warning("Rejected admin cookie on %s", request.path)
                return jsonify({"error": "Admin session invalid"}), 401

            if capability and not admin.has_capability(capability):
                logger.warning(
                    "Admin %s denied: missing capability '%s' on %s",
                    admin.id, capability, f.__name__,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required": capability,
                }), 403

            return f(*args, **kwargs)
        return decorated
    return decorator


def resolve_org_scope() -> str | None:
    """Return the org id the request is confined to; None means all orgs.

    Raises AuthenticationMissing when the caller is neither an admin nor
    identified by X-Org-ID.
    """
    org_id = (request.headers.get(ORG_HEADER) or "").strip() or None
    if org_id:
        g.org_id = org_id
        return org_id
    if request.cookies.get(ADMIN_ID_COOKIE) and current_admin() is not None:
        return None
    raise AuthenticationMissing("Unauthorized")


@contextmanager
def elevated_session():
    """Yield a session that bypasses org scoping.

    Uses the ``admin`` bind (ADMIN_DATABASE_URL) when configured, otherwise
    the regular scoped session. Callers commit explicitly.
    """
    engine = db.engines.get("admin")
    if engine is None:
        yield db.session
        return

    session = Session(bind=engine)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
