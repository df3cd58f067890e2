"""
Health check blueprint.

Endpoints:
    GET /api/health        — database round-trip plus configuration presence
    GET /api/health/ready  — simple 200 for load balancers
"""

import logging
import time

from flask import Blueprint, current_app, jsonify

from safety_vitals.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness probe — always 200 if app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("", methods=["GET"])
def live():
    """Liveness check with dependency status."""
    checks = {}
    overall = True

    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1)}
    except Exception as exc:
        db.session.rollback()
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check — database failed: %s", exc)

    cfg = current_app.config
    checks["admin_database"] = {
        "status": "ok" if "admin" in db.engines else "shared",
    }
    checks["workers_ai"] = {
        "status": "configured"
        if cfg.get("CLOUDFLARE_ACCOUNT_ID") and cfg.get("CLOUDFLARE_API_TOKEN")
        else "missing_credentials",
    }
    checks["smtp"] = {
        "status": "configured" if cfg.get("SMTP_USER") and cfg.get("SMTP_PASS") else "missing_credentials",
    }

    status_code = 200 if overall else 503
    return jsonify({
        "status": "healthy" if overall else "degraded",
        "checks": checks,
    }), status_code
