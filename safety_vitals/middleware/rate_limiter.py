"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in safety_vitals/__init__.py with no default
limits; this module applies granular limits per route category.

Usage:
    from safety_vitals.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

# blueprint name → limit string (per remote IP)
BLUEPRINT_LIMITS = {
    "ai": "10/minute",       # every call is a paid inference request
    "email": "20/minute",    # outbound mail relay
    "auth": "10/minute",     # credential checks
    "actions": "120/minute",
    "dimensions": "120/minute",
    "organizations": "120/minute",
    "dashboard": "200/minute",
    "admin": "200/minute",
}


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Health check is exempt. Rate limiting is disabled in testing mode.
    """

    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    for bp_name, limit in BLUEPRINT_LIMITS.items():
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(limit)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info(
        "Rate limiter configured: %s",
        ", ".join(f"{name}={limit}" for name, limit in BLUEPRINT_LIMITS.items()),
    )
