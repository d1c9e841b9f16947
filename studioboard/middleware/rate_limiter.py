"""
Rate limiting configuration.

The Limiter instance is created in studioboard/__init__.py with no default
limits; this module applies per-blueprint limits.

Usage:
    from studioboard.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

AUTH_LIMIT = "20/minute"
UPLOAD_LIMIT = "30/minute"
WRITE_LIMIT = "120/minute"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Auth (login, password change):  20/minute
        - Uploads:                        30/minute
        - Domain CRUD blueprints:         120/minute
        - Health, uploaded-file serving:  exempt

    Rate limiting is disabled in testing mode.
    """

    if app.config.get("TESTING") or not app.config.get("RATELIMIT_ENABLED", True):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    # Credential endpoints only; /api/auth/me is polled by the client
    for endpoint in ("auth.login", "auth.change_password"):
        view = app.view_functions.get(endpoint)
        if view:
            limiter.limit(AUTH_LIMIT)(view)

    bp = app.blueprints.get("uploads")
    if bp:
        limiter.limit(UPLOAD_LIMIT)(bp)

    for bp_name in ("users", "projects", "tasks", "bugs", "categories", "notifications"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(WRITE_LIMIT)(bp)

    for bp_name in ("health", "files"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.exempt(bp)

    app.logger.info(
        "Rate limiter configured: auth: %s, uploads: %s, crud: %s",
        AUTH_LIMIT, UPLOAD_LIMIT, WRITE_LIMIT,
    )
