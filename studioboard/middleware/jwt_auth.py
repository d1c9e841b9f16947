"""
JWT Auth Middleware — parses the Bearer token, sets g.current_user.

The before_request hook never rejects a request by itself: it resolves
the caller (or records why it could not) and `@login_required` decides.

    g.current_user   Identity | None
    g.auth_error     AuthenticationError | None — expired / invalid / deleted user
"""

import functools

from flask import g, request

from studioboard.core.exceptions import AuthenticationError
from studioboard.services.permission_service import authenticate

# Paths that skip token parsing entirely
JWT_SKIP_PREFIXES = (
    "/api/auth/login",
    "/api/health",
    "/uploads/",
)


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.current_user = None
        g.auth_error = None

        path = request.path
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return

        token = auth_header[7:].strip()  # Strip "Bearer "
        try:
            g.current_user = authenticate(token)
        except AuthenticationError as exc:
            g.auth_error = exc


def current_identity():
    """Return the authenticated Identity or raise the recorded auth error."""
    identity = getattr(g, "current_user", None)
    if identity is not None:
        return identity
    error = getattr(g, "auth_error", None)
    if error is not None:
        raise error
    raise AuthenticationError("Authentication token required")


def login_required(f):
    """Decorator: reject the request with 401 unless a valid token was sent."""

    @functools.wraps(f)
    def decorated(*args, **kwargs):
        current_identity()
        return f(*args, **kwargs)

    return decorated
