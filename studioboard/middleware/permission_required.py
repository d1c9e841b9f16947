"""
Permission Decorators — role and page-access guards for routes.

Usage:
    @bp.route("/api/projects", methods=["POST"])
    @admin_required
    def create_project():
        ...

    @bp.route("/api/bugs", methods=["GET"])
    @require_page_access("bugs")
    def list_bugs():
        ...

Both imply @login_required: an unauthenticated caller gets 401 before
any role or page check runs.
"""

import functools

from studioboard.middleware.jwt_auth import current_identity
from studioboard.services.permission_service import require_admin, require_page


def admin_required(f):
    """Decorator: require the caller to hold the admin role."""

    @functools.wraps(f)
    def decorated(*args, **kwargs):
        require_admin(current_identity())
        return f(*args, **kwargs)

    return decorated


def require_page_access(page: str):
    """
    Decorator: require access to `page`.

    Admins bypass; an empty allowedPages list means unrestricted.

    Args:
        page: Page identifier, e.g. "tasks".
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            require_page(current_identity(), page)
            return f(*args, **kwargs)
        return decorated
    return decorator
