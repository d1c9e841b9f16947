"""
Project Access Middleware — verifies project membership for the caller.

Provides the `@require_project_access` decorator that checks whether the
authenticated user is a member of the project named in the route.
Admins bypass this check.

Usage:
    @bp.route("/api/projects/<project_id>/documents")
    @require_project_access("project_id")
    def list_documents(project_id):
        ...  # Only reachable if the project exists and the user may see it

Routes whose project id lives in a body or an owning row (tasks, bugs)
call `permission_service.require_project_access` directly instead.
"""

import functools

from flask import request

from studioboard.middleware.jwt_auth import current_identity
from studioboard.services import permission_service


def require_project_access(param_name: str = "project_id"):
    """
    Decorator: require the caller to see the project identified by the
    given route parameter (404 when missing, 403 when not a member).

    Args:
        param_name: Name of the Flask route parameter holding the project id.
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            identity = current_identity()
            project_id = kwargs.get(param_name)
            if project_id is None:
                project_id = (request.view_args or {}).get(param_name)
            permission_service.require_project_access(identity, project_id)
            return f(*args, **kwargs)
        return decorated
    return decorator
