"""
Application-wide exception hierarchy.

Services raise these; `studioboard.core.error_handlers` maps each type to
an HTTP status and the `{"error": ...}` envelope once, for every blueprint.

Usage:
    from studioboard.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=project_id)
    raise ValidationError("Invalid status", details={"status": "..."})
"""


class StudioBoardError(Exception):
    """Base class for errors that map to a client-facing HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(StudioBoardError):
    """Missing or malformed input, or an enum value outside its domain.

    Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown. Keys are field names.
    """

    status_code = 400

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(StudioBoardError):
    """Missing credentials, bad credentials, or an unusable token. HTTP 401."""

    status_code = 401


class TokenExpiredError(AuthenticationError):
    """The token signature is valid but its expiry has passed."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)


class TokenInvalidError(AuthenticationError):
    """The token is malformed, forged, or signed with another key."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ForbiddenError(StudioBoardError):
    """Authenticated, but role, page access or membership denies the action.

    Maps to HTTP 403.
    """

    status_code = 403

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFoundError(StudioBoardError):
    """Raised when a requested resource has no matching row.

    Maps to HTTP 404.

    Args:
        resource: Human-readable entity name (e.g. "Project", "Task").
        resource_id: The id that was looked up. Logged, not returned.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")
