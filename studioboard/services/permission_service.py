"""
Permission Service — identity resolution and authorization decisions.

Three independent checks, each raising instead of returning a flag:

    require_admin(identity)                 role must be "admin"
    require_page(identity, page)            per-page whitelist (allowedPages)
    require_project_access(identity, pid)   admin bypass, else project member

Decorators in `studioboard.middleware` wrap these for route protection.
"""

import logging
from dataclasses import dataclass

from studioboard.core.exceptions import AuthenticationError, ForbiddenError, NotFoundError
from studioboard.models import db
from studioboard.models.project import Project, ProjectMember
from studioboard.models.user import User
from studioboard.services.jwt_service import verify_token

logger = logging.getLogger(__name__)

# Page identifiers used by require_page_access() on route groups
PAGES = ("projects", "tasks", "bugs", "categories", "documents", "calendar", "assets")


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as re-read from the users table."""

    id: str
    email: str
    name: str
    role: str
    color: str | None = None
    avatar: str | None = None
    allowed_pages: tuple = ()
    must_change_password: bool = False

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            color=user.color,
            avatar=user.avatar,
            allowed_pages=tuple(user.allowed_pages or ()),
            must_change_password=bool(user.must_change_password),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "color": self.color,
            "avatar": self.avatar,
            "allowedPages": list(self.allowed_pages),
            "mustChangePassword": self.must_change_password,
        }


# ═══════════════════════════════════════════════════════════════
# Authentication
# ═══════════════════════════════════════════════════════════════
def authenticate(token: str) -> Identity:
    """Verify `token` and load the caller's current user row.

    The row is re-read on every call so a user deleted after the token was
    issued is rejected even though the token itself is still valid.
    """
    user_id = verify_token(token)
    user = db.session.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return Identity.from_user(user)


# ═══════════════════════════════════════════════════════════════
# Authorization
# ═══════════════════════════════════════════════════════════════
def require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        logger.warning("User %s denied admin-only action", identity.id)
        raise ForbiddenError("Administrator access required")


def can_access_page(identity: Identity, page: str) -> bool:
    """Admins and users with an empty whitelist see every page."""
    if identity.is_admin or not identity.allowed_pages:
        return True
    return page in identity.allowed_pages


def require_page(identity: Identity, page: str) -> None:
    if not can_access_page(identity, page):
        logger.warning("User %s denied access to page %s", identity.id, page)
        raise ForbiddenError("Access to this page is not allowed")


def is_project_member(user_id: str, project_id: str) -> bool:
    return db.session.get(ProjectMember, (project_id, user_id)) is not None


def require_project_access(identity: Identity, project_id: str) -> Project:
    """Return the project if the caller may see it.

    Raises NotFoundError when the project does not exist (checked first, so
    admins get 404 too) and ForbiddenError for non-member, non-admin users.
    """
    project = db.session.get(Project, project_id) if project_id else None
    if project is None:
        raise NotFoundError("Project", project_id)
    if identity.is_admin:
        return project
    if not is_project_member(identity.id, project_id):
        logger.warning("User %s denied access to project %s (not a member)",
                       identity.id, project_id)
        raise ForbiddenError("You do not have access to this project")
    return project


def accessible_project_ids(identity: Identity) -> list[str] | None:
    """Project ids visible to the caller; None means unrestricted (admin)."""
    if identity.is_admin:
        return None
    rows = db.session.query(ProjectMember.project_id).filter_by(user_id=identity.id).all()
    return sorted({r[0] for r in rows})
