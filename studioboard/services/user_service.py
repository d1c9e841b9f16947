"""
User Service — credentials, account CRUD and password changes.

Login and password change are the only places plaintext passwords are
seen; everything else works on the bcrypt hash stored in `users.password`.
"""

import logging

from email_validator import EmailNotValidError, validate_email

from studioboard.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from studioboard.models import db
from studioboard.models.user import DEFAULT_COLOR, ROLES, User
from studioboard.services.permission_service import PAGES, Identity
from studioboard.utils.crypto import hash_password, verify_password
from studioboard.utils.helpers import UNSET, choice, optional_text, pick, require_text, string_list

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid email or password"


# ── Helpers ──────────────────────────────────────────────────────────────────

def normalize_email(email: str) -> str:
    """Validate syntax and return the lower-cased address."""
    if not isinstance(email, str):
        raise ValidationError("Invalid email address", details={"email": "must be a string"})
    try:
        result = validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid email address", details={"email": str(exc)}) from exc
    return result.normalized.lower()


def _check_password_length(password) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            details={"password": f"min {MIN_PASSWORD_LENGTH}"},
        )
    return password


def _allowed_pages(value) -> list[str]:
    pages = string_list(value, "allowedPages")
    unknown = sorted(set(pages) - set(PAGES))
    if unknown:
        raise ValidationError(
            f"Unknown pages: {', '.join(unknown)}", details={"allowedPages": unknown},
        )
    return pages


def _ensure_email_free(email: str, exclude_id: str | None = None):
    query = User.query.filter(User.email == email)
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise ValidationError("Email already in use", details={"email": email})


def get_user(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def ensure_users_exist(user_ids) -> list[str]:
    """Deduplicate `user_ids` keeping order; every id must name a user."""
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return ids
    found = {uid for (uid,) in db.session.query(User.id).filter(User.id.in_(ids)).all()}
    missing = [uid for uid in ids if uid not in found]
    if missing:
        raise ValidationError(
            f"Unknown user id(s): {', '.join(missing)}", details={"userIds": missing},
        )
    return ids


# ═══════════════════════════════════════════════════════════════
# Authentication
# ═══════════════════════════════════════════════════════════════
def login(email, password) -> User:
    """Return the user for valid credentials.

    Unknown e-mail and wrong password fail with the same message.
    """
    if not email or not password:
        raise ValidationError("Email and password required")
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password must be strings")
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info("User %s logged in", user.id)
    return user


def change_password(identity: Identity, current_password, new_password) -> User:
    """Set a new password for the caller and clear mustChangePassword.

    The current password is not required while mustChangePassword is set.
    """
    user = get_user(identity.id)
    if not user.must_change_password:
        if not current_password:
            raise ValidationError("Current password required")
        optional_text(current_password, "currentPassword")
        if not verify_password(current_password, user.password_hash):
            logger.warning("User %s failed current-password check", user.id)
            raise AuthenticationError("Current password is incorrect")
    user.password_hash = hash_password(_check_password_length(new_password))
    user.must_change_password = False
    return user


# ═══════════════════════════════════════════════════════════════
# CRUD
# ═══════════════════════════════════════════════════════════════
def list_users() -> list[User]:
    return User.query.order_by(User.name.asc()).all()


def create_user(data: dict) -> User:
    """Admin creates an account; the user must change the password at first login."""
    fields = require_text(data, "email", "name")
    password = _check_password_length(data.get("password"))
    email = normalize_email(fields["email"])
    _ensure_email_free(email)

    user = User(
        email=email,
        name=fields["name"],
        password_hash=hash_password(password),
        role=choice(data.get("role") or "user", sorted(ROLES), "role"),
        color=optional_text(data.get("color"), "color") or DEFAULT_COLOR,
        avatar=optional_text(data.get("avatar"), "avatar"),
        allowed_pages=_allowed_pages(data.get("allowedPages")),
        must_change_password=True,
    )
    db.session.add(user)
    db.session.flush()
    logger.info("User %s created (%s)", user.id, user.email)
    return user


def update_user(identity: Identity, user_id: str, data: dict) -> User:
    """Self may change name and color; admins may change everything.

    Setting a password through this route re-arms mustChangePassword.
    """
    if not identity.is_admin and identity.id != user_id:
        raise ForbiddenError("You can only edit your own profile")
    user = get_user(user_id)

    name = pick(data, "name")
    if name:
        user.name = optional_text(name, "name").strip() or user.name
    color = pick(data, "color")
    if color:
        user.color = optional_text(color, "color")

    if not identity.is_admin:
        return user

    email = pick(data, "email")
    if email:
        email = normalize_email(email)
        if email != user.email:
            _ensure_email_free(email, exclude_id=user.id)
            user.email = email
    role = pick(data, "role")
    if role:
        user.role = choice(role, sorted(ROLES), "role")
    avatar = pick(data, "avatar")
    if avatar is not UNSET:
        user.avatar = optional_text(avatar, "avatar") or None
    pages = pick(data, "allowedPages")
    if pages is not UNSET and pages is not None:
        user.allowed_pages = _allowed_pages(pages)
    password = pick(data, "password")
    if password:
        user.password_hash = hash_password(_check_password_length(password))
        user.must_change_password = True
    return user


def delete_user(identity: Identity, user_id: str) -> None:
    if identity.id == user_id:
        raise ValidationError("You cannot delete your own account")
    user = get_user(user_id)
    db.session.delete(user)
    logger.info("User %s deleted by %s", user_id, identity.id)
