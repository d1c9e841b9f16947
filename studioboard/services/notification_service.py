"""
Notification Service — per-user in-app notifications.

Reads and mutations are always scoped to the calling user: a notification
owned by someone else behaves exactly like a missing one (404).
"""

import logging

from studioboard.core.exceptions import NotFoundError, ValidationError
from studioboard.models import db
from studioboard.models.notification import Notification
from studioboard.services.user_service import ensure_users_exist
from studioboard.utils.helpers import optional_text

logger = logging.getLogger(__name__)

LIST_LIMIT = 100


def _build(data, index: int | None = None) -> Notification:
    """Validate one payload and build an unsaved Notification."""
    if not isinstance(data, dict):
        raise ValidationError("Each notification must be an object", details={"index": index})
    missing = [f for f in ("userId", "type", "title") if not data.get(f)]
    if missing:
        details = {f: "required" for f in missing}
        if index is not None:
            details["index"] = index
        raise ValidationError(f"{', '.join(missing)} required", details=details)
    try:
        return Notification(
            user_id=optional_text(data["userId"], "userId"),
            type=optional_text(data["type"], "type"),
            title=optional_text(data["title"], "title"),
            message=optional_text(data.get("message"), "message"),
            link=optional_text(data.get("link"), "link"),
        )
    except ValidationError as exc:
        if index is not None:
            exc.details["index"] = index
        raise


def list_for_user(user_id: str, unread_only: bool = False) -> list[Notification]:
    """Newest first, capped at LIST_LIMIT rows."""
    query = Notification.query.filter_by(user_id=user_id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    return (
        query.order_by(Notification.created_at.desc())
        .limit(LIST_LIMIT)
        .all()
    )


def unread_count(user_id: str) -> int:
    return Notification.query.filter_by(user_id=user_id, read=False).count()


def create(data: dict) -> Notification:
    notif = _build(data)
    ensure_users_exist([notif.user_id])
    db.session.add(notif)
    db.session.flush()
    return notif


def create_bulk(items) -> list[Notification]:
    """Validate every item first, then stage all of them.

    Nothing is added to the session unless the whole batch is valid, so the
    request commit writes either every row or none.
    """
    if not isinstance(items, list):
        raise ValidationError("notifications must be a list")
    notifs = [_build(item, index=i) for i, item in enumerate(items)]
    ensure_users_exist([n.user_id for n in notifs])
    db.session.add_all(notifs)
    db.session.flush()
    logger.info("Bulk-created %d notifications", len(notifs))
    return notifs


def _get_owned(user_id: str, notification_id: str) -> Notification:
    notif = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if notif is None:
        raise NotFoundError("Notification", notification_id)
    return notif


def mark_read(user_id: str, notification_id: str) -> Notification:
    notif = _get_owned(user_id, notification_id)
    notif.mark_read()
    return notif


def mark_all_read(user_id: str) -> int:
    return (
        Notification.query.filter_by(user_id=user_id, read=False)
        .update({Notification.read: True}, synchronize_session=False)
    )


def delete(user_id: str, notification_id: str) -> None:
    db.session.delete(_get_owned(user_id, notification_id))


def delete_all(user_id: str) -> int:
    return Notification.query.filter_by(user_id=user_id).delete(synchronize_session=False)
