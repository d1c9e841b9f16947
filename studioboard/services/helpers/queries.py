"""
Lookup and join-table helpers shared by the domain services.

Usage:
    task = get_or_404(Task, task_id)

    # Child rows of a project: a row from another project is a 404
    doc = get_scoped(Document, doc_id, project_id=project_id)

    # Replace-semantics member lists
    replace_links(project.memberships, ids, lambda uid: ProjectMember(user_id=uid))
"""

import logging

from sqlalchemy import select

from studioboard.core.exceptions import NotFoundError
from studioboard.models import db
from studioboard.services.user_service import ensure_users_exist

logger = logging.getLogger(__name__)


def get_or_404(model, pk, resource: str | None = None):
    """Fetch by primary key or raise NotFoundError."""
    obj = db.session.get(model, pk) if pk else None
    if obj is None:
        raise NotFoundError(resource or model.__name__, pk)
    return obj


def get_scoped(model, pk, *, project_id: str):
    """Fetch a project child by PK, requiring it to belong to `project_id`.

    A row that exists under another project is indistinguishable from a
    missing one: both raise NotFoundError.
    """
    stmt = select(model).where(model.id == pk, model.project_id == project_id)
    result = db.session.execute(stmt).scalar_one_or_none()
    if result is None:
        logger.debug("get_scoped: %s id=%s not in project %s", model.__name__, pk, project_id)
        raise NotFoundError(model.__name__, pk)
    return result


def replace_links(collection, user_ids, factory) -> None:
    """Make a join-row collection hold exactly `user_ids`.

    Rows for users no longer listed are removed (delete-orphan), rows already
    present are kept, new ids get a row built by `factory(user_id)`.
    Duplicates in `user_ids` collapse; unknown users raise ValidationError.
    """
    ids = ensure_users_exist(user_ids)
    wanted = set(ids)
    for link in list(collection):
        if link.user_id not in wanted:
            collection.remove(link)
    present = {link.user_id for link in collection}
    for user_id in ids:
        if user_id not in present:
            collection.append(factory(user_id))


def add_link(collection, user_id, factory) -> bool:
    """Idempotent insert of one join row; returns True when a row was added."""
    ensure_users_exist([user_id])
    if any(link.user_id == user_id for link in collection):
        return False
    collection.append(factory(user_id))
    return True


def remove_link(collection, user_id) -> bool:
    """Unconditional delete of one join row; returns True when a row existed."""
    for link in list(collection):
        if link.user_id == user_id:
            collection.remove(link)
            return True
    return False
