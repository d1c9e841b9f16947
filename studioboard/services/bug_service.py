"""Bug CRUD, status and severity service.

Every status change goes through `Bug.set_status()` so resolvedAt is
stamped on entering "closed" and cleared on leaving it.
"""

import logging

from studioboard.core.exceptions import ValidationError
from studioboard.models import db
from studioboard.models.bug import BUG_SEVERITIES, BUG_STATUSES, Bug
from studioboard.models.category import Category
from studioboard.services.helpers.queries import get_or_404
from studioboard.services.permission_service import (
    Identity,
    accessible_project_ids,
    require_project_access,
)
from studioboard.utils.helpers import UNSET, choice, optional_text, pick, require_text, string_list

logger = logging.getLogger(__name__)


def _category_id(value):
    if not optional_text(value, "categoryId"):
        return None
    if db.session.get(Category, value) is None:
        raise ValidationError("Unknown category", details={"categoryId": value})
    return value


def list_bugs(identity: Identity, *, project_id=None, status=None, severity=None,
              category_id=None) -> list[Bug]:
    query = Bug.query
    if project_id:
        require_project_access(identity, project_id)
        query = query.filter(Bug.project_id == project_id)
    else:
        allowed = accessible_project_ids(identity)
        if allowed is not None:
            if not allowed:
                return []
            query = query.filter(Bug.project_id.in_(allowed))
    if status:
        query = query.filter(Bug.status == status)
    if severity:
        query = query.filter(Bug.severity == severity)
    if category_id:
        query = query.filter(Bug.category_id == category_id)
    return query.order_by(Bug.created_at.desc()).all()


def get_bug(identity: Identity, bug_id: str) -> Bug:
    bug = get_or_404(Bug, bug_id, "Bug")
    require_project_access(identity, bug.project_id)
    return bug


def create_bug(identity: Identity, data: dict) -> Bug:
    fields = require_text(data, "projectId", "title")
    require_project_access(identity, fields["projectId"])

    bug = Bug(
        project_id=fields["projectId"],
        title=fields["title"],
        description=optional_text(data.get("description"), "description"),
        severity=choice(data.get("severity") or "major", BUG_SEVERITIES, "severity"),
        steps_to_reproduce=string_list(data.get("stepsToReproduce"), "stepsToReproduce"),
        attachments=string_list(data.get("attachments"), "attachments"),
        category_id=_category_id(data.get("categoryId")),
        reported_by=identity.id,
    )
    bug.set_status(choice(data.get("status") or "open", BUG_STATUSES, "status"))
    db.session.add(bug)
    db.session.flush()
    logger.info("Bug %s reported in project %s", bug.id, bug.project_id)
    return bug


def update_bug(identity: Identity, bug_id: str, data: dict) -> Bug:
    bug = get_bug(identity, bug_id)

    title = pick(data, "title")
    if title:
        bug.title = optional_text(title, "title").strip() or bug.title
    description = pick(data, "description")
    if description is not UNSET:
        bug.description = optional_text(description, "description")
    severity = pick(data, "severity")
    if severity:
        bug.severity = choice(severity, BUG_SEVERITIES, "severity")
    status = pick(data, "status")
    if status:
        bug.set_status(choice(status, BUG_STATUSES, "status"))
    steps = pick(data, "stepsToReproduce")
    if steps is not UNSET and steps is not None:
        bug.steps_to_reproduce = string_list(steps, "stepsToReproduce")
    attachments = pick(data, "attachments")
    if attachments is not UNSET and attachments is not None:
        bug.attachments = string_list(attachments, "attachments")
    category_id = pick(data, "categoryId")
    if category_id is not UNSET:
        bug.category_id = _category_id(category_id)

    db.session.flush()
    return bug


def set_status(identity: Identity, bug_id: str, status) -> Bug:
    choice(status, BUG_STATUSES, "status")
    bug = get_bug(identity, bug_id)
    bug.set_status(status)
    return bug


def set_severity(identity: Identity, bug_id: str, severity) -> Bug:
    choice(severity, BUG_SEVERITIES, "severity")
    bug = get_bug(identity, bug_id)
    bug.severity = severity
    return bug


def delete_bug(identity: Identity, bug_id: str) -> None:
    bug = get_bug(identity, bug_id)
    db.session.delete(bug)
    logger.info("Bug %s deleted by %s", bug_id, identity.id)
