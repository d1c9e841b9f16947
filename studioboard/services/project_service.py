"""Project CRUD and membership service.

The creator is always a member of a project they create. A full `members`
list on update replaces the membership set as given.
"""

import logging

from studioboard.core.exceptions import ValidationError
from studioboard.models import as_utc, db
from studioboard.models.project import PROJECT_STATUSES, Project, ProjectMember
from studioboard.models.user import DEFAULT_COLOR
from studioboard.services.helpers.queries import add_link, get_or_404, remove_link, replace_links
from studioboard.services.permission_service import Identity, accessible_project_ids
from studioboard.utils.helpers import (
    UNSET,
    choice,
    optional_text,
    parse_datetime,
    pick,
    require_text,
    string_list,
)

logger = logging.getLogger(__name__)


def _member_row(user_id):
    return ProjectMember(user_id=user_id)


def _check_dates(project: Project):
    start, end = as_utc(project.start_date), as_utc(project.end_date)
    if start and end and end < start:
        raise ValidationError("endDate must not be before startDate")


def list_projects(identity: Identity) -> list[Project]:
    """Admins see every project; other users only those they belong to."""
    query = Project.query
    allowed = accessible_project_ids(identity)
    if allowed is not None:
        if not allowed:
            return []
        query = query.filter(Project.id.in_(allowed))
    return query.order_by(Project.created_at.desc()).all()


def get_project(project_id: str) -> Project:
    return get_or_404(Project, project_id, "Project")


def create_project(identity: Identity, data: dict) -> Project:
    name = require_text(data, "name")["name"]
    members = string_list(data.get("members"), "members")

    project = Project(
        name=name,
        description=optional_text(data.get("description"), "description"),
        created_by=identity.id,
        color=optional_text(data.get("color"), "color") or DEFAULT_COLOR,
        cover_image=optional_text(data.get("coverImage"), "coverImage"),
        status=choice(data.get("status") or "active", sorted(PROJECT_STATUSES), "status"),
        end_date=parse_datetime(data.get("endDate"), "endDate"),
    )
    start = parse_datetime(data.get("startDate"), "startDate")
    if start is not None:
        project.start_date = start
    _check_dates(project)

    replace_links(project.memberships, [identity.id, *members], _member_row)
    db.session.add(project)
    db.session.flush()
    logger.info("Project %s created by %s", project.id, identity.id)
    return project


def update_project(project_id: str, data: dict) -> Project:
    project = get_project(project_id)

    name = pick(data, "name")
    if name:
        project.name = optional_text(name, "name").strip() or project.name
    description = pick(data, "description")
    if description is not UNSET:
        project.description = optional_text(description, "description")
    color = pick(data, "color")
    if color:
        project.color = optional_text(color, "color")
    cover = pick(data, "coverImage")
    if cover is not UNSET:
        project.cover_image = optional_text(cover, "coverImage")
    status = pick(data, "status")
    if status:
        project.status = choice(status, sorted(PROJECT_STATUSES), "status")
    start = pick(data, "startDate")
    if start:
        project.start_date = parse_datetime(start, "startDate")
    end = pick(data, "endDate")
    if end is not UNSET:
        project.end_date = parse_datetime(end, "endDate")
    _check_dates(project)

    members = pick(data, "members")
    if members is not UNSET and members is not None:
        replace_links(project.memberships, string_list(members, "members"), _member_row)

    db.session.flush()
    return project


def delete_project(project_id: str) -> None:
    """Delete a project; the database cascades to every child row."""
    project = get_project(project_id)
    db.session.delete(project)
    logger.info("Project %s deleted", project_id)


def add_member(project_id: str, user_id) -> bool:
    if not user_id:
        raise ValidationError("userId required")
    project = get_project(project_id)
    return add_link(project.memberships, optional_text(user_id, "userId"), _member_row)


def remove_member(project_id: str, user_id: str) -> bool:
    project = get_project(project_id)
    return remove_link(project.memberships, user_id)
