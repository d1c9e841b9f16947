"""Task CRUD, status and time-log service."""

import logging

from studioboard.core.exceptions import ValidationError
from studioboard.models import db
from studioboard.models.task import TASK_PRIORITIES, TASK_STATUSES, Task, TaskAssignee
from studioboard.services.helpers.queries import get_or_404, replace_links
from studioboard.services.permission_service import (
    Identity,
    accessible_project_ids,
    require_project_access,
)
from studioboard.utils.helpers import (
    UNSET,
    choice,
    non_negative_number,
    optional_text,
    parse_datetime,
    pick,
    require_text,
    string_list,
)

logger = logging.getLogger(__name__)


def _assignee_row(user_id):
    return TaskAssignee(user_id=user_id)


def list_tasks(identity: Identity, *, project_id=None, status=None, assignee=None) -> list[Task]:
    """Newest first, optionally filtered; scoped to the caller's projects."""
    query = Task.query
    if project_id:
        require_project_access(identity, project_id)
        query = query.filter(Task.project_id == project_id)
    else:
        allowed = accessible_project_ids(identity)
        if allowed is not None:
            if not allowed:
                return []
            query = query.filter(Task.project_id.in_(allowed))
    if status:
        query = query.filter(Task.status == status)
    if assignee:
        query = query.filter(Task.assignments.any(TaskAssignee.user_id == assignee))
    return query.order_by(Task.created_at.desc()).all()


def get_task(identity: Identity, task_id: str) -> Task:
    """Load a task the caller may see (404 if missing, 403 if not a member)."""
    task = get_or_404(Task, task_id, "Task")
    require_project_access(identity, task.project_id)
    return task


def create_task(identity: Identity, data: dict) -> Task:
    fields = require_text(data, "projectId", "title")
    require_project_access(identity, fields["projectId"])

    task = Task(
        project_id=fields["projectId"],
        title=fields["title"],
        description=optional_text(data.get("description"), "description"),
        status=choice(data.get("status") or "todo", TASK_STATUSES, "status"),
        priority=choice(data.get("priority") or "medium", TASK_PRIORITIES, "priority"),
        created_by=identity.id,
        due_date=parse_datetime(data.get("dueDate"), "dueDate"),
        time_estimate=non_negative_number(data.get("timeEstimate"), "timeEstimate"),
        time_spent=0,
        tags=string_list(data.get("tags"), "tags"),
        dependencies=string_list(data.get("dependencies"), "dependencies"),
    )
    replace_links(
        task.assignments, string_list(data.get("assignees"), "assignees"), _assignee_row,
    )
    db.session.add(task)
    db.session.flush()
    logger.info("Task %s created in project %s", task.id, task.project_id)
    return task


def update_task(identity: Identity, task_id: str, data: dict) -> Task:
    """Partial update; a supplied `assignees` list replaces the current set."""
    task = get_task(identity, task_id)

    title = pick(data, "title")
    if title:
        task.title = optional_text(title, "title").strip() or task.title
    description = pick(data, "description")
    if description is not UNSET:
        task.description = optional_text(description, "description")
    status = pick(data, "status")
    if status:
        task.status = choice(status, TASK_STATUSES, "status")
    priority = pick(data, "priority")
    if priority:
        task.priority = choice(priority, TASK_PRIORITIES, "priority")
    due = pick(data, "dueDate")
    if due is not UNSET:
        task.due_date = parse_datetime(due, "dueDate")
    estimate = pick(data, "timeEstimate")
    if estimate is not UNSET:
        task.time_estimate = non_negative_number(estimate, "timeEstimate")
    spent = pick(data, "timeSpent")
    if spent is not UNSET and spent is not None:
        task.time_spent = non_negative_number(spent, "timeSpent")
    tags = pick(data, "tags")
    if tags is not UNSET and tags is not None:
        task.tags = string_list(tags, "tags")
    dependencies = pick(data, "dependencies")
    if dependencies is not UNSET and dependencies is not None:
        task.dependencies = string_list(dependencies, "dependencies")

    assignees = pick(data, "assignees")
    if assignees is not UNSET and assignees is not None:
        replace_links(task.assignments, string_list(assignees, "assignees"), _assignee_row)

    db.session.flush()
    return task


def set_status(identity: Identity, task_id: str, status) -> Task:
    choice(status, TASK_STATUSES, "status")
    task = get_task(identity, task_id)
    task.status = status
    return task


def log_time(identity: Identity, task_id: str, hours) -> Task:
    """Add `hours` (may be negative) to timeSpent; the total stays >= 0."""
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        raise ValidationError("hours must be a number", details={"hours": hours})
    task = get_task(identity, task_id)
    total = (task.time_spent or 0) + float(hours)
    if total < 0:
        raise ValidationError("timeSpent cannot become negative", details={"hours": hours})
    task.time_spent = total
    return task


def delete_task(identity: Identity, task_id: str) -> None:
    task = get_task(identity, task_id)
    db.session.delete(task)
    logger.info("Task %s deleted by %s", task_id, identity.id)
