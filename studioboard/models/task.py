"""
Task domain models.

Models:
    - Task: unit of work inside a project
    - TaskAssignee: (task, user) assignment pair
"""

from studioboard.models import db, isoformat, new_id, utcnow
from studioboard.models.types import JSONList

TASK_STATUSES = ("todo", "in-progress", "review", "done")
TASK_PRIORITIES = ("low", "medium", "high", "critical")


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default="todo", index=True)
    priority = db.Column(db.String(20), nullable=False, default="medium")
    created_by = db.Column(db.String(36), nullable=False)
    due_date = db.Column(db.DateTime(timezone=True))
    time_estimate = db.Column(db.Float)
    time_spent = db.Column(db.Float, nullable=False, default=0)
    tags = db.Column(JSONList(unique=True), default=list)
    # Task ids; neither existence nor cycles are checked
    dependencies = db.Column(JSONList(unique=True), default=list)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('todo', 'in-progress', 'review', 'done')", name="ck_tasks_status",
        ),
        db.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'critical')", name="ck_tasks_priority",
        ),
        db.CheckConstraint("time_spent >= 0", name="ck_tasks_time_spent"),
    )

    project = db.relationship("Project", back_populates="tasks")
    creator = db.relationship(
        "User", primaryjoin="foreign(Task.created_by) == User.id", viewonly=True,
    )
    assignments = db.relationship(
        "TaskAssignee", back_populates="task",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    @property
    def assignees(self):
        return [a.user for a in self.assignments if a.user is not None]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "createdBy": self.created_by,
            "creatorName": self.creator.name if self.creator else None,
            "dueDate": isoformat(self.due_date),
            "timeEstimate": self.time_estimate,
            "timeSpent": self.time_spent or 0,
            "tags": list(self.tags or []),
            "dependencies": list(self.dependencies or []),
            "assignees": [u.to_summary() for u in self.assignees],
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title[:40]}>"


class TaskAssignee(db.Model):
    __tablename__ = "task_assignees"

    task_id = db.Column(
        db.String(36), db.ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True,
    )
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )

    task = db.relationship("Task", back_populates="assignments")
    user = db.relationship("User", back_populates="task_assignments")
