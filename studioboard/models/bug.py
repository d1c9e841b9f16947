"""Bug domain model."""

from studioboard.models import db, isoformat, new_id, utcnow
from studioboard.models.types import JSONList

BUG_SEVERITIES = ("minor", "major", "critical", "blocker")
BUG_STATUSES = ("open", "in-progress", "testing", "closed")


class Bug(db.Model):
    """
    Defect reported against a project.

    resolved_at is non-null exactly when status == "closed"; it is
    maintained by `Bug.set_status()`, never assigned directly.
    """

    __tablename__ = "bugs"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text)
    severity = db.Column(db.String(20), nullable=False, default="major")
    status = db.Column(db.String(20), nullable=False, default="open", index=True)
    steps_to_reproduce = db.Column(JSONList(), default=list)
    attachments = db.Column(JSONList(), default=list)
    category_id = db.Column(
        db.String(36), db.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True,
    )
    reported_by = db.Column(db.String(36), nullable=False)
    resolved_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "severity IN ('minor', 'major', 'critical', 'blocker')", name="ck_bugs_severity",
        ),
        db.CheckConstraint(
            "status IN ('open', 'in-progress', 'testing', 'closed')", name="ck_bugs_status",
        ),
    )

    project = db.relationship("Project", back_populates="bugs")
    category = db.relationship("Category", back_populates="bugs")
    reporter = db.relationship(
        "User", primaryjoin="foreign(Bug.reported_by) == User.id", viewonly=True,
    )

    def set_status(self, status: str) -> None:
        """Move to `status`, keeping resolved_at in step with it.

        Entering "closed" stamps the current time; staying closed keeps the
        original stamp; any other status clears it.
        """
        if status == "closed":
            if self.status != "closed" or self.resolved_at is None:
                self.resolved_at = utcnow()
        else:
            self.resolved_at = None
        self.status = status

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
            "status": self.status,
            "stepsToReproduce": list(self.steps_to_reproduce or []),
            "attachments": list(self.attachments or []),
            "categoryId": self.category_id,
            "categoryName": self.category.name if self.category else None,
            "categoryColor": self.category.color if self.category else None,
            "reportedBy": self.reported_by,
            "reporterName": self.reporter.name if self.reporter else None,
            "resolvedAt": isoformat(self.resolved_at),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Bug {self.id}: {self.title[:40]}>"
