"""
Project domain models.

Models:
    - Project: top-level container; owns every task, bug, document,
      calendar event and asset through ON DELETE CASCADE
    - ProjectMember: (project, user) membership pair
    - Document: markdown page attached to a project
    - CalendarEvent: dated event on the project calendar
    - Asset: production asset tracked through its pipeline status

`created_by` / `user_id` / `assigned_to` carry no foreign key: the author
must exist when the row is written (checked in the service layer) but a
later user deletion leaves the reference in place.
"""

from studioboard.models import db, isoformat, new_id, utcnow
from studioboard.models.user import DEFAULT_COLOR

# ── Constants ────────────────────────────────────────────────────────────────

PROJECT_STATUSES = {"active", "on-hold", "completed"}
EVENT_TYPES = {"meeting", "deadline", "vacation", "milestone", "other"}
ASSET_TYPES = {"sprite", "model", "audio", "texture", "animation", "other"}
ASSET_STATUSES = {"concept", "wip", "review", "approved", "integrated"}

_CHILD_CASCADE = dict(cascade="all, delete-orphan", passive_deletes=True)


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    created_by = db.Column(db.String(36), nullable=False, index=True)
    color = db.Column(db.String(20), default=DEFAULT_COLOR)
    cover_image = db.Column(db.String(500))
    status = db.Column(db.String(20), nullable=False, default="active")
    start_date = db.Column(db.DateTime(timezone=True), default=utcnow)
    end_date = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('active', 'on-hold', 'completed')", name="ck_projects_status",
        ),
    )

    creator = db.relationship(
        "User", primaryjoin="foreign(Project.created_by) == User.id", viewonly=True,
    )
    memberships = db.relationship("ProjectMember", back_populates="project", **_CHILD_CASCADE)
    tasks = db.relationship("Task", back_populates="project", **_CHILD_CASCADE)
    bugs = db.relationship("Bug", back_populates="project", **_CHILD_CASCADE)
    documents = db.relationship("Document", back_populates="project", **_CHILD_CASCADE)
    events = db.relationship("CalendarEvent", back_populates="project", **_CHILD_CASCADE)
    assets = db.relationship("Asset", back_populates="project", **_CHILD_CASCADE)

    @property
    def members(self):
        return [m.user for m in self.memberships if m.user is not None]

    def to_dict(self, include_members: bool = True) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdBy": self.created_by,
            "creatorName": self.creator.name if self.creator else None,
            "color": self.color,
            "coverImage": self.cover_image,
            "status": self.status,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if include_members:
            d["members"] = [u.to_summary() for u in self.members]
        return d

    def __repr__(self) -> str:
        return f"<Project {self.id}: {self.name}>"


class ProjectMember(db.Model):
    __tablename__ = "project_members"

    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True,
    )
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )

    project = db.relationship("Project", back_populates="memberships")
    user = db.relationship("User", back_populates="project_memberships")


class Document(db.Model):
    __tablename__ = "documents"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    markdown = db.Column(db.Text, default="")
    created_by = db.Column(db.String(36), nullable=False)
    doc_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    project = db.relationship("Project", back_populates="documents")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "markdown": self.markdown,
            "createdBy": self.created_by,
            "order": self.doc_order,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class CalendarEvent(db.Model):
    __tablename__ = "calendar_events"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text)
    start_date = db.Column(db.DateTime(timezone=True), nullable=False)
    end_date = db.Column(db.DateTime(timezone=True), nullable=False)
    user_id = db.Column(db.String(36), nullable=False)
    type = db.Column(db.String(20), nullable=False, default="other")
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "type IN ('meeting', 'deadline', 'vacation', 'milestone', 'other')",
            name="ck_calendar_events_type",
        ),
    )

    project = db.relationship("Project", back_populates="events")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "description": self.description,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "userId": self.user_id,
            "type": self.type,
            "createdAt": isoformat(self.created_at),
        }


class Asset(db.Model):
    __tablename__ = "assets"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    project_id = db.Column(
        db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name = db.Column(db.String(300), nullable=False)
    type = db.Column(db.String(20), nullable=False, default="other")
    status = db.Column(db.String(20), nullable=False, default="concept")
    assigned_to = db.Column(db.String(36))
    version = db.Column(db.String(30), default="1.0")
    file_url = db.Column(db.String(500))
    thumbnail = db.Column(db.String(500))
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "type IN ('sprite', 'model', 'audio', 'texture', 'animation', 'other')",
            name="ck_assets_type",
        ),
        db.CheckConstraint(
            "status IN ('concept', 'wip', 'review', 'approved', 'integrated')",
            name="ck_assets_status",
        ),
    )

    project = db.relationship("Project", back_populates="assets")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "assignedTo": self.assigned_to,
            "version": self.version,
            "fileUrl": self.file_url,
            "thumbnail": self.thumbnail,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
