"""
User model — credentials, role and per-page access list.

The password hash never leaves this module through `to_dict()`.
"""

from studioboard.models import db, isoformat, new_id, utcnow
from studioboard.models.types import JSONList

ROLES = {"admin", "user"}
DEFAULT_COLOR = "#3b82f6"


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    # Always stored lower-cased: uniqueness is case-insensitive
    email = db.Column(db.String(200), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    password_hash = db.Column("password", db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="user")
    color = db.Column(db.String(20), default=DEFAULT_COLOR)
    avatar = db.Column(db.String(500))
    allowed_pages = db.Column(JSONList(unique=True), default=list)
    must_change_password = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint("role IN ('admin', 'user')", name="ck_users_role"),
    )

    # Join rows go with the user; authored tasks/bugs/projects do not
    project_memberships = db.relationship(
        "ProjectMember", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    category_memberships = db.relationship(
        "CategoryMember", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    task_assignments = db.relationship(
        "TaskAssignee", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    notifications = db.relationship(
        "Notification", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_summary(self) -> dict:
        """Compact form embedded in member and assignee lists."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "color": self.color,
            "avatar": self.avatar,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "color": self.color,
            "avatar": self.avatar,
            "allowedPages": list(self.allowed_pages or []),
            "mustChangePassword": bool(self.must_change_password),
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"
