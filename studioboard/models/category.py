"""
Category (team / service) models.

Models:
    - Category: grouping of users, independent of projects
    - CategoryMember: (category, user) membership pair
"""

from studioboard.models import db, isoformat, new_id, utcnow
from studioboard.models.user import DEFAULT_COLOR


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(20), default=DEFAULT_COLOR)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    memberships = db.relationship(
        "CategoryMember", back_populates="category",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    # Bugs keep existing when their category goes away (category_id -> NULL)
    bugs = db.relationship("Bug", back_populates="category", passive_deletes=True)

    @property
    def members(self):
        return [m.user for m in self.memberships if m.user is not None]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "members": [u.to_summary() for u in self.members],
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Category {self.id}: {self.name}>"


class CategoryMember(db.Model):
    __tablename__ = "category_members"

    category_id = db.Column(
        db.String(36), db.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True,
    )
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )

    category = db.relationship("Category", back_populates="memberships")
    user = db.relationship("User", back_populates="category_memberships")
