"""initial_schema

Creates the StudioBoard schema:
  - users, categories, projects
  - project_members, category_members           (composite PK, cascade both sides)
  - tasks, task_assignees, bugs                 (cascade with their project)
  - documents, calendar_events, assets          (cascade with their project)
  - notifications                               (cascade with their owner)

Tables are created conditionally so databases that already received them
through db.create_all() on a development machine can be stamped forward.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column("id", sa.String(length=36), primary_key=True)


def _timestamps(updated=True):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=True)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True))
    return cols


def _project_fk():
    return sa.Column(
        "project_id", sa.String(length=36),
        sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False,
    )


def upgrade():
    bind = op.get_bind()
    existing = set(sa_inspect(bind).get_table_names())

    # ── Users ─────────────────────────────────────────────────────────────
    if "users" not in existing:
        op.create_table(
            "users",
            _id(),
            sa.Column("email", sa.String(length=200), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("password", sa.String(length=256), nullable=False),
            sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
            sa.Column("color", sa.String(length=20), nullable=True),
            sa.Column("avatar", sa.String(length=500), nullable=True),
            sa.Column("allowed_pages", sa.Text(), nullable=True),
            sa.Column("must_change_password", sa.Boolean(), nullable=False,
                      server_default=sa.false()),
            *_timestamps(),
            sa.CheckConstraint("role IN ('admin', 'user')", name="ck_users_role"),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── Categories ────────────────────────────────────────────────────────
    if "categories" not in existing:
        op.create_table(
            "categories",
            _id(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("color", sa.String(length=20), nullable=True),
            *_timestamps(updated=False),
        )

    # ── Projects ──────────────────────────────────────────────────────────
    if "projects" not in existing:
        op.create_table(
            "projects",
            _id(),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("created_by", sa.String(length=36), nullable=False),
            sa.Column("color", sa.String(length=20), nullable=True),
            sa.Column("cover_image", sa.String(length=500), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
            sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
            *_timestamps(),
            sa.CheckConstraint(
                "status IN ('active', 'on-hold', 'completed')", name="ck_projects_status",
            ),
        )
        op.create_index("ix_projects_created_by", "projects", ["created_by"])

    # ── Membership join tables ────────────────────────────────────────────
    if "project_members" not in existing:
        op.create_table(
            "project_members",
            sa.Column("project_id", sa.String(length=36),
                      sa.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("user_id", sa.String(length=36),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        )

    if "category_members" not in existing:
        op.create_table(
            "category_members",
            sa.Column("category_id", sa.String(length=36),
                      sa.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("user_id", sa.String(length=36),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        )

    # ── Tasks ─────────────────────────────────────────────────────────────
    if "tasks" not in existing:
        op.create_table(
            "tasks",
            _id(),
            _project_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="todo"),
            sa.Column("priority", sa.String(length=20), nullable=False, server_default="medium"),
            sa.Column("created_by", sa.String(length=36), nullable=False),
            sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("time_estimate", sa.Float(), nullable=True),
            sa.Column("time_spent", sa.Float(), nullable=False, server_default="0"),
            sa.Column("tags", sa.Text(), nullable=True),
            sa.Column("dependencies", sa.Text(), nullable=True),
            *_timestamps(),
            sa.CheckConstraint(
                "status IN ('todo', 'in-progress', 'review', 'done')", name="ck_tasks_status",
            ),
            sa.CheckConstraint(
                "priority IN ('low', 'medium', 'high', 'critical')", name="ck_tasks_priority",
            ),
            sa.CheckConstraint("time_spent >= 0", name="ck_tasks_time_spent"),
        )
        op.create_index("ix_tasks_project_id", "tasks", ["project_id"])
        op.create_index("ix_tasks_status", "tasks", ["status"])

    if "task_assignees" not in existing:
        op.create_table(
            "task_assignees",
            sa.Column("task_id", sa.String(length=36),
                      sa.ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("user_id", sa.String(length=36),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        )

    # ── Bugs ──────────────────────────────────────────────────────────────
    if "bugs" not in existing:
        op.create_table(
            "bugs",
            _id(),
            _project_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("severity", sa.String(length=20), nullable=False, server_default="major"),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
            sa.Column("steps_to_reproduce", sa.Text(), nullable=True),
            sa.Column("attachments", sa.Text(), nullable=True),
            sa.Column("category_id", sa.String(length=36),
                      sa.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True),
            sa.Column("reported_by", sa.String(length=36), nullable=False),
            sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
            *_timestamps(),
            sa.CheckConstraint(
                "severity IN ('minor', 'major', 'critical', 'blocker')", name="ck_bugs_severity",
            ),
            sa.CheckConstraint(
                "status IN ('open', 'in-progress', 'testing', 'closed')", name="ck_bugs_status",
            ),
        )
        op.create_index("ix_bugs_project_id", "bugs", ["project_id"])
        op.create_index("ix_bugs_status", "bugs", ["status"])

    # ── Project resources ─────────────────────────────────────────────────
    if "documents" not in existing:
        op.create_table(
            "documents",
            _id(),
            _project_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("markdown", sa.Text(), nullable=True),
            sa.Column("created_by", sa.String(length=36), nullable=False),
            sa.Column("doc_order", sa.Integer(), nullable=False, server_default="0"),
            *_timestamps(),
        )
        op.create_index("ix_documents_project_id", "documents", ["project_id"])

    if "calendar_events" not in existing:
        op.create_table(
            "calendar_events",
            _id(),
            _project_fk(),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("user_id", sa.String(length=36), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False, server_default="other"),
            *_timestamps(updated=False),
            sa.CheckConstraint(
                "type IN ('meeting', 'deadline', 'vacation', 'milestone', 'other')",
                name="ck_calendar_events_type",
            ),
        )
        op.create_index("ix_calendar_events_project_id", "calendar_events", ["project_id"])

    if "assets" not in existing:
        op.create_table(
            "assets",
            _id(),
            _project_fk(),
            sa.Column("name", sa.String(length=300), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False, server_default="other"),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="concept"),
            sa.Column("assigned_to", sa.String(length=36), nullable=True),
            sa.Column("version", sa.String(length=30), nullable=True),
            sa.Column("file_url", sa.String(length=500), nullable=True),
            sa.Column("thumbnail", sa.String(length=500), nullable=True),
            *_timestamps(),
            sa.CheckConstraint(
                "type IN ('sprite', 'model', 'audio', 'texture', 'animation', 'other')",
                name="ck_assets_type",
            ),
            sa.CheckConstraint(
                "status IN ('concept', 'wip', 'review', 'approved', 'integrated')",
                name="ck_assets_status",
            ),
        )
        op.create_index("ix_assets_project_id", "assets", ["project_id"])

    # ── Notifications ─────────────────────────────────────────────────────
    if "notifications" not in existing:
        op.create_table(
            "notifications",
            _id(),
            sa.Column("user_id", sa.String(length=36),
                      sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("type", sa.String(length=50), nullable=False),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("message", sa.Text(), nullable=True),
            sa.Column("link", sa.String(length=500), nullable=True),
            sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(updated=False),
        )
        op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
        op.create_index("ix_notifications_read", "notifications", ["read"])


def downgrade():
    for table in (
        "notifications",
        "assets",
        "calendar_events",
        "documents",
        "bugs",
        "task_assignees",
        "tasks",
        "category_members",
        "project_members",
        "projects",
        "categories",
        "users",
    ):
        op.drop_table(table)
