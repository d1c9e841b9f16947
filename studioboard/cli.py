"""
CLI commands registered on the Flask app.

    flask init-db           create tables and the default admin account
    flask init-db --demo    ... plus demo users, teams, a project and tasks

The admin account comes from ADMIN_EMAIL / ADMIN_PASSWORD and must change
its password at first login. The command refuses to touch a database that
already has users.
"""

import logging

import click

from studioboard.models import db
from studioboard.models.category import Category, CategoryMember
from studioboard.models.project import Project, ProjectMember
from studioboard.models.task import Task
from studioboard.models.user import User
from studioboard.utils.crypto import hash_password
from studioboard.utils.helpers import commit

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("dev@studioboard.dev", "Bob Developer", "admin", "#10b981"),
    ("designer@studioboard.dev", "Charlie Designer", "user", "#f59e0b"),
    ("artist@studioboard.dev", "Diana Artist", "user", "#ec4899"),
    ("sound@studioboard.dev", "Eve Sound Designer", "user", "#8b5cf6"),
    ("qa@studioboard.dev", "Frank QA", "user", "#ef4444"),
]

DEMO_CATEGORIES = [
    ("UI/UX", "User interface and user experience", "#8b5cf6"),
    ("Development", "Backend and frontend development", "#10b981"),
    ("QA", "Quality assurance and testing", "#ef4444"),
    ("Audio", "Sound design and music", "#f59e0b"),
    ("Production", "Project management and coordination", "#06b6d4"),
]

DEMO_TASKS = [
    ("Set up the server", "done", "high"),
    ("Build the user interface", "in-progress", "high"),
    ("Implement authentication", "done", "critical"),
    ("Test the features", "todo", "medium"),
    ("Deploy to production", "todo", "high"),
]


class DatabaseNotEmpty(click.ClickException):
    def __init__(self):
        super().__init__("Database already contains users; remove it first to re-initialise.")


def init_database(admin_email: str, admin_password: str, demo: bool = False) -> dict:
    """Seed an empty database; returns counts of what was created."""
    db.create_all()
    if db.session.query(User.id).first() is not None:
        raise DatabaseNotEmpty()

    admin = User(
        email=admin_email.strip().lower(),
        name="Administrator",
        password_hash=hash_password(admin_password),
        role="admin",
        must_change_password=True,
    )
    db.session.add(admin)
    summary = {"users": 1, "categories": 0, "projects": 0, "tasks": 0}

    if demo:
        demo_hash = hash_password(DEMO_PASSWORD)
        users = [admin] + [
            User(email=email, name=name, password_hash=demo_hash, role=role, color=color)
            for email, name, role, color in DEMO_USERS
        ]
        db.session.add_all(users[1:])
        db.session.flush()

        for index, (name, description, color) in enumerate(DEMO_CATEGORIES):
            category = Category(name=name, description=description, color=color)
            # One team per demo user, in order
            if index + 1 < len(users):
                category.memberships.append(CategoryMember(user_id=users[index + 1].id))
            db.session.add(category)

        project = Project(
            name="Demo Project",
            description="A demo project to try the features",
            created_by=admin.id,
        )
        project.memberships.extend(ProjectMember(user_id=u.id) for u in users)
        db.session.add(project)
        db.session.flush()

        for title, status, priority in DEMO_TASKS:
            db.session.add(Task(
                project_id=project.id,
                title=title,
                status=status,
                priority=priority,
                created_by=admin.id,
                tags=["demo"],
            ))

        summary.update(
            users=len(users),
            categories=len(DEMO_CATEGORIES),
            projects=1,
            tasks=len(DEMO_TASKS),
        )

    commit()
    logger.info("Database initialised: %s", summary)
    return summary


def register_cli(app):
    """Attach the studioboard commands to `app.cli`."""

    @app.cli.command("init-db")
    @click.option("--demo", is_flag=True, help="Also create demo users, teams, project and tasks.")
    def init_db_cmd(demo):
        """Create tables and the default admin account."""
        summary = init_database(
            app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"], demo=demo,
        )
        click.echo(f"Admin account: {app.config['ADMIN_EMAIL']} (change the password at first login)")
        if demo:
            click.echo(f"Demo users share the password '{DEMO_PASSWORD}'")
        click.echo(
            "Created {users} user(s), {categories} categories, "
            "{projects} project(s), {tasks} task(s)".format(**summary)
        )
