"""
Shared pytest fixtures for the StudioBoard test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - upload_dir: per-test UPLOAD_FOLDER under tmp_path
    - make_user / admin / alice / bob: seeded accounts
    - auth_headers: Bearer headers for a user
    - project: a project created by `admin` with `alice` as member
"""

import pytest

from studioboard import create_app
from studioboard.models import db as _db
from studioboard.models.project import Project, ProjectMember
from studioboard.models.user import User
from studioboard.services.jwt_service import issue_token
from studioboard.utils.crypto import hash_password

DEFAULT_PASSWORD = "secret123"


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def upload_dir(app, tmp_path):
    """Point UPLOAD_FOLDER at a per-test directory."""
    previous = app.config["UPLOAD_FOLDER"]
    app.config["UPLOAD_FOLDER"] = str(tmp_path)
    yield tmp_path
    app.config["UPLOAD_FOLDER"] = previous


# ── Users & auth ─────────────────────────────────────────────────────────


@pytest.fixture()
def make_user():
    """Factory: create and commit a User directly in the database."""
    counter = {"n": 0}

    def _make(email=None, name=None, role="user", password=DEFAULT_PASSWORD,
              allowed_pages=None, must_change_password=False):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@studio.com",
            name=name or f"User {counter['n']}",
            password_hash=hash_password(password),
            role=role,
            allowed_pages=allowed_pages or [],
            must_change_password=must_change_password,
        )
        _db.session.add(user)
        _db.session.commit()
        return user

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@studio.com", name="Ada Admin", role="admin")


@pytest.fixture()
def alice(make_user):
    return make_user(email="alice@studio.com", name="Alice Artist")


@pytest.fixture()
def bob(make_user):
    return make_user(email="bob@studio.com", name="Bob Builder")


@pytest.fixture()
def auth_headers():
    """Return Bearer headers for `user` (a User row or a user id)."""

    def _headers(user):
        user_id = user if isinstance(user, str) else user.id
        return {"Authorization": f"Bearer {issue_token(user_id)}"}

    return _headers


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def project(admin, alice):
    """A project created by `admin` with `alice` as the only other member."""
    proj = Project(name="Moonlight", created_by=admin.id)
    proj.memberships.extend([
        ProjectMember(user_id=admin.id),
        ProjectMember(user_id=alice.id),
    ])
    _db.session.add(proj)
    _db.session.commit()
    return proj
