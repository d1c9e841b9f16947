"""
StudioBoard
SQLAlchemy extension instance and shared column helpers.

Every model module imports `db` from here; `create_app()` binds it with
`db.init_app(app)` so sessions live in the app context.
"""

import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def new_id() -> str:
    """Opaque unique identifier for every entity."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value):
    """Attach UTC to naive datetimes (SQLite drops the offset on read)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def isoformat(value):
    return as_utc(value).isoformat() if value else None
