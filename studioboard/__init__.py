"""
StudioBoard
Flask Application Factory.

Usage:
    from studioboard import create_app
    app = create_app()           # defaults to APP_ENV, else "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os
import time

from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from studioboard.config import config
from studioboard.core.error_handlers import register_error_handlers
from studioboard.core.exceptions import ValidationError
from studioboard.middleware.jwt_auth import init_jwt_middleware
from studioboard.middleware.logging_config import configure_logging
from studioboard.middleware.rate_limiter import init_rate_limits
from studioboard.middleware.security_headers import init_security_headers
from studioboard.middleware.timing import init_request_timing
from studioboard.models import db

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # limits are applied per blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def _auto_add_missing_columns(app, db):
    """
    Compare model metadata against the live schema and ADD COLUMN for any
    column the code defines but an existing table lacks. Idempotent; runs on
    every startup so databases created by an older release keep working
    without a manual migration.

    NOT NULL columns without a scalar default are added as nullable.
    """
    import sqlalchemy as sa

    inspector = sa.inspect(db.engine)
    existing_tables = set(inspector.get_table_names())
    added = []

    with db.engine.begin() as conn:
        for table in db.metadata.sorted_tables:
            if table.name not in existing_tables:
                continue  # db.create_all() handles it
            existing_cols = {c["name"] for c in inspector.get_columns(table.name)}

            for col in table.columns:
                if col.name in existing_cols:
                    continue

                try:
                    col_type = col.type.compile(dialect=db.engine.dialect)
                except Exception:
                    col_type = "TEXT"

                default = ""
                if col.default is not None and col.default.is_scalar:
                    value = col.default.arg
                    if isinstance(value, bool):
                        value = int(value)
                    default = f" DEFAULT '{value}'"
                nullable = " NOT NULL" if not col.nullable and default else ""

                conn.execute(sa.text(
                    f'ALTER TABLE "{table.name}" ADD COLUMN "{col.name}" {col_type}{nullable}{default}'
                ))
                added.append(f"{table.name}.{col.name}")

    if added:
        app.logger.info("Auto-added %d missing columns: %s", len(added), ", ".join(added))


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    config_class = config[config_name]
    app.config.from_object(config_class() if config_name == "production" else config_class)
    app.config["STARTED_AT"] = time.monotonic()

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Security headers, request timing, JWT identity ───────────────────
    init_security_headers(app)
    init_request_timing(app)
    init_jwt_middleware(app)

    # ── Request guard (Content-Type on mutating API calls) ───────────────
    @app.before_request
    def _guard_request():
        from flask import request as _req
        if _req.method in ("POST", "PUT", "PATCH") and _req.path.startswith("/api/"):
            ct = _req.content_type or ""
            if _req.content_length and "json" not in ct and "multipart/form-data" not in ct:
                raise ValidationError("Content-Type must be application/json")

    # ── Import all models so Alembic and create_all() see them ───────────
    from studioboard.models import user as _user_models              # noqa: F401
    from studioboard.models import project as _project_models        # noqa: F401
    from studioboard.models import task as _task_models              # noqa: F401
    from studioboard.models import bug as _bug_models                # noqa: F401
    from studioboard.models import category as _category_models      # noqa: F401
    from studioboard.models import notification as _notification_models  # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) + column back-fill ─────
    if config_name != "testing":
        if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
            os.makedirs(app.instance_path, exist_ok=True)
        with app.app_context():
            db.create_all()
            try:
                _auto_add_missing_columns(app, db)
            except Exception as e:
                app.logger.warning("auto-add-columns failed: %s", e)

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    # ── Blueprints ───────────────────────────────────────────────────────
    from studioboard.blueprints.auth_bp import auth_bp
    from studioboard.blueprints.bugs_bp import bugs_bp
    from studioboard.blueprints.categories_bp import categories_bp
    from studioboard.blueprints.health_bp import health_bp
    from studioboard.blueprints.notifications_bp import notifications_bp
    from studioboard.blueprints.projects_bp import projects_bp
    from studioboard.blueprints.tasks_bp import tasks_bp
    from studioboard.blueprints.uploads_bp import files_bp, uploads_bp
    from studioboard.blueprints.users_bp import users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(bugs_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(health_bp)

    # ── Error handlers ───────────────────────────────────────────────────
    register_error_handlers(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    from studioboard.cli import register_cli
    register_cli(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
