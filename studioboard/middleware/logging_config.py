"""
Logging setup for StudioBoard.

Production writes one JSON object per line; development and testing write a
single readable line per record. Records emitted while serving a request
carry the request id and the caller's user id (see middleware/timing.py).
LOG_LEVEL overrides the default level.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

# Attributes the request logger attaches through `extra=`
REQUEST_FIELDS = (
    "method", "path", "status", "duration_ms", "remote_addr", "request_id", "user_id",
)


def _request_fields(record: logging.LogRecord) -> dict:
    return {
        key: getattr(record, key)
        for key in REQUEST_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_request_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """`HH:MM:SS LEVEL logger: message [request_id user_id]`."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _request_fields(record)
        tags = [str(fields[k]) for k in ("request_id", "user_id") if fields.get(k)]
        if tags:
            # keep the traceback (if any) after the tagged first line
            head, sep, tail = line.partition("\n")
            line = f"{head} [{' '.join(tags)}]{sep}{tail}"
        return line


def configure_logging(app):
    """Install a single stderr handler on the root logger.

    Level defaults to DEBUG outside production and INFO in production.
    """
    is_testing = app.config.get("TESTING", False)
    is_prod = not app.config.get("DEBUG", False) and not is_testing

    level_name = os.getenv("LOG_LEVEL", "INFO" if is_prod else "DEBUG").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if is_prod else ReadableFormatter())

    root = logging.getLogger()
    # tests build several apps in one process
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("werkzeug", "sqlalchemy.engine", "alembic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not is_testing:
        app.logger.info("Logging configured (level=%s, %s)",
                        level_name, "json" if is_prod else "readable")
