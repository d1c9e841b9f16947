"""
Health check blueprint.

Endpoints:
    GET /api/health       — {status, timestamp, uptime}
    GET /api/health/live  — database round-trip, 503 when degraded
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from studioboard.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


@health_bp.route("", methods=["GET"])
def health():
    started = current_app.config.get("STARTED_AT", time.monotonic())
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started, 3),
    })


@health_bp.route("/live", methods=["GET"])
def live():
    """Liveness check with database status."""
    checks = {}
    overall = True

    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1)}
    except Exception as exc:
        db.session.rollback()
        checks["database"] = {"status": "error"}
        if current_app.debug:
            checks["database"]["detail"] = str(exc)
        overall = False
        logger.error("Health check: database failed: %s", exc)

    checks["app"] = {
        "name": "StudioBoard",
        "debug": current_app.debug,
        "testing": current_app.testing,
    }

    status = "healthy" if overall else "degraded"
    return jsonify({"status": status, "checks": checks}), 200 if overall else 503
