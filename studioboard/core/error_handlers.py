"""
Application-wide error handlers.

Every error leaves the API as `{"error": "<message>"}`. Blueprints raise
the exceptions from `studioboard.core.exceptions` and never build error
responses themselves.

    ValidationError       → 400 (+ "details" when present), session rolled back
    AuthenticationError   → 401
    ForbiddenError        → 403
    NotFoundError         → 404
    HTTPException         → its own status (404 unknown route, 405, 429 ...)
    anything else         → 500, logged with traceback, session rolled back
"""

import logging

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from studioboard.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    StudioBoardError,
    ValidationError,
)
from studioboard.models import db

logger = logging.getLogger(__name__)

_HTTP_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
    429: "Too many requests",
}


def register_error_handlers(app):
    """Register JSON error handlers on `app`."""

    @app.errorhandler(ValidationError)
    def _validation(exc):
        # a partial update may have touched rows before the bad field
        db.session.rollback()
        body = {"error": exc.message}
        if exc.details:
            body["details"] = exc.details
        return jsonify(body), 400

    @app.errorhandler(AuthenticationError)
    def _unauthorized(exc):
        return jsonify({"error": exc.message}), 401

    @app.errorhandler(ForbiddenError)
    def _forbidden(exc):
        return jsonify({"error": exc.message}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(exc):
        logger.debug("%s id=%s not found", exc.resource, exc.resource_id)
        return jsonify({"error": exc.message}), 404

    @app.errorhandler(StudioBoardError)
    def _app_error(exc):
        return jsonify({"error": exc.message}), exc.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(exc):
        limit = current_app.config.get("MAX_UPLOAD_SIZE", 0) // (1024 * 1024)
        return jsonify({"error": f"File too large (max {limit}MB)"}), 400

    @app.errorhandler(HTTPException)
    def _http_error(exc):
        message = _HTTP_MESSAGES.get(exc.code) or exc.description or exc.name
        return jsonify({"error": message}), exc.code

    @app.errorhandler(Exception)
    def _unhandled(exc):
        logger.exception("Unhandled error: %s", exc)
        db.session.rollback()
        body = {"error": "Internal server error"}
        if current_app.debug:
            body["message"] = str(exc)
        return jsonify(body), 500
