"""
Auth Blueprint — session token endpoints.

  POST /api/auth/login            — Email + password → {token, user}
  GET  /api/auth/me               — Current user profile
  POST /api/auth/change-password  — Set a new password
  POST /api/auth/logout           — Acknowledged; the client drops its token
"""

import logging

from flask import Blueprint, jsonify

from studioboard.middleware.jwt_auth import current_identity, login_required
from studioboard.services import user_service
from studioboard.services.jwt_service import issue_token
from studioboard.utils.helpers import commit, json_body

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/login
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate with email + password.

    Body: { "email": "...", "password": "..." }
    """
    data = json_body()
    user = user_service.login(data.get("email"), data.get("password"))
    return jsonify({"token": issue_token(user.id), "user": user.to_dict()})


# ═══════════════════════════════════════════════════════════════
# GET /api/auth/me
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    user = user_service.get_user(current_identity().id)
    return jsonify({"user": user.to_dict()})


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/change-password
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/change-password", methods=["POST"])
@login_required
def change_password():
    """
    Body: { "currentPassword": "...", "newPassword": "..." }

    currentPassword may be omitted while mustChangePassword is set.
    """
    data = json_body()
    user = user_service.change_password(
        current_identity(), data.get("currentPassword"), data.get("newPassword"),
    )
    commit()
    logger.info("User %s changed password", user.id)
    return jsonify({"message": "Password updated", "user": user.to_dict()})


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/logout
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    """Tokens are not revoked server-side; they lapse at expiry."""
    return jsonify({"message": "Logged out"})
