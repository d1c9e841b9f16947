"""
Users Blueprint.

  GET    /api/users        — List users (any authenticated caller)
  GET    /api/users/<id>   — Single user
  POST   /api/users        — Create user (admin)
  PUT    /api/users/<id>   — Update (self: name/color; admin: everything)
  DELETE /api/users/<id>   — Delete (admin, never self)
"""

from flask import Blueprint, jsonify

from studioboard.middleware.jwt_auth import current_identity, login_required
from studioboard.middleware.permission_required import admin_required
from studioboard.services import user_service
from studioboard.utils.helpers import commit, json_body

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("", methods=["GET"])
@login_required
def list_users():
    return jsonify([u.to_dict() for u in user_service.list_users()])


@users_bp.route("/<user_id>", methods=["GET"])
@login_required
def get_user(user_id):
    return jsonify(user_service.get_user(user_id).to_dict())


@users_bp.route("", methods=["POST"])
@admin_required
def create_user():
    user = user_service.create_user(json_body())
    commit()
    return jsonify(user.to_dict()), 201


@users_bp.route("/<user_id>", methods=["PUT"])
@login_required
def update_user(user_id):
    user = user_service.update_user(current_identity(), user_id, json_body())
    commit()
    return jsonify(user.to_dict())


@users_bp.route("/<user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id):
    user_service.delete_user(current_identity(), user_id)
    commit()
    return jsonify({"message": "User deleted"})
