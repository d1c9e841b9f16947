"""
Categories Blueprint — teams / services, independent of projects.

  GET    /api/categories
  GET    /api/categories/<id>
  POST   /api/categories                          (admin)
  PUT    /api/categories/<id>                     (admin)
  DELETE /api/categories/<id>                     (admin)
  POST   /api/categories/<id>/members             (admin)
  DELETE /api/categories/<id>/members/<user_id>   (admin)
"""

from flask import Blueprint, jsonify

from studioboard.middleware.permission_required import admin_required, require_page_access
from studioboard.services import category_service
from studioboard.utils.helpers import commit, json_body

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.route("", methods=["GET"])
@require_page_access("categories")
def list_categories():
    return jsonify([c.to_dict() for c in category_service.list_categories()])


@categories_bp.route("/<category_id>", methods=["GET"])
@require_page_access("categories")
def get_category(category_id):
    return jsonify(category_service.get_category(category_id).to_dict())


@categories_bp.route("", methods=["POST"])
@admin_required
def create_category():
    category = category_service.create_category(json_body())
    commit()
    return jsonify(category.to_dict()), 201


@categories_bp.route("/<category_id>", methods=["PUT"])
@admin_required
def update_category(category_id):
    category = category_service.update_category(category_id, json_body())
    commit()
    return jsonify(category.to_dict())


@categories_bp.route("/<category_id>", methods=["DELETE"])
@admin_required
def delete_category(category_id):
    category_service.delete_category(category_id)
    commit()
    return jsonify({"message": "Category deleted"})


@categories_bp.route("/<category_id>/members", methods=["POST"])
@admin_required
def add_member(category_id):
    added = category_service.add_member(category_id, json_body().get("userId"))
    commit()
    return jsonify({"message": "Member added" if added else "Already a member"})


@categories_bp.route("/<category_id>/members/<user_id>", methods=["DELETE"])
@admin_required
def remove_member(category_id, user_id):
    category_service.remove_member(category_id, user_id)
    commit()
    return jsonify({"message": "Member removed"})
