"""
Projects Blueprint — projects, membership and project resources.

  GET    /api/projects                              — Caller's projects (admin: all)
  GET    /api/projects/<id>                         — 404 missing / 403 non-member
  POST   /api/projects                              — Create (admin)
  PUT    /api/projects/<id>                         — Update (admin)
  DELETE /api/projects/<id>                         — Delete with all children (admin)
  POST   /api/projects/<id>/members                 — Add member (admin)
  DELETE /api/projects/<id>/members/<user_id>       — Remove member (admin)

  GET|POST       /api/projects/<id>/documents
  PUT|DELETE     /api/projects/<id>/documents/<doc_id>
  GET|POST       /api/projects/<id>/events
  PUT|DELETE     /api/projects/<id>/events/<event_id>
  GET|POST       /api/projects/<id>/assets
  PUT|DELETE     /api/projects/<id>/assets/<asset_id>
"""

from flask import Blueprint, jsonify

from studioboard.middleware.jwt_auth import current_identity
from studioboard.middleware.permission_required import admin_required, require_page_access
from studioboard.middleware.project_access import require_project_access
from studioboard.services import project_resources_service as resources
from studioboard.services import project_service
from studioboard.utils.helpers import commit, json_body

projects_bp = Blueprint("projects", __name__, url_prefix="/api/projects")


# ═══════════════════════════════════════════════════════════════
#  Projects
# ═══════════════════════════════════════════════════════════════

@projects_bp.route("", methods=["GET"])
@require_page_access("projects")
def list_projects():
    projects = project_service.list_projects(current_identity())
    return jsonify([p.to_dict() for p in projects])


@projects_bp.route("/<project_id>", methods=["GET"])
@require_page_access("projects")
@require_project_access("project_id")
def get_project(project_id):
    return jsonify(project_service.get_project(project_id).to_dict())


@projects_bp.route("", methods=["POST"])
@admin_required
def create_project():
    project = project_service.create_project(current_identity(), json_body())
    commit()
    return jsonify(project.to_dict()), 201


@projects_bp.route("/<project_id>", methods=["PUT"])
@admin_required
def update_project(project_id):
    project = project_service.update_project(project_id, json_body())
    commit()
    return jsonify(project.to_dict())


@projects_bp.route("/<project_id>", methods=["DELETE"])
@admin_required
def delete_project(project_id):
    project_service.delete_project(project_id)
    commit()
    return jsonify({"message": "Project deleted"})


@projects_bp.route("/<project_id>/members", methods=["POST"])
@admin_required
def add_member(project_id):
    added = project_service.add_member(project_id, json_body().get("userId"))
    commit()
    return jsonify({"message": "Member added" if added else "Already a member"})


@projects_bp.route("/<project_id>/members/<user_id>", methods=["DELETE"])
@admin_required
def remove_member(project_id, user_id):
    project_service.remove_member(project_id, user_id)
    commit()
    return jsonify({"message": "Member removed"})


# ═══════════════════════════════════════════════════════════════
#  Documents
# ═══════════════════════════════════════════════════════════════

@projects_bp.route("/<project_id>/documents", methods=["GET"])
@require_page_access("documents")
@require_project_access("project_id")
def list_documents(project_id):
    return jsonify([d.to_dict() for d in resources.list_documents(project_id)])


@projects_bp.route("/<project_id>/documents", methods=["POST"])
@require_page_access("documents")
@require_project_access("project_id")
def create_document(project_id):
    doc = resources.create_document(current_identity(), project_id, json_body())
    commit()
    return jsonify(doc.to_dict()), 201


@projects_bp.route("/<project_id>/documents/<doc_id>", methods=["PUT"])
@require_page_access("documents")
@require_project_access("project_id")
def update_document(project_id, doc_id):
    doc = resources.update_document(project_id, doc_id, json_body())
    commit()
    return jsonify(doc.to_dict())


@projects_bp.route("/<project_id>/documents/<doc_id>", methods=["DELETE"])
@require_page_access("documents")
@require_project_access("project_id")
def delete_document(project_id, doc_id):
    resources.delete_document(project_id, doc_id)
    commit()
    return jsonify({"message": "Document deleted"})


# ═══════════════════════════════════════════════════════════════
#  Calendar events
# ═══════════════════════════════════════════════════════════════

@projects_bp.route("/<project_id>/events", methods=["GET"])
@require_page_access("calendar")
@require_project_access("project_id")
def list_events(project_id):
    return jsonify([e.to_dict() for e in resources.list_events(project_id)])


@projects_bp.route("/<project_id>/events", methods=["POST"])
@require_page_access("calendar")
@require_project_access("project_id")
def create_event(project_id):
    event = resources.create_event(current_identity(), project_id, json_body())
    commit()
    return jsonify(event.to_dict()), 201


@projects_bp.route("/<project_id>/events/<event_id>", methods=["PUT"])
@require_page_access("calendar")
@require_project_access("project_id")
def update_event(project_id, event_id):
    event = resources.update_event(project_id, event_id, json_body())
    commit()
    return jsonify(event.to_dict())


@projects_bp.route("/<project_id>/events/<event_id>", methods=["DELETE"])
@require_page_access("calendar")
@require_project_access("project_id")
def delete_event(project_id, event_id):
    resources.delete_event(project_id, event_id)
    commit()
    return jsonify({"message": "Event deleted"})


# ═══════════════════════════════════════════════════════════════
#  Assets
# ═══════════════════════════════════════════════════════════════

@projects_bp.route("/<project_id>/assets", methods=["GET"])
@require_page_access("assets")
@require_project_access("project_id")
def list_assets(project_id):
    return jsonify([a.to_dict() for a in resources.list_assets(project_id)])


@projects_bp.route("/<project_id>/assets", methods=["POST"])
@require_page_access("assets")
@require_project_access("project_id")
def create_asset(project_id):
    asset = resources.create_asset(project_id, json_body())
    commit()
    return jsonify(asset.to_dict()), 201


@projects_bp.route("/<project_id>/assets/<asset_id>", methods=["PUT"])
@require_page_access("assets")
@require_project_access("project_id")
def update_asset(project_id, asset_id):
    asset = resources.update_asset(project_id, asset_id, json_body())
    commit()
    return jsonify(asset.to_dict())


@projects_bp.route("/<project_id>/assets/<asset_id>", methods=["DELETE"])
@require_page_access("assets")
@require_project_access("project_id")
def delete_asset(project_id, asset_id):
    resources.delete_asset(project_id, asset_id)
    commit()
    return jsonify({"message": "Asset deleted"})
