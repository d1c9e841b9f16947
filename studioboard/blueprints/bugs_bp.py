"""
Bugs Blueprint.

  GET    /api/bugs?projectId=&status=&severity=&categoryId=
  GET    /api/bugs/<id>
  POST   /api/bugs
  PUT    /api/bugs/<id>
  DELETE /api/bugs/<id>
  PATCH  /api/bugs/<id>/status     — resolvedAt follows the closed state
  PATCH  /api/bugs/<id>/severity
"""

from flask import Blueprint, jsonify, request

from studioboard.middleware.jwt_auth import current_identity
from studioboard.middleware.permission_required import require_page_access
from studioboard.models import isoformat
from studioboard.services import bug_service
from studioboard.utils.helpers import commit, json_body

bugs_bp = Blueprint("bugs", __name__, url_prefix="/api/bugs")


@bugs_bp.route("", methods=["GET"])
@require_page_access("bugs")
def list_bugs():
    bugs = bug_service.list_bugs(
        current_identity(),
        project_id=request.args.get("projectId"),
        status=request.args.get("status"),
        severity=request.args.get("severity"),
        category_id=request.args.get("categoryId"),
    )
    return jsonify([b.to_dict() for b in bugs])


@bugs_bp.route("/<bug_id>", methods=["GET"])
@require_page_access("bugs")
def get_bug(bug_id):
    return jsonify(bug_service.get_bug(current_identity(), bug_id).to_dict())


@bugs_bp.route("", methods=["POST"])
@require_page_access("bugs")
def create_bug():
    bug = bug_service.create_bug(current_identity(), json_body())
    commit()
    return jsonify(bug.to_dict()), 201


@bugs_bp.route("/<bug_id>", methods=["PUT"])
@require_page_access("bugs")
def update_bug(bug_id):
    bug = bug_service.update_bug(current_identity(), bug_id, json_body())
    commit()
    return jsonify(bug.to_dict())


@bugs_bp.route("/<bug_id>", methods=["DELETE"])
@require_page_access("bugs")
def delete_bug(bug_id):
    bug_service.delete_bug(current_identity(), bug_id)
    commit()
    return jsonify({"message": "Bug deleted"})


@bugs_bp.route("/<bug_id>/status", methods=["PATCH"])
@require_page_access("bugs")
def update_status(bug_id):
    bug = bug_service.set_status(current_identity(), bug_id, json_body().get("status"))
    commit()
    return jsonify({
        "message": "Status updated",
        "status": bug.status,
        "resolvedAt": isoformat(bug.resolved_at),
    })


@bugs_bp.route("/<bug_id>/severity", methods=["PATCH"])
@require_page_access("bugs")
def update_severity(bug_id):
    bug = bug_service.set_severity(current_identity(), bug_id, json_body().get("severity"))
    commit()
    return jsonify({"message": "Severity updated", "severity": bug.severity})
