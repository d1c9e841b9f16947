"""
Tasks Blueprint.

  GET    /api/tasks?projectId=&status=&assignee=
  GET    /api/tasks/<id>
  POST   /api/tasks
  PUT    /api/tasks/<id>
  DELETE /api/tasks/<id>
  PATCH  /api/tasks/<id>/status   — { "status": "..." }
  PATCH  /api/tasks/<id>/time     — { "hours": n } added to timeSpent

Every route also requires membership of the task's project (admins bypass).
"""

from flask import Blueprint, jsonify, request

from studioboard.middleware.jwt_auth import current_identity
from studioboard.middleware.permission_required import require_page_access
from studioboard.services import task_service
from studioboard.utils.helpers import commit, json_body

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")


@tasks_bp.route("", methods=["GET"])
@require_page_access("tasks")
def list_tasks():
    tasks = task_service.list_tasks(
        current_identity(),
        project_id=request.args.get("projectId"),
        status=request.args.get("status"),
        assignee=request.args.get("assignee"),
    )
    return jsonify([t.to_dict() for t in tasks])


@tasks_bp.route("/<task_id>", methods=["GET"])
@require_page_access("tasks")
def get_task(task_id):
    return jsonify(task_service.get_task(current_identity(), task_id).to_dict())


@tasks_bp.route("", methods=["POST"])
@require_page_access("tasks")
def create_task():
    task = task_service.create_task(current_identity(), json_body())
    commit()
    return jsonify(task.to_dict()), 201


@tasks_bp.route("/<task_id>", methods=["PUT"])
@require_page_access("tasks")
def update_task(task_id):
    task = task_service.update_task(current_identity(), task_id, json_body())
    commit()
    return jsonify(task.to_dict())


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@require_page_access("tasks")
def delete_task(task_id):
    task_service.delete_task(current_identity(), task_id)
    commit()
    return jsonify({"message": "Task deleted"})


@tasks_bp.route("/<task_id>/status", methods=["PATCH"])
@require_page_access("tasks")
def update_status(task_id):
    task = task_service.set_status(current_identity(), task_id, json_body().get("status"))
    commit()
    return jsonify({"message": "Status updated", "status": task.status})


@tasks_bp.route("/<task_id>/time", methods=["PATCH"])
@require_page_access("tasks")
def log_time(task_id):
    task = task_service.log_time(current_identity(), task_id, json_body().get("hours"))
    commit()
    return jsonify({"message": "Time logged", "timeSpent": task.time_spent})
