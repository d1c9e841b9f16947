"""
Notifications Blueprint — always scoped to the calling user.

  GET    /api/notifications?unreadOnly=true   — newest first, max 100
  GET    /api/notifications/count             — unread count
  POST   /api/notifications                   — { userId, type, title, message?, link? }
  POST   /api/notifications/bulk              — { notifications: [...] }, all or nothing
  PATCH  /api/notifications/<id>/read
  PATCH  /api/notifications/read-all
  DELETE /api/notifications/<id>
  DELETE /api/notifications
"""

from flask import Blueprint, jsonify, request

from studioboard.middleware.jwt_auth import current_identity, login_required
from studioboard.services import notification_service
from studioboard.utils.helpers import commit, json_body

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.route("", methods=["GET"])
@login_required
def list_notifications():
    unread_only = request.args.get("unreadOnly", "").lower() == "true"
    notifs = notification_service.list_for_user(current_identity().id, unread_only=unread_only)
    return jsonify([n.to_dict() for n in notifs])


@notifications_bp.route("/count", methods=["GET"])
@login_required
def unread_count():
    return jsonify({"count": notification_service.unread_count(current_identity().id)})


@notifications_bp.route("", methods=["POST"])
@login_required
def create_notification():
    notif = notification_service.create(json_body())
    commit()
    return jsonify(notif.to_dict()), 201


@notifications_bp.route("/bulk", methods=["POST"])
@login_required
def create_bulk():
    notifs = notification_service.create_bulk(json_body().get("notifications"))
    commit()
    return jsonify({"message": f"{len(notifs)} notifications created", "count": len(notifs)}), 201


@notifications_bp.route("/<notification_id>/read", methods=["PATCH"])
@login_required
def mark_read(notification_id):
    notification_service.mark_read(current_identity().id, notification_id)
    commit()
    return jsonify({"message": "Notification marked as read"})


@notifications_bp.route("/read-all", methods=["PATCH"])
@login_required
def mark_all_read():
    count = notification_service.mark_all_read(current_identity().id)
    commit()
    return jsonify({"message": "All notifications marked as read", "count": count})


@notifications_bp.route("/<notification_id>", methods=["DELETE"])
@login_required
def delete_notification(notification_id):
    notification_service.delete(current_identity().id, notification_id)
    commit()
    return jsonify({"message": "Notification deleted"})


@notifications_bp.route("", methods=["DELETE"])
@login_required
def delete_all():
    count = notification_service.delete_all(current_identity().id)
    commit()
    return jsonify({"message": "All notifications deleted", "count": count})
