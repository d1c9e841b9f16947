"""
Uploads Blueprint.

  POST   /api/uploads                      — single file, form field "file"
  POST   /api/uploads/multiple             — up to MAX_UPLOAD_FILES, field "files"
  DELETE /api/uploads/<subdir>/<filename>

Stored files are served without authentication by `files_bp`:
  GET    /uploads/<subdir>/<filename>
"""

import os

from flask import Blueprint, current_app, jsonify, request, send_from_directory

from studioboard.middleware.jwt_auth import login_required
from studioboard.services import upload_service

uploads_bp = Blueprint("uploads", __name__, url_prefix="/api/uploads")
files_bp = Blueprint("files", __name__, url_prefix="/uploads")


@uploads_bp.route("", methods=["POST"])
@login_required
def upload_file():
    stored = upload_service.save_files([request.files.get("file")])
    return jsonify(stored[0])


@uploads_bp.route("/multiple", methods=["POST"])
@login_required
def upload_multiple():
    return jsonify({"files": upload_service.save_files(request.files.getlist("files"))})


@uploads_bp.route("/<subdir>/<filename>", methods=["DELETE"])
@login_required
def delete_file(subdir, filename):
    upload_service.delete_file(subdir, filename)
    return jsonify({"message": "File deleted"})


@files_bp.route("/<subdir>/<filename>", methods=["GET"])
def serve_file(subdir, filename):
    upload_service.resolve_path(subdir, filename)
    return send_from_directory(
        os.path.join(current_app.config["UPLOAD_FOLDER"], subdir), filename,
    )
