"""
Upload Service — validated file storage under UPLOAD_FOLDER.

Layout:
    <UPLOAD_FOLDER>/images/<uuid><ext>
    <UPLOAD_FOLDER>/videos/<uuid><ext>
    <UPLOAD_FOLDER>/audio/<uuid><ext>
    <UPLOAD_FOLDER>/misc/<uuid><ext>

Every file of a request is checked (type, size) before the first one is
written, so a rejected request leaves nothing on disk.
"""

import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from studioboard.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/webm",
    "video/quicktime",
    "audio/mpeg",
    "audio/wav",
    "audio/ogg",
})

SUBDIRS = ("images", "videos", "audio", "misc")
_PREFIX_SUBDIR = {"image/": "images", "video/": "videos", "audio/": "audio"}


def subdir_for(mimetype: str) -> str:
    for prefix, subdir in _PREFIX_SUBDIR.items():
        if mimetype.startswith(prefix):
            return subdir
    return "misc"


def _upload_root() -> str:
    return current_app.config["UPLOAD_FOLDER"]


def _file_size(storage) -> int:
    stream = storage.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def validate(storage) -> int:
    """Check type and size of one FileStorage; returns its size in bytes."""
    mimetype = storage.mimetype or ""
    if mimetype not in ALLOWED_MIME_TYPES:
        logger.warning("Rejected upload %r with type %s", storage.filename, mimetype or "unknown")
        raise ValidationError(
            f"File type not allowed: {mimetype or 'unknown'}", details={"mimetype": mimetype},
        )
    size = _file_size(storage)
    limit = current_app.config["MAX_UPLOAD_SIZE"]
    if size > limit:
        raise ValidationError(
            f"File too large (max {limit // (1024 * 1024)}MB)",
            details={"size": size, "limit": limit},
        )
    return size


def _store(storage, size: int) -> dict:
    mimetype = storage.mimetype
    subdir = subdir_for(mimetype)
    ext = os.path.splitext(secure_filename(storage.filename or ""))[1].lower()
    filename = f"{uuid.uuid4()}{ext}"

    target_dir = os.path.join(_upload_root(), subdir)
    os.makedirs(target_dir, exist_ok=True)
    storage.save(os.path.join(target_dir, filename))

    base_url = current_app.config.get("BASE_URL") or ""
    return {
        "url": f"{base_url}/uploads/{subdir}/{filename}",
        "filename": filename,
        "originalName": storage.filename,
        "mimetype": mimetype,
        "size": size,
    }


def save_files(files) -> list[dict]:
    """Validate all `files`, then store them; returns one descriptor per file."""
    files = [f for f in files if f and f.filename]
    if not files:
        raise ValidationError("No file provided")
    max_files = current_app.config["MAX_UPLOAD_FILES"]
    if len(files) > max_files:
        raise ValidationError(f"Too many files (max {max_files})")

    sizes = [validate(f) for f in files]
    stored = [_store(f, size) for f, size in zip(files, sizes)]
    logger.info("Stored %d uploaded file(s)", len(stored))
    return stored


def resolve_path(subdir: str, filename: str) -> str:
    """Absolute path of a stored file, refusing anything outside the upload tree."""
    if (
        subdir not in SUBDIRS
        or ".." in filename
        or filename != secure_filename(filename)
    ):
        raise ValidationError("Invalid path")
    return os.path.join(_upload_root(), subdir, filename)


def delete_file(subdir: str, filename: str) -> None:
    path = resolve_path(subdir, filename)
    if not os.path.isfile(path):
        raise NotFoundError("File", f"{subdir}/{filename}")
    os.remove(path)
    logger.info("Deleted upload %s/%s", subdir, filename)
