"""User profile blueprint: profile reads, edits and profile image upload."""

from __future__ import annotations

import os
import uuid
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, jwt_required
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, NotFound

from models import db
from models.comment import refresh_author
from models.user import User
from routes.auth import apply_profile_update
from schemas import DisplayNameRequest
from storage.local_storage import LocalStorage
from utils.request_validation import parse_request_model

users_bp = Blueprint("users", __name__)

PROFILE_IMAGE_DIR = "profile_images"
MAX_IMAGE_SIZE_DEFAULT = 5 * 1024 * 1024  # 5 MB
ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


def _require_user() -> User:
    user = get_current_user()
    if user is None:
        raise NotFound("User not found.")
    return user


def _validate_image(file: FileStorage) -> None:
    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("An image file is required.")

    if not (file.mimetype or "").startswith("image/"):
        raise BadRequest("Only image files are allowed.")

    extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))
        raise BadRequest(f"File type not allowed. Allowed types: {allowed}.")

    max_size = int(current_app.config.get("MAX_IMAGE_SIZE", MAX_IMAGE_SIZE_DEFAULT))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise BadRequest(
            f"Image exceeds the maximum upload size of {max_size // (1024 * 1024)}MB."
        )


def _build_image_filename(user_id: int, original: str) -> str:
    suffix = Path(original).suffix.lower()
    return f"{user_id}-{uuid.uuid4().hex}{suffix}"


def _stored_path(photo_url: str | None) -> str | None:
    """Map a ``/uploads/...`` URL back to its storage path."""

    if photo_url and photo_url.startswith("/uploads/"):
        return photo_url[len("/uploads/"):]
    return None


@users_bp.route("/profile", methods=["GET"])
@jwt_required()
def get_profile():
    user = _require_user()
    return jsonify({"success": True, "user": user.to_dict()})


@users_bp.route("/edit-profile", methods=["PATCH"])
@jwt_required()
def edit_profile():
    """Change the display name."""

    user = _require_user()
    body = parse_request_model(request, DisplayNameRequest)
    apply_profile_update(user, body.display_name)
    db.session.commit()

    return jsonify({"success": True, "message": "Profile updated.", "user": user.to_dict()})


@users_bp.route("/profile/image", methods=["PATCH", "POST"])
@jwt_required()
def upload_profile_image():
    """Store a new profile image and point the user's photo URL at it."""

    user = _require_user()

    file = request.files.get("image")
    if not isinstance(file, FileStorage):
        raise BadRequest("An image file is required.")

    _validate_image(file)

    storage = LocalStorage(current_app.config.get("UPLOAD_DIR"), PROFILE_IMAGE_DIR)
    previous = _stored_path(user.photo_url)
    stored_path = storage.save(file, _build_image_filename(user.id, file.filename or "image"))

    user.photo_url = f"/uploads/{stored_path}"
    refresh_author(user)
    db.session.commit()

    if previous and previous != stored_path:
        storage.delete(previous)

    current_app.logger.info("Profile image updated for user %s", user.id)
    return jsonify(
        {
            "success": True,
            "message": "Profile image uploaded.",
            "imageUrl": user.photo_url,
            "user": user.to_dict(),
        }
    )
