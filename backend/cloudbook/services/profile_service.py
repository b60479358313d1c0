# Overview: Admin profile edits and the image/logo uploads that go with them.

"""
Profile Service

The profile form posts multipart data: a `data` field holding JSON
({id, name, last_name, contact, company, address}) and optional `image`
and `logo` files.

Uploads are written under UPLOAD_FOLDER/<kind>/ and referenced by their
public path /api/uploads/<kind>/<name>. Filenames are sanitized with
werkzeug's secure_filename; a name already on disk gets a short random
suffix so an upload never overwrites another tenant's file.
"""

from __future__ import annotations

import json
import os
import secrets

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..extensions import db
from ..models import Admin
from ..validation import NotFoundError, ValidationError, is_missing, parse_int, require_fields
from .concurrency import lock_for_update

UPLOAD_KINDS = {"image": "images", "logo": "logos"}

PROFILE_FIELDS = ("name", "last_name", "contact", "company", "address")


def upload_dir(kind: str) -> str:
    if kind not in UPLOAD_KINDS.values():
        raise NotFoundError("File not found")
    return os.path.join(current_app.config["UPLOAD_FOLDER"], kind)


def _has_content(file: FileStorage | None) -> bool:
    return file is not None and bool(file.filename)


def save_upload(file: FileStorage, kind: str) -> str:
    """Write an uploaded file and return its public URL path."""
    directory = upload_dir(kind)
    os.makedirs(directory, exist_ok=True)

    filename = secure_filename(file.filename or "") or "upload"
    if os.path.exists(os.path.join(directory, filename)):
        stem, ext = os.path.splitext(filename)
        filename = f"{stem}-{secrets.token_hex(4)}{ext}"

    file.save(os.path.join(directory, filename))
    current_app.logger.info("Stored upload %s/%s", kind, filename)
    return f"/api/uploads/{kind}/{filename}"


def remove_upload(public_path: str) -> None:
    """Delete the file behind a path returned by save_upload, if it is still there."""
    kind, filename = public_path.rsplit("/", 2)[-2:]
    try:
        os.remove(os.path.join(upload_dir(kind), filename))
    except FileNotFoundError:
        return
    current_app.logger.info("Removed upload %s/%s", kind, filename)


def parse_profile_data(raw) -> dict:
    if is_missing(raw):
        raise ValidationError("Missing profile data")
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid profile data")
    if not isinstance(data, dict):
        raise ValidationError("Invalid profile data")
    require_fields(data, ("id",))
    return data


def update_profile(raw_data, image: FileStorage | None = None, logo: FileStorage | None = None) -> dict:
    """
    Apply a profile form to the admin.

    Text fields that are absent or blank keep their stored value. The
    admin row is locked first, so a file for an unknown admin is never
    written. Files written for a profile whose commit fails are removed.

    Returns {"admin", "image", "logo"} where image/logo are the new public
    paths (None when that file was not sent).
    """
    data = parse_profile_data(raw_data)
    admin_id = parse_int(data["id"], "id")

    admin = lock_for_update(db.session.query(Admin).filter(Admin.id == admin_id)).first()
    if admin is None:
        raise NotFoundError("Admin not found")

    image_path = save_upload(image, UPLOAD_KINDS["image"]) if _has_content(image) else None
    logo_path = save_upload(logo, UPLOAD_KINDS["logo"]) if _has_content(logo) else None

    for key in PROFILE_FIELDS:
        if not is_missing(data.get(key)):
            setattr(admin, key, str(data[key]).strip())
    if image_path:
        admin.image = image_path
    if logo_path:
        admin.logo = logo_path

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        for path in (image_path, logo_path):
            if path:
                remove_upload(path)
        raise
    current_app.logger.info("Updated profile for admin id=%s", admin.id)
    return {"admin": admin, "image": image_path, "logo": logo_path}
