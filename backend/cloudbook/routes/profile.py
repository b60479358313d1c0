# Overview: Flask API routes for the admin profile and uploaded files.

from flask import Blueprint, request, send_from_directory
from werkzeug.exceptions import NotFound

from ..services import profile_service, token_service
from .responses import error_response, fail, ok


profile_bp = Blueprint("profile", __name__, url_prefix="/api")


@profile_bp.put("/my-profile")
def update_profile_route():
    """
    Update the admin profile from a multipart form.

    Form fields:
    - data: JSON {id, name, last_name, contact, company, address}
    - image, logo: optional files

    Returns a fresh token so the client picks up the new profile claims.
    """
    try:
        result = profile_service.update_profile(
            request.form.get("data"),
            image=request.files.get("image"),
            logo=request.files.get("logo"),
        )
        admin = result["admin"]
        return ok(
            message="User updated successfully",
            token=token_service.issue_admin_token(admin),
            admin=admin.to_dict(),
            image=result["image"],
            logo=result["logo"],
        )
    except Exception as e:
        return error_response(e, "Failed to update admin")


@profile_bp.get("/uploads/<kind>/<path:filename>")
def uploaded_file_route(kind: str, filename: str):
    try:
        return send_from_directory(profile_service.upload_dir(kind), filename)
    except NotFound:
        return fail("File not found", 404)
    except Exception as e:
        return error_response(e, "Failed to serve upload")
