from __future__ import annotations

from flask import Blueprint, request

from ..services import settings_service
from ..validation import NotFoundError
from .responses import error_response, fail, ok


# Tenant settings: one row per tenant for each of currencies, generals,
# terms and permissions. PUT inserts the row (201) or replaces it (200).
settings_bp = Blueprint("settings", __name__, url_prefix="/api")


# --- Currencies -------------------------------------------------------------

@settings_bp.get("/currencies")
def list_currencies_route():
    try:
        return ok(settings_service.list_currencies(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to fetch currency")


@settings_bp.put("/currencies")
def save_currency_route():
    try:
        result = settings_service.upsert_currency(request.get_json(silent=True))
        if result.created:
            return ok(message="Currency created", status=201, id=result.id)
        return ok(message="Currency updated", id=result.id)
    except Exception as e:
        return error_response(e, "Failed to save currency")


# --- Generals ---------------------------------------------------------------

@settings_bp.get("/generals")
def list_generals_route():
    try:
        return ok(settings_service.list_generals(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to fetch general settings")


@settings_bp.put("/generals")
def save_generals_route():
    """department, role and category must be arrays."""
    try:
        result = settings_service.upsert_generals(request.get_json(silent=True))
        if result.created:
            return ok({"id": result.id}, message="General settings created", status=201)
        return ok({"id": result.id}, message="General settings updated")
    except Exception as e:
        return error_response(e, "Failed to save general settings")


# --- Terms ------------------------------------------------------------------

@settings_bp.get("/terms")
def get_terms_route():
    """A tenant without saved terms gets 404 with an empty list."""
    try:
        terms = settings_service.get_terms(request.args.get("user_id"))
        return ok({"terms": terms})
    except NotFoundError:
        return fail("Terms not found", 404, data={"terms": []})
    except Exception as e:
        return error_response(e, "Failed to fetch terms")


@settings_bp.put("/terms")
def save_terms_route():
    """Body: {"terms": [...]}; the tenant comes from the user_id header."""
    try:
        result = settings_service.upsert_terms(request.headers.get("user_id"), request.get_json(silent=True))
        if result.created:
            return ok(message="Terms created", status=201)
        return ok(message="Terms updated")
    except Exception as e:
        return error_response(e, "Failed to save terms")


# --- Permissions ------------------------------------------------------------

@settings_bp.get("/permissions")
def get_permissions_route():
    try:
        return ok(settings_service.get_permissions(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to fetch permissions")


@settings_bp.put("/permissions")
def save_permissions_route():
    """Body: [{"role": ..., "allowedModules": [...]}]; tenant from the user_id header."""
    try:
        settings_service.save_permissions(request.headers.get("user_id"), request.get_json(silent=True))
        return ok(message="Permissions updated successfully")
    except Exception as e:
        return error_response(e, "Failed to save permissions")


@settings_bp.get("/permissions/modules")
def permitted_modules_route():
    """
    Sidebar modules visible to a role.

    Query params:
    - user_id: int (required) - tenant
    - role: str (required) - "admin" sees every module
    """
    try:
        modules = settings_service.resolve_modules(request.args.get("user_id"), request.args.get("role"))
        return ok({"role": request.args.get("role"), "modules": modules})
    except Exception as e:
        return error_response(e, "Failed to resolve modules")
