from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flask import current_app

from ..extensions import db
from ..models import Currency, General, PermissionSet, Terms
from ..validation import (
    NotFoundError,
    ValidationError,
    is_missing,
    parse_int,
    require_fields,
    require_json_object,
    require_list,
)
from .concurrency import lock_for_update
from .tenant_service import require_tenant, scoped_rows, tenant_row


# Sidebar modules an employee role can be granted. Admins see all of them.
SIDEBAR_MODULES = ("products", "customers", "invoices", "employees", "settings")

ADMIN_ROLE = "admin"

GENERAL_LIST_FIELDS = ("department", "role", "category")


@dataclass
class UpsertResult:
    created: bool
    id: int


def _upsert(model, user_id: int, values: dict[str, Any]) -> UpsertResult:
    """
    Insert the tenant's single row of model, or replace its values.

    The existing row (if any) is locked before it is rewritten.
    """
    require_tenant(user_id)
    row = lock_for_update(db.session.query(model).filter(model.user_id == user_id)).first()
    created = row is None
    if created:
        row = model(user_id=user_id)
        db.session.add(row)
    for key, value in values.items():
        setattr(row, key, value)
    db.session.commit()
    current_app.logger.info(
        "%s %s for user_id=%s", "Created" if created else "Updated", model.__tablename__, user_id
    )
    return UpsertResult(created=created, id=row.id)


# --- Currencies -------------------------------------------------------------

def list_currencies(user_id=None) -> list[dict]:
    return [c.to_dict() for c in scoped_rows(Currency, user_id, not_found="Currency not found")]


def upsert_currency(payload) -> UpsertResult:
    payload = require_json_object(payload)
    require_fields(payload, ("user_id", "currency"), message="Missing user_id or currency")
    return _upsert(Currency, parse_int(payload["user_id"], "user_id"), {"currency": payload["currency"]})


def tenant_currency(user_id: int, default: str = "USD") -> str:
    """The tenant's currency code, accepting either "USD" or {"code": "USD", ...}."""
    row = tenant_row(Currency, user_id)
    if row is None or is_missing(row.currency):
        return default
    value = row.currency
    if isinstance(value, dict):
        value = value.get("code") or value.get("currency") or default
    return str(value)


# --- Generals ---------------------------------------------------------------

def list_generals(user_id=None) -> list[dict]:
    return [g.to_dict() for g in scoped_rows(General, user_id, not_found="General settings not found")]


def upsert_generals(payload) -> UpsertResult:
    """
    department, role and category must be arrays; size, color, material
    and weight are stored as sent.
    """
    payload = require_json_object(payload)
    require_fields(payload, ("user_id",), message="User ID is required")
    for key in GENERAL_LIST_FIELDS:
        require_list(payload.get(key), key)

    values = {key: payload.get(key) for key in General.OPTION_FIELDS}
    return _upsert(General, parse_int(payload["user_id"], "user_id"), values)


# --- Terms ------------------------------------------------------------------

def get_terms(user_id) -> list:
    """
    Raises NotFoundError when the tenant never saved terms; routes answer
    that with an empty list in the body.
    """
    if is_missing(user_id):
        raise ValidationError("User ID is required")
    row = tenant_row(Terms, user_id)
    if row is None:
        raise NotFoundError("Terms not found")
    return row.terms if isinstance(row.terms, list) else []


def upsert_terms(user_id, payload) -> UpsertResult:
    """user_id comes from the request's user_id header."""
    if is_missing(user_id):
        raise ValidationError("User ID is required")
    payload = require_json_object(payload)
    return _upsert(Terms, parse_int(user_id, "user_id"), {"terms": payload.get("terms") or []})


# --- Permissions ------------------------------------------------------------

def get_permissions(user_id) -> list:
    """The role/module matrix, or [] when the tenant has none saved."""
    if is_missing(user_id):
        raise ValidationError("User ID is required")
    row = tenant_row(PermissionSet, user_id)
    if row is None or not isinstance(row.permissions, list):
        return []
    return row.permissions


def save_permissions(user_id, payload) -> UpsertResult:
    if is_missing(user_id):
        raise ValidationError("User ID is required")
    if not isinstance(payload, list):
        raise ValidationError("Invalid data format")
    return _upsert(PermissionSet, parse_int(user_id, "user_id"), {"permissions": payload})


def resolve_modules(user_id, role) -> list[str]:
    """
    Sidebar modules visible to role.

    admin (any case) sees every module. Other roles get the allowedModules
    of their entry in the tenant's permissions, limited to known modules.
    Roles without an entry see nothing.
    """
    if is_missing(role):
        raise ValidationError("role is required")
    if str(role).strip().lower() == ADMIN_ROLE:
        return list(SIDEBAR_MODULES)

    wanted = str(role).strip().lower()
    for entry in get_permissions(user_id):
        if not isinstance(entry, dict):
            continue
        if str(entry.get("role", "")).strip().lower() == wanted:
            allowed = entry.get("allowedModules") or []
            return [m for m in SIDEBAR_MODULES if m in allowed]
    return []
