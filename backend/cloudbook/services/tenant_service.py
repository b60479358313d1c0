"""
Tenant Service: tenant validation and scoping helpers

Every resource row carries user_id = admin.id. Writes must reference
an existing admin, and tenant-scoped reads share the same "user_id query
parameter or everything" shape.

USAGE:
    from cloudbook.services.tenant_service import require_tenant, scoped_rows

    require_tenant(payload["user_id"])
    rows = scoped_rows(Customer, request.args.get("user_id"), not_found="Customer not found")
"""

from __future__ import annotations

from ..extensions import db
from ..models import Admin
from ..validation import NotFoundError, parse_int


def require_tenant(user_id) -> Admin:
    """
    Return the admin that owns user_id.

    Raises:
        ValidationError: user_id is not an integer
        NotFoundError: no such admin
    """
    admin = db.session.get(Admin, parse_int(user_id, "user_id"))
    if admin is None:
        raise NotFoundError("Admin not found")
    return admin


def scoped_rows(model, user_id, *, not_found: str) -> list:
    """
    Rows of model for one tenant, or every row when user_id is not given.

    A tenant-scoped query that yields nothing raises NotFoundError(not_found);
    the unscoped query may return an empty list.
    """
    query = db.session.query(model).order_by(model.id.asc())
    if user_id in (None, ""):
        return query.all()

    rows = query.filter(model.user_id == parse_int(user_id, "user_id")).all()
    if not rows:
        raise NotFoundError(not_found)
    return rows


def tenant_row(model, user_id):
    """The single settings row of a one-row-per-tenant model, or None."""
    return db.session.query(model).filter(model.user_id == parse_int(user_id, "user_id")).first()
