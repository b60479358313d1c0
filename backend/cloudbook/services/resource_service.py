# Overview: Shared create/read/update/delete for single-row tenant resources.

"""
Resource Service

The customers, employees and invoices handlers all follow one shape:

- create: required fields present, tenant exists, INSERT, return the row
- read: every row of a tenant (404 when none) or every row overall
- update: id required, row locked and loaded (404 when absent), editable
  columns replaced in full
- delete: id required, row locked and loaded (404 when absent), DELETE

Per-resource modules declare a ResourcePolicy and pass a `prepare` hook
when a field needs converting (password hashing, date parsing).
"""

from __future__ import annotations

from typing import Callable

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..validation import (
    ConflictError,
    NotFoundError,
    ResourcePolicy,
    parse_int,
    require_fields,
    require_json_object,
    validate_payload,
)
from .concurrency import lock_for_update
from .tenant_service import require_tenant, scoped_rows


def _commit(conflict: str | None) -> None:
    """Commit; a unique-constraint violation becomes ConflictError(conflict) when given."""
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if conflict is None:
            raise
        raise ConflictError(conflict)


def _locked_row(model, record_id, label: str):
    row = lock_for_update(db.session.query(model).filter(model.id == record_id)).first()
    if row is None:
        raise NotFoundError(f"{label} not found")
    return row


def list_records(model, user_id, *, label: str) -> list[dict]:
    return [r.to_dict() for r in scoped_rows(model, user_id, not_found=f"{label} not found")]


def create_record(
    model,
    payload,
    *,
    policy: ResourcePolicy,
    prepare: Callable[[dict], dict] | None = None,
    conflict: str | None = None,
):
    """
    Insert one row.

    Raises:
        ValidationError: required field missing
        NotFoundError: tenant does not exist
        ConflictError: a unique constraint rejected the row (when conflict is given)
    """
    cleaned = validate_payload(payload=payload, policy=policy, partial=False)
    require_tenant(cleaned["user_id"])
    if prepare is not None:
        cleaned = prepare(cleaned)

    row = model(**cleaned)
    db.session.add(row)
    _commit(conflict)
    current_app.logger.info("Created %s id=%s user_id=%s", model.__tablename__, row.id, row.user_id)
    return row


def update_record(
    model,
    payload,
    *,
    policy: ResourcePolicy,
    label: str,
    prepare: Callable[[dict], dict] | None = None,
    conflict: str | None = None,
):
    """
    Full replace of the editable columns of one row.

    The row is read with FOR UPDATE and written in the same transaction.
    """
    payload = require_json_object(payload)
    require_fields(payload, ("id",), message="Missing required fields")
    record_id = parse_int(payload["id"], "id")

    cleaned = validate_payload(payload=payload, policy=policy, partial=True)
    if prepare is not None:
        cleaned = prepare(cleaned)

    row = _locked_row(model, record_id, label)
    for key, value in cleaned.items():
        setattr(row, key, value)
    _commit(conflict)
    current_app.logger.info("Updated %s id=%s", model.__tablename__, row.id)
    return row


def delete_record(model, payload, *, label: str) -> None:
    payload = require_json_object(payload)
    require_fields(payload, ("id",), message="Missing required fields")
    record_id = parse_int(payload["id"], "id")

    row = _locked_row(model, record_id, label)
    db.session.delete(row)
    db.session.commit()
    current_app.logger.info("Deleted %s id=%s", model.__tablename__, record_id)
