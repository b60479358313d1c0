# backend/cloudbook/services/products_service.py
"""
Products Service

A product is stored as one row per physical stock unit (see Product).
This is the only resource with multi-row writes:

- create_products: every item of a batch expands to `stock` unit rows,
  all inserted in one multi-row INSERT
- update_products: a batch of catalog edits, each applied to every unit
  row of its product_id, all-or-nothing
- delete_products: one row by id, N units per product_id, or every unit
  of a product_id (see DeleteRequest)
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Union

from flask import current_app
from sqlalchemy import insert

from ..extensions import db
from ..models import Product
from ..validation import (
    NotFoundError,
    ValidationError,
    is_missing,
    parse_int,
    parse_number,
    require_fields,
    require_json_object,
)
from .concurrency import atomic, lock_for_update
from .tenant_service import require_tenant, scoped_rows

CREATE_REQUIRED = ("user_id", "product_id", "name", "price", "category", "stock", "unit")
UPDATE_REQUIRED = ("product_id", "name", "price", "category", "unit")


def _clean_str(value) -> str | None:
    if value is None:
        return None
    return str(value).strip()


def _attribute_list(value) -> list | None:
    return value if isinstance(value, list) else None


def list_products(user_id=None) -> list[dict]:
    return [p.to_dict() for p in scoped_rows(Product, user_id, not_found="Product not found")]


def expand_units(item: dict) -> list[dict]:
    """
    Build the unit rows for one catalog item: stock = N gives N rows that
    share product_id, each with stock = 1.
    """
    require_json_object(item)
    require_fields(item, CREATE_REQUIRED)

    stock = parse_int(item["stock"], "stock")
    row = {
        "user_id": parse_int(item["user_id"], "user_id"),
        "product_id": _clean_str(item["product_id"]),
        "name": _clean_str(item["name"]),
        "description": _clean_str(item.get("description")) or "",
        "price": parse_number(item["price"], "price"),
        "category": _clean_str(item["category"]),
        "stock": 1,
        "unit": _clean_str(item["unit"]),
        "attribute": _attribute_list(item.get("attribute")) or [],
    }
    return [dict(row) for _ in range(max(stock, 0))]


def create_products(items) -> int:
    """
    Insert a batch of products. Returns the number of unit rows created.

    Every item is validated before anything is written, so a bad item
    leaves the table untouched.

    Raises:
        ValidationError: items is not a list, or an item misses a field
        NotFoundError: an item references a tenant that does not exist
    """
    if not isinstance(items, list):
        raise ValidationError("Expected an array of products")

    rows: list[dict] = []
    for item in items:
        rows.extend(expand_units(item))

    for user_id in sorted({r["user_id"] for r in rows}):
        require_tenant(user_id)

    if not rows:
        return 0

    with atomic() as session:
        session.execute(insert(Product), rows)

    current_app.logger.info("Created %s product unit row(s)", len(rows))
    return len(rows)


def update_products(payload) -> int:
    """
    Apply catalog edits to every unit row of each product_id.

    payload is one object or a list of them. Each item replaces name,
    description, price, category, unit and attribute. The unit rows are
    locked before they are written. An optional user_id on an item limits
    the edit to that tenant's units.

    All items commit together or not at all.

    Returns the number of unit rows updated.

    Raises:
        ValidationError: empty batch, or an item misses a field
        NotFoundError: no unit row carries an item's product_id
    """
    items = payload if isinstance(payload, list) else [payload]
    if not items or items == [None]:
        raise ValidationError("No products provided")

    touched = 0
    with atomic():
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError("Invalid JSON payload")
            product_id = _clean_str(item.get("product_id"))
            missing = [f for f in UPDATE_REQUIRED if is_missing(item.get(f))]
            if missing:
                raise ValidationError(f"Missing required fields for {product_id}")

            query = db.session.query(Product).filter(Product.product_id == product_id)
            if not is_missing(item.get("user_id")):
                query = query.filter(Product.user_id == parse_int(item["user_id"], "user_id"))
            units = lock_for_update(query.order_by(Product.id.asc())).all()
            if not units:
                raise NotFoundError(f"Product not found: {product_id}")

            price = parse_number(item["price"], "price")
            for unit_row in units:
                unit_row.name = _clean_str(item["name"])
                unit_row.description = _clean_str(item.get("description")) or None
                unit_row.price = price
                unit_row.category = _clean_str(item["category"])
                unit_row.unit = _clean_str(item["unit"])
                unit_row.attribute = _attribute_list(item.get("attribute"))
            touched += len(units)

    current_app.logger.info("Updated %s product unit row(s) across %s item(s)", touched, len(items))
    return touched


# --- Delete requests --------------------------------------------------------

@dataclass(frozen=True)
class DeleteRow:
    """Delete one unit row by primary key."""
    id: int


@dataclass(frozen=True)
class DeleteUnits:
    """Delete counts[product_id] units of each product_id, lowest ids first."""
    counts: dict


@dataclass(frozen=True)
class DeleteAllUnits:
    """Delete every unit row of one product_id."""
    product_id: str


DeleteRequest = Union[DeleteRow, DeleteUnits, DeleteAllUnits]


def parse_delete_request(payload) -> DeleteRequest:
    """
    Decide which delete the body asks for.

    {"id": n} wins over product_id when both are sent. A product_id list
    is read as a multiset: ["P1", "P1", "P2"] means two units of P1 and
    one of P2.
    """
    payload = require_json_object(payload)
    record_id = payload.get("id")
    product_id = payload.get("product_id")

    if not is_missing(record_id):
        return DeleteRow(id=parse_int(record_id, "id"))

    if isinstance(product_id, list):
        for pid in product_id:
            if not isinstance(pid, (str, int)) or isinstance(pid, bool):
                raise ValidationError("product_id entries must be strings")
        return DeleteUnits(counts=dict(Counter(str(pid).strip() for pid in product_id)))

    if isinstance(product_id, str) and product_id.strip():
        return DeleteAllUnits(product_id=product_id.strip())

    if is_missing(product_id):
        raise ValidationError("id or product_id is required")
    raise ValidationError("product_id must be a string or an array")


def delete_products(payload) -> int:
    """
    Execute a delete request. Returns the number of unit rows deleted.

    Raises NotFoundError when nothing matched.
    """
    req = parse_delete_request(payload)

    with atomic() as session:
        if isinstance(req, DeleteRow):
            row = lock_for_update(session.query(Product).filter(Product.id == req.id)).first()
            if row is None:
                raise NotFoundError("Product not found")
            session.delete(row)
            deleted = 1

        elif isinstance(req, DeleteUnits):
            deleted = 0
            for product_id, qty in req.counts.items():
                ids = [
                    r.id
                    for r in lock_for_update(
                        session.query(Product.id)
                        .filter(Product.product_id == product_id)
                        .order_by(Product.id.asc())
                        .limit(qty)
                    ).all()
                ]
                if ids:
                    deleted += (
                        session.query(Product)
                        .filter(Product.id.in_(ids))
                        .delete(synchronize_session=False)
                    )
            if deleted == 0:
                raise NotFoundError("No products found to delete")

        else:
            deleted = (
                session.query(Product)
                .filter(Product.product_id == req.product_id)
                .delete(synchronize_session=False)
            )
            if deleted == 0:
                raise NotFoundError("No products found")

    current_app.logger.info("Deleted %s product unit row(s)", deleted)
    return deleted
