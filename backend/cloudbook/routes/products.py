# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/cloudbook/routes/products.py
"""
Product routes.

Products are stored one row per stock unit, so these endpoints work on
batches:
- POST takes {"products": [...]} and expands each item's stock into rows
- PUT takes one item or a list and edits every unit of each product_id
- DELETE takes {"id": n}, {"product_id": [..]} or {"product_id": "P1"}
"""
from flask import Blueprint, request

from ..services import products_service
from .responses import error_response, ok

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products_route():
    """
    List product unit rows.

    Query params:
    - user_id: int (optional) - tenant filter; 404 when the tenant has none
    """
    try:
        return ok(products_service.list_products(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to list products")


@products_bp.post("")
def create_products_route():
    try:
        payload = request.get_json(silent=True) or {}
        items = payload.get("products") if isinstance(payload, dict) else None
        created = products_service.create_products(items)
        return ok(message=f"{created} product(s) created", status=201, count=created)
    except Exception as e:
        return error_response(e, "Failed to create products")


@products_bp.put("")
def update_products_route():
    """All items are applied in one transaction; any failure rolls back the batch."""
    try:
        updated = products_service.update_products(request.get_json(silent=True))
        return ok(message="Product(s) updated successfully", count=updated)
    except Exception as e:
        return error_response(e, "Failed to update product(s)")


@products_bp.delete("")
def delete_products_route():
    try:
        deleted = products_service.delete_products(request.get_json(silent=True))
        message = "Product deleted" if deleted == 1 else f"{deleted} product(s) deleted"
        return ok(message=message, count=deleted)
    except Exception as e:
        return error_response(e, "Product delete failed")
