# Overview: Flask API routes for customers operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import customers_service
from .responses import error_response, ok


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers_route():
    """
    List customers.

    Query params:
    - user_id: int (optional) - tenant filter; 404 when the tenant has none
    """
    try:
        return ok(customers_service.list_customers(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to list customers")


@customers_bp.post("")
def create_customer_route():
    try:
        customer = customers_service.create_customer(request.get_json(silent=True))
        return ok(message="Customer created successfully", status=201, customerId=customer.id)
    except Exception as e:
        return error_response(e, "Failed to create customer")


@customers_bp.put("")
def update_customer_route():
    try:
        customers_service.update_customer(request.get_json(silent=True))
        return ok(message="Customer updated successfully")
    except Exception as e:
        return error_response(e, "Failed to update customer")


@customers_bp.delete("")
def delete_customer_route():
    try:
        customers_service.delete_customer(request.get_json(silent=True))
        return ok(message="Customer deleted successfully")
    except Exception as e:
        return error_response(e, "Failed to delete customer")
