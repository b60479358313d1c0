# Overview: Flask API routes for employees operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import employees_service
from .responses import error_response, ok


employees_bp = Blueprint("employees", __name__, url_prefix="/api/employees")


@employees_bp.get("")
def list_employees_route():
    """List employees (password hashes are never returned)."""
    try:
        return ok(employees_service.list_employees(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to list employees")


@employees_bp.post("")
def create_employee_route():
    """
    Create an employee login for a tenant.

    Returns 409 when the tenant already has an employee with this email.
    """
    try:
        employee = employees_service.create_employee(request.get_json(silent=True))
        return ok(message="Employee created successfully", status=201, employeeId=employee.id)
    except Exception as e:
        return error_response(e, "Failed to create employee")


@employees_bp.put("")
def update_employee_route():
    try:
        employees_service.update_employee(request.get_json(silent=True))
        return ok(message="Employee updated successfully")
    except Exception as e:
        return error_response(e, "Failed to update employee")


@employees_bp.delete("")
def delete_employee_route():
    try:
        employees_service.delete_employee(request.get_json(silent=True))
        return ok(message="Employee deleted successfully")
    except Exception as e:
        return error_response(e, "Failed to delete employee")
