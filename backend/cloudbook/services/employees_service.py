# Overview: Service-layer operations for employees; passwords are hashed before storage.

"""
Employees Service

Employees are created by their admin and log in through
/auth/employee-login. Email is unique within a tenant; the same address
may belong to employees of different tenants.

The password is only written on create. Updates replace the profile
columns and leave the stored hash alone.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Employee
from ..validation import ConflictError, ResourcePolicy, parse_int
from . import resource_service
from .auth_service import hash_password

DUPLICATE_EMAIL = "This email already exists"

EMPLOYEE_POLICY = ResourcePolicy(
    required_on_create=(
        "user_id", "employee_id", "name", "email", "contact",
        "department", "role", "status", "password",
    ),
    editable_fields=("employee_id", "name", "email", "contact", "department", "role", "status"),
    required_on_update=("employee_id", "name", "email", "contact", "department", "role", "status"),
)


def _email_taken(user_id: int, email: str, *, exclude_id: int | None = None) -> bool:
    query = db.session.query(Employee.id).filter(Employee.user_id == user_id, Employee.email == email)
    if exclude_id is not None:
        query = query.filter(Employee.id != exclude_id)
    return query.first() is not None


def _prepare_create(cleaned: dict) -> dict:
    if _email_taken(cleaned["user_id"], cleaned["email"]):
        raise ConflictError(DUPLICATE_EMAIL)
    cleaned["password"] = hash_password(str(cleaned["password"]))
    return cleaned


def list_employees(user_id=None) -> list[dict]:
    return resource_service.list_records(Employee, user_id, label="Employee")


def create_employee(payload) -> Employee:
    """
    Raises:
        ValidationError: required field missing
        NotFoundError: tenant does not exist
        ConflictError: (user_id, email) already taken
    """
    return resource_service.create_record(
        Employee, payload, policy=EMPLOYEE_POLICY, prepare=_prepare_create, conflict=DUPLICATE_EMAIL
    )


def update_employee(payload) -> Employee:
    def _prepare_update(cleaned: dict) -> dict:
        # Runs after update_record has validated payload["id"].
        current = db.session.get(Employee, parse_int(payload["id"], "id"))
        if current is not None and _email_taken(current.user_id, cleaned["email"], exclude_id=current.id):
            raise ConflictError(DUPLICATE_EMAIL)
        return cleaned

    return resource_service.update_record(
        Employee, payload, policy=EMPLOYEE_POLICY, label="Employee",
        prepare=_prepare_update, conflict=DUPLICATE_EMAIL,
    )


def delete_employee(payload) -> None:
    resource_service.delete_record(Employee, payload, label="Employee")
