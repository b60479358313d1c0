# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Admins are tenant roots and sign up themselves; employees are created by
their admin (see employees_service) and log in with their own password.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor BCRYPT_ROUNDS, default 12)
- No password strength rules; presence is the only check
- Tokens are issued by token_service
"""

import bcrypt
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Admin, Employee
from ..validation import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    parse_int,
    require_fields,
    require_json_object,
)

SIGN_UP_FIELDS = ("name", "last_name", "email", "contact", "company", "address", "role", "password")

INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str) -> str:
    """Hash password using bcrypt with the configured cost factor."""
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for missing or malformed hashes instead of raising.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.strip().encode('utf-8'))
    except ValueError:
        return False


def authenticate_admin(email: str, password: str) -> Admin:
    """
    Check admin credentials. Stored emails are compared trimmed.

    Raises UnauthorizedError if the admin is unknown or the password is wrong.
    """
    admin = (
        db.session.query(Admin)
        .filter(func.trim(Admin.email) == email.strip())
        .first()
    )
    if admin is None or not verify_password(password, admin.password):
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return admin


def authenticate_employee(email: str, password: str) -> tuple[Employee, Admin]:
    """
    Check employee credentials and load the owning tenant.

    Raises:
        UnauthorizedError: unknown employee or wrong password
        NotFoundError: the employee's admin no longer exists
    """
    employee = db.session.query(Employee).filter(Employee.email == email.strip()).first()
    if employee is None or not verify_password(password, employee.password):
        raise UnauthorizedError(INVALID_CREDENTIALS)

    admin = db.session.get(Admin, employee.user_id)
    if admin is None:
        raise NotFoundError("Admin data not found")
    return employee, admin


def email_registered(email: str) -> bool:
    return bool(db.session.query(func.count(Admin.id)).filter(Admin.email == email).scalar())


def register_admin(payload) -> Admin:
    """
    Self-service sign up of a new tenant.

    Raises:
        ValidationError: a required field is missing
        ConflictError: the email is already registered (nothing is inserted)
    """
    payload = require_json_object(payload)
    require_fields(payload, SIGN_UP_FIELDS)

    email = str(payload["email"]).strip()
    if email_registered(email):
        raise ConflictError("Email already exists")

    admin = Admin(
        name=str(payload["name"]).strip(),
        last_name=str(payload["last_name"]).strip(),
        email=email,
        contact=str(payload["contact"]).strip(),
        company=str(payload["company"]).strip(),
        address=str(payload["address"]).strip(),
        role=str(payload["role"]).strip(),
        password=hash_password(str(payload["password"])),
    )
    db.session.add(admin)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent sign-up took the email between the check and the insert.
        db.session.rollback()
        raise ConflictError("Email already exists")
    current_app.logger.info("Registered admin id=%s", admin.id)
    return admin


def list_admins() -> list[dict]:
    admins = db.session.query(Admin).order_by(Admin.id.asc()).all()
    return [a.to_dict() for a in admins]


def delete_admin(admin_id) -> None:
    """Delete an admin and, through the ORM cascade, every row of its tenant."""
    admin_id = parse_int(admin_id, "id")
    admin = db.session.get(Admin, admin_id)
    if admin is None:
        raise NotFoundError("No admin found with the specified ID")
    db.session.delete(admin)
    db.session.commit()
    current_app.logger.info("Deleted admin id=%s", admin_id)
