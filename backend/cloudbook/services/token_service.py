# Overview: Signed auth tokens (JWT, HS256) carrying the user and tenant profile.

"""
Token Service

Tokens are signed, not encrypted: every claim is readable by the client.
They carry the user id, name, email, role and status plus the tenant's
profile fields (contact, company, logo, address) so the UI can render
without a profile round trip.

Expiry defaults to JWT_EXPIRES_SECONDS (one hour).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from ..models import Admin, Employee
from ..validation import UnauthorizedError


class TokenConfigError(RuntimeError):
    """Raised when no signing key is configured."""


def _signing_key() -> str:
    key = current_app.config.get("JWT_SECRET_KEY")
    if not key:
        raise TokenConfigError("JWT_SECRET_KEY is not defined in the environment variables.")
    return key


def issue_token(claims: dict, ttl: timedelta | None = None) -> str:
    if ttl is None:
        ttl = timedelta(seconds=current_app.config.get("JWT_EXPIRES_SECONDS", 3600))
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + ttl
    return jwt.encode(payload, _signing_key(), algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"))


def decode_token(token: str) -> dict:
    """Verify signature and expiry. Raises UnauthorizedError on failure."""
    try:
        return jwt.decode(
            token,
            _signing_key(),
            algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")


def issue_admin_token(admin: Admin) -> str:
    return issue_token(admin.profile_claims())


def issue_employee_token(employee: Employee, admin: Admin) -> str:
    """
    Employee tokens carry the tenant id as "id" so every tenant-scoped
    request made by the employee resolves to the admin's data.
    """
    return issue_token({
        "id": employee.user_id,
        "name": employee.name,
        "email": employee.email,
        "role": employee.role,
        "status": employee.status,
        "contact": admin.contact,
        "company": admin.company,
        "logo": admin.logo,
        "address": admin.address,
    })
