# Overview: One-time codes for password reset: generate, hash, persist, email, verify.

"""
OTP Service

State machine per admin row:

    NONE --request_otp--> PENDING (otp, otp_expires_at set)
    PENDING --verify_otp(ok)--> NONE (fields cleared)
    PENDING --deadline passes--> EXPIRED (verify fails; next request overwrites)

Only the SHA-256 hex of the code is stored. Codes are 6 digits drawn from a
CSPRNG (100000-999999 inclusive) and live OTP_TTL_SECONDS (2 minutes).
Requesting a new code replaces any pending one.

No attempt counting or rate limiting is applied.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import Admin
from ..validation import NotFoundError, ValidationError
from . import mail_service
from .concurrency import lock_for_update
from cloudbook.time_utils import utcnow

OTP_MIN = 100000
OTP_MAX = 999999


def generate_code() -> str:
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def hash_code(code: str) -> str:
    return hashlib.sha256(str(code).strip().encode('utf-8')).hexdigest()


def request_otp(email: str) -> None:
    """
    Issue a fresh code for the admin with this email and mail it.

    The hash is committed before the mail goes out, so a delivery failure
    leaves a valid (but undelivered) code that a resend replaces.

    Raises:
        NotFoundError: no admin has this email
        MailDeliveryError: the relay refused the message
    """
    admin = db.session.query(Admin).filter(Admin.email == email.strip()).first()
    if admin is None:
        raise NotFoundError("Admin not found")

    code = generate_code()
    admin.otp = hash_code(code)
    admin.otp_expires_at = utcnow() + timedelta(seconds=current_app.config.get("OTP_TTL_SECONDS", 120))
    db.session.commit()
    current_app.logger.info("OTP issued for admin id=%s", admin.id)

    mail_service.send_otp_email(admin.email, code)


def verify_otp(email: str, code: str) -> None:
    """
    Consume a pending code.

    Raises ValidationError("Invalid or expired OTP") when nothing unexpired
    is pending and ValidationError("Invalid OTP") on a hash mismatch. On
    success both OTP fields are cleared, so the same code cannot be reused.
    The row is locked, so a concurrent verify of the same code waits and
    then finds nothing pending.
    """
    admin = lock_for_update(
        db.session.query(Admin)
        .filter(Admin.email == email.strip(), Admin.otp_expires_at > utcnow())
    ).first()
    if admin is None or admin.otp is None:
        raise ValidationError("Invalid or expired OTP")

    if not hmac.compare_digest(admin.otp, hash_code(code)):
        raise ValidationError("Invalid OTP")

    admin.otp = None
    admin.otp_expires_at = None
    db.session.commit()
    current_app.logger.info("OTP verified for admin id=%s", admin.id)


def clear_expired_otps() -> int:
    """Null out OTP fields whose deadline has passed. Returns rows touched."""
    cleared = (
        db.session.query(Admin)
        .filter(Admin.otp_expires_at.isnot(None), Admin.otp_expires_at <= utcnow())
        .update({Admin.otp: None, Admin.otp_expires_at: None}, synchronize_session=False)
    )
    db.session.commit()
    return cleared
