# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/cloudbook/routes/auth.py
"""
Authentication API routes

- Admin and employee login return a signed token (1 hour)
- Sign up creates a new tenant (admin)
- Forgot password / resend / verify drive the OTP flow
- /validate decodes a token for the frontend session check
"""

from flask import Blueprint, request, g

from ..decorators import require_auth
from ..services import auth_service, otp_service, token_service
from ..services.mail_service import MailDeliveryError
from ..validation import is_missing
from .responses import error_response, fail, ok


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _credentials():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    return data.get("email"), data.get("password")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate an admin.

    Returns the token and the admin profile. The email is compared after
    trimming the stored value.
    """
    try:
        email, password = _credentials()
        if is_missing(email) or is_missing(password):
            return fail("Email and password are required", 400)

        admin = auth_service.authenticate_admin(str(email), str(password))
        token = token_service.issue_admin_token(admin)
        return ok(token=token, admin=admin.profile_claims())
    except Exception as e:
        return error_response(e, "Failed to authenticate admin")


@auth_bp.post("/employee-login")
def employee_login_route():
    """Authenticate an employee; the token carries the tenant's profile fields."""
    try:
        email, password = _credentials()
        if is_missing(email) or is_missing(password):
            return fail("Email and password are required", 400)

        employee, admin = auth_service.authenticate_employee(str(email), str(password))
        token = token_service.issue_employee_token(employee, admin)
        return ok(token=token)
    except Exception as e:
        return error_response(e, "Failed to authenticate employee")


@auth_bp.post("/sign-up")
def sign_up_route():
    try:
        admin = auth_service.register_admin(request.get_json(silent=True))
        return ok(message="User registered successfully", status=201, userId=admin.id)
    except Exception as e:
        return error_response(e, "Failed to register admin")


@auth_bp.get("/sign-up")
def list_admins_route():
    try:
        return ok(auth_service.list_admins())
    except Exception as e:
        return error_response(e, "Failed to fetch admin")


@auth_bp.delete("/sign-up")
def delete_admin_route():
    """Delete an admin together with every row of its tenant."""
    try:
        data = request.get_json(silent=True) or {}
        admin_id = data.get("id") if isinstance(data, dict) else None
        if is_missing(admin_id):
            return fail("User ID is required", 400)

        auth_service.delete_admin(admin_id)
        return ok(message="User deleted successfully")
    except Exception as e:
        return error_response(e, "Failed to delete admin")


def _send_otp(success_message: str):
    data = request.get_json(silent=True) or {}
    email = data.get("email") if isinstance(data, dict) else None
    if is_missing(email):
        return fail("Email is required", 400)

    try:
        otp_service.request_otp(str(email))
    except MailDeliveryError as e:
        return fail("Error sending OTP. Please try again.", 500, error=str(e))
    return ok(message=success_message)


@auth_bp.post("/forgot-password")
def forgot_password_route():
    try:
        return _send_otp("OTP sent successfully")
    except Exception as e:
        return error_response(e, "Failed to send OTP")


@auth_bp.post("/resend-otp")
def resend_otp_route():
    try:
        return _send_otp("OTP resent successfully")
    except Exception as e:
        return error_response(e, "Failed to resend OTP")


@auth_bp.post("/verify-otp")
def verify_otp_route():
    """Consume the pending OTP; a code verifies at most once."""
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            data = {}
        email, code = data.get("email"), data.get("otp")
        if is_missing(email) or is_missing(code):
            return fail("OTP and email are required", 400)

        otp_service.verify_otp(str(email), str(code))
        return ok(message="OTP verified successfully")
    except Exception as e:
        return error_response(e, "Failed to verify OTP")


@auth_bp.get("/validate")
@require_auth
def validate_route():
    """
    Validate the bearer token and return its claims.

    expires_at is the token's exp (seconds since the epoch).
    """
    claims = {k: v for k, v in g.current_user.items() if k not in ("iat", "exp")}
    return ok(claims, expires_at=g.current_user.get("exp"))
