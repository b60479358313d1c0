# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import token_service
from .validation import UnauthorizedError


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def require_auth(f):
    """
    Require a valid signed token.

    Sets the following Flask g attributes:
    - g.current_user: the decoded token claims (id, name, email, role, ...)
    - g.tenant_id: the admin id the caller acts for (claims["id"])

    SECURITY: Returns 401 if:
    - No Authorization header
    - Bad signature or expired token
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"success": False, "message": "Authentication required"}), 401

        try:
            claims = token_service.decode_token(token)
        except UnauthorizedError as e:
            return jsonify({"success": False, "message": str(e)}), 401

        g.current_user = claims
        g.tenant_id = claims.get("id")

        return f(*args, **kwargs)

    return decorated_function
