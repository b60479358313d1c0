# backend/cloudbook/routes/system.py
"""
System health endpoint.

Checks the database and the configuration the auth and OTP flows depend
on, for deployment debugging.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Admin
from cloudbook.time_utils import utcnow

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database_health() -> dict:
    """
    Check database connectivity with a trivial query.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        admin_count = db.session.query(Admin).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"admins": admin_count},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


def check_mail_health() -> dict:
    """Mail is degraded (not down) when no relay credentials are configured."""
    config = current_app.config
    if config.get("MAIL_SUPPRESS_SEND"):
        return {"status": "degraded", "warning": "Mail delivery suppressed"}
    if not config.get("MAIL_USERNAME"):
        return {"status": "degraded", "warning": "MAIL_USERNAME not configured"}
    return {
        "status": "healthy",
        "details": {"server": config.get("MAIL_SERVER"), "port": config.get("MAIL_PORT")},
    }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: healthy or degraded
    - 503: database unreachable
    """
    start_time = time.time()

    database_health = check_database_health()
    mail_health = check_mail_health()

    all_checks = [database_health, mail_health]
    if any(check["status"] == "unhealthy" for check in all_checks):
        overall_status, http_status = "unhealthy", 503
    elif any(check["status"] == "degraded" for check in all_checks):
        overall_status, http_status = "degraded", 200
    else:
        overall_status, http_status = "healthy", 200

    return {
        "status": overall_status,
        "timestamp": utcnow().isoformat() + "Z",
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
        "checks": {
            "database": database_health,
            "mail": mail_health,
        },
    }, http_status
