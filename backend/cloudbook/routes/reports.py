from flask import Blueprint, request

from ..services import reporting_service
from .responses import error_response, ok


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
def dashboard_report():
    """
    Dashboard metrics for one tenant.

    Query params:
    - user_id: int (required)
    """
    try:
        return ok(reporting_service.dashboard(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to build dashboard report")
