# Overview: Flask API routes for reports; parses input and returns JSON responses.

from __future__ import annotations

from flask import Blueprint, request, current_app

from ..decorators import require_auth
from ..services import reporting_service
from ..services.reporting_service import ReportError


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/summary")
@require_auth
def sales_summary_route():
    """
    Totals over open + closed sales.

    Query params:
    - low: YYYY-MM-DD (inclusive)
    - high: YYYY-MM-DD (inclusive)
    Both are needed for filtering; with either missing the full history is used.
    """
    try:
        return reporting_service.sales_summary(
            low=request.args.get("low"),
            high=request.args.get("high"),
        ), 200
    except ReportError as exc:
        return {"message": str(exc)}, 400
    except Exception:
        current_app.logger.exception("Failed to build sales summary")
        return {"message": "Internal server error"}, 500
