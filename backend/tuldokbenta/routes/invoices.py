# backend/tuldokbenta/routes/invoices.py
"""Invoice number suggestion."""

from flask import Blueprint, jsonify, current_app

from ..services import invoice_service
from ..decorators import require_auth


invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoice-numbers")


@invoices_bp.get("/next")
@require_auth
def next_invoice_number_route():
    """
    Suggested next invoice number, scanned across open and closed sales.
    Advisory only: POST /api/open-sales still rejects duplicates.
    """
    try:
        return jsonify({"invoice_number": invoice_service.next_invoice_number()}), 200
    except Exception:
        current_app.logger.exception("Failed to compute next invoice number")
        return jsonify({"message": "Internal server error"}), 500
