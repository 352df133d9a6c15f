# Overview: Flask API routes for open/closed sales and the pay/revert transitions.

# backend/tuldokbenta/routes/sales.py
"""
Sales API routes.

- /api/open-sales     CRUD on unpaid sales (create decrements stock)
- /api/closed-sales   read/delete paid sales
- /api/pay-sale/:id   open -> closed
- /api/revert-sale/:id closed -> open
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import sales_service
from ..line_items import parse_line_items
from ..validation import ValidationError, ConflictError, NotFoundError
from ..decorators import require_auth


open_sales_bp = Blueprint("open_sales", __name__, url_prefix="/api/open-sales")
closed_sales_bp = Blueprint("closed_sales", __name__, url_prefix="/api/closed-sales")
transitions_bp = Blueprint("sale_transitions", __name__, url_prefix="/api")


# ---------------------------------------------------------------------------
# Open sales
# ---------------------------------------------------------------------------

@open_sales_bp.get("")
@require_auth
def list_open_sales_route():
    """Open sales, newest first."""
    try:
        sales = sales_service.list_open_sales()
        return jsonify([s.to_dict() for s in sales]), 200
    except Exception:
        current_app.logger.exception("Failed to fetch open sales")
        return jsonify({"message": "Internal server error"}), 500


@open_sales_bp.get("/<int:sale_id>")
@require_auth
def get_open_sale_route(sale_id: int):
    try:
        return jsonify(sales_service.get_open_sale(sale_id).to_dict()), 200
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to fetch open sale")
        return jsonify({"message": "Internal server error"}), 500


@open_sales_bp.post("")
@require_auth
def create_open_sale_route():
    """
    Ring up a new open sale.

    Body: {"invoice_number": "INV-0001", "items": [...]}
    Item lines decrement inventory stock immediately.
    """
    data = request.get_json(silent=True) or {}
    invoice_number = data.get("invoice_number")

    if not invoice_number or not data.get("items"):
        return jsonify({"message": "Invoice number and items are required"}), 400

    try:
        if not isinstance(invoice_number, str):
            raise ValidationError("invoice_number must be a string")
        lines = parse_line_items(data.get("items"))
        sale = sales_service.create_open_sale(invoice_number, lines)
        return jsonify(sale.to_dict()), 201

    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except ConflictError as e:
        return jsonify({"message": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to create open sale")
        return jsonify({"message": "Internal server error"}), 500


@open_sales_bp.put("/<int:sale_id>")
@require_auth
def update_open_sale_route(sale_id: int):
    """
    Replace the sale's items. Stock is not re-reconciled.

    Body: {"items": [...]}
    """
    data = request.get_json(silent=True) or {}

    try:
        lines = parse_line_items(data.get("items"))
        sale = sales_service.update_open_sale(sale_id, lines)
        return jsonify(sale.to_dict()), 200

    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update open sale")
        return jsonify({"message": "Internal server error"}), 500


@open_sales_bp.delete("/<int:sale_id>")
@require_auth
def delete_open_sale_route(sale_id: int):
    try:
        sales_service.delete_open_sale(sale_id)
        return jsonify({"message": "Sale deleted successfully"}), 200
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete open sale")
        return jsonify({"message": "Internal server error"}), 500


# ---------------------------------------------------------------------------
# Closed sales
# ---------------------------------------------------------------------------

@closed_sales_bp.get("")
@require_auth
def list_closed_sales_route():
    """Closed sales, most recently paid first."""
    try:
        sales = sales_service.list_closed_sales()
        return jsonify([s.to_dict() for s in sales]), 200
    except Exception:
        current_app.logger.exception("Failed to fetch closed sales")
        return jsonify({"message": "Internal server error"}), 500


@closed_sales_bp.get("/<int:sale_id>")
@require_auth
def get_closed_sale_route(sale_id: int):
    try:
        return jsonify(sales_service.get_closed_sale(sale_id).to_dict()), 200
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to fetch closed sale")
        return jsonify({"message": "Internal server error"}), 500


@closed_sales_bp.delete("/<int:sale_id>")
@require_auth
def delete_closed_sale_route(sale_id: int):
    try:
        sales_service.delete_closed_sale(sale_id)
        return jsonify({"message": "Closed sale deleted successfully"}), 200
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete closed sale")
        return jsonify({"message": "Internal server error"}), 500


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

@transitions_bp.post("/pay-sale/<int:sale_id>")
@require_auth
def pay_sale_route(sale_id: int):
    """
    Move an open sale to closed.

    Body: {"paid_using": "cash"}
    """
    data = request.get_json(silent=True) or {}
    paid_using = data.get("paid_using")

    if not paid_using:
        return jsonify({"message": "Payment method is required"}), 400

    try:
        closed = sales_service.pay_sale(sale_id, paid_using)
        body = closed.to_dict()
        body["message"] = "Sale moved to closed"
        return jsonify(body), 200

    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except ConflictError as e:
        return jsonify({"message": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to move sale to closed")
        return jsonify({"message": "Internal server error"}), 500


@transitions_bp.post("/revert-sale/<int:sale_id>")
@require_auth
def revert_sale_route(sale_id: int):
    """Move a closed sale back to open; paid fields are cleared."""
    try:
        reopened = sales_service.revert_sale(sale_id)
        body = reopened.to_dict()
        body["message"] = "Sale reverted to open."
        return jsonify(body), 200

    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except ConflictError as e:
        return jsonify({"message": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to revert sale to open")
        return jsonify({"message": "Internal server error"}), 500
