# Overview: Flask API routes for inventory items; parses input and returns JSON responses.

# backend/tuldokbenta/routes/inventory.py
"""
Inventory item CRUD.

Stock is also changed as a side effect of ringing up open sales
(see sales_service.create_open_sale).
"""
from flask import Blueprint, request, jsonify, current_app

from ..models import InventoryItem
from ..services import catalog_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_inventory_item,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from ..decorators import require_auth

INVENTORY_POLICY = ModelValidationPolicy(
    writable_fields={"item_name", "item_classification", "price", "stock"},
    required_on_create={"item_name", "price"},
)

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("")
@require_auth
def list_inventory_route():
    """All inventory items ordered by name."""
    try:
        return jsonify(catalog_service.list_inventory()), 200
    except Exception:
        current_app.logger.exception("Failed to fetch inventory")
        return jsonify({"message": "Internal server error"}), 500


@inventory_bp.get("/<int:item_id>")
@require_auth
def get_inventory_route(item_id: int):
    try:
        return catalog_service.get_inventory_item(item_id).to_dict(), 200
    except NotFoundError as e:
        return {"message": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to fetch inventory item")
        return {"message": "Internal server error"}, 500


@inventory_bp.post("")
@require_auth
def create_inventory_route():
    """
    Create an inventory item.

    Required: item_name, price. stock defaults to 0.
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=InventoryItem, payload=payload, policy=INVENTORY_POLICY, partial=False)
        enforce_rules_inventory_item(patch)
    except ValidationError as e:
        return {"message": str(e)}, 400

    try:
        created = catalog_service.create_inventory_item(patch=patch)
    except ConflictError as e:
        return {"message": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to add inventory item")
        return {"message": "Internal server error"}, 500

    return created, 201


@inventory_bp.put("/<int:item_id>")
@require_auth
def update_inventory_route(item_id: int):
    """Partial update; omitted fields keep their values."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=InventoryItem, payload=payload, policy=INVENTORY_POLICY, partial=True)
        enforce_rules_inventory_item(patch)
    except ValidationError as e:
        return {"message": str(e)}, 400

    try:
        updated = catalog_service.update_inventory_item(item_id=item_id, patch=patch)
    except NotFoundError as e:
        return {"message": str(e)}, 404
    except ConflictError as e:
        return {"message": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update inventory item")
        return {"message": "Internal server error"}, 500

    return updated, 200


@inventory_bp.delete("/<int:item_id>")
@require_auth
def delete_inventory_route(item_id: int):
    try:
        catalog_service.delete_inventory_item(item_id=item_id)
    except NotFoundError as e:
        return {"message": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to delete inventory item")
        return {"message": "Internal server error"}, 500

    return {"message": "Item deleted successfully"}, 200
