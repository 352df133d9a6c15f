# Overview: Flask API routes for service definitions; parses input and returns JSON responses.

# backend/tuldokbenta/routes/services.py
"""
Service definition CRUD.

freebies is the list of inventory classifications a customer may pick a
complimentary item from, one per unit of the service purchased.
"""
from flask import Blueprint, request, jsonify, current_app

from ..models import Service
from ..services import catalog_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_service,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from ..decorators import require_auth

SERVICE_POLICY = ModelValidationPolicy(
    writable_fields={"service_name", "price", "freebies"},
    required_on_create={"service_name", "price"},
)

services_bp = Blueprint("services", __name__, url_prefix="/api/services")


@services_bp.get("")
@require_auth
def list_services_route():
    try:
        return jsonify(catalog_service.list_services()), 200
    except Exception:
        current_app.logger.exception("Failed to fetch services")
        return jsonify({"message": "Internal server error"}), 500


@services_bp.get("/<int:service_id>")
@require_auth
def get_service_route(service_id: int):
    try:
        return catalog_service.get_service(service_id).to_dict(), 200
    except NotFoundError as e:
        return {"message": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to fetch service")
        return {"message": "Internal server error"}, 500


@services_bp.post("")
@require_auth
def create_service_route():
    """Required: service_name, price. Optional: freebies (list of classifications)."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Service, payload=payload, policy=SERVICE_POLICY, partial=False)
        enforce_rules_service(patch)
    except ValidationError as e:
        return {"message": str(e)}, 400

    try:
        created = catalog_service.create_service(patch=patch)
    except ConflictError as e:
        return {"message": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to add service")
        return {"message": "Internal server error"}, 500

    return created, 201


@services_bp.put("/<int:service_id>")
@require_auth
def update_service_route(service_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Service, payload=payload, policy=SERVICE_POLICY, partial=True)
        enforce_rules_service(patch)
    except ValidationError as e:
        return {"message": str(e)}, 400

    try:
        updated = catalog_service.update_service(service_id=service_id, patch=patch)
    except NotFoundError as e:
        return {"message": str(e)}, 404
    except ConflictError as e:
        return {"message": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update service")
        return {"message": "Internal server error"}, 500

    return updated, 200


@services_bp.delete("/<int:service_id>")
@require_auth
def delete_service_route(service_id: int):
    try:
        catalog_service.delete_service(service_id=service_id)
    except NotFoundError as e:
        return {"message": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to delete service")
        return {"message": "Internal server error"}, 500

    return {"message": "Service deleted successfully"}, 200
