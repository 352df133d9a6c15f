# backend/tuldokbenta/services/catalog_service.py
"""
Catalog Service: inventory items and service definitions.

Both are keyed by a unique name. Duplicate names surface as ConflictError
(409) instead of a raw database error.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import InventoryItem, Service
from ..line_items import ItemLine
from ..validation import ConflictError, NotFoundError

INVENTORY_MUTABLE_FIELDS = {"item_name", "item_classification", "price", "stock"}
SERVICE_MUTABLE_FIELDS = {"service_name", "price", "freebies"}


def _apply_patch(obj, patch: dict, allowed: set[str]) -> None:
    for k, v in patch.items():
        if k not in allowed:
            continue
        setattr(obj, k, v)


def _commit_or_conflict(message: str) -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(message)


# ---------------------------------------------------------------------------
# Inventory items
# ---------------------------------------------------------------------------

def list_inventory() -> list[dict]:
    items = db.session.query(InventoryItem).order_by(InventoryItem.item_name.asc(), InventoryItem.id.asc()).all()
    return [i.to_dict() for i in items]


def get_inventory_item(item_id: int) -> InventoryItem:
    item = db.session.get(InventoryItem, item_id)
    if item is None:
        raise NotFoundError("Item not found")
    return item


def create_inventory_item(*, patch: dict) -> dict:
    """Create inventory item from a validated patch. Stock defaults to 0."""
    name = patch.get("item_name")
    if db.session.query(InventoryItem).filter_by(item_name=name).first():
        raise ConflictError(f"Inventory item '{name}' already exists")

    item = InventoryItem(stock=0)
    _apply_patch(item, patch, INVENTORY_MUTABLE_FIELDS)
    db.session.add(item)
    _commit_or_conflict(f"Inventory item '{name}' already exists")
    current_app.logger.info("Created inventory item %s (id=%s)", item.item_name, item.id)
    return item.to_dict()


def update_inventory_item(*, item_id: int, patch: dict) -> dict:
    """Partial update: only provided fields change."""
    item = get_inventory_item(item_id)

    name = patch.get("item_name")
    if name and name != item.item_name:
        clash = db.session.query(InventoryItem).filter(
            InventoryItem.item_name == name,
            InventoryItem.id != item_id,
        ).first()
        if clash:
            raise ConflictError(f"Inventory item '{name}' already exists")

    _apply_patch(item, patch, INVENTORY_MUTABLE_FIELDS)
    _commit_or_conflict(f"Inventory item '{name}' already exists")
    return item.to_dict()


def delete_inventory_item(*, item_id: int) -> None:
    item = get_inventory_item(item_id)
    db.session.delete(item)
    db.session.commit()
    current_app.logger.info("Deleted inventory item id=%s", item_id)


def resolve_inventory_item(line: ItemLine) -> InventoryItem:
    """
    Find the inventory row an item line refers to: by ref_id when the
    client sent one, otherwise by exact item name.
    """
    if line.ref_id is not None:
        item = db.session.get(InventoryItem, line.ref_id)
    else:
        item = db.session.query(InventoryItem).filter_by(item_name=line.item_name).first()

    if item is None:
        ref = f"id={line.ref_id}" if line.ref_id is not None else f"'{line.item_name}'"
        raise NotFoundError(f"Inventory item {ref} not found")
    return item


def decrement_stock(line: ItemLine) -> InventoryItem:
    """
    Subtract the line quantity from stock. Does NOT commit: callers run this
    inside the same transaction as the sale insert.
    """
    item = resolve_inventory_item(line)
    item.stock = (item.stock or 0) - line.qty
    return item


# ---------------------------------------------------------------------------
# Service definitions
# ---------------------------------------------------------------------------

def list_services() -> list[dict]:
    services = db.session.query(Service).order_by(Service.service_name.asc(), Service.id.asc()).all()
    return [s.to_dict() for s in services]


def get_service(service_id: int) -> Service:
    service = db.session.get(Service, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return service


def create_service(*, patch: dict) -> dict:
    name = patch.get("service_name")
    if db.session.query(Service).filter_by(service_name=name).first():
        raise ConflictError(f"Service '{name}' already exists")

    service = Service(freebies=[])
    _apply_patch(service, patch, SERVICE_MUTABLE_FIELDS)
    db.session.add(service)
    _commit_or_conflict(f"Service '{name}' already exists")
    current_app.logger.info("Created service %s (id=%s)", service.service_name, service.id)
    return service.to_dict()


def update_service(*, service_id: int, patch: dict) -> dict:
    service = get_service(service_id)

    name = patch.get("service_name")
    if name and name != service.service_name:
        clash = db.session.query(Service).filter(
            Service.service_name == name,
            Service.id != service_id,
        ).first()
        if clash:
            raise ConflictError(f"Service '{name}' already exists")

    _apply_patch(service, patch, SERVICE_MUTABLE_FIELDS)
    _commit_or_conflict(f"Service '{name}' already exists")
    return service.to_dict()


def delete_service(*, service_id: int) -> None:
    service = get_service(service_id)
    db.session.delete(service)
    db.session.commit()
    current_app.logger.info("Deleted service id=%s", service_id)
