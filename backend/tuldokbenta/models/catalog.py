from __future__ import annotations

from ..extensions import db
from ..line_items import format_money
from tuldokbenta.time_utils import to_utc_z, utcnow


class InventoryItem(db.Model):
    """
    Stock-keeping catalog entry.

    Stock is decremented when an open sale is rung up and is allowed to go
    negative (the counter keeps selling even when the count is off).
    item_classification groups items for freebie eligibility.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        db.Index("ix_inventory_classification", "item_classification"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    item_name = db.Column(db.String(255), nullable=False, unique=True)
    item_classification = db.Column(db.String(120), nullable=True)

    price = db.Column(db.Numeric(10, 2), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<InventoryItem id={self.id} item_name={self.item_name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_name": self.item_name,
            "item_classification": self.item_classification,
            "price": format_money(self.price),
            "stock": self.stock,
            "created_at": to_utc_z(self.created_at),
        }


class Service(db.Model):
    """
    Service definition. freebies lists the inventory classifications a
    customer may pick one complimentary item from per unit purchased.
    """
    __tablename__ = "services"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    service_name = db.Column(db.String(255), nullable=False, unique=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    freebies = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Service id={self.id} service_name={self.service_name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "service_name": self.service_name,
            "price": format_money(self.price),
            "freebies": list(self.freebies or []),
            "created_at": to_utc_z(self.created_at),
        }
