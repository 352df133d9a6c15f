from __future__ import annotations

from ..extensions import db
from ..line_items import LineItem, format_money, load_line_items, sale_total
from tuldokbenta.time_utils import to_utc_z, utcnow


class _SaleRecord:
    """
    Columns shared by open and closed sales.

    WHY two tables: an invoice lives in exactly one of open_sales or
    closed_sales. Moving between them is insert + delete inside a single
    transaction (see sales_service.pay_sale / revert_sale).
    """
    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(255), nullable=False, unique=True)

    # Ordered line item snapshots, see tuldokbenta.line_items
    items = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def line_items(self) -> list[LineItem]:
        return load_line_items(self.items)

    @property
    def total(self):
        return sale_total(self.line_items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "items": list(self.items or []),
            "total": format_money(self.total),
            "created_at": to_utc_z(self.created_at),
            "paid_at": to_utc_z(self.paid_at) if self.paid_at else None,
            "paid_using": self.paid_using,
        }


class OpenSale(_SaleRecord, db.Model):
    """In-progress, unpaid sale."""
    __tablename__ = "open_sales"
    __table_args__ = (
        db.Index("ix_open_sales_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    # Always null while open; kept so both tables share one shape
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)
    paid_using = db.Column(db.String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<OpenSale id={self.id} invoice_number={self.invoice_number!r}>"


class ClosedSale(_SaleRecord, db.Model):
    """Finalized, paid sale."""
    __tablename__ = "closed_sales"
    __table_args__ = (
        db.Index("ix_closed_sales_paid_at", "paid_at"),
        {"sqlite_autoincrement": True},
    )

    paid_at = db.Column(db.DateTime(timezone=True), nullable=False)
    paid_using = db.Column(db.String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<ClosedSale id={self.id} invoice_number={self.invoice_number!r} paid_using={self.paid_using!r}>"
