"""
Sales Service - open/closed sale lifecycle

WHY: An invoice lives in exactly one of two tables. Every transition
(ring up + stock decrement, pay, revert) is a single unit of work: all
statements share one session and one commit, and any failure rolls the
whole thing back so a sale can never be duplicated, lost, or leave stock
decremented without a matching sale.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import OpenSale, ClosedSale
from ..line_items import ItemLine, LineItem, ServiceLine, dump_line_items
from ..validation import ConflictError, NotFoundError, ValidationError
from tuldokbenta.time_utils import utcnow
from .catalog_service import decrement_stock
from .concurrency import lock_for_update, run_with_retry
from .freebie_service import flatten_freebies, validate_allocations


def _checkout(lines: list[LineItem]) -> list[LineItem]:
    """Check freebie caps, then flatten choices into zero-price item lines."""
    if not lines:
        raise ValidationError("items must not be empty")
    for line in lines:
        if isinstance(line, ServiceLine):
            validate_allocations(line)
    return flatten_freebies(lines)


def _invoice_in_use(invoice_number: str, *, exclude_open_id: int | None = None, exclude_closed_id: int | None = None) -> bool:
    open_q = db.session.query(OpenSale.id).filter(OpenSale.invoice_number == invoice_number)
    if exclude_open_id is not None:
        open_q = open_q.filter(OpenSale.id != exclude_open_id)
    closed_q = db.session.query(ClosedSale.id).filter(ClosedSale.invoice_number == invoice_number)
    if exclude_closed_id is not None:
        closed_q = closed_q.filter(ClosedSale.id != exclude_closed_id)
    return open_q.first() is not None or closed_q.first() is not None


def _flush_or_conflict(invoice_number: str) -> None:
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Invoice {invoice_number} already exists")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_open_sales() -> list[OpenSale]:
    """Newest first by created_at."""
    return (
        db.session.query(OpenSale)
        .order_by(OpenSale.created_at.desc(), OpenSale.id.desc())
        .all()
    )


def list_closed_sales() -> list[ClosedSale]:
    """Newest first by paid_at."""
    return (
        db.session.query(ClosedSale)
        .order_by(ClosedSale.paid_at.desc(), ClosedSale.id.desc())
        .all()
    )


def get_open_sale(sale_id: int) -> OpenSale:
    sale = db.session.get(OpenSale, sale_id)
    if sale is None:
        raise NotFoundError("Sale not found")
    return sale


def get_closed_sale(sale_id: int) -> ClosedSale:
    sale = db.session.get(ClosedSale, sale_id)
    if sale is None:
        raise NotFoundError("Sale not found")
    return sale


# ---------------------------------------------------------------------------
# Open sale writes
# ---------------------------------------------------------------------------

def create_open_sale(invoice_number: str, lines: list[LineItem]) -> OpenSale:
    """
    Ring up a new open sale.

    Freebie choices on service lines are flattened into zero-price item
    lines first. Every item line, freebies included, decrements inventory
    stock right away, whether or not the sale is ever paid. Stock updates
    and the sale insert commit together.

    Raises:
        ValidationError: blank invoice number, empty items, over-allocated freebies
        ConflictError: invoice number already used by an open or closed sale
        NotFoundError: an item line references an unknown inventory item
    """
    invoice_number = (invoice_number or "").strip()
    if not invoice_number:
        raise ValidationError("invoice_number is required")
    lines = _checkout(lines)

    def _op() -> OpenSale:
        if _invoice_in_use(invoice_number):
            raise ConflictError(f"Invoice {invoice_number} already exists")

        for line in lines:
            if isinstance(line, ItemLine):
                item = decrement_stock(line)
                current_app.logger.info(
                    "Stock %s -%s -> %s (invoice %s)",
                    item.item_name, line.qty, item.stock, invoice_number,
                )

        sale = OpenSale(
            invoice_number=invoice_number,
            items=dump_line_items(lines),
            created_at=utcnow(),
        )
        db.session.add(sale)
        _flush_or_conflict(invoice_number)

        db.session.commit()
        return sale

    sale = run_with_retry(_op, label=f"create sale {invoice_number}")
    current_app.logger.info("Created open sale %s (id=%s)", sale.invoice_number, sale.id)
    return sale


def update_open_sale(sale_id: int, lines: list[LineItem]) -> OpenSale:
    """
    Replace the item list wholesale.

    Freebies are flattened as on create. NOTE: stock is not reconciled
    against the previous quantities, freebie lines included.
    """
    lines = _checkout(lines)

    def _op() -> OpenSale:
        sale = lock_for_update(db.session.query(OpenSale).filter_by(id=sale_id)).first()
        if sale is None:
            raise NotFoundError("Sale not found")

        sale.items = dump_line_items(lines)
        db.session.commit()
        return sale

    return run_with_retry(_op, label=f"update sale {sale_id}")


def delete_open_sale(sale_id: int) -> None:
    """Remove an open sale. Stock decremented at creation is not restored."""
    sale = get_open_sale(sale_id)
    invoice_number = sale.invoice_number
    db.session.delete(sale)
    db.session.commit()
    current_app.logger.info("Deleted open sale %s (id=%s)", invoice_number, sale_id)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def pay_sale(sale_id: int, paid_using: str) -> ClosedSale:
    """
    Open -> Closed. Carries invoice number, items and created_at over,
    stamps paid_at=now and paid_using. Insert + delete in one transaction.
    """
    paid_using = (paid_using or "").strip() if isinstance(paid_using, str) else ""
    if not paid_using:
        raise ValidationError("Payment method is required")

    def _op() -> ClosedSale:
        sale = lock_for_update(db.session.query(OpenSale).filter_by(id=sale_id)).first()
        if sale is None:
            raise NotFoundError("Sale not found")

        if _invoice_in_use(sale.invoice_number, exclude_open_id=sale.id):
            raise ConflictError(f"Invoice {sale.invoice_number} already exists in closed sales")

        closed = ClosedSale(
            invoice_number=sale.invoice_number,
            items=list(sale.items or []),
            created_at=sale.created_at,
            paid_at=utcnow(),
            paid_using=paid_using,
        )
        db.session.add(closed)
        db.session.delete(sale)
        _flush_or_conflict(closed.invoice_number)

        db.session.commit()
        return closed

    closed = run_with_retry(_op, label=f"pay sale {sale_id}")
    current_app.logger.info(
        "Paid sale %s using %s (closed id=%s)", closed.invoice_number, closed.paid_using, closed.id,
    )
    return closed


def revert_sale(sale_id: int) -> OpenSale:
    """Closed -> Open; paid_at/paid_using are cleared, created_at kept."""
    def _op() -> OpenSale:
        sale = lock_for_update(db.session.query(ClosedSale).filter_by(id=sale_id)).first()
        if sale is None:
            raise NotFoundError("Sale not found")

        if _invoice_in_use(sale.invoice_number, exclude_closed_id=sale.id):
            raise ConflictError(f"Invoice {sale.invoice_number} already exists in open sales")

        reopened = OpenSale(
            invoice_number=sale.invoice_number,
            items=list(sale.items or []),
            created_at=sale.created_at,
            paid_at=None,
            paid_using=None,
        )
        db.session.add(reopened)
        db.session.delete(sale)
        _flush_or_conflict(reopened.invoice_number)

        db.session.commit()
        return reopened

    reopened = run_with_retry(_op, label=f"revert sale {sale_id}")
    current_app.logger.info("Reverted sale %s to open (open id=%s)", reopened.invoice_number, reopened.id)
    return reopened


def delete_closed_sale(sale_id: int) -> None:
    """Pure removal; no stock or financial adjustment."""
    sale = get_closed_sale(sale_id)
    invoice_number = sale.invoice_number
    db.session.delete(sale)
    db.session.commit()
    current_app.logger.info("Deleted closed sale %s (id=%s)", invoice_number, sale_id)
