# Overview: Service-layer operations for invoice numbers; suggests the next INV-XXXX.

from __future__ import annotations

import re
from typing import Iterable

from flask import current_app

from ..extensions import db
from ..models import OpenSale, ClosedSale


def format_invoice_number(number: int, *, prefix: str, width: int) -> str:
    return f"{prefix}{str(number).zfill(width)}"


def parse_invoice_suffix(invoice_number: str | None, *, prefix: str) -> int | None:
    """Numeric suffix of "INV-0042" -> 42; None when the prefix or digits don't match."""
    if not invoice_number or not invoice_number.startswith(prefix):
        return None
    suffix = invoice_number[len(prefix):]
    if not re.fullmatch(r"\d+", suffix):
        return None
    return int(suffix)


def suggest_invoice_number(
    invoice_numbers: Iterable[str | None],
    *,
    prefix: str = "INV-",
    width: int = 4,
    first: int = 1,
) -> str:
    """
    max(existing suffix) + 1, zero-padded. Numbers with a foreign prefix are
    ignored; with nothing to scan the sequence starts at `first`.
    """
    numbers = [
        n for n in (parse_invoice_suffix(inv, prefix=prefix) for inv in invoice_numbers)
        if n is not None
    ]
    if not numbers:
        return format_invoice_number(first, prefix=prefix, width=width)
    return format_invoice_number(max(numbers) + 1, prefix=prefix, width=width)


def next_invoice_number() -> str:
    """
    Advisory next invoice number across open AND closed sales.

    NOTE: this is a suggestion, not a reservation. create_open_sale still
    rejects duplicates with ConflictError.
    """
    cfg = current_app.config
    existing = [
        row[0] for row in db.session.query(OpenSale.invoice_number).all()
    ] + [
        row[0] for row in db.session.query(ClosedSale.invoice_number).all()
    ]
    return suggest_invoice_number(
        existing,
        prefix=cfg.get("INVOICE_PREFIX", "INV-"),
        width=cfg.get("INVOICE_NUMBER_WIDTH", 4),
        first=cfg.get("INVOICE_FIRST_NUMBER", 1),
    )
