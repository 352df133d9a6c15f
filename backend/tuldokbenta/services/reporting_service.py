# Overview: Service-layer operations for reporting; read-only projection over open + closed sales.

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ..extensions import db
from ..models import OpenSale, ClosedSale
from ..line_items import ItemLine, ServiceLine, ZERO, format_money, sale_total
from ..validation import ValidationError
from tuldokbenta.time_utils import parse_iso_date, utcnow, to_utc_z
from .freebie_service import freebie_count


class ReportError(ValidationError):
    """Raised when report parameters are invalid."""


def _parse_range(low: str | None, high: str | None) -> tuple[date | None, date | None]:
    try:
        low_day = parse_iso_date(low) if low else None
        high_day = parse_iso_date(high) if high else None
    except ValueError:
        raise ReportError("low and high must be dates (YYYY-MM-DD)")

    if low_day and high_day and low_day > high_day:
        raise ReportError("low must not be after high")
    return low_day, high_day


def filter_by_date(sales: Sequence, low: date | None, high: date | None) -> list:
    """
    Inclusive calendar-day filter on created_at. When either bound is
    missing the full history is returned.
    """
    if low is None or high is None:
        return list(sales)
    return [s for s in sales if low <= s.created_at.date() <= high]


def sales_total(sales: Iterable) -> Decimal:
    return sum((sale_total(s.line_items) for s in sales), ZERO)


def group_by_payment(closed_sales: Iterable) -> dict[str, dict]:
    groups: dict[str, dict] = {}
    for sale in closed_sales:
        method = sale.paid_using or "Unknown"
        bucket = groups.setdefault(method, {"count": 0, "total": ZERO, "invoice_numbers": []})
        bucket["count"] += 1
        bucket["total"] += sale_total(sale.line_items)
        bucket["invoice_numbers"].append(sale.invoice_number)
    return groups


def rollup_lines(sales: Iterable) -> tuple[dict[str, dict], dict[str, dict]]:
    """Quantity and revenue per item name and per service name."""
    items: dict[str, dict] = {}
    services: dict[str, dict] = {}
    for sale in sales:
        for line in sale.line_items:
            if isinstance(line, ItemLine):
                bucket = items.setdefault(line.item_name, {"qty": 0, "total": ZERO})
            elif isinstance(line, ServiceLine):
                bucket = services.setdefault(line.service_name, {"qty": 0, "total": ZERO})
            else:
                raise TypeError(f"Unsupported line item: {line!r}")
            bucket["qty"] += line.qty
            bucket["total"] += line.total
    return items, services


def _money_rows(rollup: dict[str, dict]) -> list[dict]:
    return [
        {"name": name, "qty": row["qty"], "total": format_money(row["total"])}
        for name, row in sorted(rollup.items())
    ]


def summarize(open_sales: Sequence, closed_sales: Sequence, low: date | None = None, high: date | None = None) -> dict:
    """
    Pure aggregation; recomputed from scratch on every call.
    """
    open_in_range = filter_by_date(open_sales, low, high)
    closed_in_range = filter_by_date(closed_sales, low, high)
    everything = open_in_range + closed_in_range

    open_total = sales_total(open_in_range)
    closed_total = sales_total(closed_in_range)
    items, services = rollup_lines(everything)

    by_payment = group_by_payment(closed_in_range)

    return {
        "low": low.isoformat() if low and high else None,
        "high": high.isoformat() if low and high else None,
        "open_sales_count": len(open_in_range),
        "closed_sales_count": len(closed_in_range),
        "open_total": format_money(open_total),
        "closed_total": format_money(closed_total),
        "grand_total": format_money(open_total + closed_total),
        "by_payment": [
            {
                "paid_using": method,
                "count": row["count"],
                "total": format_money(row["total"]),
                "invoice_numbers": row["invoice_numbers"],
            }
            for method, row in sorted(by_payment.items())
        ],
        "items": _money_rows(items),
        "services": _money_rows(services),
        "freebies_used": sum(freebie_count(s.line_items) for s in everything),
    }


def sales_summary(*, low: str | None, high: str | None) -> dict:
    low_day, high_day = _parse_range(low, high)

    open_sales = db.session.query(OpenSale).order_by(OpenSale.created_at.asc()).all()
    closed_sales = db.session.query(ClosedSale).order_by(ClosedSale.created_at.asc()).all()

    report = summarize(open_sales, closed_sales, low_day, high_day)
    report["generated_at"] = to_utc_z(utcnow())
    return report
