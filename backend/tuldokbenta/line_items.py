# Overview: Typed sale line items stored in the sale "items" JSON column.

"""
Sale line items.

A sale stores an ordered list of line items as JSON. Each entry is tagged by
"type":

- "item": a catalog inventory item (name/price snapshot, quantity). Free
  items handed out with a service are stored as "item" lines with price 0
  and "freebie": true.
- "service": a service definition (name/price snapshot, quantity). While a
  sale is being built it carries freebie allocations, one per eligible
  classification; saving a sale flattens them into freebie item lines.

Prices are snapshots taken at sale time and never re-read from the catalog.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, ClassVar, Iterable, Union

from .validation import ValidationError, enforce_price, to_int, to_money

ZERO = Decimal("0.00")


def format_money(amount: Decimal) -> str:
    return f"{amount.quantize(Decimal('0.01')):.2f}"


@dataclass
class FreebieChoice:
    item: str | None = None
    qty: int = 1

    def to_dict(self) -> dict:
        return {"item": self.item or "", "qty": self.qty}


@dataclass
class FreebieAllocation:
    classification: str
    choices: list[FreebieChoice] = field(default_factory=list)

    @property
    def used(self) -> int:
        return sum(c.qty for c in self.choices)

    def to_dict(self) -> dict:
        return {
            "classification": self.classification,
            "choices": [c.to_dict() for c in self.choices],
        }


@dataclass
class ItemLine:
    kind: ClassVar[str] = "item"

    item_name: str
    qty: int
    price: Decimal
    ref_id: int | None = None
    # Set on zero-price lines produced from a service's freebie choices
    freebie: bool = False

    @property
    def name(self) -> str:
        return self.item_name

    @property
    def total(self) -> Decimal:
        return self.price * self.qty

    def to_dict(self) -> dict:
        data = {
            "type": self.kind,
            "item_name": self.item_name,
            "qty": self.qty,
            "price": format_money(self.price),
        }
        if self.ref_id is not None:
            data["ref_id"] = self.ref_id
        if self.freebie:
            data["freebie"] = True
        return data


@dataclass
class ServiceLine:
    kind: ClassVar[str] = "service"

    service_name: str
    qty: int
    price: Decimal
    ref_id: int | None = None
    freebies: list[FreebieAllocation] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.service_name

    @property
    def total(self) -> Decimal:
        return self.price * self.qty

    def allocation_for(self, classification: str) -> FreebieAllocation | None:
        for allocation in self.freebies:
            if allocation.classification == classification:
                return allocation
        return None

    def to_dict(self) -> dict:
        data = {
            "type": self.kind,
            "service_name": self.service_name,
            "qty": self.qty,
            "price": format_money(self.price),
        }
        if self.ref_id is not None:
            data["ref_id"] = self.ref_id
        if self.freebies:
            data["freebies"] = [f.to_dict() for f in self.freebies]
        return data


LineItem = Union[ItemLine, ServiceLine]


def _required_text(raw: dict, key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{where}: {key} is required")
    return value.strip()


def _quantity(raw: Any, where: str, default: int | None = None) -> int:
    if raw is None:
        if default is None:
            raise ValidationError(f"{where}: qty is required")
        return default
    qty = to_int(raw, f"{where}: qty")
    if qty < 1:
        raise ValidationError(f"{where}: qty must be >= 1")
    return qty


def _optional_ref(raw: dict, where: str) -> int | None:
    # refId is the key the web client sends
    value = raw.get("ref_id", raw.get("refId"))
    if value is None or value == "":
        return None
    return to_int(value, f"{where}: ref_id")


def _parse_price(raw: dict, where: str) -> Decimal:
    if raw.get("price") is None:
        raise ValidationError(f"{where}: price is required")
    price = to_money(raw["price"], f"{where}: price")
    enforce_price(price, f"{where}: price")
    return price


def _parse_freebies(raw: Any, where: str) -> list[FreebieAllocation]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError(f"{where}: freebies must be a list")

    allocations = []
    for i, entry in enumerate(raw):
        # The service form used to send bare classification names
        if isinstance(entry, str):
            if entry.strip():
                allocations.append(FreebieAllocation(classification=entry.strip()))
            continue
        if not isinstance(entry, dict):
            raise ValidationError(f"{where}: freebies[{i}] must be an object")

        classification = _required_text(entry, "classification", f"{where}: freebies[{i}]")
        choices_raw = entry.get("choices") or []
        if not isinstance(choices_raw, list):
            raise ValidationError(f"{where}: freebies[{i}].choices must be a list")

        choices = []
        for j, choice in enumerate(choices_raw):
            if not isinstance(choice, dict):
                raise ValidationError(f"{where}: freebies[{i}].choices[{j}] must be an object")
            item = choice.get("item")
            if item is not None and not isinstance(item, str):
                raise ValidationError(f"{where}: freebies[{i}].choices[{j}].item must be a string")
            choices.append(FreebieChoice(
                item=(item or "").strip() or None,
                qty=_quantity(choice.get("qty"), f"{where}: freebies[{i}].choices[{j}]", default=1),
            ))
        allocations.append(FreebieAllocation(classification=classification, choices=choices))
    return allocations


def parse_line_item(raw: Any, index: int = 0) -> LineItem:
    """Parse one JSON line item; raises ValidationError on a malformed entry."""
    where = f"items[{index}]"
    if not isinstance(raw, dict):
        raise ValidationError(f"{where} must be an object")

    kind = raw.get("type")
    if kind == ItemLine.kind:
        return ItemLine(
            item_name=_required_text(raw, "item_name", where),
            qty=_quantity(raw.get("qty"), where, default=1),
            price=_parse_price(raw, where),
            ref_id=_optional_ref(raw, where),
            freebie=raw.get("freebie") is True,
        )
    if kind == ServiceLine.kind:
        return ServiceLine(
            service_name=_required_text(raw, "service_name", where),
            qty=_quantity(raw.get("qty"), where, default=1),
            price=_parse_price(raw, where),
            ref_id=_optional_ref(raw, where),
            freebies=_parse_freebies(raw.get("freebies"), where),
        )
    raise ValidationError(f"{where}: type must be 'item' or 'service'")


def parse_line_items(raw: Any) -> list[LineItem]:
    if raw is None:
        raise ValidationError("items is required")
    if not isinstance(raw, list):
        raise ValidationError("items must be a list")
    if not raw:
        raise ValidationError("items must not be empty")
    return [parse_line_item(entry, i) for i, entry in enumerate(raw)]


def dump_line_items(lines: Iterable[LineItem]) -> list[dict]:
    return [line.to_dict() for line in lines]


def load_line_items(stored: Any) -> list[LineItem]:
    """Rehydrate lines from the JSON column; tolerates an empty list."""
    if not stored:
        return []
    return [parse_line_item(entry, i) for i, entry in enumerate(stored)]


def sale_total(lines: Iterable[LineItem]) -> Decimal:
    return sum((line.total for line in lines), ZERO)
