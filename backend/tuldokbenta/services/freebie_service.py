# Overview: Freebie allocation rules for service lines; pure functions, no database access.

"""
Freebie Allocator

A service line purchased with quantity N grants N freebie slots per eligible
classification. Each classification holds a list of choices (inventory item
name + qty); the choices' quantities must never sum past N.

All functions mutate the given ServiceLine in place and touch no database
state. flatten_freebies() is the checkout step that turns the choices into
zero-price "item" lines.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ..line_items import (
    FreebieAllocation,
    FreebieChoice,
    ItemLine,
    LineItem,
    ServiceLine,
)
from ..validation import ValidationError


class FreebieAllocationError(ValidationError):
    """Raised when an allocation operation is not permitted."""


def init_allocations(classifications: Iterable[str]) -> list[FreebieAllocation]:
    """One empty allocation per eligible classification (order kept, duplicates dropped)."""
    allocations: list[FreebieAllocation] = []
    seen: set[str] = set()
    for cls in classifications:
        if cls in seen:
            continue
        seen.add(cls)
        allocations.append(FreebieAllocation(classification=cls))
    return allocations


def _allocation(line: ServiceLine, classification: str) -> FreebieAllocation:
    allocation = line.allocation_for(classification)
    if allocation is None:
        raise FreebieAllocationError(
            f"{line.service_name} has no freebie slot for '{classification}'"
        )
    return allocation


def _choice_index(allocation: FreebieAllocation, index: int) -> int:
    if index < 0 or index >= len(allocation.choices):
        raise FreebieAllocationError(
            f"No choice #{index} for '{allocation.classification}'"
        )
    return index


def remaining_slots(line: ServiceLine, classification: str) -> int:
    return max(line.qty - _allocation(line, classification).used, 0)


def _clamp(requested: int, cap: int) -> int:
    # minimum 1 once a choice exists
    return max(1, min(requested, cap))


def add_choice(
    line: ServiceLine,
    classification: str,
    item: str | None = None,
    qty: int = 1,
) -> FreebieChoice:
    """Append a choice while a slot is free; qty is clamped to what is left."""
    allocation = _allocation(line, classification)
    remaining = line.qty - allocation.used
    if remaining <= 0:
        raise FreebieAllocationError(
            f"All {line.qty} '{classification}' freebie slot(s) are used"
        )

    choice = FreebieChoice(item=item or None, qty=_clamp(qty, remaining))
    allocation.choices.append(choice)
    return choice


def update_choice_quantity(
    line: ServiceLine,
    classification: str,
    index: int,
    new_qty: int,
) -> int:
    """
    Set a choice's qty, clamped to line.qty minus the other choices in the
    same classification. Returns the quantity actually applied.
    """
    allocation = _allocation(line, classification)
    index = _choice_index(allocation, index)

    others = sum(c.qty for i, c in enumerate(allocation.choices) if i != index)
    applied = _clamp(new_qty, line.qty - others)
    allocation.choices[index].qty = applied
    return applied


def set_choice_item(line: ServiceLine, classification: str, index: int, item: str | None) -> None:
    allocation = _allocation(line, classification)
    index = _choice_index(allocation, index)
    allocation.choices[index].item = (item or "").strip() or None


def remove_choice(line: ServiceLine, classification: str, index: int) -> FreebieChoice:
    allocation = _allocation(line, classification)
    index = _choice_index(allocation, index)
    return allocation.choices.pop(index)


def validate_allocations(line: ServiceLine) -> None:
    """Re-check the per-classification cap before a sale is persisted."""
    for allocation in line.freebies:
        if allocation.used > line.qty:
            raise FreebieAllocationError(
                f"{line.service_name}: {allocation.used} '{allocation.classification}' "
                f"freebie(s) allocated but only {line.qty} purchased"
            )


def freebie_count(lines: Iterable[LineItem]) -> int:
    """
    Freebies handed out: qty of flattened freebie item lines, plus any
    choices still attached to a service line (sales saved before checkout
    flattening).
    """
    total = 0
    for line in lines:
        if isinstance(line, ItemLine) and line.freebie:
            total += line.qty
        elif isinstance(line, ServiceLine):
            total += sum(allocation.used for allocation in line.freebies)
    return total


def flatten_freebies(lines: Iterable[LineItem]) -> list[LineItem]:
    """
    Checkout flattening: every service line is followed by one zero-price
    item line per chosen freebie, flagged freebie=True. Choices without an
    item are dropped.
    """
    flat: list[LineItem] = []
    for line in lines:
        if isinstance(line, ItemLine):
            flat.append(line)
        elif isinstance(line, ServiceLine):
            flat.append(ServiceLine(
                service_name=line.service_name,
                qty=line.qty,
                price=line.price,
                ref_id=line.ref_id,
            ))
            for allocation in line.freebies:
                for choice in allocation.choices:
                    if not choice.item:
                        continue
                    flat.append(ItemLine(
                        item_name=choice.item,
                        qty=choice.qty,
                        price=Decimal("0.00"),
                        freebie=True,
                    ))
        else:
            raise TypeError(f"Unsupported line item: {line!r}")
    return flat
