"""Domain service: the consign ledger.

Balances are a left fold over the append-only movement log.  The store
keeps an incrementally updated copy of that fold; ``apply_delta`` is the
single step used both for that copy and, through the movements it
mirrors, for the authoritative log, so the two stay equal.

A transaction is validated as a whole before anything is written, so a
return is never partially recorded when one of its consign types is short.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from fromagerie.domain.exceptions import ValidationError
from fromagerie.domain.model.consign import ConsignBalance, ConsignItem, ConsignMovement

ASSIGN = 1
RETURN = -1


def build_totals_from_movements(
    movements: Iterable[ConsignMovement],
) -> tuple[ConsignBalance, ...]:
    """Sum movements per (client, type), dropping pairs that net to zero."""
    sums: dict[tuple[str, str], int] = {}
    for movement in movements:
        key = (movement.client_id, movement.type_id)
        sums[key] = sums.get(key, 0) + movement.quantity
    return tuple(
        ConsignBalance(client_id=client_id, type_id=type_id, quantity=quantity)
        for (client_id, type_id), quantity in sums.items()
        if quantity != 0
    )


def sanitize_items(items: Iterable[ConsignItem]) -> list[ConsignItem]:
    """Keep whole, positive quantities with a type, merging duplicate types.

    Quantities are floored (containers are whole units).  The result
    keeps the order in which each type first appeared.
    """
    merged: dict[str, int] = {}
    for item in items:
        type_id = (item.type_id or "").strip()
        if not type_id:
            continue
        try:
            raw = float(item.quantity)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(raw):
            continue
        quantity = math.floor(raw)
        if quantity <= 0:
            continue
        merged[type_id] = merged.get(type_id, 0) + quantity
    return [ConsignItem(type_id=type_id, quantity=qty) for type_id, qty in merged.items()]


def apply_delta(
    totals: Iterable[ConsignBalance],
    client_id: str,
    items: Iterable[ConsignItem],
    multiplier: int,
) -> tuple[ConsignBalance, ...]:
    """Return new balances with *items* added (+1) or removed (-1) for a client.

    Pairs reaching zero disappear.  A negative balance is kept as is: it
    can only come from an inconsistent log and must stay visible.
    """
    if multiplier not in (ASSIGN, RETURN):
        raise ValueError(f"multiplier must be +1 or -1, got {multiplier!r}")

    balances = {balance.key: balance.quantity for balance in totals}
    for item in items:
        key = (client_id, item.type_id)
        next_quantity = balances.get(key, 0) + int(item.quantity) * multiplier
        if next_quantity == 0:
            balances.pop(key, None)
        else:
            balances[key] = next_quantity
    return tuple(
        ConsignBalance(client_id=c, type_id=t, quantity=q)
        for (c, t), q in balances.items()
    )


def validate_transaction(
    totals: Iterable[ConsignBalance],
    client_id: str,
    items: Iterable[ConsignItem],
    multiplier: int,
) -> list[ConsignItem]:
    """Check a whole transaction and return its sanitized items.

    Phase 1 of every consign transaction: nothing is written until this
    returns.  Returns may not exceed what the client still holds.
    """
    if not client_id or not client_id.strip():
        raise ValidationError("A client is required")
    if multiplier not in (ASSIGN, RETURN):
        raise ValueError(f"multiplier must be +1 or -1, got {multiplier!r}")

    sanitized = sanitize_items(items)
    if not sanitized:
        raise ValidationError("At least one consign quantity is required")

    if multiplier == RETURN:
        held = outstanding_by_client(totals).get(client_id, {})
        for item in sanitized:
            outstanding = held.get(item.type_id, 0)
            if item.quantity > outstanding:
                raise ValidationError(
                    f"Cannot return {item.quantity} of consign type "
                    f"'{item.type_id}' (only {outstanding} outstanding)"
                )
    return sanitized


def outstanding_by_client(
    totals: Iterable[ConsignBalance],
) -> dict[str, dict[str, int]]:
    """Positive balances grouped as ``{client_id: {type_id: quantity}}``."""
    result: dict[str, dict[str, int]] = {}
    for balance in totals:
        if balance.quantity <= 0:
            continue
        result.setdefault(balance.client_id, {})[balance.type_id] = balance.quantity
    return result
