"""Order aggregate: what a customer asked the dairy to deliver.

The Order is an aggregate root that owns its line items.  Orders are
immutable values: the store replaces an order wholesale when its status
changes, so readers never observe a half-updated order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from fromagerie.domain.exceptions import ValidationError
from fromagerie.domain.model.value_objects import Money, QuantityType

_CENT = Decimal("0.01")


class OrderStatus(Enum):
    NEW = "nouvelle"
    IN_PROGRESS = "en_cours"
    DELIVERED_UNPAID = "livree_pas_payee"
    DELIVERED_PAID = "livree_payee"
    UNDELIVERED_PAID = "non_livree_payee"

    @property
    def is_early(self) -> bool:
        """Orders in an early status may still be withdrawn."""
        return self in (OrderStatus.NEW, OrderStatus.IN_PROGRESS)

    @staticmethod
    def parse(raw: str | OrderStatus) -> OrderStatus:
        if isinstance(raw, OrderStatus):
            return raw
        try:
            return OrderStatus(raw)
        except ValueError as exc:
            options = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status {raw!r} (expected one of {options})"
            ) from exc


@dataclass(frozen=True)
class OrderLineItem:
    """Captures the product snapshot at order-creation time.

    ``quantity`` is already in canonical units, so the line total is a
    plain multiplication against the locked ``unit_price``.
    """

    id: str | None
    product_id: str
    product_name: str
    quantity_type: QuantityType
    quantity: float
    unit_price: Money  # locked at order-creation time
    comment: str | None = None

    @property
    def line_total(self) -> Money:
        total = self.unit_price * self.quantity
        # canonical weights are float ratios (0.3 kg is 2.9999999999999996 units of 100 g)
        return Money(total.amount.quantize(_CENT, rounding=ROUND_HALF_UP), total.currency)


@dataclass(frozen=True)
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: str | None
    customer_name: str
    items: tuple[OrderLineItem, ...] = ()
    contact: str = ""
    notes: str = ""
    client_id: str | None = None
    status: OrderStatus = OrderStatus.NEW
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_name: str,
        items: list[OrderLineItem],
        contact: str = "",
        notes: str = "",
        client_id: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not items:
            raise ValidationError("Cannot create an empty order")

        return Order(
            id=None,
            customer_name=(customer_name or "").strip(),
            items=tuple(items),
            contact=(contact or "").strip(),
            notes=(notes or "").strip(),
            client_id=client_id or None,
        )

    # --- State transitions ----------------------------------------------------

    def with_status(self, status: OrderStatus) -> Order:
        return replace(self, status=status)

    def without_client(self) -> Order:
        return replace(self, client_id=None)

    def ensure_removable(
        self,
        as_admin: bool,
        now: datetime,
        window: timedelta | None,
    ) -> None:
        """Raise unless this order may be deleted right now.

        Only early orders can be removed.  Admins may remove them at any
        time; everybody else only within ``window`` of creation (never,
        when ``window`` is None).
        """
        if not self.status.is_early:
            raise ValidationError(
                f"Cannot remove order in {self.status.value} status"
            )
        if as_admin:
            return
        if window is None or now - self.created_at > window:
            raise ValidationError("Order can no longer be removed")

    # --- Computed properties --------------------------------------------------

    @property
    def product_total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result
