"""JSON-file-backed implementation of OrderRepository.

Headers and line items live in two files, like the two backend tables
they stand for; line items carry the ``order_id`` foreign key.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from fromagerie.domain.exceptions import EntityNotFoundError
from fromagerie.domain.model.order import Order, OrderLineItem, OrderStatus
from fromagerie.domain.model.value_objects import Money, QuantityType
from fromagerie.domain.repository.order_repository import OrderRepository
from fromagerie.infrastructure.persistence.json_table import JsonTable


class JsonOrderRepository(OrderRepository):

    def __init__(self, orders_path: Path, items_path: Path) -> None:
        self._orders = JsonTable(orders_path)
        self._items = JsonTable(items_path)

    # --- OrderRepository interface --------------------------------------------

    async def list_all(self) -> list[Order]:
        items_by_order: dict[str, list[OrderLineItem]] = {}
        for raw in self._items.load():
            items_by_order.setdefault(raw["order_id"], []).append(self._item_to_domain(raw))

        orders = [
            self._order_to_domain(raw, items_by_order.get(raw["id"], []))
            for raw in self._orders.load()
        ]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    async def add(self, order: Order) -> Order:
        records = self._orders.load()
        raw = {
            "id": JsonTable.new_id(),
            "customer_name": order.customer_name,
            "contact": order.contact or None,
            "notes": order.notes or None,
            "client_id": order.client_id,
            "status": order.status.value,
            "created_at": JsonTable.now(),
        }
        records.append(raw)
        self._orders.persist(records)
        return self._order_to_domain(raw, [])

    async def add_line_items(
        self, order_id: str, items: list[OrderLineItem]
    ) -> list[OrderLineItem]:
        if not any(raw["id"] == order_id for raw in self._orders.load()):
            raise EntityNotFoundError(f"Order #{order_id} not found")

        records = self._items.load()
        stored = [replace(item, id=JsonTable.new_id()) for item in items]
        records.extend(self._item_to_raw(order_id, item) for item in stored)
        self._items.persist(records)
        return stored

    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        records = self._orders.load()
        for raw in records:
            if raw["id"] == order_id:
                raw["status"] = status.value
                self._orders.persist(records)
                return
        raise EntityNotFoundError(f"Order #{order_id} not found")

    async def remove(self, order_id: str) -> None:
        self._items.persist([raw for raw in self._items.load() if raw["order_id"] != order_id])
        self._orders.persist([raw for raw in self._orders.load() if raw["id"] != order_id])

    async def clear_client(self, client_id: str) -> None:
        records = self._orders.load()
        for raw in records:
            if raw.get("client_id") == client_id:
                raw["client_id"] = None
        self._orders.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _item_to_raw(order_id: str, item: OrderLineItem) -> dict:
        return {
            "id": item.id,
            "order_id": order_id,
            "item_id": item.product_id,
            "item_name": item.product_name,
            "quantity": item.quantity,
            "quantity_type": item.quantity_type.value,
            "unit_price": str(item.unit_price.amount),
            "comment": item.comment,
        }

    @staticmethod
    def _item_to_domain(raw: dict) -> OrderLineItem:
        return OrderLineItem(
            id=raw["id"],
            # rows of since-deleted products fall back to their own ID
            product_id=raw.get("item_id") or raw["id"],
            product_name=raw["item_name"],
            quantity_type=QuantityType(raw["quantity_type"]),
            quantity=raw["quantity"],
            unit_price=Money(Decimal(raw["unit_price"])),
            comment=raw.get("comment"),
        )

    @staticmethod
    def _order_to_domain(raw: dict, items: list[OrderLineItem]) -> Order:
        return Order(
            id=raw["id"],
            customer_name=raw["customer_name"],
            items=tuple(items),
            contact=raw.get("contact") or "",
            notes=raw.get("notes") or "",
            client_id=raw.get("client_id"),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
