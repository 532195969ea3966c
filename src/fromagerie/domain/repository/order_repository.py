"""Abstract repository for Order aggregate.

Orders and their line items are two tables: the header is inserted
first, the line items then reference the generated order ID.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fromagerie.domain.model.order import Order, OrderLineItem, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[Order]:
        """Return every order with its line items, newest first."""

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Insert an order header and return it with ID and timestamp.

        Line items are not written; the returned order has none.
        """

    @abstractmethod
    async def add_line_items(
        self, order_id: str, items: list[OrderLineItem]
    ) -> list[OrderLineItem]:
        """Insert line items for an existing order and return the stored rows."""

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Set the status of one order."""

    @abstractmethod
    async def remove(self, order_id: str) -> None:
        """Delete an order and its line items."""

    @abstractmethod
    async def clear_client(self, client_id: str) -> None:
        """Null the client reference of every order pointing at *client_id*."""
