"""Application service: the dairy's data store.

``AppDataStore`` is the single source of truth for the catalog, orders,
clients, consign types and consign balances.  Every mutation follows the
same protocol:

1. validate and normalize the input locally (nothing is written when
   this fails);
2. write to the backend tables;
3. only once the backend confirmed, fold the stored rows into the
   in-memory collections.

Collections are immutable tuples replaced wholesale, so a reader that
runs while a write is pending sees either the previous or the next
snapshot, never a half-applied one.  Backend errors propagate to the
caller unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import replace
from datetime import datetime, timezone

from fromagerie.application.dto import ConsignTransaction, ItemPayload, NewOrder, NewOrderEntry
from fromagerie.config import Settings
from fromagerie.domain.exceptions import EntityNotFoundError, ValidationError
from fromagerie.domain.model.client import Client
from fromagerie.domain.model.consign import ConsignBalance, ConsignMovement, ConsignType
from fromagerie.domain.model.order import Order, OrderLineItem, OrderStatus
from fromagerie.domain.model.product import Product
from fromagerie.domain.model.value_objects import Money
from fromagerie.domain.repository.client_repository import ClientRepository
from fromagerie.domain.repository.consign_repository import (
    ConsignMovementRepository,
    ConsignTypeRepository,
)
from fromagerie.domain.repository.order_repository import OrderRepository
from fromagerie.domain.repository.product_repository import ProductRepository
from fromagerie.domain.service.consign_ledger import (
    ASSIGN,
    RETURN,
    apply_delta,
    build_totals_from_movements,
    outstanding_by_client,
    validate_transaction,
)
from fromagerie.domain.service.financials import OrderFinancials, compute_order_financials
from fromagerie.domain.service.quantities import to_unit_quantity, validate_quantity_multiple

logger = logging.getLogger(__name__)


class AppDataStore:

    def __init__(
        self,
        product_repo: ProductRepository,
        order_repo: OrderRepository,
        client_repo: ClientRepository,
        consign_type_repo: ConsignTypeRepository,
        movement_repo: ConsignMovementRepository,
        settings: Settings | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._order_repo = order_repo
        self._client_repo = client_repo
        self._consign_type_repo = consign_type_repo
        self._movement_repo = movement_repo
        self._settings = settings or Settings()

        self._items: tuple[Product, ...] = ()
        self._orders: tuple[Order, ...] = ()
        self._clients: tuple[Client, ...] = ()
        self._consign_types: tuple[ConsignType, ...] = ()
        self._consign_totals: tuple[ConsignBalance, ...] = ()
        self._loading = True

    # --- Snapshots ------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def loading(self) -> bool:
        """True until the first ``load()`` has settled."""
        return self._loading

    @property
    def items(self) -> tuple[Product, ...]:
        return self._items

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._orders

    @property
    def clients(self) -> tuple[Client, ...]:
        return self._clients

    @property
    def consign_types(self) -> tuple[ConsignType, ...]:
        return self._consign_types

    @property
    def consign_totals(self) -> tuple[ConsignBalance, ...]:
        return self._consign_totals

    # --- Initial load ---------------------------------------------------------

    async def load(self) -> None:
        """Fetch all five tables concurrently.

        Each table that could be read is applied even when another one
        failed; ``loading`` turns False once every fetch has settled and
        the first failure is then re-raised.
        """
        results = await asyncio.gather(
            self._product_repo.list_all(),
            self._order_repo.list_all(),
            self._client_repo.list_all(),
            self._consign_type_repo.list_all(),
            self._movement_repo.list_all(),
            return_exceptions=True,
        )
        products, orders, clients, consign_types, movements = results

        failures: list[BaseException] = []
        for table, result in zip(
            ("products", "orders", "clients", "consign types", "consign movements"),
            results,
        ):
            if isinstance(result, BaseException):
                logger.error("Loading %s failed: %s", table, result)
                failures.append(result)

        if not isinstance(products, BaseException):
            self._items = tuple(products)
        if not isinstance(orders, BaseException):
            self._orders = tuple(orders)
        if not isinstance(clients, BaseException):
            self._clients = tuple(clients)
        if not isinstance(consign_types, BaseException):
            self._consign_types = tuple(consign_types)
        if not isinstance(movements, BaseException):
            self._consign_totals = build_totals_from_movements(movements)

        self._loading = False
        if failures:
            raise failures[0]

        logger.info(
            "Loaded %d products, %d orders, %d clients, %d consign types",
            len(self._items), len(self._orders), len(self._clients), len(self._consign_types),
        )

    # --- Catalog --------------------------------------------------------------

    async def add_item(self, payload: ItemPayload) -> Product:
        draft = self._product_from_payload(payload)
        stored = await self._product_repo.add(draft)
        self._items = (*self._items, stored)
        logger.info("Product %s '%s' added", stored.id, stored.name)
        return stored

    async def update_item(self, item_id: str, payload: ItemPayload) -> Product:
        if not item_id:
            raise ValidationError("A product ID is required")
        draft = self._product_from_payload(payload, item_id)
        stored = await self._product_repo.update(draft)
        self._items = tuple(stored if item.id == item_id else item for item in self._items)
        logger.info("Product %s updated", item_id)
        return stored

    async def remove_item(self, item_id: str) -> None:
        """Remove a product from the catalog.

        Existing orders keep their line items: they hold a snapshot of
        the product, not a reference to it.
        """
        await self._product_repo.remove(item_id)
        self._items = tuple(item for item in self._items if item.id != item_id)
        logger.info("Product %s removed", item_id)

    def find_item(self, item_id: str) -> Product | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    # --- Orders ---------------------------------------------------------------

    async def add_order(self, new_order: NewOrder) -> Order:
        """Create an order and its line items.

        Every entry is resolved against the in-memory catalog and
        validated before the first write, so a bad entry never leaves a
        partial order behind.  The header is written first because line
        items reference its generated ID.
        """
        if not new_order.entries:
            raise ValidationError("Cannot create an empty order")

        line_items = [self._line_item_for(entry) for entry in new_order.entries]
        order = Order.create(
            customer_name=new_order.customer_name,
            items=line_items,
            contact=new_order.contact,
            notes=new_order.notes,
            client_id=new_order.client_id,
        )

        header = await self._order_repo.add(order)
        try:
            inserted = await self._order_repo.add_line_items(header.id, list(order.items))
        except Exception:
            logger.error("Writing line items of order %s failed; withdrawing the header", header.id)
            await self._withdraw_order_header(header.id)
            raise

        created = replace(header, items=tuple(inserted))
        self._orders = (created, *self._orders)
        logger.info("Order %s created with %d line(s)", created.id, len(created.items))
        return created

    async def update_order_status(self, order_id: str, status: OrderStatus | str) -> None:
        new_status = OrderStatus.parse(status)
        await self._order_repo.update_status(order_id, new_status)
        self._orders = tuple(
            order.with_status(new_status) if order.id == order_id else order
            for order in self._orders
        )
        logger.info("Order %s moved to %s", order_id, new_status.value)

    async def remove_order(
        self,
        order_id: str,
        *,
        as_admin: bool = True,
        now: datetime | None = None,
    ) -> None:
        order = self.find_order(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        order.ensure_removable(
            as_admin,
            now or datetime.now(timezone.utc),
            self._settings.order_removal_window,
        )

        await self._order_repo.remove(order_id)
        self._orders = tuple(o for o in self._orders if o.id != order_id)
        logger.info("Order %s removed", order_id)

    def find_order(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def financials_for(self, order: Order) -> OrderFinancials:
        return compute_order_financials(order, self._settings.transport_fee_per_line)

    def quantity_error(self, item: Product, display_quantity: float) -> str | None:
        """Multiple-of check with this deployment's tolerance and factors."""
        return validate_quantity_multiple(
            item,
            display_quantity,
            tolerance=self._settings.multiple_tolerance,
            kg_per_unit=self._settings.kg_per_unit,
        )

    # --- Clients --------------------------------------------------------------

    async def add_client(self, name: str, contact: str | None = None) -> Client:
        client = Client.create(name, contact)
        stored = await self._client_repo.add(client)
        self._clients = tuple(sorted((*self._clients, stored), key=lambda c: c.sort_key))
        logger.info("Client %s '%s' added", stored.id, stored.name)
        return stored

    async def remove_client(self, client_id: str) -> None:
        """Remove a client, detaching its orders and dropping its consigns.

        The three backend steps run in order and are each safe to repeat,
        so a removal that failed part-way can simply be retried.
        """
        client_id = (client_id or "").strip()
        if not client_id:
            raise ValidationError("A client is required")

        try:
            await self._order_repo.clear_client(client_id)
            await self._movement_repo.remove_for_client(client_id)
            await self._client_repo.remove(client_id)
        except Exception:
            logger.error("Removing client %s failed part-way", client_id)
            await self._resync_consign_totals()
            raise

        self._clients = tuple(c for c in self._clients if c.id != client_id)
        self._consign_totals = tuple(b for b in self._consign_totals if b.client_id != client_id)
        self._orders = tuple(
            order.without_client() if order.client_id == client_id else order
            for order in self._orders
        )
        logger.info("Client %s removed", client_id)

    # --- Consigns -------------------------------------------------------------

    async def add_consign_type(self, label: str) -> ConsignType:
        consign_type = ConsignType.create(label)
        stored = await self._consign_type_repo.add(consign_type)
        self._consign_types = tuple(
            sorted((*self._consign_types, stored), key=lambda t: t.sort_key)
        )
        logger.info("Consign type %s '%s' added", stored.id, stored.label)
        return stored

    async def remove_consign_type(self, type_id: str) -> None:
        type_id = (type_id or "").strip()
        if not type_id:
            raise ValidationError("A consign type is required")

        try:
            await self._movement_repo.remove_for_type(type_id)
            await self._consign_type_repo.remove(type_id)
        except Exception:
            logger.error("Removing consign type %s failed part-way", type_id)
            await self._resync_consign_totals()
            raise

        self._consign_types = tuple(t for t in self._consign_types if t.id != type_id)
        self._consign_totals = tuple(b for b in self._consign_totals if b.type_id != type_id)
        logger.info("Consign type %s removed", type_id)

    async def assign_consigns(self, transaction: ConsignTransaction) -> list[ConsignMovement]:
        """Record consigns handed to a client."""
        return await self._record_consign_transaction(transaction, ASSIGN)

    async def return_consigns(self, transaction: ConsignTransaction) -> list[ConsignMovement]:
        """Record consigns brought back; never more than the client holds."""
        return await self._record_consign_transaction(transaction, RETURN)

    async def refresh_consign_totals(self) -> None:
        """Recompute balances from the authoritative movement log."""
        movements = await self._movement_repo.list_all()
        self._consign_totals = build_totals_from_movements(movements)

    def outstanding_for(self, client_id: str) -> dict[str, int]:
        return outstanding_by_client(self._consign_totals).get(client_id, {})

    # --- Internal helpers -----------------------------------------------------

    async def _record_consign_transaction(
        self,
        transaction: ConsignTransaction,
        multiplier: int,
    ) -> list[ConsignMovement]:
        client_id = (transaction.client_id or "").strip()
        items = validate_transaction(self._consign_totals, client_id, transaction.items, multiplier)
        note = (transaction.note or "").strip() or None

        movements = [
            ConsignMovement(
                id=None,
                client_id=client_id,
                type_id=item.type_id,
                quantity=int(item.quantity) * multiplier,
                note=note,
            )
            for item in items
        ]
        stored = await self._movement_repo.add_many(movements)

        # Fold into the current snapshot: another transaction may have landed meanwhile.
        self._consign_totals = apply_delta(self._consign_totals, client_id, items, multiplier)
        logger.info(
            "%s %d consign line(s) for client %s",
            "Assigned" if multiplier == ASSIGN else "Returned", len(items), client_id,
        )
        return stored

    def _product_from_payload(self, payload: ItemPayload, item_id: str | None = None) -> Product:
        return Product.create(
            name=payload.name,
            price=Money.of(payload.price),
            quantity_type=payload.quantity_type,
            multiple_of=payload.multiple_of,
            comment_enabled=payload.comment_enabled,
            step=payload.step,
            product_id=item_id,
        )

    def _line_item_for(self, entry: NewOrderEntry) -> OrderLineItem:
        """Resolve an entry and snapshot the product as it is right now."""
        product = self.find_item(entry.item_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{entry.item_id}'")

        try:
            display_quantity = float(entry.quantity)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid quantity for {product.name}: {entry.quantity!r}") from exc
        if not math.isfinite(display_quantity) or display_quantity <= 0:
            raise ValidationError(f"Quantity for {product.name} must be positive")

        error = self.quantity_error(product, display_quantity)
        if error:
            raise ValidationError(f"{product.name}: {error}")

        comment = (entry.comment or "").strip()
        return OrderLineItem(
            id=None,
            product_id=product.id,  # type: ignore[arg-type]
            product_name=product.name,
            quantity_type=product.quantity_type,
            quantity=to_unit_quantity(product, display_quantity, self._settings.kg_per_unit),
            unit_price=product.price,  # <-- price snapshot
            comment=comment or None,
        )

    async def _withdraw_order_header(self, order_id: str) -> None:
        try:
            await self._order_repo.remove(order_id)
        except Exception:
            logger.exception("Could not withdraw header of order %s", order_id)

    async def _resync_consign_totals(self) -> None:
        try:
            await self.refresh_consign_totals()
        except Exception:
            logger.exception("Could not re-read consign movements")
