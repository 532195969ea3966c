"""CLI commands for the Order aggregate."""

from __future__ import annotations

from collections.abc import Mapping

import click

from fromagerie.application.dto import NewOrder, NewOrderEntry
from fromagerie.application.store import AppDataStore
from fromagerie.domain.exceptions import EntityNotFoundError
from fromagerie.domain.model.order import Order, OrderStatus
from fromagerie.domain.model.value_objects import QuantityType
from fromagerie.domain.service.financials import OrderFinancials
from fromagerie.domain.service.quantities import display_unit_label_for, to_display_quantity
from fromagerie.infrastructure.cli.common import parse_number, parse_pairs, run


def _entries(store: AppDataStore, raw: str) -> list[NewOrderEntry]:
    """Turn 'Tomme:2,Brie:1:well aged' into entries, matching products by name or ID."""
    by_name = {item.name.casefold(): item.id for item in store.items}
    entries: list[NewOrderEntry] = []
    for name, qty, comment in parse_pairs(raw, "ProductName"):
        item_id = by_name.get(name.casefold(), name)
        entries.append(
            NewOrderEntry(item_id=item_id, quantity=parse_number(qty, name), comment=comment)
        )
    return entries


@click.command("create")
@click.option("--customer", default="", help="Customer name (defaults to the client's name).")
@click.option("--client", "client_id", default=None, help="Client ID.")
@click.option("--contact", default="", help="Phone or e-mail.")
@click.option("--notes", default="", help="Free-text notes.")
@click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty:comment' (kg for weighed products).")
def order_create(customer: str, client_id: str | None, contact: str, notes: str, items: str) -> None:
    """Place a new order."""

    async def _create(store: AppDataStore, _):
        name, phone = customer, contact
        if client_id:
            client = next((c for c in store.clients if c.id == client_id), None)
            if client is None:
                raise EntityNotFoundError(f"Client {client_id} not found")
            name = name or client.name
            phone = phone or (client.contact or "")
        order = await store.add_order(
            NewOrder(
                customer_name=name,
                entries=_entries(store, items),
                contact=phone,
                notes=notes,
                client_id=client_id,
            )
        )
        return order, store.financials_for(order), store.settings.kg_per_unit

    order, financials, kg_per_unit = run(_create)
    click.echo(f"Order {order.id} created  (status={order.status.value})")
    _display_order(order, financials, kg_per_unit)


def _display_order(
    order: Order,
    financials: OrderFinancials,
    kg_per_unit: Mapping[QuantityType, float],
) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Customer: {order.customer_name}  {order.contact}")
    click.echo(f"Created:  {order.created_at.strftime('%Y-%m-%d %H:%M UTC')}")
    if order.notes:
        click.echo(f"Notes:    {order.notes}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>10} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*61}")
    for item in order.items:
        shown = to_display_quantity(item.quantity_type, item.quantity, kg_per_unit)
        qty = f"{shown:g} {display_unit_label_for(item.quantity_type)}"
        click.echo(
            f"  {item.product_name:<20} {qty:>10} "
            f"{str(item.unit_price) + item.quantity_type.label:>14} {str(item.line_total):>14}"
        )
        if item.comment:
            click.echo(f"    > {item.comment}")
    click.echo(f"  {'-'*61}")
    click.echo(f"  {'Products':<31} {str(financials.product_total):>30}")
    click.echo(f"  {'Transport':<31} {str(financials.transport_fee):>30}")
    click.echo(f"  {'Order Total':<31} {str(financials.grand_total):>30}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""

    async def _find(store: AppDataStore, _):
        order = store.find_order(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order, store.financials_for(order), store.settings.kg_per_unit

    order, financials, kg_per_unit = run(_find)
    click.echo(f"Order {order.id}  (status={order.status.value})")
    _display_order(order, financials, kg_per_unit)


@click.command("list")
def order_list() -> None:
    """List orders, newest first."""

    async def _orders(store: AppDataStore, _):
        return [(o, store.financials_for(o)) for o in store.orders]

    rows = run(_orders)
    if not rows:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<38} {'Created':<17} {'Customer':<20} {'Status':<18} {'Total':>14}")
    click.echo("-" * 111)
    for order, financials in rows:
        click.echo(
            f"{order.id:<38} {order.created_at.strftime('%Y-%m-%d %H:%M'):<17} "
            f"{order.customer_name:<20} {order.status.value:<18} {str(financials.grand_total):>14}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="New status.",
)
def order_status(order_id: str, status: str) -> None:
    """Change the status of an order."""
    run(lambda store, _: store.update_order_status(order_id, status), admin=True)
    click.echo(f"Order {order_id} is now {status}")


@click.command("remove")
@click.option("--id", "order_id", required=True, help="Order ID to remove.")
def order_remove(order_id: str) -> None:
    """Withdraw an order that has not been processed yet."""
    run(lambda store, accounts: store.remove_order(order_id, as_admin=accounts.is_admin))
    click.echo(f"Order {order_id} removed.")
