"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from fromagerie.application.dto import ItemPayload
from fromagerie.domain.model.value_objects import QuantityType
from fromagerie.domain.service.quantities import input_step_for
from fromagerie.infrastructure.cli.common import run

_QUANTITY_TYPES = click.Choice([qt.value for qt in QuantityType])


def _payload(name, price, quantity_type, multiple, step, comment) -> ItemPayload:
    return ItemPayload(
        name=name,
        price=price,
        quantity_type=quantity_type,
        multiple_of=multiple,
        comment_enabled=comment,
        step=step,
    )


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price in ariary (e.g. 12000).")
@click.option("--type", "quantity_type", required=True, type=_QUANTITY_TYPES, help="Pricing unit.")
@click.option("--multiple", type=float, default=None, help="Required multiple, in pricing units.")
@click.option("--step", type=float, default=None, help="Input increment.")
@click.option("--comment/--no-comment", default=False, help="Allow a comment per order line.")
def item_add(name, price, quantity_type, multiple, step, comment) -> None:
    """Add a new product to the catalog."""
    payload = _payload(name, price, quantity_type, multiple, step, comment)
    product = run(lambda store, _: store.add_item(payload), admin=True)
    click.echo(f"Product {product.id} '{product.name}' added at {product.price} {product.quantity_type.label}")


@click.command("update")
@click.option("--id", "item_id", required=True, help="Product ID.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price in ariary.")
@click.option("--type", "quantity_type", required=True, type=_QUANTITY_TYPES, help="Pricing unit.")
@click.option("--multiple", type=float, default=None, help="Required multiple, in pricing units.")
@click.option("--step", type=float, default=None, help="Input increment.")
@click.option("--comment/--no-comment", default=False, help="Allow a comment per order line.")
def item_update(item_id, name, price, quantity_type, multiple, step, comment) -> None:
    """Replace a product's details (existing orders keep their snapshot)."""
    payload = _payload(name, price, quantity_type, multiple, step, comment)
    run(lambda store, _: store.update_item(item_id, payload), admin=True)
    click.echo(f"Product {item_id} updated")


@click.command("remove")
@click.option("--id", "item_id", required=True, help="Product ID.")
def item_remove(item_id: str) -> None:
    """Remove a product from the catalog."""
    run(lambda store, _: store.remove_item(item_id), admin=True)
    click.echo(f"Product {item_id} removed")


@click.command("list")
def item_list() -> None:
    """List all products in the catalog."""

    async def _items(store, _):
        return store.items

    products = run(_items)
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<38} {'Name':<20} {'Price':>12} {'Unit':<6} {'Multiple':>8} {'Step':>6}")
    click.echo("-" * 95)
    for p in products:
        multiple = f"{p.multiple_of:g}" if p.multiple_of else "-"
        click.echo(
            f"{p.id:<38} {p.name:<20} {str(p.price):>12} {p.quantity_type.label:<6} "
            f"{multiple:>8} {input_step_for(p):>6g}"
        )
