"""CLI commands for consigns (returnable containers)."""

from __future__ import annotations

import click

from fromagerie.application.dto import ConsignTransaction
from fromagerie.application.store import AppDataStore
from fromagerie.domain.model.consign import ConsignItem
from fromagerie.infrastructure.cli.common import parse_number, parse_pairs, run


def _transaction(store: AppDataStore, client_id: str, raw: str, note: str | None) -> ConsignTransaction:
    """Turn 'Bocal 500ml:3,Bouteille:2' into a transaction, matching types by label or ID."""
    by_label = {t.label.casefold(): t.id for t in store.consign_types}
    items = [
        ConsignItem(type_id=by_label.get(label.casefold(), label), quantity=parse_number(qty, label))
        for label, qty, _ in parse_pairs(raw, "TypeLabel")
    ]
    return ConsignTransaction(client_id=client_id, items=items, note=note)


@click.command("type-add")
@click.option("--label", required=True, help="Consign type label (e.g. 'Bocal 500ml').")
def consign_type_add(label: str) -> None:
    """Create a consign type."""
    consign_type = run(lambda store, _: store.add_consign_type(label), admin=True)
    click.echo(f"Consign type {consign_type.id} '{consign_type.label}' added")


@click.command("type-remove")
@click.option("--id", "type_id", required=True, help="Consign type ID.")
def consign_type_remove(type_id: str) -> None:
    """Remove a consign type together with its movements."""
    run(lambda store, _: store.remove_consign_type(type_id), admin=True)
    click.echo(f"Consign type {type_id} removed")


@click.command("types")
def consign_types() -> None:
    """List consign types."""

    async def _types(store, _):
        return store.consign_types

    types = run(_types)
    if not types:
        click.echo("No consign types found.")
        return
    for t in types:
        click.echo(f"{t.id:<38} {t.label}")


@click.command("assign")
@click.option("--client", "client_id", required=True, help="Client ID.")
@click.option("--items", required=True, help="Quantities as 'Type:Qty,Type:Qty'.")
@click.option("--note", default=None, help="Optional note.")
def consign_assign(client_id: str, items: str, note: str | None) -> None:
    """Record consigns handed to a client."""

    async def _assign(store: AppDataStore, _):
        return await store.assign_consigns(_transaction(store, client_id, items, note))

    movements = run(_assign, admin=True)
    click.echo(f"Recorded {len(movements)} consign line(s) for client {client_id}")


@click.command("return")
@click.option("--client", "client_id", required=True, help="Client ID.")
@click.option("--items", required=True, help="Quantities as 'Type:Qty,Type:Qty'.")
@click.option("--note", default=None, help="Optional note.")
def consign_return(client_id: str, items: str, note: str | None) -> None:
    """Record consigns brought back by a client."""

    async def _return(store: AppDataStore, _):
        return await store.return_consigns(_transaction(store, client_id, items, note))

    movements = run(_return, admin=True)
    click.echo(f"Recorded return of {len(movements)} consign line(s) for client {client_id}")


@click.command("balances")
@click.option("--client", "client_id", default=None, help="Only this client.")
def consign_balances(client_id: str | None) -> None:
    """Show consigns still held by clients."""

    async def _balances(store: AppDataStore, _):
        clients = {c.id: c.name for c in store.clients}
        labels = {t.id: t.label for t in store.consign_types}
        return [
            (clients.get(b.client_id, b.client_id), labels.get(b.type_id, b.type_id), b.quantity)
            for b in store.consign_totals
            if client_id is None or b.client_id == client_id
        ]

    rows = sorted(run(_balances))
    if not rows:
        click.echo("No consigns outstanding.")
        return

    click.echo(f"{'Client':<24} {'Type':<24} {'Held':>6}")
    click.echo("-" * 56)
    for client, label, quantity in rows:
        click.echo(f"{client:<24} {label:<24} {quantity:>6}")
