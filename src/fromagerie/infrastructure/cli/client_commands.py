"""CLI commands for clients."""

from __future__ import annotations

import click

from fromagerie.infrastructure.cli.common import run


@click.command("add")
@click.option("--name", required=True, help="Client name.")
@click.option("--contact", default=None, help="Phone or e-mail.")
def client_add(name: str, contact: str | None) -> None:
    """Register a client."""
    client = run(lambda store, _: store.add_client(name, contact))
    click.echo(f"Client {client.id} '{client.name}' added")


@click.command("list")
def client_list() -> None:
    """List clients alphabetically."""

    async def _clients(store, _):
        return store.clients

    clients = run(_clients)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo(f"{'ID':<38} {'Name':<24} {'Contact':<20}")
    click.echo("-" * 84)
    for c in clients:
        click.echo(f"{c.id:<38} {c.name:<24} {c.contact or '-':<20}")


@click.command("remove")
@click.option("--id", "client_id", required=True, help="Client ID.")
def client_remove(client_id: str) -> None:
    """Remove a client; their orders are kept but detached, their consigns dropped."""
    run(lambda store, _: store.remove_client(client_id), admin=True)
    click.echo(f"Client {client_id} removed")
