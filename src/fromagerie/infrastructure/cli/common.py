"""Helpers shared by the CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from fromagerie.application.accounts import AccountService
from fromagerie.application.store import AppDataStore
from fromagerie.domain.exceptions import AuthenticationError, DomainException
from fromagerie.infrastructure import bootstrap

T = TypeVar("T")


def run(action: Callable[[AppDataStore, AccountService], Awaitable[T]], admin: bool = False) -> T:
    """Load the store and session, then run *action* on them.

    Domain errors are turned into ``click.ClickException`` so the user
    sees a one-line message instead of a traceback.
    """

    async def _main() -> T:
        config = bootstrap.settings()
        accounts = bootstrap.account_service(config)
        await accounts.load_session()
        if admin and not accounts.is_admin:
            raise AuthenticationError("Admin mode required")
        store = bootstrap.store(config)
        await store.load()
        return await action(store, accounts)

    try:
        return asyncio.run(_main())
    except DomainException as exc:
        raise click.ClickException(str(exc))


def run_accounts(action: Callable[[AccountService], Awaitable[T]]) -> T:
    """Like ``run`` but only needs the account service."""

    async def _main() -> T:
        accounts = bootstrap.account_service()
        await accounts.load_session()
        return await action(accounts)

    try:
        return asyncio.run(_main())
    except DomainException as exc:
        raise click.ClickException(str(exc))


def parse_pairs(raw: str, what: str) -> list[tuple[str, str, str | None]]:
    """Parse 'Name:Qty,Name:Qty:comment' into (name, qty, comment) triples."""
    pairs: list[tuple[str, str, str | None]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected '{what}:Quantity'."
            )
        parts = pair.split(":", 2)
        name, qty = parts[0].strip(), parts[1].strip()
        comment = parts[2].strip() if len(parts) == 3 else None
        pairs.append((name, qty, comment))
    return pairs


def parse_number(raw: str, name: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{raw}' for '{name}'.")
