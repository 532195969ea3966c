"""CLI commands for sales reports."""

from __future__ import annotations

import click

from fromagerie.application.analytics import (
    build_date_range,
    build_order_snapshots,
    monthly_volume,
    product_distribution,
    summarize,
    top_customers,
)
from fromagerie.domain.model.value_objects import Money
from fromagerie.infrastructure.cli.common import run

_DAYS = click.option("--days", type=int, default=90, show_default=True, help="Days to cover.")


def _snapshots(days: int):
    date_range = build_date_range(days)

    async def _collect(store, _):
        return build_order_snapshots(store.orders, date_range, store.settings.transport_fee_per_line)

    return date_range, run(_collect, admin=True)


@click.command("summary")
@_DAYS
def report_summary(days: int) -> None:
    """Totals and averages over the period."""
    date_range, snapshots = _snapshots(days)
    summary = summarize(snapshots)
    click.echo(f"From {date_range.start} to {date_range.end}")
    click.echo(f"  Orders:          {summary.order_count}")
    click.echo(f"  Customers:       {summary.customer_count}")
    click.echo(f"  Products:        {summary.product_total}")
    click.echo(f"  Transport:       {summary.transport_total}")
    click.echo(f"  Total:           {summary.grand_total}")
    click.echo(f"  Average order:   {summary.average_order}")
    click.echo(f"  Lines per order: {summary.average_lines:.1f}")


@click.command("customers")
@_DAYS
@click.option("--limit", type=int, default=5, show_default=True)
def report_customers(days: int, limit: int) -> None:
    """Best customers by revenue."""
    _, snapshots = _snapshots(days)
    for row in top_customers(snapshots, limit):
        click.echo(f"{row.label:<24} {str(row.total):>14}  {row.count} order(s)")


@click.command("products")
@_DAYS
@click.option("--limit", type=int, default=5, show_default=True)
def report_products(days: int, limit: int) -> None:
    """Revenue per product."""
    _, snapshots = _snapshots(days)
    for row in product_distribution(snapshots, limit):
        click.echo(f"{row.label:<24} {str(row.total):>14}  {row.count:g} unit(s)")


@click.command("monthly")
@click.option("--months", type=int, default=12, show_default=True)
def report_monthly(months: int) -> None:
    """Revenue per calendar month."""
    date_range, snapshots = _snapshots(months * 31)
    for point in monthly_volume(snapshots, date_range.end, months):
        click.echo(f"{point.start:%Y-%m}  {str(Money(point.value)):>14}")
