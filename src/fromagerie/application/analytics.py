"""Application service: sales analytics (query only).

Pure functions over the orders held by the store.  They compute the
figures behind the owner's dashboard; rendering them is someone else's
job.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from fromagerie.domain.model.order import Order
from fromagerie.domain.model.value_objects import Money
from fromagerie.domain.service.financials import (
    TRANSPORT_FEE_PER_LINE,
    OrderFinancials,
    compute_order_financials,
)

OTHERS_LABEL = "Others"
UNNAMED_CUSTOMER = "Unnamed customer"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days; ``start`` None means "since forever"."""

    start: date | None
    end: date

    def contains(self, moment: datetime) -> bool:
        day = moment.date()
        if self.start is not None and day < self.start:
            return False
        return day <= self.end


@dataclass(frozen=True)
class OrderSnapshot:

    order: Order
    created_at: datetime
    financials: OrderFinancials


@dataclass(frozen=True)
class SalesSummary:

    order_count: int
    line_count: int
    customer_count: int
    product_total: Money
    transport_total: Money
    grand_total: Money
    average_order: Money
    average_lines: float


@dataclass(frozen=True)
class RankedRow:
    """One bar of a ranking: a label, its revenue and how many units/orders."""

    label: str
    total: Money
    count: float


@dataclass(frozen=True)
class SeriesPoint:

    start: date
    value: Decimal


def build_date_range(days: int, today: date | None = None) -> DateRange:
    """The last *days* calendar days, today included."""
    if days <= 0:
        raise ValueError("days must be positive")
    end = today or date.today()
    return DateRange(start=end - timedelta(days=days - 1), end=end)


def build_order_snapshots(
    orders: Iterable[Order],
    date_range: DateRange,
    fee_per_line: Money = TRANSPORT_FEE_PER_LINE,
) -> list[OrderSnapshot]:
    """Orders created within *date_range*, oldest first, with their totals."""
    snapshots = [
        OrderSnapshot(
            order=order,
            created_at=order.created_at,
            financials=compute_order_financials(order, fee_per_line),
        )
        for order in orders
        if date_range.contains(order.created_at)
    ]
    snapshots.sort(key=lambda s: s.created_at)
    return snapshots


def summarize(snapshots: list[OrderSnapshot]) -> SalesSummary:
    product_total = Money.zero()
    transport_total = Money.zero()
    line_count = 0
    customers: set[str] = set()

    for snapshot in snapshots:
        product_total = product_total + snapshot.financials.product_total
        transport_total = transport_total + snapshot.financials.transport_fee
        line_count += len(snapshot.order.items)
        customers.add(_customer_label(snapshot.order))

    grand_total = product_total + transport_total
    order_count = len(snapshots)
    if order_count:
        average_order = Money((grand_total.amount / order_count).quantize(Decimal("0.01")))
        average_lines = line_count / order_count
    else:
        average_order = Money.zero()
        average_lines = 0.0

    return SalesSummary(
        order_count=order_count,
        line_count=line_count,
        customer_count=len(customers),
        product_total=product_total,
        transport_total=transport_total,
        grand_total=grand_total,
        average_order=average_order,
        average_lines=average_lines,
    )


def top_customers(snapshots: list[OrderSnapshot], limit: int = 5) -> list[RankedRow]:
    """Customers ranked by grand total; ``count`` is their number of orders."""
    totals: dict[str, Money] = {}
    counts: dict[str, int] = {}
    for snapshot in snapshots:
        name = _customer_label(snapshot.order)
        totals[name] = totals.get(name, Money.zero()) + snapshot.financials.grand_total
        counts[name] = counts.get(name, 0) + 1

    rows = [RankedRow(label=name, total=total, count=counts[name]) for name, total in totals.items()]
    rows.sort(key=lambda row: row.total.amount, reverse=True)
    return rows[:limit]


def product_distribution(snapshots: list[OrderSnapshot], limit: int = 5) -> list[RankedRow]:
    """Products ranked by revenue; everything past *limit* is grouped.

    ``count`` is the canonical quantity sold.  Products are keyed by the
    name captured on the line item, so renamed or removed products keep
    their history.
    """
    totals: dict[str, Money] = {}
    quantities: dict[str, float] = {}
    for snapshot in snapshots:
        for item in snapshot.order.items:
            totals[item.product_name] = totals.get(item.product_name, Money.zero()) + item.line_total
            quantities[item.product_name] = quantities.get(item.product_name, 0) + item.quantity

    rows = [
        RankedRow(label=name, total=total, count=quantities[name])
        for name, total in totals.items()
    ]
    rows.sort(key=lambda row: row.total.amount, reverse=True)

    top, rest = rows[:limit], rows[limit:]
    if rest:
        rest_total = Money.zero()
        for row in rest:
            rest_total = rest_total + row.total
        top.append(
            RankedRow(label=OTHERS_LABEL, total=rest_total, count=sum(row.count for row in rest))
        )
    return top


def weekly_series(
    snapshots: list[OrderSnapshot],
    end: date,
    weeks: int = 5,
    mode: str = "volume",
) -> list[SeriesPoint]:
    """Monday-based weeks ending with the week of *end*, oldest first.

    ``mode`` is ``"volume"`` (sum of grand totals) or ``"count"``.
    """
    if mode not in ("volume", "count"):
        raise ValueError(f"Unknown mode {mode!r}")

    current_week = end - timedelta(days=end.weekday())
    points: list[SeriesPoint] = []
    for step in range(weeks - 1, -1, -1):
        week_start = current_week - timedelta(weeks=step)
        week_end = week_start + timedelta(days=6)
        value = Decimal("0")
        for snapshot in snapshots:
            if week_start <= snapshot.created_at.date() <= week_end:
                value += snapshot.financials.grand_total.amount if mode == "volume" else 1
        points.append(SeriesPoint(start=week_start, value=value))
    return points


def monthly_volume(
    snapshots: list[OrderSnapshot],
    end: date,
    months: int = 12,
) -> list[SeriesPoint]:
    """Grand totals per calendar month, ending with the month of *end*."""
    points: list[SeriesPoint] = []
    for back in range(months - 1, -1, -1):
        year, month = divmod(end.year * 12 + (end.month - 1) - back, 12)
        month_start = date(year, month + 1, 1)
        value = Decimal("0")
        for snapshot in snapshots:
            created = snapshot.created_at.date()
            if (created.year, created.month) == (month_start.year, month_start.month):
                value += snapshot.financials.grand_total.amount
        points.append(SeriesPoint(start=month_start, value=value))
    return points


def _customer_label(order: Order) -> str:
    return order.customer_name.strip() or UNNAMED_CUSTOMER
