import logging

import click

from fromagerie.domain.exceptions import DomainException
from fromagerie.infrastructure import bootstrap
from fromagerie.infrastructure.cli.account_commands import (
    account_login,
    account_logout,
    account_password,
    account_profile,
    account_signup,
    account_whoami,
)
from fromagerie.infrastructure.cli.client_commands import client_add, client_list, client_remove
from fromagerie.infrastructure.cli.consign_commands import (
    consign_assign,
    consign_balances,
    consign_return,
    consign_type_add,
    consign_type_remove,
    consign_types,
)
from fromagerie.infrastructure.cli.item_commands import item_add, item_list, item_remove, item_update
from fromagerie.infrastructure.cli.order_commands import (
    order_create,
    order_list,
    order_remove,
    order_show,
    order_status,
)
from fromagerie.infrastructure.cli.report_commands import (
    report_customers,
    report_monthly,
    report_products,
    report_summary,
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log what the store does.")
def cli(verbose: bool) -> None:
    """Fromagerie: orders, clients and consigns of the dairy."""
    try:
        level = logging.INFO if verbose else bootstrap.settings().log_level
    except DomainException as exc:
        raise click.ClickException(str(exc))
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@cli.group()
def item() -> None:
    """Manage the product catalog."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def client() -> None:
    """Manage clients."""


@cli.group()
def consign() -> None:
    """Manage consigns (returnable containers)."""


@cli.group()
def account() -> None:
    """Sign in and manage your account."""


@cli.group()
def report() -> None:
    """Sales reports."""


# Register subcommands
item.add_command(item_add)
item.add_command(item_list)
item.add_command(item_remove)
item.add_command(item_update)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_remove)
order.add_command(order_show)
order.add_command(order_status)
client.add_command(client_add)
client.add_command(client_list)
client.add_command(client_remove)
consign.add_command(consign_assign)
consign.add_command(consign_balances)
consign.add_command(consign_return)
consign.add_command(consign_type_add)
consign.add_command(consign_type_remove)
consign.add_command(consign_types)
account.add_command(account_login)
account.add_command(account_logout)
account.add_command(account_password)
account.add_command(account_profile)
account.add_command(account_signup)
account.add_command(account_whoami)
report.add_command(report_customers)
report.add_command(report_monthly)
report.add_command(report_products)
report.add_command(report_summary)
