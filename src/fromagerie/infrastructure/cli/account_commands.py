"""CLI commands for accounts and sessions."""

from __future__ import annotations

import click

from fromagerie.application.dto import ProfilePayload, SignupPayload
from fromagerie.infrastructure.cli.common import run_accounts


@click.command("signup")
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--name", "display_name", required=True, help="Display name.")
@click.option("--phone", required=True)
@click.option("--delivery-location", required=True)
@click.option("--company", default=None)
def account_signup(email, password, display_name, phone, delivery_location, company) -> None:
    """Create an account and sign in."""
    payload = SignupPayload(
        email=email,
        password=password,
        display_name=display_name,
        phone=phone,
        delivery_location=delivery_location,
        company=company,
    )
    user = run_accounts(lambda accounts: accounts.signup(payload))
    click.echo(f"Welcome {user.display_name}")


@click.command("login")
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True)
def account_login(email: str, password: str) -> None:
    """Sign in."""
    user = run_accounts(lambda accounts: accounts.login(email, password))
    role = " (admin)" if user.is_admin else ""
    click.echo(f"Signed in as {user.display_name}{role}")


@click.command("logout")
def account_logout() -> None:
    """Sign out."""
    run_accounts(lambda accounts: accounts.logout())
    click.echo("Signed out.")


@click.command("whoami")
def account_whoami() -> None:
    """Show the signed-in user."""

    async def _user(accounts):
        return accounts.user

    user = run_accounts(_user)
    if user is None:
        click.echo("Not signed in.")
        return
    role = " (admin)" if user.is_admin else ""
    click.echo(f"{user.display_name} <{user.email}>{role}")
    click.echo(f"Contact: {user.contact}")


@click.command("profile")
@click.option("--email", required=True)
@click.option("--name", "display_name", required=True, help="Display name.")
@click.option("--phone", required=True)
@click.option("--delivery-location", required=True)
@click.option("--company", default=None)
def account_profile(email, display_name, phone, delivery_location, company) -> None:
    """Update the signed-in user's profile."""
    payload = ProfilePayload(
        email=email,
        display_name=display_name,
        phone=phone,
        delivery_location=delivery_location,
        company=company,
    )
    run_accounts(lambda accounts: accounts.update_profile(payload))
    click.echo("Profile updated.")


@click.command("password")
@click.option("--current", required=True, prompt="Current password", hide_input=True)
@click.option("--new", "new_password", required=True, prompt="New password", hide_input=True, confirmation_prompt=True)
def account_password(current: str, new_password: str) -> None:
    """Change the signed-in user's password."""
    run_accounts(lambda accounts: accounts.change_password(current, new_password))
    click.echo("Password changed.")
