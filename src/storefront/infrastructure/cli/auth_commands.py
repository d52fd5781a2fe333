"""CLI commands for logging in and out."""

from __future__ import annotations

import click

from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.runner import run


@click.command("login")
@click.option("--email", required=True, help="Account email.")
@click.password_option(confirmation_prompt=False, help="Account password.")
def auth_login(email: str, password: str) -> None:
    """Log in and store the session locally."""

    async def action(storefront: Storefront) -> None:
        user = await storefront.auth.login(email, password)
        click.echo(f"Logged in as {user.name or user.email}.")

    run(action)


@click.command("register")
@click.option("--email", required=True, help="Account email.")
@click.option("--name", default=None, help="Display name.")
@click.password_option(help="Account password.")
def auth_register(email: str, name: str | None, password: str) -> None:
    """Create an account and log in."""

    async def action(storefront: Storefront) -> None:
        user = await storefront.auth.register(email, password, name)
        click.echo(f"Account created. Logged in as {user.name or user.email}.")

    run(action)


@click.command("logout")
def auth_logout() -> None:
    """Forget the stored session."""

    async def action(storefront: Storefront) -> None:
        storefront.auth.logout()
        click.echo("Logged out.")

    run(action)


@click.command("whoami")
def auth_whoami() -> None:
    """Verify the stored session with the backend."""

    async def action(storefront: Storefront) -> None:
        user = await storefront.auth.verify()
        click.echo(f"{user.email}  (role={user.role.value})")

    run(action)
