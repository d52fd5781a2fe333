"""CLI commands for orders."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO
from storefront.application.order_queries import order_to_dto
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.runner import run


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.number}  ({dto.status_label})")
    if dto.created_at:
        click.echo(f"Placed:   {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*52}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*52}")
    click.echo(f"  {'Order Total':<30} {dto.total:>22}")


@click.command("submit")
def order_submit() -> None:
    """Turn the cart into an order (clears the cart on success)."""

    async def action(storefront: Storefront) -> None:
        order = await storefront.submission.submit()
        click.echo("Order created successfully!")
        display_order(order_to_dto(order))
        click.echo()
        click.echo(f"Pay with: storefront pay start --order {order.id}")

    run(action)


@click.command("list")
def order_list() -> None:
    """List your orders."""

    async def action(storefront: Storefront) -> None:
        orders = await storefront.orders.list_orders()
        if not orders:
            click.echo("No orders yet.")
            return
        click.echo(f"{'Order':<12} {'Status':<18} {'Total':>10}  Placed")
        click.echo("-" * 62)
        for dto in orders:
            click.echo(f"{dto.number:<12} {dto.status_label:<18} {dto.total:>10}  {dto.created_at}")

    run(action)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""

    async def action(storefront: Storefront) -> None:
        display_order(await storefront.orders.get_order(order_id))

    run(action)
