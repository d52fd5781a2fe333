"""CLI commands for browsing the catalog."""

from __future__ import annotations

import click

from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.runner import run


@click.command("list")
@click.option("--page", default=1, show_default=True, type=int, help="Page number.")
@click.option("--limit", default=10, show_default=True, type=int, help="Products per page.")
def product_list(page: int, limit: int) -> None:
    """List products in the catalog."""

    async def action(storefront: Storefront) -> None:
        result = await storefront.api.list_products(page=page, limit=limit)
        if not result.products:
            click.echo("No products found.")
            return

        click.echo(f"{'ID':<38} {'Product':<24} {'Price':>10} {'Stock':>6}")
        click.echo("-" * 81)
        for product in result.products:
            stock = "out" if product.is_out_of_stock else str(product.stock)
            click.echo(
                f"{product.id:<38} {product.name:<24} {str(product.price):>10} {stock:>6}"
            )
        click.echo(f"Page {result.page} of {result.total_pages} ({result.total} products)")

    run(action)
