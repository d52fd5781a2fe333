"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from storefront.application.cart_store import cart_to_dto
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.runner import run


def _display_cart(storefront: Storefront) -> None:
    dto = cart_to_dto(storefront.cart)
    if not dto.lines:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Product':<24} {'Qty':>5} {'Max':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<24} {line.quantity:>5} {line.stock_ceiling:>5} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Subtotal (' + str(dto.item_count) + ' items)':<36} {dto.total:>22}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int, help="Quantity to add.")
def cart_add(product_id: str, quantity: int) -> None:
    """Add a product to the cart."""

    async def action(storefront: Storefront) -> None:
        line = await storefront.add_to_cart.handle(product_id, quantity)
        click.echo(f"{line.product_name} added to cart (qty {line.quantity}).")

    run(action)


@click.command("remove")
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_remove(product_id: str) -> None:
    """Remove a product from the cart."""

    async def action(storefront: Storefront) -> None:
        storefront.cart.remove_item(product_id)
        click.echo("Item removed from cart.")

    run(action)


@click.command("update")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity.")
def cart_update(product_id: str, quantity: int) -> None:
    """Set the quantity of a product already in the cart."""

    async def action(storefront: Storefront) -> None:
        line = storefront.cart.update_quantity(product_id, quantity)
        if line is None:
            click.echo(f"Product '{product_id}' is not in your cart.")
            return
        click.echo(f"{line.product_name}: qty {line.quantity}")

    run(action)


@click.command("show")
def cart_show() -> None:
    """Show the cart and its total."""

    async def action(storefront: Storefront) -> None:
        _display_cart(storefront)

    run(action)


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""

    async def action(storefront: Storefront) -> None:
        storefront.cart.clear()
        click.echo("Cart cleared.")

    run(action)
