import logging

import click

from storefront.infrastructure.cli.auth_commands import (
    auth_login,
    auth_logout,
    auth_register,
    auth_whoami,
)
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.order_commands import order_list, order_show, order_submit
from storefront.infrastructure.cli.payment_commands import pay_callback, pay_start
from storefront.infrastructure.cli.product_commands import product_list


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Storefront: cart, checkout and payment from the command line"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.group()
def auth() -> None:
    """Log in and out."""


@cli.group()
def product() -> None:
    """Browse products."""


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def order() -> None:
    """Submit and view orders."""


@cli.group()
def pay() -> None:
    """Pay for orders."""


# Register subcommands
auth.add_command(auth_login)
auth.add_command(auth_logout)
auth.add_command(auth_register)
auth.add_command(auth_whoami)
product.add_command(product_list)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_submit)
pay.add_command(pay_callback)
pay.add_command(pay_start)
