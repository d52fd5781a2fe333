"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry display-ready data from the application layer to the CLI
without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineDTO:

    product_id: str
    product_name: str
    quantity: int
    stock_ceiling: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:

    lines: list[CartLineDTO]
    item_count: int
    total: str


@dataclass(frozen=True)
class OrderLineItemDTO:

    product_name: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:

    id: str
    number: str
    status: str
    status_label: str
    items: list[OrderLineItemDTO]
    total: str
    created_at: str


@dataclass(frozen=True)
class PaymentSessionDTO:
    """Output: what the user needs to finish paying.

    For card sessions ``client_secret`` initialises the provider UI.
    For wallet sessions ``redirect_url`` is where the user goes next.
    """

    order_id: str
    provider: str
    status: str
    client_secret: str | None = None
    redirect_url: str | None = None
