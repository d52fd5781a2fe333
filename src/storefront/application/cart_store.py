"""Application service: Persistent Cart Store.

Owns the one Cart of the browsing session.  The store is created from
durable storage, mutated only through the methods below, and every
mutation is written back before the method returns, so a restart
recovers the last committed state exactly.
"""

from __future__ import annotations

import logging

from storefront.application.dto import CartDTO, CartLineDTO
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class CartStore:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo
        self._cart = cart_repo.load()

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> CartLine:
        """Add *product*, merging with an existing line.

        Zero-stock products must be rejected by the caller first
        (``Product.ensure_purchasable``); here quantities only clamp.
        """
        line = self._cart.add(product, quantity)
        self._commit()
        logger.debug("Cart: %s now x%d", product.id, line.quantity)
        return line

    def remove_item(self, product_id: str) -> None:
        if self._cart.remove(product_id):
            self._commit()

    def update_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        line = self._cart.set_quantity(product_id, quantity)
        if line is not None:
            self._commit()
        return line

    def clear(self) -> None:
        self._cart.clear()
        self._commit()
        logger.debug("Cart cleared")

    # --- Queries --------------------------------------------------------------

    def total(self) -> Money:
        return self._cart.total

    @property
    def lines(self) -> list[CartLine]:
        return list(self._cart.lines)

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    def snapshot(self) -> Cart:
        """Detached copy of the current cart."""
        return Cart(
            lines=[
                CartLine(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    stock_ceiling=line.stock_ceiling,
                )
                for line in self._cart.lines
            ]
        )

    # --- Internal helpers -----------------------------------------------------

    def _commit(self) -> None:
        self._cart_repo.save(self._cart)


def cart_to_dto(cart_store: CartStore) -> CartDTO:
    cart = cart_store.snapshot()
    return CartDTO(
        lines=[
            CartLineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                stock_ceiling=line.stock_ceiling,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in cart.lines
        ],
        item_count=cart.item_count,
        total=str(cart.total),
    )
