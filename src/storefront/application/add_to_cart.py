"""Application service: Add To Cart use case.

Fetches the live product so the cart gets a current price snapshot and
stock ceiling, and rejects out-of-stock products before the cart is
touched.
"""

from __future__ import annotations

from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import ValidationError
from storefront.domain.gateway.backend_api import BackendApi
from storefront.domain.model.cart import CartLine


class AddToCartHandler:

    def __init__(self, api: BackendApi, cart_store: CartStore) -> None:
        self._api = api
        self._cart_store = cart_store

    async def handle(self, product_id: str, quantity: int = 1) -> CartLine:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")

        product = await self._api.get_product(product_id)
        product.ensure_purchasable()
        return self._cart_store.add_item(product, quantity)
