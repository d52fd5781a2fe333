"""Application service: Order Submission Coordinator.

Turns the current cart into one server-side order per checkout attempt.
Preconditions are checked locally, in order, before anything touches
the network:

1. the session carries a credential token, else ``UnauthenticatedError``;
2. the cart is not empty, else ``EmptyCartError``.

Pricing and stock are validated by the server; the cart's cached stock
ceiling is for display only.  The cart is cleared only after the server
has confirmed the order.
"""

from __future__ import annotations

import logging

from storefront.application.auth_session import AuthSessionHolder
from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import (
    AmbiguousOutcomeError,
    EmptyCartError,
    SubmissionInProgressError,
    UnauthenticatedError,
)
from storefront.domain.gateway.backend_api import BackendApi, OrderItemRequest
from storefront.domain.model.order import Order

logger = logging.getLogger(__name__)


class OrderSubmissionCoordinator:

    def __init__(
        self,
        api: BackendApi,
        cart_store: CartStore,
        session_holder: AuthSessionHolder,
    ) -> None:
        self._api = api
        self._cart_store = cart_store
        self._session_holder = session_holder
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self) -> Order:
        """Create an order from the cart and clear the cart on success.

        On any failure the cart is left exactly as it was.  An
        ``AmbiguousOutcomeError`` means the request may have created an
        order anyway; it is not retried because the backend offers no
        idempotency key to make a retry safe.
        """
        if self._in_flight:
            raise SubmissionInProgressError()

        if not self._session_holder.current_session().is_authenticated:
            raise UnauthenticatedError("Please login to checkout")

        if self._cart_store.is_empty:
            raise EmptyCartError()

        items = [
            OrderItemRequest(product_id=line.product_id, quantity=line.quantity)
            for line in self._cart_store.lines
        ]

        self._in_flight = True
        try:
            order = await self._api.create_order(items)
        except AmbiguousOutcomeError:
            logger.warning(
                "Order submission outcome unknown for %d line(s); cart kept",
                len(items),
            )
            raise
        finally:
            self._in_flight = False

        self._cart_store.clear()
        logger.info("Order %s created (total %s)", order.id, order.total_amount)
        return order
