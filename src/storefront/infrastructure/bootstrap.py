"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  The stores are built
once per process and handed to everything that needs them.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.auth_session import AuthService, AuthSessionHolder
from storefront.application.cart_store import CartStore
from storefront.application.order_queries import OrderQueries
from storefront.application.payment_checkout import PaymentSessionCoordinator
from storefront.application.submit_order import OrderSubmissionCoordinator
from storefront.infrastructure.api.client import BackendClient
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from storefront.infrastructure.persistence.json_pending_payment_repository import (
    JsonPendingPaymentRepository,
)
from storefront.infrastructure.persistence.json_session_repository import (
    JsonSessionRepository,
)


def cart_store(settings: Settings) -> CartStore:
    return CartStore(JsonCartRepository(settings.data_dir / "cart.json"))


def session_holder(settings: Settings) -> AuthSessionHolder:
    return AuthSessionHolder(JsonSessionRepository(settings.data_dir / "session.json"))


def pending_payment_repository(settings: Settings) -> JsonPendingPaymentRepository:
    return JsonPendingPaymentRepository(settings.data_dir / "pending_payments.json")


@dataclass
class Storefront:
    """Everything a front end needs, sharing one cart and one session."""

    settings: Settings
    api: BackendClient
    cart: CartStore
    session: AuthSessionHolder
    auth: AuthService
    add_to_cart: AddToCartHandler
    orders: OrderQueries
    submission: OrderSubmissionCoordinator
    payments: PaymentSessionCoordinator

    async def close(self) -> None:
        await self.api.close()


def build_storefront(settings: Settings | None = None) -> Storefront:
    settings = settings or get_settings()
    cart = cart_store(settings)
    holder = session_holder(settings)
    api = BackendClient(
        settings.api_url,
        token_provider=lambda: holder.current_session().token,
        on_unauthorized=holder.clear,
        timeout=settings.request_timeout,
    )
    return Storefront(
        settings=settings,
        api=api,
        cart=cart,
        session=holder,
        auth=AuthService(api, holder),
        add_to_cart=AddToCartHandler(api, cart),
        orders=OrderQueries(api),
        submission=OrderSubmissionCoordinator(api, cart, holder),
        payments=PaymentSessionCoordinator(
            api, pending_payment_repository(settings), public_url=settings.public_url
        ),
    )
