"""Abstract gateway to the backend HTTP API.

The backend is a black box.  Implementations translate every failure
into the DomainException hierarchy, so callers never see transport or
provider-specific error formats.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.order import Order
from storefront.domain.model.payment import PaymentProvider
from storefront.domain.model.product import Product
from storefront.domain.model.session import User


@dataclass(frozen=True)
class OrderItemRequest:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class AuthGrant:
    user: User
    token: str


@dataclass(frozen=True)
class ProductPage:
    products: list[Product]
    total: int
    page: int
    total_pages: int


@dataclass(frozen=True)
class ProviderSessionGrant:
    """What the backend hands back when a payment session is opened.

    ``token`` is the card provider's client secret or the wallet's
    payment id.  ``redirect_url`` is only set for wallet sessions.
    """

    token: str
    redirect_url: str | None = None


@dataclass(frozen=True)
class WalletTransaction:
    payment_id: str
    transaction_status: str
    transaction_id: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.transaction_status.lower() == "completed"


class BackendApi(ABC):

    # --- Auth -----------------------------------------------------------------

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthGrant: ...

    @abstractmethod
    async def register(self, email: str, password: str, name: str | None = None) -> AuthGrant: ...

    @abstractmethod
    async def get_me(self) -> User: ...

    # --- Catalog --------------------------------------------------------------

    @abstractmethod
    async def list_products(self, page: int = 1, limit: int = 10) -> ProductPage: ...

    @abstractmethod
    async def get_product(self, product_id: str) -> Product: ...

    # --- Orders ---------------------------------------------------------------

    @abstractmethod
    async def create_order(self, items: list[OrderItemRequest]) -> Order:
        """``POST /orders``.  Authenticated; not idempotent."""

    @abstractmethod
    async def list_orders(self) -> list[Order]: ...

    @abstractmethod
    async def get_order(self, order_id: str) -> Order: ...

    # --- Payments -------------------------------------------------------------

    @abstractmethod
    async def create_payment_session(
        self, order_id: str, provider: PaymentProvider
    ) -> ProviderSessionGrant:
        """``POST /payments/checkout``."""

    @abstractmethod
    async def execute_wallet_payment(self, payment_id: str) -> WalletTransaction: ...

    @abstractmethod
    async def query_wallet_payment(self, payment_id: str) -> WalletTransaction: ...
