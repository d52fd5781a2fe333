"""Backend API Client

HTTP client for the storefront backend.  Attaches the session's bearer
token to every request and normalizes every failure into the domain
exception hierarchy, so nothing above this module sees httpx errors or
the backend's error body format.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from storefront.domain.exceptions import (
    DEFAULT_ERROR_MESSAGE,
    AmbiguousOutcomeError,
    NetworkError,
    ServerRejectedError,
    UnauthenticatedError,
)
from storefront.domain.gateway.backend_api import (
    AuthGrant,
    BackendApi,
    OrderItemRequest,
    ProductPage,
    ProviderSessionGrant,
    WalletTransaction,
)
from storefront.domain.model.order import Order
from storefront.domain.model.payment import PaymentProvider
from storefront.domain.model.product import Product
from storefront.domain.model.session import User
from storefront.infrastructure.api import mapping

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

AMBIGUOUS_MESSAGE = (
    "The server may have received the request but no response arrived. "
    "Check your orders before trying again."
)

UNREADABLE_MESSAGE = "Unexpected response from server"


@dataclass(frozen=True)
class ApiFailure:
    """Every error response, reduced to one shape."""

    http_status: int
    server_message: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_response(response: httpx.Response) -> ApiFailure:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            return ApiFailure(http_status=response.status_code)

        message = body.get("message") or body.get("error")
        if isinstance(message, list):
            # Validation pipes send a list of messages.
            message = "; ".join(str(m) for m in message)

        return ApiFailure(
            http_status=response.status_code,
            server_message=message or None,
            field_errors=_field_errors(body.get("errors")),
        )


def _field_errors(raw: Any) -> dict[str, str]:
    if isinstance(raw, dict):
        return {
            str(k): "; ".join(str(m) for m in v) if isinstance(v, list) else str(v)
            for k, v in raw.items()
        }
    if isinstance(raw, list):
        return {
            str(e["field"]): str(e.get("message", ""))
            for e in raw
            if isinstance(e, dict) and "field" in e
        }
    return {}


class BackendClient(BackendApi):
    """
    Client for the storefront backend API.

    ``token_provider`` is read on every request, so a login or logout
    takes effect immediately.  ``on_unauthorized`` runs whenever the
    backend rejects the credential.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None],
        on_unauthorized: Callable[[], None] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _generate_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: dict | None = None,
        params: dict | None = None,
        parse: Callable[[Any], Any] | None = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body.

        ``parse`` maps the decoded body to domain objects.  A success
        response that cannot be decoded or mapped is a failure like any
        other.
        """
        try:
            response = await self._http_client.request(
                method,
                path,
                json=body,
                params=params,
                headers=self._generate_headers(),
            )
        except (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout) as exc:
            # Nothing was sent.
            logger.warning("Request not sent: %s %s (%s)", method, path, exc)
            raise NetworkError() from exc
        except httpx.TransportError as exc:
            logger.warning("No response: %s %s (%s)", method, path, exc)
            if method in IDEMPOTENT_METHODS:
                raise NetworkError() from exc
            raise AmbiguousOutcomeError(AMBIGUOUS_MESSAGE) from exc

        if response.status_code >= 400:
            self._raise_for_failure(method, path, ApiFailure.from_response(response))

        try:
            data = response.json() if response.content else None
            return parse(data) if parse is not None else data
        except (ValueError, KeyError, TypeError, AttributeError, ArithmeticError) as exc:
            logger.error(
                "Unreadable response: %s %s -> %d (%r)",
                method, path, response.status_code, exc,
            )
            if method in IDEMPOTENT_METHODS:
                raise ServerRejectedError(
                    UNREADABLE_MESSAGE, http_status=response.status_code
                ) from exc
            raise AmbiguousOutcomeError(
                f"{UNREADABLE_MESSAGE}. Check your orders before trying again."
            ) from exc

    def _raise_for_failure(self, method: str, path: str, failure: ApiFailure) -> None:
        logger.error(
            "Request failed: %s %s -> %d %s",
            method, path, failure.http_status, failure.server_message or "",
        )
        if failure.http_status == 401:
            if self._on_unauthorized is not None:
                self._on_unauthorized()
            raise UnauthenticatedError(
                failure.server_message or "Session expired. Please login again."
            )
        raise ServerRejectedError(
            failure.server_message or DEFAULT_ERROR_MESSAGE,
            http_status=failure.http_status,
            field_errors=failure.field_errors,
        )

    # ==================== Auth APIs ====================

    async def login(self, email: str, password: str) -> AuthGrant:
        return await self._request(
            "POST",
            "/auth/login",
            body={"email": email, "password": password},
            parse=mapping.to_auth_grant,
        )

    async def register(self, email: str, password: str, name: str | None = None) -> AuthGrant:
        body = {"email": email, "password": password}
        if name:
            body["name"] = name
        return await self._request(
            "POST", "/auth/register", body=body, parse=mapping.to_auth_grant
        )

    async def get_me(self) -> User:
        return await self._request("GET", "/users/me", parse=mapping.to_user)

    # ==================== Product APIs ====================

    async def list_products(self, page: int = 1, limit: int = 10) -> ProductPage:
        return await self._request(
            "GET",
            "/products",
            params={"page": page, "limit": limit},
            parse=mapping.to_product_page,
        )

    async def get_product(self, product_id: str) -> Product:
        return await self._request(
            "GET", f"/products/{product_id}", parse=mapping.to_product
        )

    # ==================== Order APIs ====================

    async def create_order(self, items: list[OrderItemRequest]) -> Order:
        body = {
            "items": [
                {"productId": item.product_id, "quantity": item.quantity}
                for item in items
            ]
        }
        return await self._request("POST", "/orders", body=body, parse=mapping.to_order)

    async def list_orders(self) -> list[Order]:
        return await self._request(
            "GET",
            "/orders",
            parse=lambda data: [mapping.to_order(raw) for raw in data or []],
        )

    async def get_order(self, order_id: str) -> Order:
        return await self._request("GET", f"/orders/{order_id}", parse=mapping.to_order)

    # ==================== Payment APIs ====================

    async def create_payment_session(
        self, order_id: str, provider: PaymentProvider
    ) -> ProviderSessionGrant:
        return await self._request(
            "POST",
            "/payments/checkout",
            body={"orderId": order_id, "provider": provider.value},
            parse=lambda data: mapping.to_provider_session_grant(data or {}),
        )

    async def execute_wallet_payment(self, payment_id: str) -> WalletTransaction:
        return await self._request(
            "POST",
            "/api/v1/payments/bkash/execute",
            body={"paymentID": payment_id},
            parse=lambda data: mapping.to_wallet_transaction(data or {}, payment_id),
        )

    async def query_wallet_payment(self, payment_id: str) -> WalletTransaction:
        return await self._request(
            "GET",
            f"/api/v1/payments/bkash/query/{payment_id}",
            parse=lambda data: mapping.to_wallet_transaction(data or {}, payment_id),
        )
