"""Translation between backend JSON payloads and domain objects."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from storefront.domain.gateway.backend_api import (
    AuthGrant,
    ProductPage,
    ProviderSessionGrant,
    WalletTransaction,
)
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus
from storefront.domain.model.product import Product, ProductStatus
from storefront.domain.model.session import User, UserRole
from storefront.domain.model.value_objects import Money


def to_user(raw: dict[str, Any]) -> User:
    return User(
        id=str(raw["id"]),
        email=raw["email"],
        name=raw.get("name"),
        role=UserRole(raw.get("role", UserRole.USER.value)),
    )


def to_auth_grant(raw: dict[str, Any]) -> AuthGrant:
    return AuthGrant(user=to_user(raw["user"]), token=raw["token"])


def to_product(raw: dict[str, Any]) -> Product:
    return Product(
        id=str(raw["id"]),
        name=raw["name"],
        price=Money.of(raw["price"]),
        stock=int(raw.get("stock") or 0),
        sku=raw.get("sku") or "",
        description=raw.get("description") or "",
        status=ProductStatus(raw.get("status", ProductStatus.ACTIVE.value)),
    )


def to_product_page(raw: dict[str, Any]) -> ProductPage:
    meta = raw.get("meta") or {}
    products = [to_product(p) for p in raw.get("data", [])]
    return ProductPage(
        products=products,
        total=int(meta.get("total", len(products))),
        page=int(meta.get("page", 1)),
        total_pages=int(meta.get("totalPages", 1)),
    )


def to_order(raw: dict[str, Any]) -> Order:
    items = []
    for item in raw.get("items", []):
        product = item.get("product") or {}
        items.append(
            OrderLineItem(
                product_id=str(item["productId"]),
                quantity=int(item["quantity"]),
                unit_price=Money.of(item["price"]),
                product_name=product.get("name"),
            )
        )
    return Order(
        id=str(raw["id"]),
        total_amount=Money.of(raw["totalAmount"]),
        status=OrderStatus(raw["status"]),
        items=tuple(items),
        created_at=_parse_timestamp(raw.get("createdAt")),
        order_number=raw.get("orderNumber"),
    )


def to_provider_session_grant(raw: dict[str, Any]) -> ProviderSessionGrant:
    token = (
        raw.get("clientSecret")
        or raw.get("providerSessionToken")
        or raw.get("paymentID")
        or ""
    )
    redirect_url = raw.get("bkashURL") or raw.get("redirectUrl")
    return ProviderSessionGrant(token=token, redirect_url=redirect_url)


def to_wallet_transaction(raw: dict[str, Any], payment_id: str) -> WalletTransaction:
    return WalletTransaction(
        payment_id=raw.get("paymentID") or payment_id,
        transaction_status=raw.get("transactionStatus") or raw.get("status") or "Unknown",
        transaction_id=raw.get("trxID"),
    )


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
