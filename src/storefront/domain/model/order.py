"""Order: read-only projection of a server-side order.

Orders are created and transitioned by the backend.  The client only
observes them: PENDING -> PAID or PENDING -> CANCELED happen on the
server and show up here on the next read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storefront.domain.model.value_objects import Money


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELED = "CANCELED"


@dataclass(frozen=True)
class OrderLineItem:
    """Price and quantity as locked in by the server at order time."""

    product_id: str
    quantity: int
    unit_price: Money
    product_name: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:

    id: str
    total_amount: Money
    status: OrderStatus
    items: tuple[OrderLineItem, ...] = ()
    created_at: datetime | None = None
    order_number: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID

    @property
    def display_number(self) -> str:
        return self.order_number or self.id[:8]
