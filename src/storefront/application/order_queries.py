"""Application service: order read projections (queries)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, OrderLineItemDTO
from storefront.domain.gateway.backend_api import BackendApi
from storefront.domain.model.order import Order, OrderStatus

_STATUS_LABELS = {
    OrderStatus.PAID: "Paid",
    OrderStatus.PENDING: "Pending Payment",
    OrderStatus.CANCELED: "Canceled",
}


class OrderQueries:

    def __init__(self, api: BackendApi) -> None:
        self._api = api

    async def list_orders(self) -> list[OrderDTO]:
        orders = await self._api.list_orders()
        return [order_to_dto(order) for order in orders]

    async def get_order(self, order_id: str) -> OrderDTO:
        return order_to_dto(await self._api.get_order(order_id))


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        number=order.display_number,
        status=order.status.value,
        status_label=_STATUS_LABELS[order.status],
        items=[
            OrderLineItemDTO(
                product_name=item.product_name or item.product_id,
                quantity=item.quantity,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        created_at=(
            order.created_at.strftime("%Y-%m-%d %H:%M UTC") if order.created_at else ""
        ),
    )
