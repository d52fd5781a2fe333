"""Cart aggregate: the client-side shopping cart.

The Cart owns its lines.  Quantities are clamped into
``[1, stock_ceiling]`` on every mutation instead of being rejected, so
a cart can never hold an out-of-range line.

Unit prices are snapshotted when a product is first added; the backend
re-prices everything when the order is created.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money


def clamp_quantity(quantity: int, stock_ceiling: int) -> int:
    """Clamp *quantity* into ``[1, stock_ceiling]``.

    The lower bound wins when the ceiling itself is below 1, which only
    happens for stock that sold out after the line was added.
    """
    return max(1, min(quantity, stock_ceiling))


@dataclass
class CartLine:

    product_id: str
    product_name: str
    unit_price: Money  # snapshot at add time
    quantity: int
    stock_ceiling: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Ordered collection of lines, at most one per product."""

    lines: list[CartLine] = field(default_factory=list)

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        """Merge into the existing line for *product* or append a new one."""
        line = self.find(product.id)
        if line is not None:
            line.stock_ceiling = product.stock
            line.quantity = clamp_quantity(line.quantity + quantity, line.stock_ceiling)
            return line

        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=clamp_quantity(quantity, product.stock),
            stock_ceiling=product.stock,
        )
        self.lines.append(line)
        return line

    def remove(self, product_id: str) -> bool:
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.product_id != product_id]
        return len(self.lines) != before

    def set_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        line = self.find(product_id)
        if line is None:
            return None
        line.quantity = clamp_quantity(quantity, line.stock_ceiling)
        return line

    def clear(self) -> None:
        self.lines = []

    # --- Queries --------------------------------------------------------------

    def find(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    @property
    def total(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
