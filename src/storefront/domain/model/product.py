"""Product as seen by the storefront.

The catalog is owned by the backend; the client keeps only what it
needs to fill a cart: identity, display name, price and last observed
stock level.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import OutOfStockError
from storefront.domain.model.value_objects import Money


class ProductStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


@dataclass(frozen=True)
class Product:

    id: str
    name: str
    price: Money
    stock: int
    sku: str = ""
    description: str = ""
    status: ProductStatus = ProductStatus.ACTIVE

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0 or self.status != ProductStatus.ACTIVE

    def ensure_purchasable(self) -> None:
        """Caller-side check before putting the product in a cart."""
        if self.is_out_of_stock:
            raise OutOfStockError(f"{self.name} is out of stock")
