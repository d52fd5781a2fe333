"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def load(self) -> Cart:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            return Cart(lines=[self._to_domain(item) for item in raw.get("items", [])])
        except (ValueError, KeyError, TypeError, AttributeError, ArithmeticError) as exc:
            logger.warning("Discarding unreadable cart at %s (%r)", self._file_path, exc)
            return Cart()

    def save(self, cart: Cart) -> None:
        self._persist_raw({"items": [self._to_raw(line) for line in cart.lines]})

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        return {
            "product_id": line.product_id,
            "product_name": line.product_name,
            "unit_price": str(line.unit_price.amount),
            "currency": line.unit_price.currency,
            "quantity": line.quantity,
            "stock_ceiling": line.stock_ceiling,
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        return CartLine(
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            unit_price=Money(Decimal(raw["unit_price"]), raw.get("currency", "USD")),
            quantity=raw["quantity"],
            stock_ceiling=raw["stock_ceiling"],
        )

    # --- File helpers ---------------------------------------------------------

    def _persist_raw(self, record: dict) -> None:
        # Write-then-rename so a crash mid-write keeps the last committed cart.
        tmp_path = self._file_path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(record, indent=2) + "\n", encoding="utf-8")
        tmp_path.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text('{"items": []}', encoding="utf-8")
