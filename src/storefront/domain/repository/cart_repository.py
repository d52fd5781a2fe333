"""Abstract durable storage for the shopping cart."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def load(self) -> Cart:
        """Return the last committed cart, or an empty one."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Durably replace the stored cart."""
