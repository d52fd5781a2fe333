"""Abstract durable storage for wallet payments awaiting their callback."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.payment import PendingPayment


class PendingPaymentRepository(ABC):

    @abstractmethod
    def get(self, payment_id: str) -> PendingPayment | None:
        """Return the pending payment for a provider transaction id, or None."""

    @abstractmethod
    def save(self, pending: PendingPayment) -> None:
        """Persist a new or replaced pending payment."""

    @abstractmethod
    def delete(self, payment_id: str) -> None:
        """Forget a pending payment.  No-op when absent."""
