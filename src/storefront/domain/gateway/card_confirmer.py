"""Abstract in-process confirmation primitive of a card provider."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CardConfirmer(ABC):

    @abstractmethod
    async def confirm_payment(self, client_secret: str, return_url: str) -> str | None:
        """Ask the provider to confirm the payment behind *client_secret*.

        Returns ``None`` when the provider accepted the payment, or the
        provider's error message when it refused.  On success the
        provider itself will also send the user to *return_url*.
        """
