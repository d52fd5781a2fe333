"""PaymentSession: one attempt at paying for one order.

State machine::

    INITIATED --(provider session created)--> AWAITING_CONFIRMATION
    AWAITING_CONFIRMATION --(confirmed in-process or via callback)--> CONFIRMED
    AWAITING_CONFIRMATION --(provider reports failure)--> FAILED

A session lives only as long as one checkout attempt.  The wallet flow
leaves the process, so what must survive the redirect is kept in a
separate ``PendingPayment`` record keyed by the provider's transaction
id rather than in the session itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError


class PaymentProvider(Enum):
    """Provider shapes, valued by their backend wire names."""

    CARD = "STRIPE"
    WALLET = "BKASH"

    @property
    def confirms_in_process(self) -> bool:
        return self is PaymentProvider.CARD


class PaymentSessionStatus(Enum):
    INITIATED = "INITIATED"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


@dataclass
class PaymentSession:

    order_id: str
    provider: PaymentProvider
    provider_session_token: str | None = None
    redirect_url: str | None = None
    status: PaymentSessionStatus = PaymentSessionStatus.INITIATED
    failure_reason: str | None = None

    # --- State transitions ----------------------------------------------------

    def open(self, provider_session_token: str, redirect_url: str | None = None) -> None:
        """Transition INITIATED -> AWAITING_CONFIRMATION."""
        if self.status != PaymentSessionStatus.INITIATED:
            raise ValidationError(
                f"Cannot open payment session, current status is {self.status.value}"
            )
        if not provider_session_token:
            raise ValidationError("Provider did not return a session token")
        self.provider_session_token = provider_session_token
        self.redirect_url = redirect_url
        self.status = PaymentSessionStatus.AWAITING_CONFIRMATION

    def confirm(self) -> None:
        """Transition AWAITING_CONFIRMATION -> CONFIRMED."""
        self._require_awaiting("confirm")
        self.status = PaymentSessionStatus.CONFIRMED

    def fail(self, reason: str) -> None:
        """Transition AWAITING_CONFIRMATION -> FAILED."""
        self._require_awaiting("fail")
        self.status = PaymentSessionStatus.FAILED
        self.failure_reason = reason

    @property
    def is_terminal(self) -> bool:
        return self.status in (PaymentSessionStatus.CONFIRMED, PaymentSessionStatus.FAILED)

    # --- Internal helpers -----------------------------------------------------

    def _require_awaiting(self, action: str) -> None:
        if self.status != PaymentSessionStatus.AWAITING_CONFIRMATION:
            raise ValidationError(
                f"Cannot {action} payment session, current status is "
                f"{self.status.value}, expected AWAITING_CONFIRMATION"
            )


@dataclass(frozen=True)
class PendingPayment:
    """Durable link from a wallet transaction id back to its order."""

    payment_id: str
    order_id: str
    provider: PaymentProvider = PaymentProvider.WALLET
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
