"""Application service: Payment Session Coordinator.

Drives one payment attempt for one PENDING order through to a terminal
state.  Two provider shapes are supported:

- CARD: confirmation happens in-process.  ``confirm_card`` awaits the
  provider's confirmation primitive; the provider also redirects to the
  return URL, so that URL must be safe to reach twice.
- WALLET: the user is sent to the provider's site and comes back later,
  possibly into a fresh process.  ``start`` records a PendingPayment
  keyed by the provider's payment id; ``handle_callback`` resolves the
  returning redirect from that record and the server, never from
  memory.

Callback query strings are untrusted.  They identify which order to
look at; only the server's view of the order decides the outcome.

Failures while opening a session leave the order PENDING and are not
retried; the user can start checkout again for the same order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlencode

from storefront.domain.exceptions import (
    AmbiguousOutcomeError,
    DomainException,
    ProviderError,
    ValidationError,
)
from storefront.domain.gateway.backend_api import BackendApi, WalletTransaction
from storefront.domain.gateway.card_confirmer import CardConfirmer
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.payment import (
    PaymentProvider,
    PaymentSession,
    PendingPayment,
)
from storefront.domain.repository.pending_payment_repository import (
    PendingPaymentRepository,
)

logger = logging.getLogger(__name__)

WALLET_SUCCESS = "success"
WALLET_CANCEL = "cancel"


@dataclass(frozen=True)
class PaymentOutcome:
    order: Order
    session: PaymentSession


class PaymentSessionCoordinator:

    def __init__(
        self,
        api: BackendApi,
        pending_repo: PendingPaymentRepository,
        public_url: str = "",
    ) -> None:
        self._api = api
        self._pending_repo = pending_repo
        self._public_url = public_url.rstrip("/")

    # --- Opening a session ----------------------------------------------------

    async def start(self, order: Order, provider: PaymentProvider) -> PaymentSession:
        """Open a provider session for an order the server has created."""
        if not order.id:
            raise ValidationError("Cannot pay for an order that has not been created")
        if not order.is_pending:
            raise ValidationError(
                f"Order #{order.display_number} is {order.status.value}, not awaiting payment"
            )

        session = PaymentSession(order_id=order.id, provider=provider)
        grant = await self._api.create_payment_session(order.id, provider)
        session.open(grant.token, grant.redirect_url)

        if not provider.confirms_in_process:
            self._pending_repo.save(
                PendingPayment(payment_id=grant.token, order_id=order.id, provider=provider)
            )

        logger.info(
            "Payment session opened for order %s via %s", order.id, provider.value
        )
        return session

    async def checkout(self, order_id: str, provider: PaymentProvider) -> PaymentSession:
        """Load the order from the server, then open a session for it."""
        order = await self._api.get_order(order_id)
        return await self.start(order, provider)

    # --- In-process confirmation ----------------------------------------------

    async def confirm_card(self, session: PaymentSession, confirmer: CardConfirmer) -> str:
        """Confirm a card payment and return the navigation target.

        A provider refusal moves the session to FAILED and is raised as
        ``ProviderError`` carrying the provider's own message.
        """
        if not session.provider.confirms_in_process:
            raise ValidationError(
                f"{session.provider.value} payments are confirmed by callback"
            )
        if session.provider_session_token is None:
            raise ValidationError("Payment session has not been opened")

        return_url = self.return_url(session.order_id)
        try:
            error = await confirmer.confirm_payment(session.provider_session_token, return_url)
        except DomainException as exc:
            session.fail(exc.message)
            raise

        if error is not None:
            message = error or "Payment failed. Please try again."
            session.fail(message)
            logger.info("Card payment refused for order %s: %s", session.order_id, message)
            raise ProviderError(message)

        session.confirm()
        return return_url

    def return_url(self, order_id: str) -> str:
        query = urlencode({"payment": "success", "orderId": order_id})
        return f"{self._public_url}/orders?{query}"

    # --- Out-of-process confirmation ------------------------------------------

    async def handle_callback(self, params: Mapping[str, str]) -> PaymentOutcome:
        """Resolve a return redirect against the server.

        Reaching the same callback twice is harmless: a second wallet
        callback finds the order already PAID, does not execute the
        payment again, and drops the pending record.  A wallet callback
        without a status only queries the provider and never discards
        the record, since the user may well have been charged.
        """
        payment_id = params.get("paymentID") or params.get("paymentId")
        if payment_id:
            return await self._handle_wallet_callback(payment_id, params.get("status", ""))

        if params.get("payment") == WALLET_SUCCESS:
            return await self._handle_card_return(params)

        raise ProviderError("Unrecognized payment callback")

    async def _handle_wallet_callback(self, payment_id: str, status: str) -> PaymentOutcome:
        pending = self._pending_repo.get(payment_id)
        if pending is None:
            logger.warning("Callback for unknown wallet payment %s", payment_id)
            raise ProviderError("Unknown payment transaction")

        session = PaymentSession(order_id=pending.order_id, provider=pending.provider)
        session.open(payment_id)

        status = status.lower()
        if status and status != WALLET_SUCCESS:
            reason = "Payment was cancelled" if status == WALLET_CANCEL else "Payment failed"
            self._pending_repo.delete(payment_id)
            session.fail(reason)
            raise ProviderError(reason)

        order = await self._api.get_order(pending.order_id)
        if order.is_paid:
            # Repeat callback: the first one already settled this payment.
            self._pending_repo.delete(payment_id)
            session.confirm()
            return PaymentOutcome(order=order, session=session)
        if order.status == OrderStatus.CANCELED:
            self._pending_repo.delete(payment_id)
            session.fail("Order was canceled")
            raise ProviderError(f"Order #{order.display_number} was canceled")

        if not status:
            transaction = await self._api.query_wallet_payment(payment_id)
            if not transaction.is_completed:
                logger.warning(
                    "Wallet callback for %s carried no status; provider reports %s",
                    payment_id, transaction.transaction_status,
                )
                raise AmbiguousOutcomeError(
                    f"Payment for order #{order.display_number} could not be "
                    "confirmed yet. Check your orders."
                )
        else:
            transaction = await self._execute_wallet(payment_id)
            if not transaction.is_completed:
                reason = f"Payment {transaction.transaction_status.lower()}"
                self._pending_repo.delete(payment_id)
                session.fail(reason)
                raise ProviderError(reason)

        order = await self._api.get_order(pending.order_id)
        return self._reconcile(session, order)

    async def _execute_wallet(self, payment_id: str) -> WalletTransaction:
        try:
            return await self._api.execute_wallet_payment(payment_id)
        except AmbiguousOutcomeError:
            logger.warning("Wallet execute for %s ambiguous; querying status", payment_id)
            return await self._api.query_wallet_payment(payment_id)

    async def _handle_card_return(self, params: Mapping[str, str]) -> PaymentOutcome:
        order_id = params.get("orderId")
        if not order_id:
            raise AmbiguousOutcomeError(
                "Payment result could not be matched to an order. Check your orders."
            )

        session = PaymentSession(order_id=order_id, provider=PaymentProvider.CARD)
        session.open(params.get("payment_intent") or order_id)

        if params.get("redirect_status") == "failed":
            session.fail("Payment failed")
            raise ProviderError("Payment failed. Please try again.")

        order = await self._api.get_order(order_id)
        return self._reconcile(session, order)

    def _reconcile(self, session: PaymentSession, order: Order) -> PaymentOutcome:
        if order.status == OrderStatus.PAID:
            session.confirm()
            logger.info("Payment confirmed for order %s", order.id)
            return PaymentOutcome(order=order, session=session)

        if order.status == OrderStatus.CANCELED:
            session.fail("Order was canceled")
            raise ProviderError(f"Order #{order.display_number} was canceled")

        raise AmbiguousOutcomeError(
            f"Payment for order #{order.display_number} has not been confirmed yet"
        )
