"""Tests for the Payment Session Coordinator.

Covers both provider shapes: in-process card confirmation and the
redirect-and-callback wallet flow, including callbacks that arrive in
a fresh coordinator with nothing in memory.
"""

import dataclasses

import pytest

from storefront.application.payment_checkout import PaymentSessionCoordinator
from storefront.domain.exceptions import (
    AmbiguousOutcomeError,
    NetworkError,
    ProviderError,
    ServerRejectedError,
    ValidationError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.payment import PaymentProvider, PaymentSessionStatus
from tests.fakes import (
    FakeBackendApi,
    FakeCardConfirmer,
    FakePendingPaymentRepository,
    make_order,
)


def _setup(
    status: OrderStatus = OrderStatus.PENDING,
) -> tuple[PaymentSessionCoordinator, FakeBackendApi, FakePendingPaymentRepository]:
    api = FakeBackendApi(orders=[make_order("ord-1", status=status)])
    pending = FakePendingPaymentRepository()
    coordinator = PaymentSessionCoordinator(api, pending, public_url="https://shop.example/")
    return coordinator, api, pending


class TestStart:

    @pytest.mark.asyncio
    async def test_card_session_awaits_confirmation(self):
        coordinator, api, pending = _setup()
        session = await coordinator.start(api.orders["ord-1"], PaymentProvider.CARD)
        assert session.status == PaymentSessionStatus.AWAITING_CONFIRMATION
        assert session.provider_session_token == "pi_ord-1_secret"
        assert pending.get("pi_ord-1_secret") is None

    @pytest.mark.asyncio
    async def test_wallet_session_records_pending_payment(self):
        coordinator, api, pending = _setup()
        session = await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        assert session.redirect_url == "https://wallet.example/pay/TR0001"
        record = pending.get("TR0001")
        assert record is not None
        assert record.order_id == "ord-1"

    @pytest.mark.asyncio
    async def test_paid_order_rejected_before_network(self):
        coordinator, api, _ = _setup(status=OrderStatus.PAID)
        with pytest.raises(ValidationError, match="not awaiting payment"):
            await coordinator.start(api.orders["ord-1"], PaymentProvider.CARD)
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_provider_error_leaves_order_pending(self):
        coordinator, api, pending = _setup()
        api.failures["create_payment_session"] = ServerRejectedError(
            "Payment provider unavailable", http_status=502
        )
        with pytest.raises(ServerRejectedError):
            await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        assert api.orders["ord-1"].status == OrderStatus.PENDING
        assert pending.get("TR0001") is None

    @pytest.mark.asyncio
    async def test_user_may_retry_after_failure(self):
        coordinator, api, _ = _setup()
        api.failures["create_payment_session"] = NetworkError()
        with pytest.raises(NetworkError):
            await coordinator.start(api.orders["ord-1"], PaymentProvider.CARD)
        del api.failures["create_payment_session"]
        session = await coordinator.start(api.orders["ord-1"], PaymentProvider.CARD)
        assert session.status == PaymentSessionStatus.AWAITING_CONFIRMATION

    @pytest.mark.asyncio
    async def test_checkout_loads_order_first(self):
        coordinator, api, _ = _setup()
        await coordinator.checkout("ord-1", PaymentProvider.CARD)
        assert api.calls == ["get_order", "create_payment_session"]


class TestCardConfirmation:

    @pytest.mark.asyncio
    async def test_success_returns_return_url(self):
        coordinator, api, _ = _setup()
        session = await coordinator.start(api.orders["ord-1"], PaymentProvider.CARD)
        confirmer = FakeCardConfirmer()

        target = await coordinator.confirm_card(session, confirmer)

        assert target == "https://shop.example/orders?payment=success&orderId=ord-1"
        assert confirmer.calls == [("pi_ord-1_secret", target)]
        assert session.status == PaymentSessionStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_provider_error_surfaced_verbatim(self):
        coordinator, api, _ = _setup()
        session = await coordinator.start(api.orders["ord-1"], PaymentProvider.CARD)

        with pytest.raises(ProviderError, match="Your card was declined."):
            await coordinator.confirm_card(session, FakeCardConfirmer("Your card was declined."))

        assert session.status == PaymentSessionStatus.FAILED
        assert session.failure_reason == "Your card was declined."
        assert api.orders["ord-1"].status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_wallet_session_cannot_be_card_confirmed(self):
        coordinator, api, _ = _setup()
        session = await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        with pytest.raises(ValidationError, match="confirmed by callback"):
            await coordinator.confirm_card(session, FakeCardConfirmer())


class TestCardReturn:

    @pytest.mark.asyncio
    async def test_paid_order_confirms(self):
        coordinator, api, _ = _setup()
        api.mark_paid("ord-1")
        outcome = await coordinator.handle_callback({"payment": "success", "orderId": "ord-1"})
        assert outcome.session.status == PaymentSessionStatus.CONFIRMED
        assert outcome.order.is_paid

    @pytest.mark.asyncio
    async def test_reaching_return_twice_is_harmless(self):
        coordinator, api, _ = _setup()
        api.mark_paid("ord-1")
        params = {"payment": "success", "orderId": "ord-1"}
        await coordinator.handle_callback(params)
        outcome = await coordinator.handle_callback(params)
        assert outcome.order.is_paid
        assert "create_payment_session" not in api.calls

    @pytest.mark.asyncio
    async def test_query_string_is_not_proof_of_payment(self):
        coordinator, _, _ = _setup()
        with pytest.raises(AmbiguousOutcomeError, match="not been confirmed"):
            await coordinator.handle_callback({"payment": "success", "orderId": "ord-1"})

    @pytest.mark.asyncio
    async def test_missing_order_id_is_ambiguous(self):
        coordinator, api, _ = _setup()
        with pytest.raises(AmbiguousOutcomeError):
            await coordinator.handle_callback({"payment": "success"})
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_failed_redirect_status(self):
        coordinator, _, _ = _setup()
        with pytest.raises(ProviderError):
            await coordinator.handle_callback(
                {"payment": "success", "orderId": "ord-1", "redirect_status": "failed"}
            )

    @pytest.mark.asyncio
    async def test_canceled_order(self):
        coordinator, _, _ = _setup(status=OrderStatus.CANCELED)
        with pytest.raises(ProviderError, match="canceled"):
            await coordinator.handle_callback({"payment": "success", "orderId": "ord-1"})


class TestWalletCallback:

    @pytest.mark.asyncio
    async def test_callback_in_fresh_process_confirms(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)

        # Nothing survives the redirect except the durable record.
        resumed = PaymentSessionCoordinator(api, pending)
        outcome = await resumed.handle_callback({"paymentID": "TR0001", "status": "success"})

        assert outcome.session.status == PaymentSessionStatus.CONFIRMED
        assert outcome.session.order_id == "ord-1"
        assert outcome.order.status == OrderStatus.PAID
        assert "execute_wallet_payment" in api.calls

    @pytest.mark.asyncio
    async def test_unknown_transaction_never_confirms(self):
        coordinator, api, _ = _setup()
        with pytest.raises(ProviderError, match="Unknown payment transaction"):
            await coordinator.handle_callback({"paymentID": "TR-FORGED", "status": "success"})
        assert api.calls == []
        assert api.orders["ord-1"].status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_cancelled_by_user(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        with pytest.raises(ProviderError, match="cancelled"):
            await coordinator.handle_callback({"paymentID": "TR0001", "status": "cancel"})
        assert pending.get("TR0001") is None
        assert api.orders["ord-1"].status == OrderStatus.PENDING
        assert "execute_wallet_payment" not in api.calls

    @pytest.mark.asyncio
    async def test_provider_failure_status(self):
        coordinator, api, _ = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        with pytest.raises(ProviderError, match="Payment failed"):
            await coordinator.handle_callback({"paymentID": "TR0001", "status": "failure"})

    @pytest.mark.asyncio
    async def test_execute_not_completed(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        api.wallet_status = "Failed"
        with pytest.raises(ProviderError, match="Payment failed"):
            await coordinator.handle_callback({"paymentID": "TR0001", "status": "success"})
        assert pending.get("TR0001") is None
        assert api.orders["ord-1"].status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_ambiguous_execute_falls_back_to_query(self):
        coordinator, api, _ = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        api.failures["execute_wallet_payment"] = AmbiguousOutcomeError("no response")
        outcome = await coordinator.handle_callback({"paymentID": "TR0001", "status": "success"})
        assert "query_wallet_payment" in api.calls
        assert outcome.order.is_paid

    @pytest.mark.asyncio
    async def test_second_callback_does_not_execute_again(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        params = {"paymentID": "TR0001", "status": "success"}
        await coordinator.handle_callback(params)
        outcome = await coordinator.handle_callback(params)
        assert api.calls.count("execute_wallet_payment") == 1
        assert outcome.session.status == PaymentSessionStatus.CONFIRMED
        assert pending.get("TR0001") is None

    @pytest.mark.asyncio
    async def test_order_not_yet_paid_is_ambiguous(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        # Provider says completed but the backend has not caught up.
        api.wallet_orders.clear()
        with pytest.raises(AmbiguousOutcomeError):
            await coordinator.handle_callback({"paymentID": "TR0001", "status": "success"})
        assert pending.get("TR0001") is not None

    @pytest.mark.asyncio
    async def test_canceled_order_is_never_executed(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        # Expired server-side while the user was on the wallet site.
        api.orders["ord-1"] = dataclasses.replace(
            api.orders["ord-1"], status=OrderStatus.CANCELED
        )
        with pytest.raises(ProviderError, match="was canceled"):
            await coordinator.handle_callback({"paymentID": "TR0001", "status": "success"})
        assert api.calls == ["create_payment_session", "get_order"]
        assert pending.get("TR0001") is None

    @pytest.mark.asyncio
    async def test_missing_status_queries_without_executing(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        outcome = await coordinator.handle_callback({"paymentID": "TR0001"})
        assert outcome.session.status == PaymentSessionStatus.CONFIRMED
        assert "query_wallet_payment" in api.calls
        assert "execute_wallet_payment" not in api.calls

    @pytest.mark.asyncio
    async def test_missing_status_unsettled_keeps_record(self):
        coordinator, api, pending = _setup()
        await coordinator.start(api.orders["ord-1"], PaymentProvider.WALLET)
        api.wallet_status = "Initiated"
        with pytest.raises(AmbiguousOutcomeError):
            await coordinator.handle_callback({"paymentID": "TR0001"})
        assert pending.get("TR0001") is not None
        assert "execute_wallet_payment" not in api.calls
        assert api.orders["ord-1"].status == OrderStatus.PENDING


class TestUnrecognized:

    @pytest.mark.asyncio
    async def test_empty_callback(self):
        coordinator, _, _ = _setup()
        with pytest.raises(ProviderError, match="Unrecognized"):
            await coordinator.handle_callback({})
