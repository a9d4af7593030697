"""
Tests des passerelles simulees : idempotence, pannes injectees et
cycle de vie des reservations.
"""

from decimal import Decimal

import pytest

from orderflow.adapters.gateways import (
    StubInventoryGateway,
    StubNotificationGateway,
    StubPaymentGateway,
)
from orderflow.core.errors import GatewayError, InsufficientStockError, NotFoundError
from orderflow.core.ports.gateways import PaymentStatus


class TestStubPaymentGateway:
    @pytest.mark.asyncio
    async def test_same_key_returns_same_transaction(self) -> None:
        gateway = StubPaymentGateway()

        first = await gateway.process_payment(Decimal("10"), "USD", "credit_card", "o1:payment")
        second = await gateway.process_payment(Decimal("10"), "USD", "credit_card", "o1:payment")

        assert first.transaction_id == second.transaction_id
        assert len(gateway.transactions) == 1

    @pytest.mark.asyncio
    async def test_decline_next_only_once(self) -> None:
        gateway = StubPaymentGateway()
        gateway.decline_next = True

        declined = await gateway.process_payment(Decimal("10"), "USD", "credit_card")
        accepted = await gateway.process_payment(Decimal("10"), "USD", "credit_card")

        assert not declined.success
        assert accepted.success

    @pytest.mark.asyncio
    async def test_refund_marks_transaction_cancelled(self) -> None:
        gateway = StubPaymentGateway()
        payment = await gateway.process_payment(Decimal("10"), "USD", "credit_card")

        refund = await gateway.refund_payment(payment.transaction_id, Decimal("10"))

        assert refund.success
        status = await gateway.get_transaction_status(payment.transaction_id)
        assert status == PaymentStatus.CANCELLED
        assert not (await gateway.refund_payment("txn_unknown", Decimal("1"))).success

    @pytest.mark.asyncio
    async def test_should_fail_raises_gateway_error(self) -> None:
        gateway = StubPaymentGateway()
        gateway.should_fail = True

        with pytest.raises(GatewayError):
            await gateway.process_payment(Decimal("10"), "USD", "credit_card")
        assert not await gateway.health()


class TestStubInventoryGateway:
    @pytest.mark.asyncio
    async def test_reserve_release_confirm(self) -> None:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 5)

        kept = await gateway.reserve_stock("p1", 2)
        dropped = await gateway.reserve_stock("p1", 1)
        await gateway.release_reservation(dropped.reservation_id)
        await gateway.confirm_usage(kept.reservation_id)

        stock = await gateway.check_stock("p1")
        assert (stock.available, stock.reserved) == (3, 0)
        assert gateway.inventories["p1"].quantity == 3

    @pytest.mark.asyncio
    async def test_release_twice_is_harmless(self) -> None:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 5)
        reservation = await gateway.reserve_stock("p1", 2)

        await gateway.release_reservation(reservation.reservation_id)
        await gateway.release_reservation(reservation.reservation_id)

        assert gateway.inventories["p1"].available == 5

    @pytest.mark.asyncio
    async def test_idempotent_reservation(self) -> None:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 5)

        first = await gateway.reserve_stock("p1", 2, "o1:reserve:0")
        second = await gateway.reserve_stock("p1", 2, "o1:reserve:0")

        assert first == second
        assert gateway.inventories["p1"].reserved == 2

    @pytest.mark.asyncio
    async def test_errors(self) -> None:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 1)

        with pytest.raises(InsufficientStockError) as exc_info:
            await gateway.reserve_stock("p1", 2)
        assert exc_info.value.available == 1

        with pytest.raises(NotFoundError):
            await gateway.check_stock("ghost")
        with pytest.raises(NotFoundError):
            await gateway.confirm_usage("res_ghost")

    def test_set_stock_keeps_reservations(self) -> None:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 5)
        gateway.inventories["p1"] = gateway.inventories["p1"].reserve(2)

        gateway.set_stock("p1", 8)

        assert gateway.inventories["p1"].reserved == 2
        assert gateway.inventories["p1"].available == 6

    def test_set_stock_below_reservations_caps_them(self) -> None:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 5)
        gateway.inventories["p1"] = gateway.inventories["p1"].reserve(2)

        gateway.set_stock("p1", 1)

        assert gateway.inventories["p1"].quantity == 1
        assert gateway.inventories["p1"].reserved == 1
        assert gateway.inventories["p1"].available == 0


class TestStubNotificationGateway:
    @pytest.mark.asyncio
    async def test_records_sent_messages(self) -> None:
        gateway = StubNotificationGateway()

        await gateway.send_email("a@example.com", "Bienvenue", "Bonjour")
        await gateway.send_sms("+33600000000", "Code 1234")

        assert [m["channel"] for m in gateway.sent] == ["email", "sms"]
        assert gateway.sent[0]["body"] == "Bonjour"

    @pytest.mark.asyncio
    async def test_failure_is_reported(self) -> None:
        gateway = StubNotificationGateway()
        gateway.should_fail = True

        result = await gateway.send_push("u1", "Titre", "Corps")

        assert not result.success
        assert gateway.sent == []
        assert gateway.call_count("send_push") == 1
