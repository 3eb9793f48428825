"""Tests for the fake settlement gateway and the gateway registry."""

from decimal import Decimal

import pytest
from payments.gateway import get_gateway, reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeSettlementGateway, SettlementUnavailable


class TestRegistry:
    def test_fake_gateway_is_the_default(self):
        reset_gateway()
        assert isinstance(get_gateway(), FakeSettlementGateway)

    def test_set_gateway(self):
        gateway = FakeSettlementGateway()
        set_gateway(gateway)
        assert get_gateway() is gateway


class TestFakeSettlementGateway:
    def test_succeeds_by_default(self):
        gateway = FakeSettlementGateway()
        result = gateway.confirm_payment(address="1Wallet", amount=Decimal("0.5"), reference="session-1")
        assert result.success
        assert result.transaction_id.startswith("fake_btc_")
        assert result.failure_reason is None

    def test_records_calls(self):
        gateway = FakeSettlementGateway()
        gateway.confirm_payment(address="1Wallet", amount=Decimal("2"), reference="session-1")
        assert gateway.calls == [
            {
                "method": "confirm_payment",
                "address": "1Wallet",
                "amount": Decimal("2"),
                "reference": "session-1",
            }
        ]

    def test_configured_failure(self):
        gateway = FakeSettlementGateway()
        gateway.configure(should_succeed=False, failure_reason="Underpaid")
        result = gateway.confirm_payment(address="1Wallet", amount=Decimal("2"), reference="session-1")
        assert not result.success
        assert result.transaction_id is None
        assert result.failure_reason == "Underpaid"

    def test_configured_fault_raises(self):
        gateway = FakeSettlementGateway()
        gateway.configure(should_succeed=True, raise_fault=True)
        with pytest.raises(SettlementUnavailable):
            gateway.confirm_payment(address="1Wallet", amount=Decimal("2"), reference="session-1")
        assert len(gateway.calls) == 1
