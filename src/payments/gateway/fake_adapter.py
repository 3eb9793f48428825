"""Configurable fake settlement gateway for development and testing.

Simulates BTC settlement without touching any network. It can be told to
succeed, to report a failed settlement, or to blow up as if the network
were unreachable, which covers every path of the checkout state machine.
"""

from decimal import Decimal
from uuid import uuid4

from payments.gateway.port import SettlementGateway, SettlementResult


class SettlementUnavailable(ConnectionError):
    """Simulated network fault while confirming a settlement."""


class FakeSettlementGateway(SettlementGateway):
    """Configurable fake settlement gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment not received"
        self.raise_fault: bool = False
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Payment not received",
        raise_fault: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_fault = raise_fault

    def confirm_payment(
        self,
        address: str,
        amount: Decimal,
        reference: str,
    ) -> SettlementResult:
        self.calls.append(
            {
                "method": "confirm_payment",
                "address": address,
                "amount": amount,
                "reference": reference,
            }
        )

        if self.raise_fault:
            raise SettlementUnavailable("Settlement network unreachable")

        if self.should_succeed:
            return SettlementResult(
                success=True,
                transaction_id=f"fake_btc_{uuid4().hex[:16]}",
            )
        return SettlementResult(
            success=False,
            failure_reason=self.failure_reason,
        )
