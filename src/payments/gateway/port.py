"""Settlement gateway port (abstract interface).

Defines the contract for confirming that a crypto payment has arrived at
the storefront's wallet. The storefront only ever simulates settlement, so
the fake adapter is the one in use; the port keeps checkout logic
independent of how confirmation is obtained.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SettlementResult:
    """Result of a settlement confirmation attempt."""

    success: bool
    transaction_id: str | None = None
    failure_reason: str | None = None


class SettlementGateway(ABC):
    """Abstract settlement gateway interface."""

    @abstractmethod
    def confirm_payment(
        self,
        address: str,
        amount: Decimal,
        reference: str,
    ) -> SettlementResult:
        """Confirm that ``amount`` was received at ``address``.

        ``reference`` identifies the checkout session and doubles as an
        idempotency key.
        """
        ...
