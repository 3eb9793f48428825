"""Checkout session: one pass of a cart through the crypto checkout.

State Machine (4 phases):
    IDLE → AWAITING_SETTLEMENT → DELIVERED → CLEARING → IDLE
    AWAITING_SETTLEMENT → IDLE (settlement failed)

A session freezes the cart total when payment is initiated (the quote) and
records which lines were delivered when the payment settled. It never
reaches back into the cart itself; the state machine owning it does that.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from shared.entries import CartLine

from ordering.checkout.pricing import compute_total


class CheckoutPhase(Enum):
    IDLE = "Idle"
    AWAITING_SETTLEMENT = "AwaitingSettlement"
    DELIVERED = "Delivered"
    CLEARING = "Clearing"


_VALID_TRANSITIONS = {
    CheckoutPhase.IDLE: {CheckoutPhase.AWAITING_SETTLEMENT},
    CheckoutPhase.AWAITING_SETTLEMENT: {
        CheckoutPhase.DELIVERED,
        CheckoutPhase.IDLE,  # Settlement failed
    },
    CheckoutPhase.DELIVERED: {CheckoutPhase.CLEARING},
    CheckoutPhase.CLEARING: {CheckoutPhase.IDLE},
}


class CheckoutSession:
    def __init__(self, cart_id: str, payment_address: str) -> None:
        self.id: str = uuid4().hex
        self.cart_id = cart_id
        self.payment_address = payment_address
        self.phase = CheckoutPhase.IDLE
        self.quoted_lines: tuple[CartLine, ...] = ()
        self.target_total: Decimal | None = None
        self.settled_ids: frozenset[str] = frozenset()
        self.transaction_id: str | None = None
        self.failure_reason: str | None = None
        self.initiated_at: datetime | None = None
        self.settled_at: datetime | None = None

    def __repr__(self) -> str:
        return f"<CheckoutSession {self.id} {self.phase.value}>"

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def begin(self, lines: Sequence[CartLine]) -> None:
        """Quote the cart and wait for the payment to settle."""
        if not lines:
            raise ValidationError({"cart": ["Cannot pay for an empty cart"]})
        self._assert_can_transition(CheckoutPhase.AWAITING_SETTLEMENT)

        self.quoted_lines = tuple(lines)
        self.target_total = compute_total(self.quoted_lines)
        self.phase = CheckoutPhase.AWAITING_SETTLEMENT
        self.initiated_at = datetime.now(UTC)

    def mark_delivered(self, lines: Iterable[CartLine], transaction_id: str | None = None) -> None:
        """Payment settled: every line in the cart right now is delivered."""
        self._assert_can_transition(CheckoutPhase.DELIVERED)

        self.settled_ids = frozenset(line.id for line in lines)
        self.transaction_id = transaction_id
        self.phase = CheckoutPhase.DELIVERED
        self.settled_at = datetime.now(UTC)

    def mark_failed(self, reason: str | None) -> None:
        """Payment did not settle: back to a clean Idle with nothing retained."""
        self._assert_can_transition(CheckoutPhase.IDLE)

        self.settled_ids = frozenset()
        self.target_total = None
        self.failure_reason = reason
        self.phase = CheckoutPhase.IDLE

    def start_clearing(self) -> None:
        self._assert_can_transition(CheckoutPhase.CLEARING)
        self.phase = CheckoutPhase.CLEARING

    def finish_clearing(self) -> None:
        self._assert_can_transition(CheckoutPhase.IDLE)
        self.settled_ids = frozenset()
        self.phase = CheckoutPhase.IDLE

    def _assert_can_transition(self, target_phase: CheckoutPhase) -> None:
        """Validate that the current phase allows transition to target."""
        if target_phase not in _VALID_TRANSITIONS.get(self.phase, set()):
            raise ValidationError({"phase": [f"Cannot transition from {self.phase.value} to {target_phase.value}"]})
