"""Tests for CheckoutSession phase transitions."""

from decimal import Decimal

import pytest
from ordering.checkout.session import CheckoutPhase, CheckoutSession
from protean.exceptions import ValidationError
from shared.entries import CartLine


def _line(entry_id="1", price="10", quantity=1):
    return CartLine(
        id=entry_id,
        name="Data",
        description="",
        price=Decimal(price),
        category="General",
        format="CSV",
        size="1 GB",
        records=0,
        quantity=quantity,
    )


def _session():
    return CheckoutSession(cart_id="cart-1", payment_address="1TestWallet")


def _awaiting(*lines):
    session = _session()
    session.begin(list(lines) or [_line()])
    return session


class TestBegin:
    def test_new_session_is_idle(self):
        session = _session()
        assert session.phase == CheckoutPhase.IDLE
        assert session.target_total is None
        assert session.settled_ids == frozenset()

    def test_begin_quotes_the_cart(self):
        session = _awaiting(_line("1", "10", 1), _line("2", "2.5", 2))
        assert session.phase == CheckoutPhase.AWAITING_SETTLEMENT
        assert session.target_total == Decimal("15")
        assert [line.id for line in session.quoted_lines] == ["1", "2"]
        assert session.initiated_at is not None

    def test_quote_is_a_snapshot(self):
        lines = [_line("1", "10")]
        session = _session()
        session.begin(lines)
        lines.append(_line("2", "40"))
        assert session.target_total == Decimal("10")
        assert len(session.quoted_lines) == 1

    def test_begin_with_empty_cart_rejected(self):
        session = _session()
        with pytest.raises(ValidationError):
            session.begin([])
        assert session.phase == CheckoutPhase.IDLE

    def test_cannot_begin_twice(self):
        session = _awaiting()
        with pytest.raises(ValidationError):
            session.begin([_line()])


class TestSettlement:
    def test_mark_delivered_records_settled_ids(self):
        session = _awaiting(_line("1"))
        session.mark_delivered([_line("1"), _line("2")], transaction_id="tx-1")
        assert session.phase == CheckoutPhase.DELIVERED
        assert session.settled_ids == frozenset({"1", "2"})
        assert session.transaction_id == "tx-1"
        assert session.settled_at is not None

    def test_mark_failed_returns_to_idle_clean(self):
        session = _awaiting()
        session.mark_failed("Payment not received")
        assert session.phase == CheckoutPhase.IDLE
        assert session.settled_ids == frozenset()
        assert session.target_total is None
        assert session.failure_reason == "Payment not received"

    def test_cannot_deliver_from_idle(self):
        with pytest.raises(ValidationError):
            _session().mark_delivered([_line()])


class TestClearing:
    def _delivered(self):
        session = _awaiting()
        session.mark_delivered([_line("1")])
        return session

    def test_clearing_cycle_ends_idle(self):
        session = self._delivered()
        session.start_clearing()
        assert session.phase == CheckoutPhase.CLEARING
        session.finish_clearing()
        assert session.phase == CheckoutPhase.IDLE
        assert session.settled_ids == frozenset()

    def test_cannot_fail_after_delivery(self):
        with pytest.raises(ValidationError):
            self._delivered().mark_failed("too late")

    def test_cannot_clear_before_delivery(self):
        with pytest.raises(ValidationError):
            _awaiting().start_clearing()

    def test_cannot_finish_clearing_without_starting(self):
        with pytest.raises(ValidationError):
            self._delivered().finish_clearing()
