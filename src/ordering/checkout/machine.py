"""Checkout state machine: drives a cart through the simulated BTC checkout.

Flow:
    1. initiate_payment → quote the cart (total frozen), show the payment
       instruction, schedule settlement → AWAITING_SETTLEMENT
    2a. settlement confirmed → lines in the cart are delivered, schedule the
        sweep → DELIVERED
    2b. settlement failed → IDLE, cart untouched, shopper may retry
    3. sweep → the delivered lines (and only those) leave the cart → IDLE

One machine belongs to one cart and runs at most one session at a time.
Deferred steps are timer callbacks keyed by session id; a callback that
finds a different session (or none) does nothing.
"""

import json
from collections.abc import Iterable
from decimal import Decimal
from functools import partial

import structlog
from notifications.channel import get_channel
from notifications.channel.port import NotificationChannel
from notifications.message import Notification, Severity
from payments.gateway import get_gateway
from payments.gateway.port import SettlementGateway, SettlementResult
from protean.utils.globals import current_domain
from shared.entries import CartLine, format_btc

from ordering.cart.cart import ShoppingCart
from ordering.cart.management import ClearDeliveredItems
from ordering.checkout.session import CheckoutPhase, CheckoutSession
from ordering.checkout.timer.port import Timer
from ordering.domain import ordering

logger = structlog.get_logger(__name__)

DEFAULT_SETTLEMENT_DELAY = 3.0
DEFAULT_AUTO_CLEAR_DELAY = 5.0


class CheckoutStateMachine:
    def __init__(
        self,
        cart_id: str,
        timer: Timer,
        wallet_address: str,
        settlement_delay: float = DEFAULT_SETTLEMENT_DELAY,
        auto_clear_delay: float = DEFAULT_AUTO_CLEAR_DELAY,
        gateway: SettlementGateway | None = None,
        channel: NotificationChannel | None = None,
    ) -> None:
        self.cart_id = str(cart_id)
        self.timer = timer
        self.wallet_address = wallet_address
        self.settlement_delay = settlement_delay
        self.auto_clear_delay = auto_clear_delay
        self._gateway = gateway
        self._channel = channel
        self._session: CheckoutSession | None = None

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def phase(self) -> CheckoutPhase:
        return self._session.phase if self._session else CheckoutPhase.IDLE

    @property
    def session(self) -> CheckoutSession | None:
        return self._session

    @property
    def target_total(self) -> Decimal | None:
        return self._session.target_total if self._session else None

    def is_delivered(self, product_id) -> bool:
        """True while a delivered line is waiting to be swept from the cart."""
        return self.phase == CheckoutPhase.DELIVERED and str(product_id) in self._session.settled_ids

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def initiate_payment(self) -> bool:
        """Start a checkout for the current cart.

        Returns False, changing nothing, when the cart is empty or a session
        is already in flight.
        """
        if self._session is not None:
            logger.info(
                "Payment already in progress",
                cart_id=self.cart_id,
                session_id=self._session.id,
                phase=self._session.phase.value,
            )
            self._notify(
                Notification(
                    title="Payment in progress",
                    message="A payment for this cart is already being processed",
                )
            )
            return False

        lines = self._load_lines()
        if not lines:
            logger.info("Rejected payment for an empty cart", cart_id=self.cart_id)
            self._notify(
                Notification(
                    title="Your cart is empty",
                    message="Add a database to your cart before paying",
                )
            )
            return False

        session = CheckoutSession(cart_id=self.cart_id, payment_address=self.wallet_address)
        session.begin(lines)
        instruction = Notification(
            title="Send Bitcoin Payment",
            message=f"Send {format_btc(session.target_total)} in BTC to: {session.payment_address}",
        )
        self.timer.schedule(
            self._key(session, "settle"),
            self.settlement_delay,
            partial(self._on_settlement_due, session.id),
        )
        # Published last; any failure above leaves the machine Idle
        self._session = session
        self._notify(instruction)

        logger.info(
            "Checkout initiated",
            cart_id=self.cart_id,
            session_id=session.id,
            target_total=str(session.target_total),
            line_count=len(lines),
        )
        return True

    def teardown(self) -> None:
        """Discard the current session and cancel its pending callbacks."""
        if self._session is None:
            return

        cancelled = self.timer.cancel_prefix(f"{self._session.id}:")
        logger.info(
            "Checkout session discarded",
            cart_id=self.cart_id,
            session_id=self._session.id,
            phase=self._session.phase.value,
            cancelled_timers=cancelled,
        )
        self._session = None

    def _on_settlement_due(self, session_id: str) -> None:
        session = self._current(session_id, CheckoutPhase.AWAITING_SETTLEMENT)
        if session is None:
            return

        result = self._confirm(session)

        if not result.success:
            session.mark_failed(result.failure_reason)
            self._session = None
            logger.warning(
                "Settlement failed",
                cart_id=self.cart_id,
                session_id=session.id,
                reason=result.failure_reason,
            )
            self._notify(
                Notification(
                    title="Payment Failed",
                    message="There was an issue processing your Bitcoin payment. Please try again.",
                    severity=Severity.ERROR,
                )
            )
            return

        session.mark_delivered(self._load_lines(), transaction_id=result.transaction_id)
        logger.info(
            "Settlement confirmed",
            cart_id=self.cart_id,
            session_id=session.id,
            transaction_id=result.transaction_id,
            delivered=sorted(session.settled_ids),
        )
        self._notify(
            Notification(
                title="Payment Successful!",
                message="Your databases have been automatically delivered. Download links are now active.",
                severity=Severity.SUCCESS,
            )
        )
        self.timer.schedule(
            self._key(session, "auto-clear"),
            self.auto_clear_delay,
            partial(self._on_auto_clear_due, session.id),
        )

    def _on_auto_clear_due(self, session_id: str) -> None:
        session = self._current(session_id, CheckoutPhase.DELIVERED)
        if session is None:
            return

        session.start_clearing()
        try:
            cleared = self._clear_lines(session.settled_ids)
        except Exception as exc:
            logger.error(
                "Clearing delivered items failed",
                cart_id=self.cart_id,
                session_id=session.id,
                error=str(exc),
            )
            self._notify(
                Notification(
                    title="Cart cleanup failed",
                    message="Your delivered databases could not be removed from the cart. Please remove them manually.",
                    severity=Severity.ERROR,
                )
            )
            return
        finally:
            session.finish_clearing()
            self._session = None

        logger.info(
            "Delivered items cleared",
            cart_id=self.cart_id,
            session_id=session.id,
            cleared=cleared,
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _current(self, session_id: str, expected: CheckoutPhase) -> CheckoutSession | None:
        """The live session if it is ``session_id`` and in the ``expected`` phase."""
        session = self._session
        if session is None or session.id != session_id or session.phase != expected:
            logger.info(
                "Ignoring stale checkout callback",
                cart_id=self.cart_id,
                session_id=session_id,
                expected=expected.value,
            )
            return None
        return session

    def _confirm(self, session: CheckoutSession) -> SettlementResult:
        gateway = self._gateway or get_gateway()
        try:
            return gateway.confirm_payment(
                address=session.payment_address,
                amount=session.target_total,
                reference=session.id,
            )
        except Exception as exc:
            logger.error("Settlement gateway error", session_id=session.id, error=str(exc))
            return SettlementResult(success=False, failure_reason=str(exc))

    def _load_lines(self) -> list[CartLine]:
        with ordering.domain_context():
            cart = current_domain.repository_for(ShoppingCart).get(self.cart_id)
            return cart.lines()

    def _clear_lines(self, product_ids: Iterable[str]) -> list[str]:
        with ordering.domain_context():
            return current_domain.process(
                ClearDeliveredItems(cart_id=self.cart_id, product_ids=json.dumps(sorted(product_ids))),
                asynchronous=False,
            )

    def _notify(self, notification: Notification) -> None:
        (self._channel or get_channel()).send(notification)

    @staticmethod
    def _key(session: CheckoutSession, step: str) -> str:
        return f"{session.id}:{step}"
