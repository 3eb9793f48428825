"""DataVault storefront: the surface the presentation layer talks to.

A ``Storefront`` owns one shopper's view of the shop: the catalogue, a cart
and the checkout session lifetime for that cart. Every call runs to
completion on the caller's thread; checkout's deferred steps are handed to
the timer and fire later on the same thread.

Usage:
    bootstrap()
    shop = Storefront(timer=AsyncioTimer())   # inside a running event loop
    shop.add_to_cart("1")
    shop.pay()
"""

from decimal import Decimal

import structlog
from catalogue.ingestion.upload import IngestionResult, ingest_upload
from catalogue.seed import seeded_store
from catalogue.store import CatalogStore
from notifications.channel.port import NotificationChannel
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import RemoveFromCart, UpdateCartQuantity, add_to_cart_command
from ordering.cart.management import CreateCart
from ordering.checkout.machine import CheckoutStateMachine
from ordering.checkout.pricing import compute_total
from ordering.checkout.session import CheckoutPhase
from ordering.checkout.timer.port import Timer
from ordering.domain import ordering
from payments.gateway.port import SettlementGateway
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from shared.entries import CartLine, CatalogEntry

from storefront.settings import Settings, settings
from storefront.utils.logging import configure_logging

logger = structlog.get_logger(__name__)

_initialized = False


def bootstrap(with_logging: bool = True) -> None:
    """Initialize the ordering domain (once per process) and logging."""
    global _initialized
    if _initialized:
        return

    if with_logging:
        configure_logging(log_dir=settings.LOG_DIR)
    ordering.init()
    _initialized = True
    logger.info("Storefront initialized", app=settings.APP_NAME)


class Storefront:
    def __init__(
        self,
        timer: Timer,
        catalog: CatalogStore | None = None,
        gateway: SettlementGateway | None = None,
        channel: NotificationChannel | None = None,
        config: Settings = settings,
        session_id: str | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else seeded_store()
        self.channel = channel

        with ordering.domain_context():
            self.cart_id = current_domain.process(CreateCart(session_id=session_id), asynchronous=False)

        self.checkout = CheckoutStateMachine(
            cart_id=self.cart_id,
            timer=timer,
            wallet_address=config.WALLET_ADDRESS,
            settlement_delay=config.SETTLEMENT_DELAY,
            auto_clear_delay=config.AUTO_CLEAR_DELAY,
            gateway=gateway,
            channel=channel,
        )

    # -------------------------------------------------------------------
    # Catalogue
    # -------------------------------------------------------------------
    def upload(self, data: bytes, file_name: str) -> IngestionResult:
        """Bulk-list the products of an uploaded CSV / Excel file."""
        return ingest_upload(data, file_name, self.catalog, channel=self.channel)

    def browse(self, term: str = "", category: str | None = None, format: str | None = None) -> list[CatalogEntry]:
        return self.catalog.search(term, category=category, format=format)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def add_to_cart(self, product_id: str) -> None:
        entry = self.catalog.get(product_id)
        if entry is None:
            raise ValidationError({"product_id": [f"Unknown catalogue entry '{product_id}'"]})
        self._process(add_to_cart_command(self.cart_id, entry))

    def update_quantity(self, product_id: str, quantity: int) -> None:
        self._process(UpdateCartQuantity(cart_id=self.cart_id, product_id=product_id, new_quantity=quantity))

    def remove_from_cart(self, product_id: str) -> None:
        self._process(RemoveFromCart(cart_id=self.cart_id, product_id=product_id))

    def cart_lines(self) -> list[CartLine]:
        with ordering.domain_context():
            return current_domain.repository_for(ShoppingCart).get(self.cart_id).lines()

    def cart_count(self) -> int:
        return sum(line.quantity for line in self.cart_lines())

    def cart_total(self) -> Decimal:
        """Live total of the cart as it is now; a running checkout keeps its own quote."""
        return compute_total(self.cart_lines())

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    @property
    def phase(self) -> CheckoutPhase:
        return self.checkout.phase

    def pay(self) -> bool:
        return self.checkout.initiate_payment()

    def close(self) -> None:
        """Tear down the checkout session; pending timers become no-ops."""
        self.checkout.teardown()

    def _process(self, command) -> None:
        with ordering.domain_context():
            current_domain.process(command, asynchronous=False)
