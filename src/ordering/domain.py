"""Ordering bounded context: Shopping Cart and Checkout.

Handles the shopper's cart (CQRS aggregate) and the simulated crypto
checkout that delivers and then clears the purchased lines.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
