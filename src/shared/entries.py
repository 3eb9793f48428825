"""Catalogue entry shared between the Catalogue and Ordering contexts.

The catalogue owns entries; ordering only snapshots their fields into cart
lines. Keeping the type here lets both sides agree on the shape without
importing each other.
"""

from dataclasses import dataclass
from decimal import Context, Decimal


@dataclass(frozen=True)
class CatalogEntry:
    """One listed data product available for purchase."""

    id: str
    name: str
    description: str
    price: Decimal
    category: str
    format: str
    size: str
    records: int


@dataclass(frozen=True)
class CartLine:
    """A catalogue entry plus the quantity a shopper intends to purchase."""

    id: str
    name: str
    description: str
    price: Decimal
    category: str
    format: str
    size: str
    records: int
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


def format_btc(amount: Decimal) -> str:
    """Render an amount the way the storefront shows prices, e.g. ``₿0.5``."""
    amount = Decimal(amount)
    # Satoshi precision for every magnitude, not just the default 28 digits
    context = Context(prec=max(28, amount.adjusted() + 10))
    quantized = amount.quantize(Decimal("1e-8"), context=context)
    text = f"{quantized:f}".rstrip("0").rstrip(".")
    return f"₿{text or '0'}"
