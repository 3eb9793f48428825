"""Cart pricing."""

from collections.abc import Iterable
from decimal import Context, Decimal, localcontext

from shared.entries import CartLine


def compute_total(lines: Iterable[CartLine]) -> Decimal:
    """Sum of price × quantity over ``lines``; zero for no lines.

    Catalogue prices carry arbitrary precision, so the sum is taken with
    enough digits to stay exact.
    """
    lines = list(lines)
    if not lines:
        return Decimal("0")

    highest = max(line.price.adjusted() + len(str(line.quantity)) for line in lines) + len(str(len(lines)))
    lowest = min(line.price.as_tuple().exponent for line in lines)
    with localcontext(Context(prec=max(28, highest - lowest + 1))):
        return sum((line.price * line.quantity for line in lines), Decimal("0"))
