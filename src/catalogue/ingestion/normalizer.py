"""Ingestion normalizer: decoded rows to validated catalogue entries.

Every row is normalized on its own: a missing or unreadable field falls back
to a fixed default instead of failing the row, so a batch of N rows always
yields N entries in input order. The only batch-level failure the normalizer
itself reports is an empty batch.

Field rules (``n`` is the 1-based row position):

    id           row ``id``            else ``uploaded-{batch_stamp}-{n-1}``
    name         ``name`` / ``title``  else ``Database {n}``
    description  ``description``/``desc`` else ``No description provided``
    price        decimal ``price``     else ``DEFAULT_PRICE``
    category     ``category``          else ``General``
    size         ``size``              else ``Unknown``
    format       ``format``            else ``CSV``
    records      integer ``records``   else ``0``

Column names are matched exactly first, then case-insensitively with
surrounding whitespace ignored.
"""

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from shared.entries import CatalogEntry

from catalogue.ingestion.errors import ErrorKind

DEFAULT_PRICE = Decimal("0.001")
DEFAULT_DESCRIPTION = "No description provided"
DEFAULT_CATEGORY = "General"
DEFAULT_SIZE = "Unknown"
DEFAULT_FORMAT = "CSV"
DEFAULT_RECORDS = 0


@dataclass(frozen=True)
class NormalizationResult:
    entries: list[CatalogEntry] = field(default_factory=list)
    batch_error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.batch_error is None


def normalize(rows: Sequence[Mapping[str, Any]], *, batch_stamp: int | None = None) -> NormalizationResult:
    """Normalize a decoded batch.

    Args:
        rows: Decoder output, one mapping per row.
        batch_stamp: Millisecond timestamp used for synthesized ids.
            Defaults to the current time.
    """
    if not rows:
        return NormalizationResult(entries=[], batch_error=ErrorKind.EMPTY)

    if batch_stamp is None:
        batch_stamp = time.time_ns() // 1_000_000

    entries = [normalize_row(row, index, batch_stamp) for index, row in enumerate(rows)]
    return NormalizationResult(entries=entries)


def normalize_row(row: Mapping[str, Any], index: int, batch_stamp: int) -> CatalogEntry:
    """Build one entry from ``row`` found at 0-based ``index`` of its batch."""
    position = index + 1

    return CatalogEntry(
        id=_text(row, "id") or f"uploaded-{batch_stamp}-{index}",
        name=_text(row, "name") or _text(row, "title") or f"Database {position}",
        description=_text(row, "description") or _text(row, "desc") or DEFAULT_DESCRIPTION,
        price=_price(_lookup(row, "price")),
        category=_text(row, "category") or DEFAULT_CATEGORY,
        size=_text(row, "size") or DEFAULT_SIZE,
        format=_text(row, "format") or DEFAULT_FORMAT,
        records=_records(_lookup(row, "records")),
    )


def _lookup(row: Mapping[str, Any], column: str) -> Any:
    if column in row:
        return row[column]
    for key, value in row.items():
        if isinstance(key, str) and key.strip().lower() == column:
            return value
    return None


def _text(row: Mapping[str, Any], column: str) -> str | None:
    """Column value as text, or None when absent or blank."""
    value = _lookup(row, column)
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, float):
        if value != value:  # NaN from spreadsheet libraries
            return None
        if value.is_integer():
            return str(int(value))
    return str(value)


def _decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = Decimal(str(value))
    elif isinstance(value, Decimal):
        number = value
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not number.is_finite():
        return None
    return number


def _price(value: Any) -> Decimal:
    number = _decimal(value)
    if number is None or number < 0:
        return DEFAULT_PRICE
    return abs(number)  # folds -0 into 0


def _records(value: Any) -> int:
    number = _decimal(value)
    if number is None or number < 0 or number != number.to_integral_value():
        return DEFAULT_RECORDS
    return int(number)
