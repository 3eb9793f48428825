"""Tabular decoder: turns uploaded file bytes into loosely typed rows.

Each row is a mapping from the column name found in the header row to the
raw cell value (``str``, ``int``, ``float`` or ``None``). No schema is
enforced here; the normalizer decides what the columns mean.

Supported uploads:
    - ``.csv``  delimited text (stdlib ``csv``)
    - ``.xlsx`` Office Open XML workbooks (openpyxl)
    - ``.xls``  legacy Excel workbooks (xlrd)

Only the first worksheet of a workbook is read. Fully blank rows are
skipped, matching what spreadsheet exports usually contain at the end.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any

import openpyxl
import structlog
import xlrd

from catalogue.ingestion.errors import DecodeError, ErrorKind

logger = structlog.get_logger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls")

RawRow = dict[str, Any]


def extension_of(file_name: str) -> str:
    """Return the lower-cased extension of ``file_name`` without the dot."""
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[1].strip().lower()


def decode(data: bytes, extension: str) -> list[RawRow]:
    """Decode ``data`` according to its declared ``extension``.

    Raises:
        DecodeError: ``UNSUPPORTED_TYPE`` for an unknown extension,
            ``MALFORMED`` when the underlying library cannot read the bytes.
    """
    extension = extension.lstrip(".").lower()

    if extension == "csv":
        return _decode_csv(data)
    if extension == "xlsx":
        return _decode_xlsx(data)
    if extension == "xls":
        return _decode_xls(data)

    raise DecodeError(
        ErrorKind.UNSUPPORTED_TYPE,
        f"Unsupported file type '{extension or '(none)'}'. Please upload a CSV or Excel file",
    )


def _decode_csv(data: bytes) -> list[RawRow]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("CSV upload is not UTF-8, falling back to Latin-1")
        text = data.decode("latin-1")

    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        rows = []
        for record in reader:
            # Surplus cells land under the ``None`` key; they have no column name.
            record.pop(None, None)
            row = {key: (value if value != "" else None) for key, value in record.items()}
            if _is_blank(row.values()):
                continue
            rows.append(row)
    except csv.Error as exc:
        raise DecodeError(ErrorKind.MALFORMED, f"Error parsing CSV: {exc}") from exc

    return rows


def _decode_xlsx(data: bytes) -> list[RawRow]:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            sheet = workbook.worksheets[0]
            table = [list(values) for values in sheet.iter_rows(values_only=True)]
        finally:
            workbook.close()
    except Exception as exc:
        raise DecodeError(ErrorKind.MALFORMED, "Failed to parse the Excel file") from exc

    return _rows_from_table(table)


def _decode_xls(data: bytes) -> list[RawRow]:
    try:
        book = xlrd.open_workbook(file_contents=data)
        sheet = book.sheet_by_index(0)
        table = [sheet.row_values(index) for index in range(sheet.nrows)]
    except Exception as exc:
        raise DecodeError(ErrorKind.MALFORMED, "Failed to parse the Excel file") from exc

    # xlrd reports empty cells as empty strings
    table = [[None if cell == "" else cell for cell in row] for row in table]
    return _rows_from_table(table)


def _rows_from_table(table: Sequence[Sequence[Any]]) -> list[RawRow]:
    """Use the first row as header and map every following row onto it."""
    if not table:
        return []

    header = [None if cell is None else str(cell) for cell in table[0]]

    rows = []
    for values in table[1:]:
        row = {name: value for name, value in zip(header, values, strict=False) if name is not None and name != ""}
        if _is_blank(row.values()):
            continue
        rows.append(row)
    return rows


def _is_blank(values: Iterable[Any]) -> bool:
    return all(value is None or (isinstance(value, str) and not value.strip()) for value in values)
