"""Catalogue upload: decode, normalize and list an uploaded stock file.

A batch is all-or-nothing at the file level: if the file cannot be decoded
or holds no rows, nothing is listed and the shopper is told why. Individual
rows never fail; their gaps are filled by the normalizer.
"""

from dataclasses import dataclass, field

import structlog
from notifications.channel import get_channel
from notifications.channel.port import NotificationChannel
from notifications.message import Notification, Severity
from shared.entries import CatalogEntry

from catalogue.ingestion.decoder import decode, extension_of
from catalogue.ingestion.errors import DecodeError, ErrorKind
from catalogue.ingestion.normalizer import normalize
from catalogue.store import CatalogStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IngestionResult:
    entries: list[CatalogEntry] = field(default_factory=list)
    appended: list[CatalogEntry] = field(default_factory=list)
    batch_error: ErrorKind | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.batch_error is None


def ingest_upload(
    data: bytes,
    file_name: str,
    store: CatalogStore,
    channel: NotificationChannel | None = None,
    batch_stamp: int | None = None,
) -> IngestionResult:
    """Turn an uploaded file into catalogue entries and append them to ``store``."""
    channel = channel or get_channel()
    extension = extension_of(file_name)

    try:
        rows = decode(data, extension)
    except DecodeError as exc:
        logger.warning("Catalogue upload rejected", file_name=file_name, kind=exc.kind.value, error=exc.message)
        channel.send(_decode_failure(exc, extension))
        return IngestionResult(batch_error=exc.kind, error_message=exc.message)

    result = normalize(rows, batch_stamp=batch_stamp)
    if not result.ok:
        logger.warning("Catalogue upload contained no rows", file_name=file_name)
        channel.send(
            Notification(
                title="No rows found",
                message="The uploaded file does not contain any products",
                severity=Severity.ERROR,
            )
        )
        return IngestionResult(batch_error=result.batch_error, error_message="No rows found")

    appended = store.append(result.entries)
    logger.info(
        "Catalogue upload ingested",
        file_name=file_name,
        rows=len(rows),
        appended=len(appended),
        skipped=len(result.entries) - len(appended),
    )
    channel.send(
        Notification(
            title="Upload successful",
            message=f"Added {len(appended)} products to the database",
            severity=Severity.SUCCESS,
        )
    )
    return IngestionResult(entries=result.entries, appended=appended)


def _decode_failure(exc: DecodeError, extension: str) -> Notification:
    if exc.kind == ErrorKind.UNSUPPORTED_TYPE:
        title = "Unsupported file type"
        message = "Please upload a CSV or Excel file"
    elif extension == "csv":
        title = "Error parsing CSV"
        message = exc.message
    else:
        title = "Error parsing Excel file"
        message = exc.message
    return Notification(title=title, message=message, severity=Severity.ERROR)
