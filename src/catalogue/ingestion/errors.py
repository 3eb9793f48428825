"""Batch-level failures of the catalogue upload path."""

from enum import Enum


class ErrorKind(Enum):
    UNSUPPORTED_TYPE = "Unsupported_Type"
    MALFORMED = "Malformed"
    EMPTY = "Empty"


class DecodeError(Exception):
    """Raised when an uploaded file cannot be turned into rows at all."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
