"""Storefront notifications: the toasts shown to the shopper.

A notification is purely observational: nothing in the storefront waits for
it to be acknowledged.
"""

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    INFO = "Info"
    SUCCESS = "Success"
    ERROR = "Error"


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    severity: Severity = Severity.INFO
