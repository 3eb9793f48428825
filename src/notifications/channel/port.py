"""Notification channel port: abstract interface for toast dispatch."""

from abc import ABC, abstractmethod

from notifications.message import Notification


class NotificationChannel(ABC):
    """Abstract interface for notification dispatch adapters."""

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Deliver a notification to whoever is watching the storefront."""
        ...
