"""Fake notification channel: records notifications for testing."""

from notifications.channel.port import NotificationChannel
from notifications.message import Notification, Severity


class FakeChannel(NotificationChannel):
    """Channel that keeps every notification in memory for test assertions."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.sent]

    def of_severity(self, severity: Severity) -> list[Notification]:
        return [n for n in self.sent if n.severity == severity]

    def reset(self) -> None:
        """Clear recorded notifications (useful between tests)."""
        self.sent.clear()
