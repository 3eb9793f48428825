"""Log channel: writes notifications to the structured application log."""

import structlog

from notifications.channel.port import NotificationChannel
from notifications.message import Notification, Severity

logger = structlog.get_logger(__name__)


class LogChannel(NotificationChannel):
    """Default channel when no presentation layer is attached."""

    def send(self, notification: Notification) -> None:
        log = logger.error if notification.severity == Severity.ERROR else logger.info
        log(
            "Notification",
            title=notification.title,
            message=notification.message,
            severity=notification.severity.value,
        )
