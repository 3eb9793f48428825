"""Channel adapter registry: pluggable notification dispatch.

Provides singleton access to the active channel. The log channel is used
by default; a presentation layer (or a test) installs its own adapter with
``set_channel``.
"""

from notifications.channel.log_channel import LogChannel
from notifications.channel.port import NotificationChannel

_current_channel: NotificationChannel | None = None


def get_channel() -> NotificationChannel:
    """Return the active notification channel. Defaults to LogChannel."""
    global _current_channel
    if _current_channel is None:
        _current_channel = LogChannel()
    return _current_channel


def set_channel(channel: NotificationChannel) -> None:
    """Override the active channel (useful for tests)."""
    global _current_channel
    _current_channel = channel


def reset_channel() -> None:
    """Reset to the default channel."""
    global _current_channel
    _current_channel = None
