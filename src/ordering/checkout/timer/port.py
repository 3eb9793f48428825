"""Timer port: deferred callbacks keyed by name.

Checkout never blocks while it waits for settlement or for the delivered
lines to be swept; it schedules a callback and returns. Keys let the owner
cancel everything belonging to a session at once.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable


class Timer(ABC):
    """Abstract deferred-callback scheduler."""

    @abstractmethod
    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once, ``delay`` seconds from now.

        Scheduling a key that is already pending replaces the earlier callback.
        """
        ...

    @abstractmethod
    def cancel(self, key: str) -> bool:
        """Cancel a pending callback. Returns False if nothing was pending."""
        ...

    @abstractmethod
    def pending(self) -> list[str]:
        """Keys of the callbacks that have not fired yet."""
        ...

    def cancel_prefix(self, prefix: str) -> int:
        """Cancel every pending callback whose key starts with ``prefix``."""
        return sum(1 for key in self.pending() if key.startswith(prefix) and self.cancel(key))
