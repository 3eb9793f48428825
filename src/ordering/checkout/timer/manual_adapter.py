"""Manually driven timer for tests and deterministic demos.

Time only moves when ``advance`` is called. Due callbacks fire in due-time
order (ties in scheduling order), including callbacks scheduled by other
callbacks while the clock is being advanced.
"""

import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

from ordering.checkout.timer.port import Timer


@dataclass(order=True)
class _Scheduled:
    due: float
    sequence: int
    key: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False)


class ManualTimer(Timer):
    def __init__(self) -> None:
        self.now: float = 0.0
        self._sequence = itertools.count()
        self._scheduled: dict[str, _Scheduled] = {}

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        self._scheduled[key] = _Scheduled(self.now + delay, next(self._sequence), key, callback)

    def cancel(self, key: str) -> bool:
        return self._scheduled.pop(key, None) is not None

    def pending(self) -> list[str]:
        return [s.key for s in sorted(self._scheduled.values())]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing everything that falls due."""
        target = self.now + seconds
        while True:
            due = [s for s in self._scheduled.values() if s.due <= target]
            if not due:
                break
            upcoming = min(due)
            del self._scheduled[upcoming.key]
            self.now = upcoming.due
            upcoming.callback()
        self.now = target

    def run_all(self) -> None:
        """Advance until nothing is pending."""
        while self._scheduled:
            upcoming = min(self._scheduled.values())
            self.advance(max(upcoming.due - self.now, 0.0))
