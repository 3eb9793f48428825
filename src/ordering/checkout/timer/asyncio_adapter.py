"""Timer adapter backed by the running asyncio event loop."""

import asyncio
from collections.abc import Callable

from ordering.checkout.timer.port import Timer


class AsyncioTimer(Timer):
    """Schedules callbacks with ``loop.call_later``.

    Without an explicit loop, the loop running at scheduling time is used,
    so ``schedule`` must then be called from inside that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        self.cancel(key)
        loop = self._loop or asyncio.get_running_loop()

        def fire() -> None:
            self._handles.pop(key, None)
            callback()

        self._handles[key] = loop.call_later(delay, fire)

    def cancel(self, key: str) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def pending(self) -> list[str]:
        return list(self._handles)
