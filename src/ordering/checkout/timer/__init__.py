from ordering.checkout.timer.asyncio_adapter import AsyncioTimer
from ordering.checkout.timer.manual_adapter import ManualTimer
from ordering.checkout.timer.port import Timer

__all__ = ["AsyncioTimer", "ManualTimer", "Timer"]
