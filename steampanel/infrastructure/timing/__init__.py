from .asyncio_timer import AsyncioTimer, AsyncioTimerFactory

__all__ = ["AsyncioTimer", "AsyncioTimerFactory"]
