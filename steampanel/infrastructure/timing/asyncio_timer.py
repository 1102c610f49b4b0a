"""Asyncio timers — the production implementation of the Timer port."""

import asyncio
import logging
import time

from steampanel.application.interfaces import Timer, TimerCallback, TimerFactory

logger = logging.getLogger(__name__)


class AsyncioTimer(Timer):
    """Fixed-rate timer on the running event loop (``loop.call_at``).

    The next firing is scheduled before the callback runs, so a slow or
    failing callback never stops the timer. If the loop falls behind, the
    next firing happens as soon as possible instead of bunching up.
    """

    def __init__(self, callback: TimerCallback):
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._period: float | None = None
        self._due_at = 0.0
        self._disposed = False

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def change(self, due: float | None, period: float | None = None) -> None:
        if self._disposed:
            logger.debug("change() on a disposed timer ignored")
            return
        self._cancel()
        if due is None:
            return

        loop = asyncio.get_running_loop()
        self._period = period
        self._due_at = loop.time() + max(due, 0.0)
        self._handle = loop.call_at(self._due_at, self._fire, loop)

    def dispose(self) -> None:
        self._cancel()
        self._disposed = True

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, loop: asyncio.AbstractEventLoop) -> None:
        self._handle = None
        if self._period is not None:
            self._due_at = max(self._due_at + self._period, loop.time())
            self._handle = loop.call_at(self._due_at, self._fire, loop)

        try:
            self._callback()
        except Exception:
            logger.exception("Timer callback %r failed", self._callback)


class AsyncioTimerFactory(TimerFactory):
    def create(self, callback: TimerCallback) -> Timer:
        return AsyncioTimer(callback)

    def monotonic(self) -> float:
        # Same clock as the default event loop's time()
        return time.monotonic()
