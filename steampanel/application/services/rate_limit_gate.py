"""Rate-limit gate — the single permit that serializes every upstream call."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from steampanel.domain.exceptions import GateUnavailableError

logger = logging.getLogger(__name__)


class ScopedPermit:
    """A held permit. ``release()`` is idempotent."""

    def __init__(self, gate: "RateLimitGate") -> None:
        self._gate = gate
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._gate._release()

    async def __aenter__(self) -> "ScopedPermit":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()


class RateLimitGate:
    """Binary semaphore shared by every domain scheduler.

    At most one upstream call is in flight system-wide. Waiting happens on
    the event loop, never on a worker thread. Once closed, ``acquire`` raises
    :class:`GateUnavailableError` and callers skip their cycle.
    """

    def __init__(self) -> None:
        self._semaphore = asyncio.Semaphore(1)
        self._held = 0
        self._closed = False

    @property
    def available(self) -> int:
        """Free permits right now (0 or 1)."""
        return 1 - self._held

    @property
    def closed(self) -> bool:
        return self._closed

    async def acquire(self) -> ScopedPermit:
        """Wait for the permit and return it wrapped in a :class:`ScopedPermit`."""
        if self._closed:
            raise GateUnavailableError()
        await self._semaphore.acquire()
        if self._closed:
            # Woken after close(); pass the permit on so other waiters can bail out too
            self._semaphore.release()
            raise GateUnavailableError()
        self._held += 1
        return ScopedPermit(self)

    @asynccontextmanager
    async def permit(self) -> AsyncIterator[ScopedPermit]:
        """Hold the permit for the duration of the ``async with`` block.

        Usage:
            async with gate.permit():
                data = await client.call(...)
        """
        scoped = await self.acquire()
        try:
            yield scoped
        finally:
            scoped.release()

    def close(self) -> None:
        """Refuse new acquisitions; in-flight holders still release normally."""
        if not self._closed:
            self._closed = True
            logger.debug("RateLimitGate closed (held=%d)", self._held)

    def _release(self) -> None:
        self._held -= 1
        self._semaphore.release()
