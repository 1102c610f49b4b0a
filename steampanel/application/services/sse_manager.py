"""SSE Manager — pushes published snapshots to connected dashboard clients."""

import asyncio
import itertools
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

logger = logging.getLogger(__name__)

# Events buffered per client before it is considered dead
CLIENT_QUEUE_SIZE = 100

_CLOSE = None


class SSEManager:
    """Fan-out of server-sent events with a per-key replay cache.

    ``broadcast`` is synchronous so scheduler event handlers can call it
    directly. Each event carries a monotonically increasing ``id``. When a
    ``replay_key`` is given (e.g. the domain name), the latest event for that
    key is remembered and sent first to clients that connect later, so a new
    dashboard shows every domain's last snapshot without waiting a full cycle.

    A client whose bounded queue fills up is disconnected.
    """

    def __init__(self, queue_size: int = CLIENT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._clients: set[asyncio.Queue[str | None]] = set()
        self._replay: dict[str, str] = {}
        self._ids = itertools.count(1)

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def subscribe(self) -> AsyncGenerator[str, None]:
        """Yield formatted SSE messages until the client or the server goes away."""
        inbox: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._queue_size)
        for message in list(self._replay.values())[-self._queue_size:]:
            inbox.put_nowait(message)
        self._clients.add(inbox)
        logger.debug("SSE client connected (%d total)", len(self._clients))

        try:
            while (message := await inbox.get()) is not _CLOSE:
                yield message
        finally:
            self._clients.discard(inbox)
            logger.debug("SSE client disconnected (%d left)", len(self._clients))

    def broadcast(
        self,
        event_type: str,
        data: dict[str, Any],
        *,
        replay_key: str | None = None,
    ) -> None:
        message = _format_event(next(self._ids), event_type, data)
        if replay_key is not None:
            self._replay[f"{event_type}:{replay_key}"] = message

        for inbox in tuple(self._clients):
            try:
                inbox.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("SSE client fell %d events behind, disconnecting", self._queue_size)
                self._disconnect(inbox)

    async def shutdown(self) -> None:
        """Close every open stream."""
        for inbox in tuple(self._clients):
            self._disconnect(inbox)
        self._replay.clear()

    def _disconnect(self, inbox: asyncio.Queue[str | None]) -> None:
        self._clients.discard(inbox)
        # Make room for the close marker in a full queue
        while inbox.full():
            inbox.get_nowait()
        inbox.put_nowait(_CLOSE)


def _format_event(event_id: int, event_type: str, data: dict[str, Any]) -> str:
    return f"id: {event_id}\nevent: {event_type}\ndata: {json.dumps(data)}\n\n"
