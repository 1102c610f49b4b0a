"""Session cache store — the canonical Player-owned cache behind a lock."""

import logging
import threading
from datetime import datetime

from steampanel.application.interfaces import SessionCacheSource
from steampanel.domain.entities import PlayerData, SessionCache

logger = logging.getLogger(__name__)


class SessionCacheStore(SessionCacheSource):
    """Owns the canonical :class:`SessionCache`.

    The lock is a ``threading.Lock`` because readers may run outside the
    event loop (e.g. sync endpoints in the FastAPI threadpool). It is held
    only for the update or the deep copy, never across an await.
    """

    def __init__(self, cache: SessionCache | None = None) -> None:
        self._cache = cache or SessionCache()
        self._lock = threading.Lock()

    def snapshot(self) -> SessionCache:
        with self._lock:
            return self._cache.clone()

    def update_from_player(self, player: PlayerData, now: datetime) -> SessionCache:
        """Apply one Player observation and return a clone of the result."""
        with self._lock:
            self._cache.update_from_player(player, now)
            updated = self._cache.clone()

        logger.debug(
            "Session cache updated — current=%dmin average=%.1fmin last_played=%s",
            updated.current_session_minutes,
            updated.average_session_minutes,
            updated.last_played_game_name,
        )
        return updated
