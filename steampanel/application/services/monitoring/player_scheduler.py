"""Player scheduler — fastest domain and sole writer of the session cache."""

from collections.abc import Callable
from datetime import datetime, timezone

from steampanel.application.interfaces import SessionCacheSource
from steampanel.application.services.collectors import PlayerCollector
from steampanel.application.services.session_cache_store import SessionCacheStore
from steampanel.domain.entities import Domain, DomainSnapshot, PlayerData, SessionCache

from .domain_scheduler import DomainScheduler


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PlayerScheduler(DomainScheduler[PlayerData]):
    """Polls the player profile and advances the session cache.

    Success snapshots carry the clone produced by the cache update itself;
    error snapshots carry a fresh clone of the unchanged cache.
    """

    domain = Domain.PLAYER

    def __init__(
        self,
        collector: PlayerCollector,
        *,
        store: SessionCacheStore | None = None,
        clock: Callable[[], datetime] = _utc_now,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._collector = collector
        self._store = store or SessionCacheStore()
        self._clock = clock

    @property
    def session_source(self) -> SessionCacheSource:
        """Read-only view handed to Social and Library at wiring time."""
        return self._store

    def get_session_cache(self) -> SessionCache:
        return self._store.snapshot()

    async def _collect(self) -> PlayerData:
        return await self._collector.collect()

    def _empty_payload(self) -> PlayerData:
        return PlayerData()

    def _on_collected(self, payload: PlayerData, cycle: int) -> DomainSnapshot[PlayerData]:
        session = self._store.update_from_player(payload, self._clock())
        self._log.detail(
            "Player updated",
            status=payload.display_status,
            session=f"{session.current_session_minutes}min",
        )
        return DomainSnapshot.success(self.domain, payload, cycle=cycle, session=session)

    def _session_for_publish(self) -> SessionCache:
        return self._store.snapshot()
