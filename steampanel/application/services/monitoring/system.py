"""Monitoring system — assembles gate, collectors, schedulers and wiring."""

import logging

from steampanel.application.interfaces import TimerFactory, UpstreamClient
from steampanel.application.schemas import SnapshotResponse
from steampanel.application.services.collectors import (
    AchievementsCollector,
    LibraryCollector,
    NewsCollector,
    PlayerCollector,
    SocialCollector,
)
from steampanel.application.services.rate_limit_gate import RateLimitGate
from steampanel.application.services.sse_manager import SSEManager
from steampanel.config import Settings
from steampanel.domain.entities import Domain, DomainSnapshot, SessionCache

from .achievements_scheduler import AchievementsScheduler
from .coordinator import CrossDomainCoordinator
from .domain_scheduler import DomainScheduler
from .library_scheduler import LibraryScheduler
from .news_scheduler import NewsScheduler
from .player_scheduler import PlayerScheduler
from .social_scheduler import SocialScheduler

logger = logging.getLogger(__name__)


class MonitoringSystem:
    """One gate, one upstream client, five schedulers, one coordinator.

    Dependencies are passed in explicitly; nothing here reaches for a
    module-level singleton. When an :class:`SSEManager` is given, every
    published snapshot is also broadcast as a ``snapshot`` SSE event.
    """

    def __init__(
        self,
        client: UpstreamClient,
        settings: Settings,
        timer_factory: TimerFactory,
        *,
        gate: RateLimitGate | None = None,
        sse_manager: SSEManager | None = None,
    ):
        self._client = client
        self._gate = gate or RateLimitGate()
        self._sse = sse_manager
        steam_id = settings.steam_id

        def common(domain: Domain) -> dict:
            return {
                "options": settings.domain_options(domain),
                "gate": self._gate,
                "timer_factory": timer_factory,
            }

        library_collector = LibraryCollector(client, steam_id)

        self.player = PlayerScheduler(
            PlayerCollector(
                client, steam_id, level_refresh_seconds=settings.player_level_refresh_seconds
            ),
            **common(Domain.PLAYER),
        )
        self.social = SocialScheduler(
            SocialCollector(client, steam_id, activity_limit=settings.social_activity_limit),
            **common(Domain.SOCIAL),
        )
        self.library = LibraryScheduler(library_collector, **common(Domain.LIBRARY))
        self.achievements = AchievementsScheduler(
            AchievementsCollector(
                client, steam_id, library=library_collector, language=settings.steam_language
            ),
            grace_delay=settings.achievements_grace_delay_seconds,
            **common(Domain.ACHIEVEMENTS),
        )
        self.news = NewsScheduler(
            NewsCollector(
                client,
                max_length=settings.news_max_length,
                items_per_game=settings.news_items_per_game,
            ),
            watch_list_size=settings.news_watch_list_size,
            **common(Domain.NEWS),
        )

        self.social.set_session_cache(self.player.session_source)
        self.library.set_session_cache(self.player.session_source)

        self.coordinator = CrossDomainCoordinator(
            player=self.player,
            library=self.library,
            achievements=self.achievements,
            news=self.news,
        )
        self.coordinator.wire()

        if self._sse is not None:
            for scheduler in self.schedulers.values():
                scheduler.updated.subscribe(self._broadcast)

    @property
    def gate(self) -> RateLimitGate:
        return self._gate

    @property
    def schedulers(self) -> dict[Domain, DomainScheduler]:
        return {
            Domain.PLAYER: self.player,
            Domain.SOCIAL: self.social,
            Domain.LIBRARY: self.library,
            Domain.ACHIEVEMENTS: self.achievements,
            Domain.NEWS: self.news,
        }

    def start_all(self) -> None:
        for scheduler in self.schedulers.values():
            scheduler.start()
        logger.info("Monitoring started for %d domains", len(self.schedulers))

    def stop_all(self) -> None:
        for scheduler in self.schedulers.values():
            scheduler.stop()
        logger.info("Monitoring stopped")

    async def shutdown(self) -> None:
        """Stop, let in-flight cycles finish, then release every resource."""
        self.stop_all()
        for scheduler in self.schedulers.values():
            await scheduler.wait_idle()
        for scheduler in self.schedulers.values():
            if self._sse is not None:
                scheduler.updated.unsubscribe(self._broadcast)
            scheduler.dispose()
        self.coordinator.unwire()
        self._gate.close()
        await self._client.aclose()
        logger.info("Monitoring system shut down")

    def latest(self, domain: Domain) -> DomainSnapshot | None:
        return self.schedulers[domain].latest

    def get_session_cache(self) -> SessionCache:
        return self.player.get_session_cache()

    def _broadcast(self, snapshot: DomainSnapshot) -> None:
        self._sse.broadcast(
            "snapshot",
            SnapshotResponse.from_snapshot(snapshot).model_dump(mode="json"),
            replay_key=snapshot.domain.value,
        )
