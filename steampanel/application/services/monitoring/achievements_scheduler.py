"""Achievements scheduler — slow poll with a fast refresh on game change."""

from steampanel.application.services.collectors import AchievementsCollector
from steampanel.domain.entities import AchievementsData, Domain, DomainSnapshot

from .domain_scheduler import DomainScheduler


class AchievementsScheduler(DomainScheduler[AchievementsData]):
    """Tracks the target game and re-arms its timer when the game changes.

    ``current_game_id`` (the live game) wins over ``last_played_game_id``.
    A change re-arms the timer after ``grace_delay`` seconds so the Player
    cycle that reported the change can release the gate first; later ticks
    keep the normal period.
    """

    domain = Domain.ACHIEVEMENTS

    def __init__(self, collector: AchievementsCollector, *, grace_delay: float = 0.5, **kwargs):
        super().__init__(**kwargs)
        self._collector = collector
        self._grace_delay = grace_delay
        self._current_game_id = 0
        self._last_played_game_id = 0

    @property
    def current_game_id(self) -> int:
        return self._current_game_id

    @property
    def last_played_game_id(self) -> int:
        return self._last_played_game_id

    @property
    def grace_delay(self) -> float:
        return self._grace_delay

    def update_current_game(self, game_id: int) -> None:
        if game_id == self._current_game_id:
            return

        previous = self._current_game_id
        self._current_game_id = game_id
        if game_id > 0:
            self._last_played_game_id = game_id

        self._log.lifecycle("Target game changed", previous=previous, current=game_id)
        self.trigger_soon(self._grace_delay)

    async def _collect(self) -> AchievementsData:
        return await self._collector.collect(self._current_game_id, self._last_played_game_id)

    def _empty_payload(self) -> AchievementsData:
        return AchievementsData()

    def _on_collected(self, payload: AchievementsData, cycle: int) -> DomainSnapshot[AchievementsData]:
        # Remember the library fallback so later cycles skip the extra lookups
        if not payload.is_current_game and payload.game_app_id and not self._last_played_game_id:
            self._last_played_game_id = payload.game_app_id
        return super()._on_collected(payload, cycle)
