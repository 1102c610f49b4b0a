"""Cross-domain coordinator — routes Player and Library updates to their dependents."""

import logging

from steampanel.domain.entities import DomainSnapshot, LibraryData, PlayerData

from .achievements_scheduler import AchievementsScheduler
from .library_scheduler import LibraryScheduler
from .news_scheduler import NewsScheduler
from .player_scheduler import PlayerScheduler

logger = logging.getLogger(__name__)


class CrossDomainCoordinator:
    """Wires the publisher -> subscriber edges between schedulers.

    * Player current game changed -> ``AchievementsScheduler.update_current_game``
    * Player update -> ``NewsScheduler.update_current_game`` (live game, else last played)
    * Library update -> ``NewsScheduler.update_recent_games``

    Error snapshots carry no reliable game identity and are ignored.
    ``wire()`` and ``unwire()`` are symmetric and idempotent.
    """

    def __init__(
        self,
        *,
        player: PlayerScheduler,
        library: LibraryScheduler,
        achievements: AchievementsScheduler,
        news: NewsScheduler | None = None,
    ):
        self._player = player
        self._library = library
        self._achievements = achievements
        self._news = news
        self._last_game_id: int | None = None
        self._wired = False

    @property
    def wired(self) -> bool:
        return self._wired

    def wire(self) -> None:
        if self._wired:
            return
        self._player.updated.subscribe(self.on_player_updated)
        if self._news is not None:
            self._library.updated.subscribe(self.on_library_updated)
        self._wired = True
        logger.debug("Cross-domain handlers wired")

    def unwire(self) -> None:
        if not self._wired:
            return
        self._player.updated.unsubscribe(self.on_player_updated)
        self._library.updated.unsubscribe(self.on_library_updated)
        self._wired = False
        logger.debug("Cross-domain handlers unwired")

    def on_player_updated(self, snapshot: DomainSnapshot[PlayerData]) -> None:
        if snapshot.has_error:
            return

        game_id = snapshot.payload.current_game_app_id
        if game_id != self._last_game_id:
            logger.info("Current game changed: %s -> %d", self._last_game_id, game_id)
            self._last_game_id = game_id
            self._achievements.update_current_game(game_id)

        if self._news is not None:
            last_played = snapshot.session.last_played_game_id if snapshot.session else 0
            self._news.update_current_game(game_id or last_played)

    def on_library_updated(self, snapshot: DomainSnapshot[LibraryData]) -> None:
        if snapshot.has_error or self._news is None:
            return
        self._news.update_recent_games(snapshot.payload.recent_games)
