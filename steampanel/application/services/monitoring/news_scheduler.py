"""News scheduler — watch-list feed plus on-demand news for the current game."""

import asyncio
from collections.abc import Sequence

from steampanel.application.services.collectors import NewsCollector
from steampanel.domain.entities import (
    Domain,
    DomainSnapshot,
    GameNews,
    NewsData,
    NewsItem,
    RecentGame,
    WatchedGame,
)
from steampanel.domain.exceptions import GateUnavailableError

from .domain_scheduler import DomainScheduler


class NewsScheduler(DomainScheduler[NewsData]):
    """Keeps the watch-list and refreshes its news on a slow period.

    The watch-list is the current (or last-played) game plus the top recent
    games from Library, capped at ``watch_list_size``. Two events bypass the
    period:

    * the recent-games set changes (including the first non-empty list):
      the whole feed is fetched at once via ``run_now()``;
    * the current game changes: only that game's news is fetched, as a
      one-off task that does not count as a cycle.
    """

    domain = Domain.NEWS

    def __init__(self, collector: NewsCollector, *, watch_list_size: int = 5, **kwargs):
        super().__init__(**kwargs)
        self._collector = collector
        self._watch_list_size = watch_list_size
        self._current_game_id = 0
        self._current_game_news: NewsItem | None = None
        self._current_news_loaded = True
        self._recent_games: list[WatchedGame] = []
        self._library_news: tuple[GameNews, ...] = ()

    @property
    def current_game_id(self) -> int:
        return self._current_game_id

    @property
    def watch_list(self) -> list[WatchedGame]:
        """Current game first, then recent games, without duplicates."""
        games: list[WatchedGame] = []
        if self._current_game_id > 0:
            name = next(
                (g.name for g in self._recent_games if g.app_id == self._current_game_id), ""
            )
            games.append(WatchedGame(self._current_game_id, name))
        games.extend(g for g in self._recent_games if g.app_id != self._current_game_id)
        return games

    # ── Inputs from the coordinator ──────────────────────────────────

    def update_current_game(self, game_id: int) -> None:
        if game_id == self._current_game_id:
            return

        self._current_game_id = game_id
        self._current_game_news = None
        self._log.lifecycle("Current game changed", game=game_id)

        if game_id <= 0:
            self._current_news_loaded = True
            self._publish(DomainSnapshot.success(self.domain, self._state_payload(), cycle=self._cycle_count))
            return

        self._current_news_loaded = False
        if self.is_running:
            task = asyncio.get_running_loop().create_task(
                self._refresh_current_game(game_id), name=f"news-current-{game_id}"
            )
            self._track(task)

    def update_recent_games(self, games: Sequence[RecentGame]) -> None:
        watch = [WatchedGame(g.app_id, g.name) for g in games[:self._watch_list_size]]
        changed = {g.app_id for g in watch} != {g.app_id for g in self._recent_games}
        self._recent_games = watch

        if not changed:
            return

        self._log.lifecycle("Watch-list changed", games=len(watch))
        if watch:
            self.run_now()
        elif self._library_news:
            # Nothing left to refresh; drop the stale feed
            self._library_news = ()
            self._publish(DomainSnapshot.success(self.domain, self._state_payload(), cycle=self._cycle_count))

    # ── Collection ───────────────────────────────────────────────────

    async def _refresh_current_game(self, game_id: int) -> None:
        try:
            async with self._gate.permit():
                item = await self._collector.latest_for_game(game_id)
        except GateUnavailableError:
            return
        except Exception as e:
            if game_id != self._current_game_id:
                return
            self._log.cycle_error(self._cycle_count, f"news for game {game_id} failed", error=e)
            self._publish(self._failure_snapshot(e, self._cycle_count))
            return

        if game_id != self._current_game_id:
            self._log.detail(f"News for game {game_id} dropped — game changed meanwhile")
            return

        self._current_game_news = item
        self._current_news_loaded = True
        self._publish(DomainSnapshot.success(self.domain, self._state_payload(), cycle=self._cycle_count))

    def _should_collect(self) -> bool:
        return bool(self._recent_games) or not self._current_news_loaded

    async def _collect(self) -> NewsData:
        current_id = self._current_game_id
        current = self._current_game_news
        if current_id > 0 and not self._current_news_loaded:
            current = await self._collector.latest_for_game(current_id)

        library = await self._collector.for_games(list(self._recent_games))
        return NewsData(
            current_game_app_id=current_id,
            current_game_news=current,
            library_news=tuple(library),
        )

    def _on_collected(self, payload: NewsData, cycle: int) -> DomainSnapshot[NewsData]:
        self._library_news = payload.library_news if self._recent_games else ()
        if payload.current_game_app_id == self._current_game_id and not self._current_news_loaded:
            self._current_game_news = payload.current_game_news
            self._current_news_loaded = True
        return DomainSnapshot.success(self.domain, self._state_payload(), cycle=cycle)

    def _empty_payload(self) -> NewsData:
        return NewsData()

    def _state_payload(self) -> NewsData:
        return NewsData(
            current_game_app_id=self._current_game_id,
            current_game_news=self._current_game_news,
            library_news=self._library_news,
        )
