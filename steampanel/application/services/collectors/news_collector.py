"""News collector — latest news items per game."""

import logging
from datetime import datetime, timezone

from steampanel.application.interfaces import Endpoint, UpstreamClient
from steampanel.domain.entities import GameNews, NewsItem, WatchedGame
from steampanel.domain.exceptions import UpstreamError

from .parsing import as_list, as_str, dig, from_unix

logger = logging.getLogger(__name__)

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class NewsCollector:
    def __init__(self, client: UpstreamClient, *, max_length: int = 300, items_per_game: int = 1):
        self._client = client
        self._max_length = max_length
        self._items_per_game = items_per_game

    async def latest_for_game(self, app_id: int) -> NewsItem | None:
        """Newest news item for ``app_id``; ``None`` when the game has none."""
        items = await self._fetch(app_id, count=1)
        return items[0] if items else None

    async def for_games(self, games: list[WatchedGame]) -> list[GameNews]:
        """News across ``games``, newest first.

        A game whose lookup fails is logged and skipped so one broken app
        does not blank the whole feed.
        """
        feed: list[GameNews] = []
        for game in games:
            try:
                items = await self._fetch(game.app_id, count=self._items_per_game)
            except UpstreamError as e:
                logger.warning("News for %s (%d) failed: %s", game.name, game.app_id, e)
                continue
            feed.extend(
                GameNews(app_id=game.app_id, game_name=game.name, item=item) for item in items
            )

        feed.sort(key=lambda n: n.item.published_at or _EPOCH, reverse=True)
        return feed

    async def _fetch(self, app_id: int, count: int) -> list[NewsItem]:
        data = await self._client.call(
            Endpoint.NEWS_FOR_APP,
            {"appid": app_id, "count": count, "maxlength": self._max_length},
        )
        items: list[NewsItem] = []
        for entry in as_list(dig(data, "appnews", "newsitems")):
            title = as_str(entry.get("title"))
            if not title:
                continue
            items.append(
                NewsItem(
                    gid=as_str(entry.get("gid")) or "",
                    title=title,
                    url=as_str(entry.get("url")) or "",
                    author=as_str(entry.get("author")) or "",
                    contents=as_str(entry.get("contents")) or "",
                    feed_label=as_str(entry.get("feedlabel")) or "",
                    published_at=from_unix(entry.get("date")),
                )
            )
        return items
