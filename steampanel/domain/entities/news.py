"""News domain payload — game news for the watch-list."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NewsItem:
    gid: str
    title: str
    url: str = ""
    author: str = ""
    contents: str = ""
    feed_label: str = ""
    published_at: datetime | None = None


@dataclass(frozen=True)
class WatchedGame:
    """A game on the News watch-list."""

    app_id: int
    name: str = ""


@dataclass(frozen=True)
class GameNews:
    app_id: int
    game_name: str
    item: NewsItem


@dataclass(frozen=True)
class NewsData:
    """Latest news for the current game plus the watch-list-wide feed."""

    current_game_app_id: int = 0
    current_game_news: NewsItem | None = None
    library_news: tuple[GameNews, ...] = ()
