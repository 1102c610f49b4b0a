from .player import PlayerData, PERSONA_STATES
from .social import SocialData, FriendActivity
from .library import LibraryData, RecentGame
from .achievements import AchievementsData
from .news import NewsData, NewsItem, GameNews, WatchedGame
from .session_cache import SessionCache, SessionView
from .snapshot import Domain, DomainSnapshot

__all__ = [
    "PlayerData",
    "PERSONA_STATES",
    "SocialData",
    "FriendActivity",
    "LibraryData",
    "RecentGame",
    "AchievementsData",
    "NewsData",
    "NewsItem",
    "GameNews",
    "WatchedGame",
    "SessionCache",
    "SessionView",
    "Domain",
    "DomainSnapshot",
]
