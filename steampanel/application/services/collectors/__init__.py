from .player_collector import PlayerCollector, banner_url
from .social_collector import SocialCollector
from .library_collector import LibraryCollector
from .achievements_collector import AchievementsCollector
from .news_collector import NewsCollector

__all__ = [
    "PlayerCollector",
    "banner_url",
    "SocialCollector",
    "LibraryCollector",
    "AchievementsCollector",
    "NewsCollector",
]
