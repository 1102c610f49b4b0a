from .domain_scheduler import DomainScheduler, SchedulerState, SessionReadingScheduler
from .player_scheduler import PlayerScheduler
from .social_scheduler import SocialScheduler
from .library_scheduler import LibraryScheduler
from .achievements_scheduler import AchievementsScheduler
from .news_scheduler import NewsScheduler
from .coordinator import CrossDomainCoordinator
from .system import MonitoringSystem

__all__ = [
    "DomainScheduler",
    "SchedulerState",
    "SessionReadingScheduler",
    "PlayerScheduler",
    "SocialScheduler",
    "LibraryScheduler",
    "AchievementsScheduler",
    "NewsScheduler",
    "CrossDomainCoordinator",
    "MonitoringSystem",
]
