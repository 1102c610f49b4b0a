from .event_channel import EventChannel
from .rate_limit_gate import RateLimitGate, ScopedPermit
from .session_cache_store import SessionCacheStore
from .sse_manager import SSEManager
from .monitoring import (
    AchievementsScheduler,
    CrossDomainCoordinator,
    DomainScheduler,
    LibraryScheduler,
    MonitoringSystem,
    NewsScheduler,
    PlayerScheduler,
    SchedulerState,
    SocialScheduler,
)

__all__ = [
    "EventChannel",
    "RateLimitGate",
    "ScopedPermit",
    "SessionCacheStore",
    "SSEManager",
    "AchievementsScheduler",
    "CrossDomainCoordinator",
    "DomainScheduler",
    "LibraryScheduler",
    "MonitoringSystem",
    "NewsScheduler",
    "PlayerScheduler",
    "SchedulerState",
    "SocialScheduler",
]
