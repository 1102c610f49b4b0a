from .snapshot import (
    HealthResponse,
    SchedulerStatus,
    SessionCacheResponse,
    SnapshotResponse,
    WatchedGameResponse,
    WatchListResponse,
)

__all__ = [
    "HealthResponse",
    "SchedulerStatus",
    "SessionCacheResponse",
    "SnapshotResponse",
    "WatchedGameResponse",
    "WatchListResponse",
]
