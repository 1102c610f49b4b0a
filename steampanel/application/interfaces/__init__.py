from .upstream_client import Endpoint, UpstreamClient
from .timer import Timer, TimerCallback, TimerFactory
from .session_cache_source import SessionCacheSource

__all__ = [
    "Endpoint",
    "UpstreamClient",
    "Timer",
    "TimerCallback",
    "TimerFactory",
    "SessionCacheSource",
]
