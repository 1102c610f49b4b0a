"""FastAPI dependency injection — wires infrastructure to the application layer."""

from functools import lru_cache

from fastapi import HTTPException, Request

from steampanel.application.services import MonitoringSystem, SSEManager
from steampanel.config import Settings, get_settings
from steampanel.infrastructure.steam import SteamWebApiClient
from steampanel.infrastructure.timing import AsyncioTimerFactory


@lru_cache
def get_sse_manager() -> SSEManager:
    """Process-wide SSE broadcaster."""
    return SSEManager()


def build_monitoring_system(settings: Settings | None = None) -> MonitoringSystem:
    """Assemble the production MonitoringSystem from settings."""
    settings = settings or get_settings()
    client = SteamWebApiClient(
        api_key=settings.steam_api_key,
        base_url=settings.steam_base_url,
        timeout=settings.steam_request_timeout,
    )
    return MonitoringSystem(
        client,
        settings,
        AsyncioTimerFactory(),
        sse_manager=get_sse_manager(),
    )


def get_monitoring_system(request: Request) -> MonitoringSystem:
    """Provides the MonitoringSystem started by the application lifespan."""
    system = getattr(request.app.state, "monitoring", None)
    if system is None:
        raise HTTPException(status_code=503, detail="Monitoring system is not running")
    return system
