from fastapi import APIRouter, Depends

from steampanel.application.schemas import SessionCacheResponse
from steampanel.application.services import MonitoringSystem
from steampanel.infrastructure.dependencies import get_monitoring_system

router = APIRouter(prefix="/session", tags=["Session"])


@router.get("", response_model=SessionCacheResponse)
async def get_session(
    system: MonitoringSystem = Depends(get_monitoring_system),
) -> SessionCacheResponse:
    """A clone of the Player-owned session cache."""
    return SessionCacheResponse.model_validate(system.get_session_cache())
