from fastapi import APIRouter, Depends

from steampanel.application.schemas import WatchedGameResponse, WatchListResponse
from steampanel.application.services import MonitoringSystem
from steampanel.infrastructure.dependencies import get_monitoring_system

router = APIRouter(prefix="/news", tags=["News"])


@router.get("/watch-list", response_model=WatchListResponse)
async def get_watch_list(
    system: MonitoringSystem = Depends(get_monitoring_system),
) -> WatchListResponse:
    """Games the News domain currently fetches updates for."""
    return WatchListResponse(
        current_game_app_id=system.news.current_game_id,
        games=[WatchedGameResponse.model_validate(g) for g in system.news.watch_list],
    )
