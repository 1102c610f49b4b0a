"""Health check endpoint — available even before the monitoring system starts."""

from fastapi import APIRouter, Request

from steampanel.application.schemas import HealthResponse, SchedulerStatus
from steampanel.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Returns application health plus the state of each domain scheduler."""
    settings = get_settings()
    system = getattr(request.app.state, "monitoring", None)

    schedulers: list[SchedulerStatus] = []
    if system is not None:
        schedulers = [
            SchedulerStatus(
                domain=domain,
                state=scheduler.state.value,
                cycle_count=scheduler.cycle_count,
                interval_seconds=scheduler.options.interval,
                busy=scheduler.is_busy,
                has_data=scheduler.latest is not None,
            )
            for domain, scheduler in system.schedulers.items()
        ]

    return HealthResponse(
        status="healthy" if system is not None else "starting",
        version=settings.app_version,
        environment=settings.app_env,
        schedulers=schedulers,
    )
