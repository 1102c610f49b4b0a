"""Snapshot endpoints — latest published snapshot per domain plus an SSE stream."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from steampanel.application.schemas import SnapshotResponse
from steampanel.application.services import MonitoringSystem, SSEManager
from steampanel.domain.entities import Domain
from steampanel.infrastructure.dependencies import get_monitoring_system, get_sse_manager

router = APIRouter(prefix="/snapshots", tags=["Snapshots"])


@router.get("", response_model=dict[str, SnapshotResponse])
async def list_snapshots(
    system: MonitoringSystem = Depends(get_monitoring_system),
) -> dict[str, SnapshotResponse]:
    """Latest snapshot of every domain that has published at least once.

    A missing domain means "no data yet", not an error.
    """
    result: dict[str, SnapshotResponse] = {}
    for domain in Domain:
        snapshot = system.latest(domain)
        if snapshot is not None:
            result[domain.value] = SnapshotResponse.from_snapshot(snapshot)
    return result


@router.get("/stream")
async def stream_snapshots(
    sse: SSEManager = Depends(get_sse_manager),
) -> StreamingResponse:
    """SSE stream of ``snapshot`` events, one per published domain snapshot."""
    return StreamingResponse(
        sse.subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/{domain}", response_model=SnapshotResponse)
async def get_snapshot(
    domain: Domain,
    system: MonitoringSystem = Depends(get_monitoring_system),
) -> SnapshotResponse:
    """Latest snapshot for one domain; 404 until the domain first publishes."""
    snapshot = system.latest(domain)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {domain.value} snapshot published yet",
        )
    return SnapshotResponse.from_snapshot(snapshot)
