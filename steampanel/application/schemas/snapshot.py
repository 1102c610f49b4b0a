"""Pydantic DTOs for snapshots, the session cache and scheduler status."""

import dataclasses
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from steampanel.domain.entities import Domain, DomainSnapshot


class SessionCacheResponse(BaseModel):
    """Clone of the Player-owned session cache."""

    current_session_minutes: int = 0
    session_start_time: datetime | None = None
    average_session_minutes: float = 0.0
    completed_sessions: int = 0
    active_game_id: int = 0
    last_played_game_id: int = 0
    last_played_game_name: str | None = None
    last_played_game_banner_url: str | None = None
    last_updated: datetime | None = None

    model_config = {"from_attributes": True}


class SnapshotResponse(BaseModel):
    """One published domain snapshot."""

    domain: Domain
    cycle: int
    timestamp: datetime
    has_error: bool = False
    error_message: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    session: SessionCacheResponse | None = None

    @classmethod
    def from_snapshot(cls, snapshot: DomainSnapshot) -> "SnapshotResponse":
        payload = snapshot.payload
        return cls(
            domain=snapshot.domain,
            cycle=snapshot.cycle,
            timestamp=snapshot.timestamp,
            has_error=snapshot.has_error,
            error_message=snapshot.error_message,
            payload=dataclasses.asdict(payload) if dataclasses.is_dataclass(payload) else {},
            session=(
                SessionCacheResponse.model_validate(snapshot.session)
                if snapshot.session is not None
                else None
            ),
        )


class SchedulerStatus(BaseModel):
    domain: Domain
    state: str
    cycle_count: int
    interval_seconds: float
    busy: bool = False
    has_data: bool = False


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    environment: str
    schedulers: list[SchedulerStatus] = Field(default_factory=list)


class WatchedGameResponse(BaseModel):
    app_id: int
    name: str = ""

    model_config = {"from_attributes": True}


class WatchListResponse(BaseModel):
    current_game_app_id: int = 0
    games: list[WatchedGameResponse] = Field(default_factory=list)
