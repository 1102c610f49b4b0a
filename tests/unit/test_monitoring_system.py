"""Unit tests for MonitoringSystem assembly, end-to-end timing and shutdown."""

import asyncio

import pytest

from steampanel.application.services import SSEManager
from steampanel.application.services.monitoring import MonitoringSystem, SchedulerState
from steampanel.config import Settings
from steampanel.domain.entities import Domain
from tests.support.fakes import (
    STEAM_ID,
    EventRecorder,
    FakeTimerFactory,
    FakeUpstreamClient,
    settle,
    steam_responses,
)


def _settings(**overrides) -> Settings:
    values = {"steam_api_key": "test-key", "steam_id": STEAM_ID}
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
async def test_player_and_library_publish_at_their_own_rates():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses())
    system = MonitoringSystem(
        client,
        _settings(
            player_interval_seconds=1.0,
            player_start_delay_seconds=0.0,
            library_interval_seconds=45.0,
            library_start_delay_seconds=5.0,
        ),
        timers,
    )
    player_events, library_events = EventRecorder(), EventRecorder()
    system.player.updated.subscribe(player_events)
    system.library.updated.subscribe(library_events)

    system.player.start()
    system.library.start()
    await timers.advance(46.0)

    assert len(player_events.events) >= 45
    assert len(library_events.events) == 1
    assert client.max_active == 1


@pytest.mark.asyncio
async def test_start_all_brings_every_domain_online():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses(game_id=730))
    system = MonitoringSystem(client, _settings(), timers)

    system.start_all()
    await timers.advance(15.0)

    for domain in Domain:
        snapshot = system.latest(domain)
        assert snapshot is not None, domain
        assert not snapshot.has_error, snapshot.error_message

    assert system.get_session_cache().last_played_game_id == 730
    assert system.latest(Domain.SOCIAL).session.last_played_game_id == 730
    assert system.achievements.current_game_id == 730
    assert system.latest(Domain.NEWS).payload.current_game_news is not None
    assert client.max_active == 1


@pytest.mark.asyncio
async def test_start_all_is_idempotent():
    timers = FakeTimerFactory()
    system = MonitoringSystem(FakeUpstreamClient(steam_responses()), _settings(), timers)

    system.start_all()
    changes = [t.change_count for t in timers.timers]
    system.start_all()

    assert [t.change_count for t in timers.timers] == changes
    assert len(timers.timers) == 5


@pytest.mark.asyncio
async def test_shutdown_releases_everything():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses())
    system = MonitoringSystem(client, _settings(), timers)
    system.start_all()
    await timers.advance(1.0)

    await system.shutdown()

    assert all(s.state is SchedulerState.DISPOSED for s in system.schedulers.values())
    assert all(t.disposed for t in timers.timers)
    assert system.gate.closed
    assert client.closed
    assert not system.coordinator.wired


@pytest.mark.asyncio
async def test_snapshots_are_broadcast_over_sse():
    timers = FakeTimerFactory()
    sse = SSEManager()
    system = MonitoringSystem(
        FakeUpstreamClient(steam_responses()), _settings(), timers, sse_manager=sse
    )
    stream = sse.subscribe()
    next_event = asyncio.ensure_future(stream.__anext__())
    await settle()

    system.player.start()
    await timers.advance(0)

    message = await asyncio.wait_for(next_event, timeout=1)
    assert "event: snapshot\n" in message
    assert '"domain": "player"' in message
    await stream.aclose()
