"""Unit tests for the shared DomainScheduler behaviour, exercised through real domains."""

import asyncio
import logging

import pytest

from steampanel.application.services.collectors import LibraryCollector, PlayerCollector
from steampanel.application.services.monitoring import (
    LibraryScheduler,
    PlayerScheduler,
    SchedulerState,
)
from steampanel.application.services.rate_limit_gate import RateLimitGate
from steampanel.domain.entities import Domain, LibraryData
from steampanel.domain.exceptions import SchedulerDisposedError, UpstreamError
from tests.support.fakes import (
    STEAM_ID,
    EventRecorder,
    FakeTimerFactory,
    FakeUpstreamClient,
    make_options,
    settle,
    steam_responses,
)


def _player(client, timers, gate=None, interval=1.0, tolerance=0.5, start_delay=0.0):
    return PlayerScheduler(
        PlayerCollector(client, STEAM_ID),
        options=make_options(interval, tolerance, start_delay),
        gate=gate or RateLimitGate(),
        timer_factory=timers,
    )


def _library(client, timers, gate=None, interval=45.0, start_delay=5.0):
    return LibraryScheduler(
        LibraryCollector(client, STEAM_ID),
        options=make_options(interval, 2.0, start_delay),
        gate=gate or RateLimitGate(),
        timer_factory=timers,
    )


# ── Lifecycle ──


@pytest.mark.asyncio
async def test_start_twice_does_not_rearm_timer():
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses()), timers)

    scheduler.start()
    changes = timers.timers[0].change_count
    scheduler.start()

    assert timers.timers[0].change_count == changes
    assert len(timers.timers) == 1
    assert scheduler.state is SchedulerState.RUNNING


@pytest.mark.asyncio
async def test_start_arms_timer_with_delay_and_period():
    timers = FakeTimerFactory()
    scheduler = _library(FakeUpstreamClient(steam_responses()), timers)

    scheduler.start()

    timer = timers.timers[0]
    assert timer.due_at == 5.0
    assert timer.period == 45.0


@pytest.mark.asyncio
async def test_stop_disarms_and_start_rearms():
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses()), timers)

    scheduler.start()
    scheduler.stop()
    assert not timers.timers[0].armed
    assert scheduler.state is SchedulerState.IDLE

    scheduler.start()
    assert timers.timers[0].armed


@pytest.mark.asyncio
async def test_dispose_is_terminal():
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses()), timers)
    scheduler.start()

    scheduler.dispose()
    scheduler.dispose()

    assert timers.timers[0].disposed
    assert scheduler.state is SchedulerState.DISPOSED
    with pytest.raises(SchedulerDisposedError):
        scheduler.start()


# ── Cycles ──


@pytest.mark.asyncio
async def test_successful_cycle_publishes_snapshot_with_session():
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses(game_id=730)), timers)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    scheduler.start()
    await timers.advance(0)

    assert len(recorder.events) == 1
    snapshot = recorder.events[0]
    assert snapshot.domain is Domain.PLAYER
    assert not snapshot.has_error
    assert snapshot.payload.current_game_app_id == 730
    assert snapshot.session.last_played_game_id == 730
    assert scheduler.latest is snapshot


@pytest.mark.asyncio
async def test_gate_is_free_after_failing_cycle():
    timers = FakeTimerFactory()
    gate = RateLimitGate()
    client = FakeUpstreamClient()
    client.fail_all = UpstreamError("ISteamUser/GetPlayerSummaries/v0002", 503, "down")
    scheduler = _player(client, timers, gate=gate)

    scheduler.start()
    await timers.advance(3)

    assert scheduler.cycle_count == 4
    assert gate.available == 1
    assert not scheduler.is_busy


@pytest.mark.asyncio
async def test_player_publishes_error_on_every_tick_while_upstream_fails():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient()
    client.fail_all = UpstreamError("ISteamUser/GetPlayerSummaries/v0002", 0, "ConnectError")
    scheduler = _player(client, timers, interval=3.0)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    scheduler.start()
    await timers.advance(30)

    # Ticks at 0, 3, ..., 30
    assert len(recorder.events) == 11
    assert len(recorder.errors) == 11
    first = recorder.events[0]
    assert first.payload.steam_id == ""
    assert "ConnectError" in first.error_message
    assert first.session is not None
    assert timers.timers[0].armed


@pytest.mark.asyncio
async def test_unexpected_collector_exception_becomes_collector_error():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses())
    scheduler = _library(client, timers, start_delay=0.0)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    async def broken() -> LibraryData:
        raise KeyError("games")

    scheduler._collect = broken
    scheduler.start()
    await timers.advance(0)

    assert len(recorder.errors) == 1
    assert "library collector failed" in recorder.errors[0].error_message
    assert recorder.errors[0].payload == LibraryData()


@pytest.mark.asyncio
async def test_failure_while_processing_collected_data_is_logged_as_error(caplog):
    timers = FakeTimerFactory()
    scheduler = _library(FakeUpstreamClient(steam_responses()), timers, start_delay=0.0)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    def broken(payload, cycle):
        raise ValueError("bad session math")

    scheduler._on_collected = broken
    scheduler.start()
    with caplog.at_level(logging.ERROR, logger="LibraryScheduler"):
        await timers.advance(0)

    assert len(recorder.errors) == 1
    assert "bad session math" in recorder.errors[0].error_message
    assert any(
        r.levelno == logging.ERROR and "processing collected data failed" in r.getMessage()
        for r in caplog.records
    )
    assert not scheduler.is_busy


@pytest.mark.asyncio
async def test_published_session_cannot_be_changed_by_a_subscriber():
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses(game_id=730)), timers)
    seen = []

    def tamper(snapshot):
        seen.append(snapshot)
        snapshot.session.last_played_game_id = -1

    recorder = EventRecorder()
    scheduler.updated.subscribe(tamper)
    scheduler.updated.subscribe(recorder)

    scheduler.start()
    await timers.advance(0)

    assert seen
    assert recorder.events[0].session.last_played_game_id == 730
    assert scheduler.latest.session.last_played_game_id == 730
    assert scheduler.get_session_cache().last_played_game_id == 730


@pytest.mark.asyncio
async def test_overlapping_tick_is_skipped_while_busy():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses())
    client.hold = asyncio.Event()
    scheduler = _player(client, timers)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    scheduler.start()
    await timers.advance(2)  # ticks at 0, 1, 2 while the first cycle hangs

    assert scheduler.is_busy
    assert scheduler.cycle_count == 3
    assert len(client.calls) == 1

    client.hold.set()
    await scheduler.wait_idle()

    assert len(recorder.events) == 1
    assert not scheduler.is_busy


@pytest.mark.asyncio
async def test_stop_lets_in_flight_cycle_publish():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses())
    client.hold = asyncio.Event()
    gate = RateLimitGate()
    scheduler = _player(client, timers, gate=gate)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    scheduler.start()
    await timers.advance(0)
    scheduler.stop()

    client.hold.set()
    await scheduler.wait_idle()

    assert len(recorder.events) == 1
    assert gate.available == 1
    assert not timers.timers[0].armed


@pytest.mark.asyncio
async def test_closed_gate_skips_cycle_without_publishing():
    timers = FakeTimerFactory()
    gate = RateLimitGate()
    scheduler = _player(FakeUpstreamClient(steam_responses()), timers, gate=gate)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    gate.close()
    scheduler.start()
    await timers.advance(2)

    assert recorder.events == []
    assert scheduler.cycle_count == 3
    assert not scheduler.is_busy


@pytest.mark.asyncio
async def test_run_now_while_busy_runs_again_after_cycle():
    timers = FakeTimerFactory()
    client = FakeUpstreamClient(steam_responses())
    client.hold = asyncio.Event()
    scheduler = _player(client, timers, interval=60.0)
    recorder = EventRecorder()
    scheduler.updated.subscribe(recorder)

    scheduler.start()
    await timers.advance(0)
    assert scheduler.run_now() is False

    client.hold.set()
    await settle()
    await scheduler.wait_idle()

    assert len(recorder.events) == 2


@pytest.mark.asyncio
async def test_run_now_is_ignored_when_not_running():
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses()), timers)

    assert scheduler.run_now() is False
    assert scheduler.cycle_count == 0


@pytest.mark.asyncio
async def test_trigger_soon_keeps_normal_period():
    timers = FakeTimerFactory()
    scheduler = _library(FakeUpstreamClient(steam_responses()), timers)
    scheduler.start()

    scheduler.trigger_soon(0.5)
    timer = timers.timers[0]
    assert timer.due_at == 0.5
    assert timer.period == 45.0

    await timers.advance(1)
    assert scheduler.cycle_count == 1
    assert timer.due_at == 45.5


# ── Serialization across domains ──


@pytest.mark.asyncio
async def test_concurrent_domains_never_overlap_upstream_calls():
    timers = FakeTimerFactory()
    gate = RateLimitGate()
    client = FakeUpstreamClient(steam_responses(), delay=0.005)
    player = _player(client, timers, gate=gate, start_delay=100.0)
    library = _library(client, timers, gate=gate, start_delay=100.0)
    player.start()
    library.start()

    assert player.run_now()
    assert library.run_now()
    await asyncio.gather(player.wait_idle(), library.wait_idle())

    assert client.max_active == 1
    assert len(client.calls) >= 4
    assert player.latest is not None and library.latest is not None
    assert gate.available == 1


# ── Drift diagnostics ──


@pytest.mark.asyncio
async def test_late_tick_logs_drift_warning(caplog):
    timers = FakeTimerFactory()
    scheduler = _player(FakeUpstreamClient(steam_responses()), timers, interval=1.0, tolerance=0.5)
    scheduler.start()
    await timers.advance(0)

    timers.now = 3.0  # next tick arrives two seconds late
    with caplog.at_level(logging.WARNING, logger="PlayerScheduler"):
        timers.timers[0].fire()
        await settle()

    assert any("deviation" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_triggered_tick_is_not_reported_as_drift(caplog):
    timers = FakeTimerFactory()
    scheduler = _library(FakeUpstreamClient(steam_responses()), timers, start_delay=0.0)
    scheduler.start()
    await timers.advance(10)

    with caplog.at_level(logging.WARNING, logger="LibraryScheduler"):
        scheduler.trigger_soon(0.5)
        await timers.advance(1)

    assert scheduler.cycle_count == 2
    assert not any("deviation" in record.getMessage() for record in caplog.records)
