"""Integration tests for the snapshot, session and news endpoints."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from steampanel.application.services.monitoring import MonitoringSystem
from steampanel.config import Settings
from steampanel.main import create_app
from tests.support.fakes import STEAM_ID, FakeTimerFactory, FakeUpstreamClient, steam_responses


@pytest_asyncio.fixture
async def running():
    """App with a monitoring system driven by a virtual clock."""
    test_app = create_app()
    timers = FakeTimerFactory()
    system = MonitoringSystem(
        FakeUpstreamClient(steam_responses(game_id=730)),
        Settings(_env_file=None, steam_api_key="k", steam_id=STEAM_ID),
        timers,
    )
    test_app.state.monitoring = system
    system.start_all()

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client, timers, system

    await system.shutdown()


@pytest.mark.asyncio
async def test_snapshots_fill_in_as_domains_publish(running):
    client, timers, _ = running

    await timers.advance(0)
    response = await client.get("/api/v1/snapshots")
    assert response.status_code == 200
    # Player reports game 730, so News fetches that game right away
    assert set(response.json()) == {"player", "news"}

    await timers.advance(15)
    response = await client.get("/api/v1/snapshots")
    assert set(response.json()) == {"player", "social", "library", "achievements", "news"}


@pytest.mark.asyncio
async def test_single_snapshot_is_404_until_published(running):
    client, timers, _ = running

    response = await client.get("/api/v1/snapshots/library")
    assert response.status_code == 404

    await timers.advance(5)
    response = await client.get("/api/v1/snapshots/library")
    assert response.status_code == 200
    data = response.json()
    assert data["domain"] == "library"
    assert data["has_error"] is False
    assert data["payload"]["total_games_owned"] == 3
    assert data["session"]["last_played_game_id"] == 730


@pytest.mark.asyncio
async def test_unknown_domain_is_rejected(running):
    client, _, _ = running

    response = await client.get("/api/v1/snapshots/weather")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_player_snapshot_payload(running):
    client, timers, _ = running
    await timers.advance(0)

    data = (await client.get("/api/v1/snapshots/player")).json()

    assert data["payload"]["current_game_app_id"] == 730
    assert data["payload"]["player_name"] == "Gordon"
    assert data["error_message"] is None


@pytest.mark.asyncio
async def test_session_endpoint_returns_clone(running):
    client, timers, _ = running
    await timers.advance(0)

    data = (await client.get("/api/v1/session")).json()

    assert data["active_game_id"] == 730
    assert data["last_played_game_name"] == "Counter-Strike 2"


@pytest.mark.asyncio
async def test_watch_list_endpoint(running):
    client, timers, _ = running
    await timers.advance(6)

    data = (await client.get("/api/v1/news/watch-list")).json()

    assert data["current_game_app_id"] == 730
    assert [g["app_id"] for g in data["games"]] == [730, 570]


@pytest.mark.asyncio
async def test_endpoints_return_503_without_system():
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/snapshots")

    assert response.status_code == 503
