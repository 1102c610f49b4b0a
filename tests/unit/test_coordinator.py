"""Unit tests for CrossDomainCoordinator wiring."""

import pytest

from steampanel.application.services.collectors import (
    AchievementsCollector,
    LibraryCollector,
    NewsCollector,
    PlayerCollector,
)
from steampanel.application.services.monitoring import (
    AchievementsScheduler,
    CrossDomainCoordinator,
    LibraryScheduler,
    NewsScheduler,
    PlayerScheduler,
)
from steampanel.application.services.rate_limit_gate import RateLimitGate
from steampanel.domain.entities import (
    Domain,
    DomainSnapshot,
    LibraryData,
    PlayerData,
    RecentGame,
    SessionCache,
)
from tests.support.fakes import (
    STEAM_ID,
    FakeTimerFactory,
    FakeUpstreamClient,
    make_options,
    steam_responses,
)


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def client():
    return FakeUpstreamClient(steam_responses(game_id=730))


@pytest.fixture
def schedulers(client, timers):
    gate = RateLimitGate()
    common = {"gate": gate, "timer_factory": timers}
    return {
        "player": PlayerScheduler(
            PlayerCollector(client, STEAM_ID), options=make_options(1.0), **common
        ),
        "library": LibraryScheduler(
            LibraryCollector(client, STEAM_ID), options=make_options(45.0, 2.0, 5.0), **common
        ),
        "achievements": AchievementsScheduler(
            AchievementsCollector(client, STEAM_ID),
            options=make_options(60.0, 5.0, 5.0),
            **common,
        ),
        "news": NewsScheduler(NewsCollector(client), options=make_options(900.0, 30.0, 10.0), **common),
    }


@pytest.fixture
def coordinator(schedulers):
    coordinator = CrossDomainCoordinator(**schedulers)
    coordinator.wire()
    return coordinator


def _player_snapshot(game_id: int, last_played: int = 0) -> DomainSnapshot:
    return DomainSnapshot.success(
        Domain.PLAYER,
        PlayerData(steam_id=STEAM_ID, current_game_app_id=game_id),
        session=SessionCache(last_played_game_id=last_played),
    )


def test_game_change_reaches_achievements_and_news(schedulers, coordinator):
    schedulers["player"].updated.publish(_player_snapshot(730, last_played=730))

    assert schedulers["achievements"].current_game_id == 730
    assert schedulers["news"].current_game_id == 730


def test_news_falls_back_to_last_played_game(schedulers, coordinator):
    schedulers["player"].updated.publish(_player_snapshot(730, last_played=730))
    schedulers["player"].updated.publish(_player_snapshot(0, last_played=730))

    assert schedulers["achievements"].current_game_id == 0
    assert schedulers["achievements"].last_played_game_id == 730
    assert schedulers["news"].current_game_id == 730


def test_error_snapshots_are_ignored(schedulers, coordinator):
    schedulers["player"].updated.publish(
        DomainSnapshot.failure(Domain.PLAYER, PlayerData(current_game_app_id=440), "down")
    )

    assert schedulers["achievements"].current_game_id == 0


def test_library_update_feeds_news_watch_list(schedulers, coordinator):
    games = (RecentGame(app_id=570, name="Dota 2"),)
    schedulers["library"].updated.publish(
        DomainSnapshot.success(Domain.LIBRARY, LibraryData(recent_games=games))
    )

    assert [g.app_id for g in schedulers["news"].watch_list] == [570]


def test_wire_and_unwire_are_symmetric(schedulers, coordinator):
    coordinator.wire()
    assert schedulers["player"].updated.subscriber_count == 1
    assert schedulers["library"].updated.subscriber_count == 1

    coordinator.unwire()
    coordinator.unwire()
    assert schedulers["player"].updated.subscriber_count == 0
    assert schedulers["library"].updated.subscriber_count == 0

    schedulers["player"].updated.publish(_player_snapshot(730))
    assert schedulers["achievements"].current_game_id == 0


@pytest.mark.asyncio
async def test_live_game_launch_refreshes_achievements_early(schedulers, coordinator, timers, client):
    schedulers["player"].start()
    schedulers["achievements"].start()

    await timers.advance(1.0)  # Player tick at 0 reports game 730

    achievements = schedulers["achievements"]
    assert achievements.current_game_id == 730
    assert achievements.cycle_count == 1
    assert achievements.latest.payload.game_app_id == 730
