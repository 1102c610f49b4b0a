"""Achievements collector — badge totals plus progress for one target game."""

import logging
from dataclasses import dataclass
from typing import Any

from steampanel.application.interfaces import Endpoint, UpstreamClient
from steampanel.domain.entities import AchievementsData
from steampanel.domain.exceptions import UpstreamError

from .library_collector import LibraryCollector
from .parsing import as_int, as_list, as_str, dig, from_unix

logger = logging.getLogger(__name__)

# Games without a stats schema answer GetPlayerAchievements with one of these
_NO_STATS_STATUSES = frozenset({400, 403})


@dataclass(frozen=True)
class _Target:
    app_id: int
    name: str | None
    is_current: bool


class AchievementsCollector:
    """Collects badges, then achievements for the live or last-played game.

    Target priority: ``current_game_id`` > ``last_played_game_id`` > the
    Library collector's most recently played game. With no target at all
    only the badge fields are filled. Game schemas (display names, icons)
    are cached per game for the collector's lifetime; failed lookups are
    not cached and are retried next cycle.
    """

    def __init__(
        self,
        client: UpstreamClient,
        steam_id: str,
        *,
        library: LibraryCollector | None = None,
        language: str = "english",
    ):
        self._client = client
        self._steam_id = steam_id
        self._library = library
        self._language = language
        self._schema_cache: dict[int, dict[str, dict[str, Any]]] = {}

    async def collect(self, current_game_id: int = 0, last_played_game_id: int = 0) -> AchievementsData:
        badges = await self._badges()
        target = await self._resolve_target(current_game_id, last_played_game_id)
        if target is None:
            logger.debug("No target game — reporting badges only")
            return AchievementsData(**badges)

        return AchievementsData(**badges, **await self._game_progress(target))

    async def _badges(self) -> dict[str, Any]:
        data = await self._client.call(Endpoint.BADGES, {"steamid": self._steam_id})
        response = dig(data, "response") or {}
        badges = as_list(response.get("badges"))

        latest = max(badges, key=lambda b: as_int(b.get("completion_time")), default=None)
        return {
            "total_badges_earned": len(badges),
            "total_badge_xp": as_int(response.get("player_xp")),
            "player_level": as_int(response.get("player_level")),
            "latest_badge_name": f"Badge #{as_int(latest.get('badgeid'))}" if latest else None,
            "latest_badge_date": from_unix(latest.get("completion_time")) if latest else None,
        }

    async def _resolve_target(self, current_game_id: int, last_played_game_id: int) -> _Target | None:
        if current_game_id > 0:
            return _Target(current_game_id, None, is_current=True)
        if last_played_game_id > 0:
            return _Target(last_played_game_id, None, is_current=False)
        if self._library is None:
            return None

        recent = await self._library.most_recent_game()
        if recent is None:
            return None
        logger.debug("Falling back to most recent library game %s (%d)", recent.name, recent.app_id)
        return _Target(recent.app_id, recent.name, is_current=False)

    async def _game_progress(self, target: _Target) -> dict[str, Any]:
        progress: dict[str, Any] = {
            "game_app_id": target.app_id,
            "game_name": target.name,
            "is_current_game": target.is_current,
        }
        try:
            data = await self._client.call(
                Endpoint.PLAYER_ACHIEVEMENTS,
                {"steamid": self._steam_id, "appid": target.app_id, "l": self._language},
            )
        except UpstreamError as e:
            if e.status_code in _NO_STATS_STATUSES:
                logger.debug("Game %d has no achievement stats: %s", target.app_id, e.message)
                return progress
            raise

        stats = dig(data, "playerstats") or {}
        progress["game_name"] = as_str(stats.get("gameName")) or target.name
        achievements = as_list(stats.get("achievements"))
        unlocked = [a for a in achievements if as_int(a.get("achieved")) == 1]

        progress["achievement_count"] = len(achievements)
        progress["unlocked_count"] = len(unlocked)
        if achievements:
            progress["completion_percent"] = round(len(unlocked) / len(achievements) * 100, 1)

        latest = max(unlocked, key=lambda a: as_int(a.get("unlocktime")), default=None)
        if latest is not None:
            api_name = as_str(latest.get("apiname")) or ""
            schema_entry = (await self._schema(target.app_id)).get(api_name.lower(), {})
            progress["latest_achievement_name"] = (
                as_str(schema_entry.get("displayName")) or as_str(latest.get("name")) or api_name
            )
            progress["latest_achievement_icon"] = as_str(schema_entry.get("icon"))
            progress["latest_achievement_date"] = from_unix(latest.get("unlocktime"))

        return progress

    async def _schema(self, app_id: int) -> dict[str, dict[str, Any]]:
        """Achievement schema for ``app_id`` keyed by lower-cased API name."""
        if app_id in self._schema_cache:
            return self._schema_cache[app_id]

        try:
            data = await self._client.call(
                Endpoint.GAME_SCHEMA, {"appid": app_id, "l": self._language}
            )
        except UpstreamError as e:
            logger.warning("Schema lookup for game %d failed: %s", app_id, e)
            return {}

        entries = as_list(dig(data, "game", "availableGameStats", "achievements"))
        schema = {
            name.lower(): entry
            for entry in entries
            if (name := as_str(entry.get("name")))
        }
        self._schema_cache[app_id] = schema
        return schema
