"""Library collector — owned games, playtime totals and recently played games."""

import logging
from datetime import datetime, timezone

from steampanel.application.interfaces import Endpoint, UpstreamClient
from steampanel.domain.entities import LibraryData, RecentGame

from .parsing import as_int, as_list, as_str, dig, from_unix

logger = logging.getLogger(__name__)

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class LibraryCollector:
    """Aggregates the owned-games list and the two-week recent list.

    ``last_played`` for recent games comes from the owned-games list, which
    carries ``rtime_last_played``; recent games are ordered newest first.
    """

    def __init__(self, client: UpstreamClient, steam_id: str):
        self._client = client
        self._steam_id = steam_id

    async def collect(self) -> LibraryData:
        owned = await self._owned_games()
        recent = await self._recent_games(owned)

        total_minutes = sum(as_int(g.get("playtime_forever")) for g in owned)
        most_played = max(owned, key=lambda g: as_int(g.get("playtime_forever")), default=None)
        recent_minutes = sum(g.playtime_2weeks_minutes for g in recent)
        top_recent = max(recent, key=lambda g: g.playtime_2weeks_minutes, default=None)

        return LibraryData(
            total_games_owned=len(owned),
            total_library_playtime_hours=round(total_minutes / 60, 1),
            most_played_game_name=as_str(most_played.get("name")) if most_played else None,
            most_played_game_hours=(
                round(as_int(most_played.get("playtime_forever")) / 60, 1) if most_played else 0.0
            ),
            recent_playtime_hours=round(recent_minutes / 60, 1),
            recent_games_count=len(recent),
            most_played_recent_game=top_recent.name if top_recent else None,
            recent_games=tuple(recent),
        )

    async def recent_games(self, count: int) -> list[RecentGame]:
        """The ``count`` most recently played games, newest first."""
        owned = await self._owned_games()
        return (await self._recent_games(owned))[:count]

    async def most_recent_game(self) -> RecentGame | None:
        games = await self.recent_games(1)
        return games[0] if games else None

    async def _owned_games(self) -> list[dict]:
        data = await self._client.call(
            Endpoint.OWNED_GAMES,
            {
                "steamid": self._steam_id,
                "include_appinfo": 1,
                "include_played_free_games": 1,
            },
        )
        return as_list(dig(data, "response", "games"))

    async def _recent_games(self, owned: list[dict]) -> list[RecentGame]:
        data = await self._client.call(
            Endpoint.RECENTLY_PLAYED_GAMES, {"steamid": self._steam_id}
        )
        last_played = {
            as_int(g.get("appid")): from_unix(g.get("rtime_last_played")) for g in owned
        }

        games: list[RecentGame] = []
        for entry in as_list(dig(data, "response", "games")):
            app_id = as_int(entry.get("appid"))
            if app_id <= 0:
                continue
            games.append(
                RecentGame(
                    app_id=app_id,
                    name=as_str(entry.get("name")) or f"App {app_id}",
                    playtime_2weeks_minutes=as_int(entry.get("playtime_2weeks")),
                    playtime_forever_minutes=as_int(entry.get("playtime_forever")),
                    last_played=last_played.get(app_id),
                )
            )

        # Newest first; unknown dates fall back to two-week playtime order
        games.sort(
            key=lambda g: (g.last_played or _EPOCH, g.playtime_2weeks_minutes),
            reverse=True,
        )
        return games
