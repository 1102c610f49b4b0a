"""Player collector — profile, presence and the currently running game."""

import logging
import time
from collections.abc import Callable

from steampanel.application.interfaces import Endpoint, UpstreamClient
from steampanel.domain.entities import PERSONA_STATES, PlayerData
from steampanel.domain.exceptions import UpstreamError

from .parsing import as_int, as_list, as_str, dig, from_unix

logger = logging.getLogger(__name__)

BANNER_URL_TEMPLATE = "https://cdn.cloudflare.steamstatic.com/steam/apps/{app_id}/header.jpg"


def banner_url(app_id: int) -> str | None:
    """Steam store header image for ``app_id``."""
    if app_id <= 0:
        return None
    return BANNER_URL_TEMPLATE.format(app_id=app_id)


class PlayerCollector:
    """Builds :class:`PlayerData` from the player summary.

    The Steam level changes rarely, so it is fetched at most once every
    ``level_refresh_seconds`` and the cached value is reused in between.
    A failed level lookup keeps the previous value instead of failing the cycle.
    """

    def __init__(
        self,
        client: UpstreamClient,
        steam_id: str,
        *,
        level_refresh_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._steam_id = steam_id
        self._level_refresh_seconds = level_refresh_seconds
        self._clock = clock
        self._steam_level = 0
        self._level_fetched_at: float | None = None

    async def collect(self) -> PlayerData:
        data = await self._client.call(
            Endpoint.PLAYER_SUMMARIES, {"steamids": self._steam_id}
        )
        players = as_list(dig(data, "response", "players"))
        if not players:
            raise UpstreamError(
                Endpoint.PLAYER_SUMMARIES.value, 404, f"No profile for {self._steam_id}"
            )
        profile = players[0]

        level = await self._steam_level_cached()
        game_id = as_int(profile.get("gameid"))

        return PlayerData(
            steam_id=as_str(profile.get("steamid")) or self._steam_id,
            player_name=as_str(profile.get("personaname")),
            online_state=PERSONA_STATES.get(as_int(profile.get("personastate")), "Unknown"),
            profile_url=as_str(profile.get("profileurl")),
            avatar_url=as_str(profile.get("avatarfull")) or as_str(profile.get("avatar")),
            steam_level=level,
            last_log_off=from_unix(profile.get("lastlogoff")),
            current_game_app_id=game_id,
            current_game_name=as_str(profile.get("gameextrainfo")) if game_id else None,
            current_game_extra_info=as_str(profile.get("gameextrainfo")) if game_id else None,
            current_game_banner_url=banner_url(game_id),
        )

    async def _steam_level_cached(self) -> int:
        now = self._clock()
        if (
            self._level_fetched_at is not None
            and now - self._level_fetched_at < self._level_refresh_seconds
        ):
            return self._steam_level

        try:
            data = await self._client.call(Endpoint.STEAM_LEVEL, {"steamid": self._steam_id})
        except UpstreamError as e:
            logger.warning("Steam level lookup failed, keeping %d: %s", self._steam_level, e)
            return self._steam_level

        self._steam_level = as_int(dig(data, "response", "player_level"), self._steam_level)
        self._level_fetched_at = now
        return self._steam_level
