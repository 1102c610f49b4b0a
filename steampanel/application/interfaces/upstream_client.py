"""Abstract upstream client interface — port for the external web API."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class Endpoint(str, Enum):
    """Upstream endpoint descriptors (interface/method/version paths)."""

    PLAYER_SUMMARIES = "ISteamUser/GetPlayerSummaries/v0002"
    STEAM_LEVEL = "IPlayerService/GetSteamLevel/v1"
    FRIEND_LIST = "ISteamUser/GetFriendList/v0001"
    OWNED_GAMES = "IPlayerService/GetOwnedGames/v0001"
    RECENTLY_PLAYED_GAMES = "IPlayerService/GetRecentlyPlayedGames/v0001"
    PLAYER_ACHIEVEMENTS = "ISteamUserStats/GetPlayerAchievements/v0001"
    GAME_SCHEMA = "ISteamUserStats/GetSchemaForGame/v2"
    BADGES = "IPlayerService/GetBadges/v1"
    NEWS_FOR_APP = "ISteamNews/GetNewsForApp/v0002"


class UpstreamClient(ABC):
    """Port — defines what collectors need from the upstream API."""

    @abstractmethod
    async def call(
        self,
        endpoint: Endpoint,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue one request and return the parsed JSON object.

        Args:
            endpoint: Which upstream method to call.
            params: Query parameters; credentials are added by the adapter.

        Returns:
            The decoded JSON object. Callers must treat every field as optional.

        Raises:
            UpstreamError: On network failure, non-2xx status or malformed payload.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the client."""
        return None
