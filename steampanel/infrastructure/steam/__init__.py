"""Steam Web API infrastructure package."""

from .steam_web_api_client import SteamWebApiClient

__all__ = ["SteamWebApiClient"]
