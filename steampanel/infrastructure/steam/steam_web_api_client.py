"""Steam Web API client — implements the UpstreamClient interface.

Issues GET requests against https://api.steampowered.com using httpx.
Credentials and ``format=json`` are added to every call. There are no
retries here: the next scheduled cycle is the retry.
"""

import logging
from typing import Any

import httpx

from steampanel.application.interfaces import Endpoint, UpstreamClient
from steampanel.domain.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class SteamWebApiClient(UpstreamClient):
    """Infrastructure adapter — connects to the Steam Web API.

    Keeps one pooled ``httpx.AsyncClient`` for its lifetime. An injected
    client (e.g. one built on ``httpx.MockTransport`` in tests) is used as-is
    and left open on :meth:`aclose`.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.steampowered.com",
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key.strip()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or lazily create the owned one."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def call(
        self,
        endpoint: Endpoint,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self._api_key:
            raise UpstreamError(endpoint.value, 0, "Steam API key is not configured")

        query = {**(params or {}), "key": self._api_key, "format": "json"}
        url = f"{self._base_url}/{endpoint.value}/"

        try:
            response = await self._get_client().get(url, params=query)
        except httpx.HTTPError as e:
            raise UpstreamError(endpoint.value, 0, f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            self._raise_upstream_error(endpoint, response)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(endpoint.value, response.status_code, "Malformed JSON payload") from e

        if not isinstance(data, dict):
            raise UpstreamError(
                endpoint.value, response.status_code, f"Expected a JSON object, got {type(data).__name__}"
            )

        logger.debug("%s -> %d", endpoint.value, response.status_code)
        return data

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _raise_upstream_error(self, endpoint: Endpoint, response: httpx.Response) -> None:
        """Raise UpstreamError from a non-200 httpx Response."""
        try:
            data = response.json()
            error = data.get("error", {}) if isinstance(data, dict) else {}
            message = error.get("message") if isinstance(error, dict) else str(error)
        except ValueError:
            message = None

        raise UpstreamError(
            endpoint=endpoint.value,
            status_code=response.status_code,
            message=message or response.reason_phrase or response.text[:200],
        )
