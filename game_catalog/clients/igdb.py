"""
IGDB search client.

Exchanges Twitch client credentials for an app access token, keeps it until
it expires and uses it to query the IGDB games endpoint.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, List

import httpx

from game_catalog.core.config import IGDBSettings
from game_catalog.core.errors import (
    AuthError,
    RemoteError,
    RemoteTimeoutError,
    ValidationError,
)
from game_catalog.schemas.game import GameSummary

logger = logging.getLogger(__name__)

SEARCH_FIELDS = "name, first_release_date, platforms.name, genres.name"
SEARCH_LIMIT = 10


def build_search_query(name: str) -> str:
    """Render the IGDB query (apicalypse) for a name search."""
    escaped = name.replace('"', '\\"')
    return f'search "{escaped}"; fields {SEARCH_FIELDS}; limit {SEARCH_LIMIT};'


class IGDBClient:
    """Search IGDB using a cached client-credentials token.

    A single token is held per instance. Expiry is evaluated lazily on each
    call; nothing refreshes it in the background. A 401 from the search
    endpoint is surfaced as-is and does not trigger a refresh.
    """

    def __init__(
        self,
        settings: IGDBSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._clock = clock
        self._token: str | None = None
        self._token_expiry: float | None = None
        self._token_lock = asyncio.Lock()

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.timeout_seconds, transport=self._transport
        )

    def _token_is_valid(self) -> bool:
        return (
            self._token is not None
            and self._token_expiry is not None
            and self._clock() < self._token_expiry
        )

    async def get_token(self) -> str:
        """Return the cached token, exchanging credentials when it is absent or expired."""
        if self._token_is_valid():
            return self._token  # type: ignore[return-value]

        async with self._token_lock:
            # Another caller may have refreshed while we waited.
            if self._token_is_valid():
                return self._token  # type: ignore[return-value]
            token, expires_in = await self._exchange_credentials()
            self._token = token
            self._token_expiry = self._clock() + expires_in
            return token

    def clear_token(self) -> None:
        """Forget the current token so the next call re-authenticates."""
        self._token = None
        self._token_expiry = None

    async def _exchange_credentials(self) -> tuple[str, int]:
        params = {
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "grant_type": "client_credentials",
        }
        try:
            async with self._http_client() as client:
                response = await client.post(self._settings.token_url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Failed to obtain IGDB token: %s", exc)
            raise AuthError(f"Token request failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "IGDB token endpoint answered %s: %s",
                response.status_code,
                response.text,
            )
            raise AuthError(
                f"Token endpoint returned HTTP {response.status_code}.",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            access_token = payload["access_token"]
            expires_in = int(payload["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Malformed IGDB token payload: %s", response.text)
            raise AuthError("Incomplete token payload returned from Twitch.") from exc

        if not access_token:
            raise AuthError("Incomplete token payload returned from Twitch.")
        logger.info("Obtained IGDB token valid for %ss", expires_in)
        return str(access_token), expires_in

    async def search_games(self, query: Any) -> List[GameSummary]:
        """Search IGDB by name and return at most ten summaries."""
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Game name is required for search.")
        name = query.strip()

        try:
            token = await self.get_token()
        except AuthError:
            logger.error("IGDB search for %r aborted: no access token", name)
            raise
        headers = {
            "Client-ID": self._settings.client_id,
            "Authorization": f"Bearer {token}",
        }
        try:
            async with self._http_client() as client:
                response = await client.post(
                    self._settings.api_url,
                    content=build_search_query(name),
                    headers=headers,
                )
        except httpx.TimeoutException as exc:
            logger.error("IGDB search timed out for query %r", name)
            raise RemoteTimeoutError(f"IGDB search timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("IGDB search failed for query %r: %s", name, exc)
            raise RemoteError(f"IGDB search failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "IGDB search for %r answered %s: %s",
                name,
                response.status_code,
                response.text,
            )
            raise RemoteError(
                f"IGDB search returned HTTP {response.status_code}.",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("IGDB search for %r returned invalid JSON", name)
            raise RemoteError("IGDB search returned invalid JSON.") from exc
        if not isinstance(payload, list):
            raise RemoteError("IGDB search returned an unexpected payload.")

        results = [GameSummary.from_igdb(item) for item in payload if isinstance(item, dict)]
        logger.info("IGDB search for %r returned %d results", name, len(results))
        return results


__all__ = ["IGDBClient", "build_search_query"]
