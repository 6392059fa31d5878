"""Cached IGDB search used by the API layer."""

from __future__ import annotations

import logging
from typing import Any, List, Protocol

from game_catalog.core.errors import ValidationError
from game_catalog.schemas.game import GameSummary
from game_catalog.services.cache import TTLCache

logger = logging.getLogger(__name__)


class SearchBackend(Protocol):
    async def search_games(self, query: Any) -> List[GameSummary]: ...


def search_cache_key(query: str) -> str:
    return f"search:{query.strip().lower()}"


class GameSearchService:
    """Validate search queries and memoize IGDB results in the shared cache."""

    def __init__(self, igdb_client: SearchBackend, cache: TTLCache, *, ttl_seconds: float) -> None:
        self._igdb = igdb_client
        self._cache = cache
        self._ttl = ttl_seconds

    async def search(self, query: Any) -> List[GameSummary]:
        if not isinstance(query, str) or not query.strip():
            logger.warning("Rejected empty search query %r", query)
            raise ValidationError("Game name is required for search.")
        name = query.strip()
        return await self._cache.get_or_fetch(
            search_cache_key(name),
            lambda: self._igdb.search_games(name),
            self._ttl,
        )


__all__ = ["GameSearchService", "search_cache_key"]
