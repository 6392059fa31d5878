"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Each component is built once per process and handed to its consumers
explicitly, so tests can swap any of them through ``dependency_overrides``.
"""

from functools import lru_cache

from game_catalog.clients import GoogleSheetsClient, IGDBClient
from game_catalog.core.config import get_settings
from game_catalog.services import GameSearchService, GameStore, TTLCache


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_cache() -> TTLCache:
    """Provide the process-wide TTL cache."""
    settings = _settings()
    return TTLCache(default_ttl=settings.cache.default_ttl_seconds)


@lru_cache()
def get_sheets_client() -> GoogleSheetsClient:
    """Provide Google Sheets client instance."""
    return GoogleSheetsClient.from_settings(_settings().sheets)


@lru_cache()
def get_igdb_client() -> IGDBClient:
    """Provide the IGDB client holding the shared app token."""
    return IGDBClient(_settings().igdb)


def get_game_store() -> GameStore:
    """Build the sheet-backed record store."""
    return GameStore(get_sheets_client(), _settings().sheets)


def get_game_search_service() -> GameSearchService:
    """Build a cached search service over the IGDB client."""
    settings = _settings()
    return GameSearchService(
        get_igdb_client(),
        get_cache(),
        ttl_seconds=settings.cache.search_ttl_seconds,
    )


__all__ = [
    "get_cache",
    "get_game_search_service",
    "get_game_store",
    "get_igdb_client",
    "get_sheets_client",
]
