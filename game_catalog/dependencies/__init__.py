"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_cache,
    get_game_search_service,
    get_game_store,
    get_igdb_client,
    get_sheets_client,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_cache",
    "get_game_search_service",
    "get_game_store",
    "get_igdb_client",
    "get_sheets_client",
]
