"""Expose constructed client wrappers."""

from .google_sheets import GoogleSheetsClient, load_service_account_credentials
from .igdb import IGDBClient, build_search_query

__all__ = [
    "GoogleSheetsClient",
    "IGDBClient",
    "build_search_query",
    "load_service_account_credentials",
]
