"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the record store and the
search client share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SHEETS_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/spreadsheets",)


class _Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class SheetsSettings(_Settings):
    """Configuration for the spreadsheet used as the record store."""

    spreadsheet_id: str = Field(..., min_length=1, validation_alias="SPREADSHEET_ID")
    credentials_json: str = Field(
        ...,
        min_length=1,
        validation_alias="GOOGLE_CREDENTIALS_JSON",
        description="Service account key serialized as JSON.",
    )
    sheet_name: str = Field("Jogos", validation_alias="SHEET_NAME")
    timeout_seconds: float = Field(10.0, validation_alias="SHEETS_TIMEOUT_SECONDS")

    @property
    def data_range(self) -> str:
        """Range holding the records, header row excluded."""
        return f"{self.sheet_name}!A2:I"

    @property
    def full_range(self) -> str:
        """Range holding the header row and every record."""
        return f"{self.sheet_name}!A1:I"

    def row_range(self, row_number: int) -> str:
        return f"{self.sheet_name}!A{row_number}:I{row_number}"


class IGDBSettings(_Settings):
    """Credentials and endpoints for the IGDB search API."""

    client_id: str = Field(..., min_length=1, validation_alias="TWITCH_CLIENT_ID")
    client_secret: str = Field(..., min_length=1, validation_alias="TWITCH_CLIENT_SECRET")
    token_url: str = Field(
        "https://id.twitch.tv/oauth2/token", validation_alias="TWITCH_AUTH_URL"
    )
    api_url: str = Field(
        "https://api.igdb.com/v4/games", validation_alias="IGDB_API_URL"
    )
    timeout_seconds: float = Field(10.0, validation_alias="IGDB_TIMEOUT_SECONDS")


class CacheSettings(_Settings):
    """In-process cache tuning."""

    default_ttl_seconds: int = Field(300, validation_alias="CACHE_DEFAULT_TTL")
    search_ttl_seconds: int = Field(300, validation_alias="CACHE_SEARCH_TTL")

    @field_validator("default_ttl_seconds", "search_ttl_seconds")
    @classmethod
    def _positive_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Cache TTL must be a positive number of seconds.")
        return value


class AppSettings(_Settings):
    """Root settings object for the FastAPI application."""

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    frontend_origin: str = Field(
        "",
        validation_alias="FRONTEND_ORIGIN",
        description="Comma-separated list of origins allowed by CORS.",
    )
    sheets: SheetsSettings = Field(default_factory=SheetsSettings)
    igdb: IGDBSettings = Field(default_factory=IGDBSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.frontend_origin.split(",")
            if origin.strip()
        ]

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


EnvFile = Union[str, Path]


def load_settings(env_file: EnvFile = ".env") -> AppSettings:
    """Build settings with every group reading the same env file.

    Process environment variables take precedence over values in the file.
    """
    return AppSettings(
        _env_file=env_file,
        sheets=SheetsSettings(_env_file=env_file),
        igdb=IGDBSettings(_env_file=env_file),
        cache=CacheSettings(_env_file=env_file),
    )  # type: ignore[call-arg]


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return load_settings()


__all__ = [
    "AppSettings",
    "CacheSettings",
    "IGDBSettings",
    "SHEETS_SCOPES",
    "SheetsSettings",
    "get_settings",
    "load_settings",
]
