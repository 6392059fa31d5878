"""Error taxonomy shared by the record store, the search client and the API."""

from __future__ import annotations

from typing import Iterable


class CatalogError(Exception):
    """Base class for failures raised by the catalog core."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(CatalogError):
    """Raised before any remote call when input is malformed or out of range."""

    def __init__(self, message: str, errors: Iterable[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors) if errors is not None else [message]


class AuthError(CatalogError):
    """Raised when the client-credentials exchange fails."""


class RemoteError(CatalogError):
    """Raised when the spreadsheet or search API answers with a failure."""


class NotFoundError(CatalogError):
    """Raised when an id falls outside the current data range."""


class RemoteTimeoutError(RemoteError, TimeoutError):
    """Raised when a remote call exceeds its time bound."""


__all__ = [
    "AuthError",
    "CatalogError",
    "NotFoundError",
    "RemoteError",
    "RemoteTimeoutError",
    "ValidationError",
]
