"""Google Sheets client wrapper exposing the row operations the catalog needs."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, List, TypeVar

from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from game_catalog.core.config import SHEETS_SCOPES, SheetsSettings
from game_catalog.core.errors import AuthError, RemoteError, RemoteTimeoutError

T = TypeVar("T")


def load_service_account_credentials(credentials_json: str) -> Credentials:
    """Build service-account credentials from the JSON key in the environment."""
    try:
        info = json.loads(credentials_json)
    except ValueError as exc:
        raise AuthError("GOOGLE_CREDENTIALS_JSON is not valid JSON.") from exc
    try:
        return service_account.Credentials.from_service_account_info(
            info, scopes=list(SHEETS_SCOPES)
        )
    except (ValueError, KeyError) as exc:
        raise AuthError(f"Invalid service account credentials: {exc}") from exc


class GoogleSheetsClient:
    """Read, append, overwrite and delete rows of a single spreadsheet."""

    def __init__(
        self,
        *,
        credentials: Credentials,
        spreadsheet_id: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._credentials = credentials
        self._spreadsheet_id = spreadsheet_id
        self._timeout = timeout_seconds

    @classmethod
    def from_settings(cls, settings: SheetsSettings) -> "GoogleSheetsClient":
        return cls(
            credentials=load_service_account_credentials(settings.credentials_json),
            spreadsheet_id=settings.spreadsheet_id,
            timeout_seconds=settings.timeout_seconds,
        )

    def _service(self) -> Any:
        return build("sheets", "v4", credentials=self._credentials, cache_discovery=False)

    async def _run(self, description: str, func: Callable[[], T]) -> T:
        """Execute a blocking API call off the event loop within the timeout."""
        try:
            return await asyncio.wait_for(asyncio.to_thread(func), timeout=self._timeout)
        except TimeoutError as exc:
            raise RemoteTimeoutError(
                f"Google Sheets {description} timed out after {self._timeout}s."
            ) from exc
        except HttpError as exc:
            status = exc.resp.status if exc.resp is not None else None
            raise RemoteError(
                f"Google Sheets {description} failed: {exc.reason}",
                status_code=int(status) if status else None,
            ) from exc
        except GoogleAuthError as exc:
            raise AuthError(f"Google authentication failed: {exc}") from exc
        except OSError as exc:
            raise RemoteError(f"Google Sheets {description} failed: {exc}") from exc

    async def get_values(self, range_: str) -> List[List[Any]]:
        """Return the rows of ``range_``; trailing empty cells are omitted by the API."""

        def _execute_get() -> List[List[Any]]:
            response = (
                self._service()
                .spreadsheets()
                .values()
                .get(
                    spreadsheetId=self._spreadsheet_id,
                    range=range_,
                    majorDimension="ROWS",
                )
                .execute()
            )
            return response.get("values", [])

        return await self._run("read", _execute_get)

    async def append_row(self, range_: str, row: List[Any]) -> str:
        """Append ``row`` after the last row of ``range_`` and return the updated range."""

        def _execute_append() -> str:
            result = (
                self._service()
                .spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=range_,
                    valueInputOption="USER_ENTERED",
                    insertDataOption="INSERT_ROWS",
                    body={"values": [row]},
                )
                .execute()
            )
            updates = result.get("updates", {})
            return updates.get("updatedRange") or updates.get("tableRange") or ""

        return await self._run("append", _execute_append)

    async def update_row(self, range_: str, row: List[Any]) -> None:
        """Overwrite the cells of ``range_`` with ``row``."""

        def _execute_update() -> None:
            (
                self._service()
                .spreadsheets()
                .values()
                .update(
                    spreadsheetId=self._spreadsheet_id,
                    range=range_,
                    valueInputOption="USER_ENTERED",
                    body={"values": [row]},
                )
                .execute()
            )

        await self._run("update", _execute_update)

    async def get_sheet_id(self, title: str) -> int | None:
        """Resolve a sheet (tab) title to its numeric id."""

        def _execute_metadata() -> int | None:
            spreadsheet = (
                self._service()
                .spreadsheets()
                .get(
                    spreadsheetId=self._spreadsheet_id,
                    fields="sheets.properties(sheetId,title)",
                )
                .execute()
            )
            for sheet in spreadsheet.get("sheets", []):
                properties = sheet.get("properties", {})
                if properties.get("title") == title:
                    return properties.get("sheetId")
            return None

        return await self._run("metadata lookup", _execute_metadata)

    async def delete_rows(self, *, sheet_id: int, start_index: int, end_index: int) -> None:
        """Delete rows ``[start_index, end_index)`` (0-based); rows below shift up."""

        def _execute_delete() -> None:
            (
                self._service()
                .spreadsheets()
                .batchUpdate(
                    spreadsheetId=self._spreadsheet_id,
                    body={
                        "requests": [
                            {
                                "deleteDimension": {
                                    "range": {
                                        "sheetId": sheet_id,
                                        "dimension": "ROWS",
                                        "startIndex": start_index,
                                        "endIndex": end_index,
                                    }
                                }
                            }
                        ]
                    },
                )
                .execute()
            )

        await self._run("row deletion", _execute_delete)


__all__ = ["GoogleSheetsClient", "load_service_account_credentials"]
