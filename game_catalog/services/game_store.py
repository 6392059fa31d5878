"""
Record store mapping catalog entries onto the rows of a Google Sheet.

Identity is positional: a record's ``id`` is its row number (data offset + 2,
row 1 being the header). Deleting a row shifts every row below it up by one,
so the ids of all later records drop by one as part of the same operation.
There is no locking; concurrent writers can invalidate each other's ids.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Protocol, Union

from game_catalog.core.config import SheetsSettings
from game_catalog.core.errors import CatalogError, NotFoundError, RemoteError, ValidationError
from game_catalog.schemas.game import FIRST_DATA_ROW, GameInput, GameRecord
from game_catalog.services.game_validation import build_row, parse_game

logger = logging.getLogger(__name__)

_CSV_SPECIAL_CHARACTERS = (",", "\n", '"')

GamePayload = Union[GameInput, Mapping[str, Any]]


class SheetTable(Protocol):
    """Row operations the store needs from the spreadsheet backend."""

    async def get_values(self, range_: str) -> List[List[Any]]: ...

    async def append_row(self, range_: str, row: List[Any]) -> str: ...

    async def update_row(self, range_: str, row: List[Any]) -> None: ...

    async def get_sheet_id(self, title: str) -> int | None: ...

    async def delete_rows(self, *, sheet_id: int, start_index: int, end_index: int) -> None: ...


def escape_csv_cell(cell: Any) -> str:
    """Quote a cell when it holds a comma, newline or quote, doubling quotes."""
    text = "" if cell is None else str(cell)
    if any(character in text for character in _CSV_SPECIAL_CHARACTERS):
        return '"' + text.replace('"', '""') + '"'
    return text


def rows_to_csv(rows: Iterable[Iterable[Any]]) -> str:
    """Serialize rows as CSV lines joined with ``\\n`` (no trailing newline)."""
    return "\n".join(",".join(escape_csv_cell(cell) for cell in row) for row in rows)


def _check_row_id(game_id: Any) -> int:
    if isinstance(game_id, bool) or not isinstance(game_id, int) or game_id < FIRST_DATA_ROW:
        raise ValidationError(f"Invalid game id: {game_id!r}.")
    return game_id


class GameStore:
    """Stateless CRUD facade over the catalog sheet."""

    def __init__(self, table: SheetTable, settings: SheetsSettings) -> None:
        self._table = table
        self._settings = settings

    async def get_all(self) -> List[GameRecord]:
        """Return every record in sheet order, ids derived from row position."""
        try:
            rows = await self._table.get_values(self._settings.data_range)
        except CatalogError as exc:
            logger.error("Failed to load games: %s", exc)
            raise
        games = [GameRecord.from_row(offset, row) for offset, row in enumerate(rows)]
        logger.info("Loaded %d games", len(games))
        return games

    async def add(self, record: GamePayload) -> None:
        """Append a record after the last row.

        The new record's id is only known after the append lands; call
        ``get_all`` to discover it.
        """
        payload = self._validate(record, action="add")
        row = build_row(payload)
        try:
            updated_range = await self._table.append_row(self._settings.data_range, row)
        except CatalogError as exc:
            logger.error("Failed to add game %r: %s", payload.get("nome"), exc)
            raise
        logger.info("Added game %r at %s", payload.get("nome"), updated_range)

    async def update(self, game_id: int, record: GamePayload) -> None:
        """Overwrite the row whose number is ``game_id``.

        No existence check is made; an id past the last record writes a new
        row at that position.
        """
        row_number = _check_row_id(game_id)
        payload = self._validate(record, action="update", game_id=row_number)
        row = build_row(payload)
        try:
            await self._table.update_row(self._settings.row_range(row_number), row)
        except CatalogError as exc:
            logger.error("Failed to update game %s: %s", row_number, exc)
            raise
        logger.info("Updated game %s (%r)", row_number, payload.get("nome"))

    async def delete(self, game_id: int) -> None:
        """Remove the row ``game_id``; every later record's id drops by one."""
        row_number = _check_row_id(game_id)
        try:
            rows = await self._table.get_values(self._settings.data_range)
            row_offset = row_number - FIRST_DATA_ROW
            if row_offset >= len(rows):
                raise NotFoundError(f"Game {row_number} not found.")

            sheet_id = await self._table.get_sheet_id(self._settings.sheet_name)
            if sheet_id is None:
                raise RemoteError(
                    f"Sheet {self._settings.sheet_name!r} not found in spreadsheet."
                )

            # deleteDimension indexes are 0-based: row N lives at index N - 1.
            await self._table.delete_rows(
                sheet_id=sheet_id, start_index=row_number - 1, end_index=row_number
            )
        except CatalogError as exc:
            logger.error("Failed to delete game %s: %s", row_number, exc)
            raise
        logger.info("Deleted game %s", row_number)

    async def export_as_csv(self) -> str:
        """Return the whole sheet, header included, as CSV text."""
        try:
            rows = await self._table.get_values(self._settings.full_range)
        except CatalogError as exc:
            logger.error("Failed to export games: %s", exc)
            raise
        logger.info("Exported %d rows", len(rows))
        return rows_to_csv(rows)
    @staticmethod
    def _validate(
        record: GamePayload, *, action: str, game_id: int | None = None
    ) -> Mapping[str, Any]:
        try:
            return parse_game(record).as_payload()
        except ValidationError as exc:
            name = record.get("nome") if isinstance(record, Mapping) else None
            logger.warning(
                "Rejected %s for game %s: %s",
                action,
                game_id if game_id is not None else repr(name),
                "; ".join(exc.errors),
            )
            raise


__all__ = ["GameStore", "SheetTable", "escape_csv_cell", "rows_to_csv"]
