"""
Pydantic models describing catalog records and search results.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

GameStatus = Literal["Não iniciado", "Jogando", "Pausado", "Concluído", "Dropado"]

GAME_STATUSES: tuple[str, ...] = (
    "Não iniciado",
    "Jogando",
    "Pausado",
    "Concluído",
    "Dropado",
)
DEFAULT_STATUS = "Não iniciado"

# Column order A..I of the backing sheet.
GAME_FIELDS: tuple[str, ...] = (
    "plataforma",
    "nome",
    "dataLancamento",
    "genero",
    "status",
    "tempo",
    "inicio",
    "fim",
    "nota",
)

# Row 1 holds the header, so the first record lives on row 2.
FIRST_DATA_ROW = 2


class GameRecord(BaseModel):
    """A catalog entry as read back from the sheet.

    ``id`` is not stored anywhere: it is the record's row number, so deleting
    a row renumbers every record below it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=FIRST_DATA_ROW, description="Row number in the sheet.")
    plataforma: str = ""
    nome: str = ""
    data_lancamento: str = Field("", alias="dataLancamento")
    genero: str = ""
    status: str = ""
    tempo: str = ""
    inicio: str = ""
    fim: str = ""
    nota: Union[str, float] = ""

    @classmethod
    def from_row(cls, row_offset: int, row: List[Any]) -> "GameRecord":
        """Build a record from a data-range row, padding short rows."""
        values: Dict[str, Any] = {}
        for index, field_name in enumerate(GAME_FIELDS):
            cell = row[index] if index < len(row) else ""
            if cell is None:
                cell = ""
            elif field_name != "nota":
                cell = str(cell)
            values[field_name] = cell
        return cls(id=row_offset + FIRST_DATA_ROW, **values)


PLAYTIME_PATTERN = re.compile(r"^(\d+h)?\s*(\d+m)?$", re.IGNORECASE)


def parse_iso_date(text: str) -> date | None:
    """Parse an ISO 8601 date or datetime, returning ``None`` when invalid."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def is_valid_playtime(value: str) -> bool:
    """Check ``tempo`` against the ``10h``, ``90m`` or ``1h 30m`` grammar."""
    text = value.strip()
    if not text:
        return True
    lowered = text.lower()
    return bool(PLAYTIME_PATTERN.match(text)) and ("h" in lowered or "m" in lowered)


class GameInput(BaseModel):
    """Payload accepted when adding or editing a record.

    Text is stripped before the length checks, so a blank ``nome`` counts as
    missing. Optional columns accept ``None`` or ``""`` for "no value".
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    plataforma: str = Field(..., min_length=1, max_length=100)
    nome: str = Field(..., min_length=1, max_length=200)
    data_lancamento: str = Field(
        "", alias="dataLancamento", description="ISO 8601 release date."
    )
    genero: str = Field("", max_length=200)
    status: GameStatus = DEFAULT_STATUS
    tempo: str = Field("", description='Playtime such as "10h", "90m" or "1h 30m".')
    inicio: str = Field("", description="ISO 8601 start date.")
    fim: str = Field("", description="ISO 8601 finish date.")
    nota: Optional[float] = Field(None, ge=0, le=10, allow_inf_nan=False)

    @field_validator("data_lancamento", "genero", "tempo", "inicio", "fim", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_STATUS
        return value

    @field_validator("nota", mode="before")
    @classmethod
    def _score_input(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number between 0 and 10.")
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("data_lancamento", "inicio", "fim")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        if value and parse_iso_date(value) is None:
            raise ValueError("must be an ISO 8601 date.")
        return value

    @field_validator("tempo")
    @classmethod
    def _playtime(cls, value: str) -> str:
        if not is_valid_playtime(value):
            raise ValueError('must look like "10h", "90m" or "1h 30m".')
        return value

    def as_payload(self) -> Dict[str, Any]:
        """Return the payload keyed by column names."""
        return self.model_dump(by_alias=True)


class GameSummary(BaseModel):
    """Normalized IGDB search hit."""

    id: int
    name: str
    first_release_date: Optional[int] = Field(
        None, description="Unix timestamp (seconds) of the first release."
    )
    release_date: str = Field("", description="First release as YYYY-MM-DD.")
    platforms: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)

    @classmethod
    def from_igdb(cls, payload: Mapping[str, Any]) -> "GameSummary":
        timestamp = payload.get("first_release_date")
        release_date = ""
        if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
            release_date = (
                datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()
            )
        else:
            timestamp = None
        return cls(
            id=int(payload.get("id") or 0),
            name=str(payload.get("name") or ""),
            first_release_date=int(timestamp) if timestamp is not None else None,
            release_date=release_date,
            platforms=_names(payload.get("platforms")),
            genres=_names(payload.get("genres")),
        )

    def to_game_input(self) -> GameInput:
        """Prefill a catalog entry from this search hit.

        The result is a draft: hits without platforms leave ``plataforma``
        blank, so it is only validated once submitted to the store.
        """
        return GameInput.model_construct(
            plataforma=self.platforms[0] if self.platforms else "",
            nome=self.name,
            data_lancamento=self.release_date,
            genero=", ".join(self.genres),
            status=DEFAULT_STATUS,
        )


def _names(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []
    names: list[str] = []
    for item in items:
        if isinstance(item, Mapping) and item.get("name"):
            names.append(str(item["name"]))
    return names


class GameMutationResponse(BaseModel):
    """Acknowledgement returned by write endpoints."""

    message: str


__all__ = [
    "DEFAULT_STATUS",
    "FIRST_DATA_ROW",
    "GAME_FIELDS",
    "GAME_STATUSES",
    "GameInput",
    "GameMutationResponse",
    "GameRecord",
    "GameStatus",
    "GameSummary",
    "PLAYTIME_PATTERN",
    "is_valid_playtime",
    "parse_iso_date",
]
