"""
Field validation and default filling for catalog records.

Both ``GameStore.add`` and ``GameStore.update`` go through these helpers so
the two entry points can never disagree on what a valid row looks like. The
field rules themselves are declared on ``GameInput``.
"""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError as PydanticValidationError

from game_catalog.core.errors import ValidationError
from game_catalog.schemas.game import (
    DEFAULT_STATUS,
    GAME_FIELDS,
    GameInput,
    is_valid_playtime,
    parse_iso_date,
)

_HOURS_PATTERN = re.compile(r"(\d+)h", re.IGNORECASE)
_MINUTES_PATTERN = re.compile(r"(\d+)m", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

_FIELD_LABELS = {
    "plataforma": "Platform",
    "nome": "Name",
    "dataLancamento": "Release date",
    "data_lancamento": "Release date",
    "genero": "Genre",
    "status": "Status",
    "tempo": "Playtime",
    "inicio": "Start date",
    "fim": "Finish date",
    "nota": "Score",
}
_REQUIRED_FIELDS = {"plataforma", "nome"}
_MISSING_TYPES = {"missing", "string_too_short"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_date(value: Any) -> date | None:
    """Parse an ISO date or datetime string, returning ``None`` when invalid."""
    if not isinstance(value, str):
        return None
    return parse_iso_date(value.strip())


def parse_score(value: Any) -> float | None:
    """Return a stored ``nota`` cell as a float, or ``None`` when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        score = float(value)
    elif isinstance(value, str):
        try:
            score = float(value.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(score):
        return None
    return score


def normalize_playtime(value: Any) -> str:
    """Drop whitespace and lower-case a playtime, so ``1H 30M`` becomes ``1h30m``."""
    if not isinstance(value, str) or not value.strip():
        return ""
    return _WHITESPACE.sub("", value).lower()


def playtime_to_minutes(value: Any) -> int:
    """Convert a playtime string such as ``1h 30m`` into minutes."""
    if not isinstance(value, str) or not value:
        return 0
    minutes = 0
    hours_match = _HOURS_PATTERN.search(value)
    minutes_match = _MINUTES_PATTERN.search(value)
    if hours_match:
        minutes += int(hours_match.group(1)) * 60
    if minutes_match:
        minutes += int(minutes_match.group(1))
    return minutes


def format_playtime(value: Any) -> str:
    """Render a playtime for display: ``1h 30min``, ``2h``, ``45min`` or ``-``."""
    total = playtime_to_minutes(value)
    hours, minutes = divmod(total, 60)
    if hours and minutes:
        return f"{hours}h {minutes}min"
    if hours:
        return f"{hours}h"
    if minutes:
        return f"{minutes}min"
    return "-"


def describe_errors(exc: PydanticValidationError) -> List[str]:
    """Turn pydantic error details into one readable message per problem."""
    messages: List[str] = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        label = _FIELD_LABELS.get(field, field or "Game")
        if field in _REQUIRED_FIELDS and error["type"] in _MISSING_TYPES:
            messages.append(f"{label} is required.")
            continue
        cause = (error.get("ctx") or {}).get("error")
        detail = str(cause) if cause is not None else error["msg"]
        messages.append(f"{label}: {detail}")
    return messages


def parse_game(record: Any) -> GameInput:
    """Validate ``record``, raising ``ValidationError`` listing every problem."""
    if isinstance(record, GameInput):
        record = record.as_payload()
    try:
        return GameInput.model_validate(record)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid game data.", describe_errors(exc)) from exc


def validate_game(record: Any) -> List[str]:
    """Return every validation problem found in ``record``.

    An empty list means the record can be written to the sheet.
    """
    try:
        parse_game(record)
    except ValidationError as exc:
        return exc.errors
    return []


def apply_defaults(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the nine column values with defaults for omitted fields."""
    filled: Dict[str, Any] = {}
    for field_name in GAME_FIELDS:
        value = record.get(field_name)
        filled[field_name] = "" if _is_blank(value) else value
    if not filled["status"]:
        filled["status"] = DEFAULT_STATUS
    filled["tempo"] = normalize_playtime(filled["tempo"])
    return filled


def build_row(record: Mapping[str, Any]) -> List[Any]:
    """Lay out a record in sheet column order (A..I)."""
    filled = apply_defaults(record)
    return [filled[field_name] for field_name in GAME_FIELDS]


__all__ = [
    "apply_defaults",
    "build_row",
    "describe_errors",
    "format_playtime",
    "is_valid_playtime",
    "normalize_playtime",
    "parse_date",
    "parse_game",
    "parse_score",
    "playtime_to_minutes",
    "validate_game",
]
