"""Filtering and sorting helpers for catalog listings."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Tuple

from game_catalog.core.errors import ValidationError
from game_catalog.schemas.game import GameRecord
from game_catalog.services.game_validation import parse_date, parse_score, playtime_to_minutes

SORTABLE_COLUMNS: Tuple[str, ...] = (
    "id",
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


def filter_games(
    games: Iterable[GameRecord],
    *,
    search: str | None = None,
    status: str | None = None,
    platform: str | None = None,
) -> List[GameRecord]:
    """Keep games whose name contains ``search`` and whose status/platform match."""
    needle = (search or "").strip().casefold()
    results: List[GameRecord] = []
    for game in games:
        if needle and needle not in game.nome.casefold():
            continue
        if status and game.status != status:
            continue
        if platform and game.plataforma != platform:
            continue
        results.append(game)
    return results


def _date_key(value: Any) -> date:
    return parse_date(value) or date.min


def _score_key(value: Any) -> float:
    score = parse_score(value)
    return score if score is not None else float("-inf")


def _text_key(value: Any) -> str:
    return str(value or "").casefold()


_SORT_KEYS: Dict[str, Callable[[Any], Any]] = {
    "id": int,
    "dataLancamento": _date_key,
    "inicio": _date_key,
    "fim": _date_key,
    "tempo": playtime_to_minutes,
    "nota": _score_key,
}


def sort_games(
    games: Iterable[GameRecord], column: str, *, ascending: bool = True
) -> List[GameRecord]:
    """Return games ordered by ``column``; empty values sort first when ascending."""
    if column not in SORTABLE_COLUMNS:
        raise ValidationError(f"Cannot sort by {column!r}.")
    key = _SORT_KEYS.get(column, _text_key)
    return sorted(
        games,
        key=lambda game: key(game.model_dump(by_alias=True)[column]),
        reverse=not ascending,
    )


__all__ = ["SORTABLE_COLUMNS", "filter_games", "sort_games"]
