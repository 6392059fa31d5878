"""Service layer exports."""

from .cache import TTLCache
from .game_query import SORTABLE_COLUMNS, filter_games, sort_games
from .game_search import GameSearchService
from .game_store import GameStore, rows_to_csv
from .game_validation import (
    apply_defaults,
    build_row,
    format_playtime,
    normalize_playtime,
    parse_game,
    playtime_to_minutes,
    validate_game,
)

__all__ = [
    "GameSearchService",
    "GameStore",
    "SORTABLE_COLUMNS",
    "TTLCache",
    "apply_defaults",
    "build_row",
    "filter_games",
    "format_playtime",
    "normalize_playtime",
    "parse_game",
    "playtime_to_minutes",
    "rows_to_csv",
    "sort_games",
    "validate_game",
]
