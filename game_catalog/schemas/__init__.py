"""Public schema exports."""

from .game import (
    DEFAULT_STATUS,
    FIRST_DATA_ROW,
    GAME_FIELDS,
    GAME_STATUSES,
    GameInput,
    GameMutationResponse,
    GameRecord,
    GameStatus,
    GameSummary,
)

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
]
