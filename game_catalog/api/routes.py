"""
FastAPI routes for the game catalog.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Annotated, Any, Dict, List, Literal, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse

from game_catalog.clients.google_sheets import load_service_account_credentials
from game_catalog.core.config import AppSettings
from game_catalog.core.errors import (
    AuthError,
    CatalogError,
    NotFoundError,
    RemoteTimeoutError,
    ValidationError,
)
from game_catalog.dependencies import (
    get_app_settings,
    get_cache,
    get_game_search_service,
    get_game_store,
)
from game_catalog.schemas import (
    GameMutationResponse,
    GameRecord,
    GameStatus,
    GameSummary,
)
from game_catalog.services import (
    GameSearchService,
    GameStore,
    TTLCache,
    filter_games,
    sort_games,
)

router = APIRouter()
logger = logging.getLogger(__name__)

CSV_BOM = "\ufeff"
GAME_BODY_DESCRIPTION = (
    "Game columns keyed by name; checked against GameInput so every problem "
    "is reported together in a 400 response."
)


def http_error_for(exc: CatalogError, settings: AppSettings) -> HTTPException:
    """Translate a catalog failure into the matching HTTP status."""
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail={"message": exc.message, "errors": exc.errors},
        )
    if isinstance(exc, AuthError):
        return HTTPException(
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable: upstream authentication failed.",
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=exc.message)
    if isinstance(exc, RemoteTimeoutError):
        return HTTPException(
            status_code=HTTPStatus.GATEWAY_TIMEOUT, detail="Upstream request timed out."
        )
    detail = exc.message if settings.is_development else "Unexpected server error."
    return HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=detail)


def _raise_http_error(exc: CatalogError, settings: AppSettings) -> NoReturn:
    raise http_error_for(exc, settings) from exc


@router.get("/health")
async def healthcheck(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    cache: Annotated[TTLCache, Depends(get_cache)],
) -> JSONResponse:
    """Report whether the Sheets credentials load and IGDB is configured."""
    sheets_ready = True
    try:
        load_service_account_credentials(settings.sheets.credentials_json)
    except AuthError as exc:
        logger.warning("Sheets credentials unavailable: %s", exc)
        sheets_ready = False

    stats = cache.get_stats()
    body = {
        "status": "healthy" if sheets_ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "googleSheets": "ready" if sheets_ready else "not_ready",
            "igdb": "configured" if settings.igdb.client_id else "not_configured",
        },
        "cache": {"keyCount": stats["key_count"]},
    }
    status_code = HTTPStatus.OK if sheets_ready else HTTPStatus.SERVICE_UNAVAILABLE
    return JSONResponse(body, status_code=status_code)


@router.get("/games", response_model=List[GameRecord])
async def list_games(
    store: Annotated[GameStore, Depends(get_game_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    search: Optional[str] = Query(None, description="Case-insensitive name filter."),
    status: Optional[GameStatus] = Query(None),
    platform: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description="Column to sort by."),
    order: Literal["asc", "desc"] = Query("asc"),
) -> List[GameRecord]:
    """List games in sheet order, optionally filtered and sorted."""
    try:
        games = await store.get_all()
        games = filter_games(games, search=search, status=status, platform=platform)
        if sort:
            games = sort_games(games, sort, ascending=order == "asc")
    except CatalogError as exc:
        _raise_http_error(exc, settings)
    return games


@router.post(
    "/games",
    status_code=HTTPStatus.CREATED,
    response_model=GameMutationResponse,
)
async def add_game(
    payload: Annotated[Dict[str, Any], Body(description=GAME_BODY_DESCRIPTION)],
    store: Annotated[GameStore, Depends(get_game_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> GameMutationResponse:
    try:
        await store.add(payload)
    except CatalogError as exc:
        _raise_http_error(exc, settings)
    return GameMutationResponse(message="Game added.")


@router.get("/games/export")
async def export_games(
    store: Annotated[GameStore, Depends(get_game_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> Response:
    """Download the sheet as a UTF-8 CSV file with a BOM."""
    try:
        csv_text = await store.export_as_csv()
    except CatalogError as exc:
        _raise_http_error(exc, settings)
    filename = f"meus-jogos-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return Response(
        content=CSV_BOM + csv_text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.put("/games/{game_id}", response_model=GameMutationResponse)
async def update_game(
    game_id: int,
    payload: Annotated[Dict[str, Any], Body(description=GAME_BODY_DESCRIPTION)],
    store: Annotated[GameStore, Depends(get_game_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> GameMutationResponse:
    try:
        await store.update(game_id, payload)
    except CatalogError as exc:
        _raise_http_error(exc, settings)
    return GameMutationResponse(message="Game updated.")


@router.delete("/games/{game_id}", response_model=GameMutationResponse)
async def delete_game(
    game_id: int,
    store: Annotated[GameStore, Depends(get_game_store)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> GameMutationResponse:
    try:
        await store.delete(game_id)
    except CatalogError as exc:
        _raise_http_error(exc, settings)
    return GameMutationResponse(message="Game deleted.")


@router.get("/search", response_model=List[GameSummary])
async def search_games(
    search_service: Annotated[GameSearchService, Depends(get_game_search_service)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    name: str = Query("", description="Game name to look up on IGDB."),
) -> List[GameSummary]:
    try:
        return await search_service.search(name)
    except CatalogError as exc:
        _raise_http_error(exc, settings)


__all__ = ["http_error_for", "router"]
