"""
FastAPI application entrypoint for the game catalog.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from game_catalog import __version__
from game_catalog.api.routes import http_error_for
from game_catalog.api.routes import router as api_router
from game_catalog.core.config import get_settings
from game_catalog.core.errors import CatalogError
from game_catalog.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Game Catalog",
        version=__version__,
        description="Personal game list stored in Google Sheets with IGDB search.",
    )
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Failures raised while building dependencies never reach a route's handler.
    @app.exception_handler(CatalogError)
    async def _catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        http_exc = http_error_for(exc, settings)
        return JSONResponse({"detail": http_exc.detail}, status_code=http_exc.status_code)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
