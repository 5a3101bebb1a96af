"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS so browser tools can post RIB snippets.
2.  **Exception Handling**: Global handlers so that errors return structured JSON.
3.  **Routing**: Mounting the expand router and the health probe.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`), so tests can build
a fresh app per test and settings are read at construction time.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ristream import __version__
from ristream.api.routers import expand
from ristream.core.settings import get_logger, load_settings

logger = get_logger("ristream.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """ASGI lifespan: log startup/shutdown with the active configuration."""
    cfg = load_settings()
    logger.info(
        "starting up (env=%s, max_replay_depth=%d, capture_records=%s)",
        cfg.environment,
        cfg.max_replay_depth,
        cfg.capture_archive_records,
    )
    yield
    logger.info("shutting down")


def create_app() -> FastAPI:
    """
    Construct and configure the ristream FastAPI application.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="ristream API",
        description="Inline archive and object instance expansion for RIB streams",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions return structured JSON."""
        logger.exception("unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    app.include_router(expand.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
