"""FastAPI application for Lightbulbs.

Use ``create_app(database)`` to serve an explicit database context. The
module-level ``app`` is only the ASGI entry point for servers such as
``uvicorn lightbulbs.app:app``; it builds its database from the settings when
its lifespan starts.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lightbulbs import __version__
from lightbulbs.config import get_settings
from lightbulbs.db import Database
from lightbulbs.errors import LightbulbsError, NotFoundError

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application.

    The database context is connected once in the lifespan, before any
    request is served, and disconnected at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan handler."""
        settings = get_settings()
        logging.basicConfig(level=settings.log_level)
        db = database or Database(settings.database_config())
        await db.connect()
        await db.init_schema()
        app.state.db = db
        try:
            yield
        finally:
            await db.disconnect()

    app = FastAPI(
        title="Lightbulbs",
        description="Personal knowledge base of bulbs, categories, tags and references",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(LightbulbsError)
    async def handle_error(request: Request, exc: LightbulbsError) -> JSONResponse:
        status_code = 404 if isinstance(exc, NotFoundError) else 500
        if status_code == 500:
            logger.error("Request %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"message": "Hello World! I am API server"}

    @app.get("/health")
    async def health(request: Request) -> dict[str, str]:
        """Health check endpoint."""
        db: Database | None = getattr(request.app.state, "db", None)
        connected = db is not None and db.is_connected()
        return {
            "status": "ok",
            "version": __version__,
            "database": "connected" if connected else "disconnected",
        }

    return app


app = create_app()
