"""Tests for the FastAPI application."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from lightbulbs import __version__
from lightbulbs.app import app as asgi_app
from lightbulbs.app import create_app
from lightbulbs.config import DatabaseConfig
from lightbulbs.db import Database
from lightbulbs.errors import NotFoundError, UniquenessConflictError


@pytest.fixture
def app(db_config: DatabaseConfig) -> FastAPI:
    app = create_app(Database(db_config))

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundError("The bulb 'x' is not found!")

    @app.get("/conflict")
    async def conflict() -> None:
        raise UniquenessConflictError("The category conflicts with an existing record!")

    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    # ASGITransport does not run the lifespan, so enter it explicitly
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client


async def test_root(client: AsyncClient) -> None:
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Hello World! I am API server"}


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__, "database": "connected"}


async def test_health_without_lifespan(app: FastAPI) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    assert response.json()["database"] == "disconnected"


async def test_not_found_error(client: AsyncClient) -> None:
    response = await client.get("/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "The bulb 'x' is not found!"}


async def test_other_errors(client: AsyncClient) -> None:
    response = await client.get("/conflict")
    assert response.status_code == 500
    assert response.json() == {"error": "The category conflicts with an existing record!"}


async def test_lifespan_disconnects(db_config: DatabaseConfig) -> None:
    database = Database(db_config)
    app = create_app(database)
    async with app.router.lifespan_context(app):
        assert database.is_connected()
    assert not database.is_connected()


def test_entry_point_holds_no_database_before_startup() -> None:
    assert getattr(asgi_app.state, "db", None) is None
