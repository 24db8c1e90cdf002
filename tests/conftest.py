"""Shared pytest fixtures for Lightbulbs tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest

from lightbulbs.config import DatabaseConfig
from lightbulbs.db import Database
from lightbulbs.entities import Bulb, Category, ReferenceSource, Tag


@pytest.fixture
def db_config(tmp_path: Path) -> DatabaseConfig:
    """Config for a throwaway SQLite database, one file per test."""
    return DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'lightbulbs.db'}")


@pytest.fixture
async def db(db_config: DatabaseConfig) -> AsyncGenerator[Database, None]:
    """A connected database context with all tables created."""
    database = Database(db_config)
    await database.connect()
    await database.init_schema()

    yield database

    await database.drop_schema()
    await database.disconnect()


# Type aliases for factory fixtures
MakeCategory = Callable[..., Awaitable[Category]]
MakeTag = Callable[..., Awaitable[Tag]]
MakeSource = Callable[..., Awaitable[ReferenceSource]]
MakeBulb = Callable[..., Awaitable[Bulb]]


@pytest.fixture
def make_category(db: Database) -> MakeCategory:
    """Factory fixture for saved categories."""

    async def _make(name: str = "Hobbies", description: str | None = None) -> Category:
        category = Category(db, {"name": name, "description": description})
        await category.save()
        return category

    return _make


@pytest.fixture
def make_tag(db: Database) -> MakeTag:
    """Factory fixture for saved tags."""

    async def _make(label: str = "philosophy", description: str | None = None) -> Tag:
        tag = Tag(db, {"label": label, "description": description})
        await tag.save()
        return tag

    return _make


@pytest.fixture
def make_source(db: Database) -> MakeSource:
    """Factory fixture for saved reference sources."""

    async def _make(name: str = "The Republic", type: str = "Print", **extra: Any) -> ReferenceSource:
        source = ReferenceSource(db, {"name": name, "type": type, **extra})
        await source.save()
        return source

    return _make


@pytest.fixture
def make_bulb(db: Database, make_category: MakeCategory) -> MakeBulb:
    """Factory fixture for saved bulbs. Creates a category when none is given."""

    async def _make(
        title: str = "Allegory of the cave",
        content: str = "Prisoners mistake shadows for reality.",
        category: Category | None = None,
        **extra: Any,
    ) -> Bulb:
        if category is None:
            category = await make_category(name=f"Category for {title}")
        bulb = Bulb(db, {"title": title, "content": content, "category": category, **extra})
        await bulb.save()
        return bulb

    return _make
