"""Database connection context.

A single ``Database`` is constructed at process start, connected once, and
passed down to every operator. Nothing in this module is a global.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lightbulbs.config import DatabaseConfig
from lightbulbs.errors import DatabaseOutageError
from lightbulbs.models import Base
from lightbulbs.operators.base import OperatorFactory

if TYPE_CHECKING:
    from lightbulbs.operators.base import DatabaseOperator

OperatorT = TypeVar("OperatorT", bound="DatabaseOperator")

logger = logging.getLogger(__name__)


class Database:
    """Connection context holding the async engine and session factory.

    Usage:
        db = Database(DatabaseConfig(url="sqlite+aiosqlite:///bulbs.db"))
        async with db:
            await db.init_schema()
            category = Category(db)
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    async def connect(self) -> None:
        """Open the connection pool. Does nothing if already connected."""
        if self._engine is not None:
            return

        url = self._config.sqlalchemy_url()
        self._engine = create_async_engine(url, echo=self._config.echo)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Connected to %s", url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Disconnected from database")

    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseOutageError("Database is not connected!")
        return self._engine

    def session(self) -> AsyncSession:
        """Open a new session. Each operator I/O runs in its own session."""
        if self._session_factory is None:
            raise DatabaseOutageError("Database is not connected!")
        return self._session_factory()

    async def init_schema(self) -> None:
        """Create all tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        """Drop all tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    def operators(self, operator_cls: type[OperatorT]) -> OperatorFactory[OperatorT]:
        """Bind an operator class to this context."""
        return OperatorFactory(operator_cls, self)

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.disconnect()
