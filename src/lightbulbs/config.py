"""Configuration settings for Lightbulbs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

from lightbulbs.errors import InvalidConfigError, MissingConfigError

logger = logging.getLogger(__name__)


class DatabaseConfig(BaseModel):
    """Connection parameters for the relational database."""

    host: str = "localhost"
    port: int = 5432
    database: str = "lightbulbs"
    user: str = "postgres"
    password: str = "postgres"

    # SQLAlchemy async driver used to compose the URL
    driver: str = "postgresql+asyncpg"

    # Full URL; overrides the composed one (e.g. sqlite+aiosqlite:///bulbs.db)
    url: str | None = None
    echo: bool = False

    def sqlalchemy_url(self) -> URL:
        """Build the SQLAlchemy URL for this config."""
        if self.url:
            return make_url(self.url)
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


class EnvironmentConfig(BaseModel):
    """The environment config loaded from a JSON file."""

    db: DatabaseConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Nested values use a double underscore, e.g. ``LIGHTBULBS_DB__HOST``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIGHTBULBS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db: DatabaseConfig = DatabaseConfig()

    # Optional JSON environment file; takes precedence over ``db`` when set
    env_json: Path | None = None

    log_level: str = "INFO"

    def database_config(self, loader: ConfigLoader | None = None) -> DatabaseConfig:
        """Resolve the database config, reading ``env_json`` when configured."""
        if self.env_json is None:
            return self.db
        loader = loader or ConfigLoader()
        return loader.load(name="lightbulbs::env", source=self.env_json).db


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once."""
    return Settings()


@dataclass
class _ConfigRecord:
    source: Path
    config: EnvironmentConfig


class ConfigLoader:
    """Loads validated environment configs from JSON files.

    Loaded configs are cached per logical name. A cached config is returned as
    long as it was read from the same source and ``force_reload`` is off.

    Usage:
        loader = ConfigLoader()
        config = loader.load(name="api::env", source="env.json")
    """

    def __init__(self) -> None:
        self._records: dict[str, _ConfigRecord] = {}

    def load(
        self,
        *,
        name: str,
        source: str | Path,
        force_reload: bool = False,
    ) -> EnvironmentConfig:
        """Load the config registered as ``name`` from ``source``.

        Raises:
            MissingConfigError: The source file does not exist.
            InvalidConfigError: The file content is not a valid environment config.
        """
        source = Path(source).resolve()

        record = self._records.get(name)
        if record is not None and record.source == source and not force_reload:
            return record.config

        if not source.is_file():
            raise MissingConfigError(f'Config file for "{name}" is not found at {source}')

        try:
            config = EnvironmentConfig.model_validate_json(source.read_text(encoding="utf-8"))
        except ValidationError as exc:
            raise InvalidConfigError(
                f'Loaded config for "{name}" is invalid. Errors: {exc.errors()}'
            ) from exc

        logger.debug("Loaded config %s from %s", name, source)
        self._records[name] = _ConfigRecord(source=source, config=config)
        return config

    def clear(self) -> None:
        """Forget all cached configs."""
        self._records.clear()
