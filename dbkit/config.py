"""Configuration management for dbkit."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .types import Environment

EXTERNAL_PREFIX = "ext:"
IN_MEMORY = ":memory:"


class Settings(BaseModel):
    """Library settings."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Environment (development/production/testing)",
    )

    # Database Settings
    database_dir: Path = Field(
        default=Path("db"), description="Directory holding database files"
    )
    default_version: str = Field(
        default="1", description="Version requested when none is given"
    )
    estimated_size: int | None = Field(
        default=None, description="Estimated database size in bytes"
    )
    in_memory: bool = Field(
        default=False, description="Open every database in memory"
    )

    # Logging
    debug: bool = Field(default=False, description="Trace every executed statement")
    log_level: str = Field(default="INFO", description="Logging level")

    # Document Loader Settings
    loader_timeout: float = Field(
        default=30.0, description="Timeout in seconds for remote document loads"
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if self.environment == Environment.TESTING:
            self.in_memory = True

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    def database_location(self, name: str) -> str:
        """Map a database name to the location handed to sqlite3.

        The ``ext:`` marker is stripped; ``:memory:`` and the in-memory setting
        bypass the filesystem entirely.

        Args:
            name: Database name as given by the caller

        Returns:
            Filesystem path or ``:memory:``
        """
        if name == IN_MEMORY or self.in_memory:
            return IN_MEMORY

        if name.startswith(EXTERNAL_PREFIX):
            name = name[len(EXTERNAL_PREFIX) :]

        return str(self.database_dir / f"{name}.db")


def _parse_bool(value: str) -> bool:
    return value.lower() in ["true", "1", "yes", "on"]


def load_settings() -> Settings:
    """Load settings from environment variables."""

    # Load .env file if it exists
    load_dotenv()

    estimated_size_str = os.getenv("DBKIT_ESTIMATED_SIZE")
    estimated_size = int(estimated_size_str) if estimated_size_str else None

    return Settings(
        environment=Environment(os.getenv("DBKIT_ENV", "development")),
        database_dir=Path(os.getenv("DBKIT_DATABASE_DIR", "db")),
        default_version=os.getenv("DBKIT_DEFAULT_VERSION", "1"),
        estimated_size=estimated_size,
        in_memory=_parse_bool(os.getenv("DBKIT_IN_MEMORY", "false")),
        debug=_parse_bool(os.getenv("DBKIT_DEBUG", "false")),
        log_level=os.getenv("DBKIT_LOG_LEVEL", "INFO").upper(),
        loader_timeout=float(os.getenv("DBKIT_LOADER_TIMEOUT", "30.0")),
    )


# Global settings instance
settings = load_settings()
