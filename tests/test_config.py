"""Tests for configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dbkit.config import IN_MEMORY, Settings, load_settings
from dbkit.types import Environment


def test_environment_values() -> None:
    """Test environment enum values."""
    assert Environment.DEVELOPMENT == "development"
    assert Environment.PRODUCTION == "production"
    assert Environment.TESTING == "testing"


def test_default_settings() -> None:
    """Test default settings values."""
    with patch.dict(os.environ, {}, clear=True):
        settings = load_settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.database_dir == Path("db")
        assert settings.default_version == "1"
        assert settings.estimated_size is None
        assert settings.in_memory is False
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.loader_timeout == 30.0


def test_production_mode_properties() -> None:
    """Test production mode properties."""
    with patch.dict(os.environ, {"DBKIT_ENV": "production"}, clear=True):
        settings = load_settings()

        assert settings.is_development is False
        assert settings.is_production is True
        assert settings.is_testing is False


def test_testing_mode_forces_in_memory() -> None:
    """Test testing mode keeps every database in memory."""
    with patch.dict(os.environ, {"DBKIT_ENV": "testing"}, clear=True):
        settings = load_settings()

        assert settings.is_testing is True
        assert settings.in_memory is True
        assert settings.database_location("ext:entries") == IN_MEMORY


def test_custom_settings() -> None:
    """Test custom settings via environment variables."""
    env_vars = {
        "DBKIT_DATABASE_DIR": "/var/lib/dbkit",
        "DBKIT_DEFAULT_VERSION": "2.1",
        "DBKIT_ESTIMATED_SIZE": "5242880",
        "DBKIT_DEBUG": "yes",
        "DBKIT_LOG_LEVEL": "debug",
        "DBKIT_LOADER_TIMEOUT": "2.5",
    }

    with patch.dict(os.environ, env_vars, clear=True):
        settings = load_settings()

        assert settings.database_dir == Path("/var/lib/dbkit")
        assert settings.default_version == "2.1"
        assert settings.estimated_size == 5242880
        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.loader_timeout == 2.5


def test_invalid_environment() -> None:
    with patch.dict(os.environ, {"DBKIT_ENV": "staging"}, clear=True):
        with pytest.raises(ValueError):
            load_settings()


def test_database_location(tmp_path: Path) -> None:
    settings = Settings(database_dir=tmp_path)

    assert settings.database_location("ext:entries") == str(tmp_path / "entries.db")
    assert settings.database_location("local") == str(tmp_path / "local.db")
    assert settings.database_location(IN_MEMORY) == IN_MEMORY
