"""Shared test fixtures for SQLite host tests."""

from pathlib import Path

import pytest
import pytest_asyncio

from dbkit.database.implementations.sqlite import SQLiteConnection


@pytest.fixture
def temp_db_path(tmp_path: Path) -> str:
    """Create a temporary database path using pytest's tmp_path."""
    return str(tmp_path / "nested" / "test.db")


@pytest_asyncio.fixture
async def sqlite_connection(temp_db_path: str):
    """Connected SQLite host at version "1"."""
    connection = SQLiteConnection("ext:test", "1", location=temp_db_path)
    async with connection:
        yield connection
