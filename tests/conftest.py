"""Global test configuration and fixtures."""

import pytest
import pytest_asyncio

from dbkit.config import Settings
from dbkit.database.implementations.sqlite import SQLiteConnectionOpener
from dbkit.database.manager import Database
from dbkit.database.synchronizer import SchemaSynchronizer
from dbkit.database.transaction import TransactionRunner
from dbkit.log import setup_test_logging
from dbkit.types import Environment
from tests.utils.fakes import FakeConnection, FakeOpener


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup logging for all tests."""
    setup_test_logging()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing database files at a temporary directory."""
    return Settings(environment=Environment.DEVELOPMENT, database_dir=tmp_path / "db")


@pytest.fixture
def fake_connection() -> FakeConnection:
    """Connected in-memory host double at version "1"."""
    connection = FakeConnection()
    connection.connected = True
    return connection


@pytest.fixture
def runner(fake_connection: FakeConnection) -> TransactionRunner:
    return TransactionRunner(fake_connection)


@pytest.fixture
def synchronizer(runner: TransactionRunner) -> SchemaSynchronizer:
    return SchemaSynchronizer(runner)


@pytest.fixture
def fake_opener(fake_connection: FakeConnection) -> FakeOpener:
    return FakeOpener(fake_connection)


@pytest_asyncio.fixture
async def fake_db(fake_opener: FakeOpener):
    """Database facade over the host double."""
    db = Database("ext:test", opener=fake_opener)
    await db.open()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def sqlite_db(test_settings: Settings):
    """Database facade over a real SQLite file in a temporary directory."""
    db = Database("ext:test", version="1", opener=SQLiteConnectionOpener(test_settings))
    await db.open()
    yield db
    await db.close()
