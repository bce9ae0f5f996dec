"""Tests for the SQLite host connection."""

import asyncio
from pathlib import Path

import pytest

from dbkit.config import Settings
from dbkit.database.implementations.sqlite import (
    SQLiteConnection,
    SQLiteConnectionOpener,
)
from dbkit.database.implementations.sqlite.sqlite_connection import VERSION_MISMATCH
from dbkit.database.interfaces import HostTransaction
from dbkit.exceptions import ConnectionUnavailableError, HostExecutionError


async def _tables(connection: SQLiteConnection) -> list[str]:
    async with await connection.begin_transaction() as transaction:
        cursor = await transaction.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )
        return [row[0] for row in cursor.fetchall()]


@pytest.mark.asyncio
async def test_connect_creates_file_and_version(
    sqlite_connection: SQLiteConnection, temp_db_path: str
) -> None:
    assert sqlite_connection.is_connected
    assert Path(temp_db_path).exists()
    assert sqlite_connection.version == "1"


@pytest.mark.asyncio
async def test_existing_database_keeps_stored_version(temp_db_path: str) -> None:
    async with SQLiteConnection("ext:test", "3", location=temp_db_path) as first:
        await first.change_version("3", "4")

    async with SQLiteConnection("ext:test", "1", location=temp_db_path) as second:
        assert second.version == "4"


@pytest.mark.asyncio
async def test_disconnect(sqlite_connection: SQLiteConnection) -> None:
    await sqlite_connection.disconnect()

    assert not sqlite_connection.is_connected
    with pytest.raises(ConnectionUnavailableError):
        await sqlite_connection.begin_transaction()


@pytest.mark.asyncio
async def test_transaction_commits(sqlite_connection: SQLiteConnection) -> None:
    async with await sqlite_connection.begin_transaction() as transaction:
        await transaction.execute("CREATE TABLE t (a TEXT)")
        await transaction.execute("INSERT INTO t (a) VALUES (?)", ["x"])

    async with await sqlite_connection.begin_transaction() as transaction:
        cursor = await transaction.execute("SELECT a FROM t")
        assert cursor.fetchall() == [("x",)]


@pytest.mark.asyncio
async def test_transaction_is_atomic(sqlite_connection: SQLiteConnection) -> None:
    """DDL and DML are both undone when a later statement fails."""
    with pytest.raises(HostExecutionError) as exc_info:
        async with await sqlite_connection.begin_transaction() as transaction:
            await transaction.execute("CREATE TABLE t (a TEXT)")
            await transaction.execute("INSERT INTO t (a) VALUES ('x')")
            await transaction.execute("INSERT INTO missing (a) VALUES ('x')")

    assert exc_info.value.code == "SQLITE_ERROR"
    assert "t" not in await _tables(sqlite_connection)


@pytest.mark.asyncio
async def test_transactions_are_serialized(
    sqlite_connection: SQLiteConnection,
) -> None:
    async with await sqlite_connection.begin_transaction() as transaction:
        await transaction.execute("CREATE TABLE t (a INTEGER)")

    async def insert(value: int) -> None:
        async with await sqlite_connection.begin_transaction() as transaction:
            await transaction.execute("INSERT INTO t (a) VALUES (?)", [value])
            await asyncio.sleep(0)
            await transaction.execute("INSERT INTO t (a) VALUES (?)", [value])

    await asyncio.gather(*(insert(i) for i in range(5)))

    async with await sqlite_connection.begin_transaction() as transaction:
        cursor = await transaction.execute("SELECT COUNT(*) FROM t")
        assert cursor.fetchall() == [(10,)]


@pytest.mark.asyncio
async def test_change_version_runs_upgrade(
    sqlite_connection: SQLiteConnection,
) -> None:
    async def upgrade(transaction: HostTransaction) -> None:
        await transaction.execute("CREATE TABLE t (a TEXT)")

    await sqlite_connection.change_version("1", "2", upgrade)

    assert sqlite_connection.version == "2"
    assert "t" in await _tables(sqlite_connection)


@pytest.mark.asyncio
async def test_change_version_mismatch(sqlite_connection: SQLiteConnection) -> None:
    with pytest.raises(HostExecutionError) as exc_info:
        await sqlite_connection.change_version("9", "2")

    assert exc_info.value.code == VERSION_MISMATCH
    assert sqlite_connection.version == "1"


@pytest.mark.asyncio
async def test_change_version_failed_upgrade_rolls_back(
    sqlite_connection: SQLiteConnection, temp_db_path: str
) -> None:
    async def upgrade(transaction: HostTransaction) -> None:
        await transaction.execute("CREATE TABLE t (a TEXT)")
        await transaction.execute("NOT SQL")

    with pytest.raises(HostExecutionError):
        await sqlite_connection.change_version("1", "2", upgrade)

    assert sqlite_connection.version == "1"
    assert "t" not in await _tables(sqlite_connection)

    await sqlite_connection.disconnect()
    async with SQLiteConnection("ext:test", "1", location=temp_db_path) as reopened:
        assert reopened.version == "1"


@pytest.mark.asyncio
async def test_opener_uses_settings(tmp_path: Path) -> None:
    opener = SQLiteConnectionOpener(Settings(database_dir=tmp_path))

    connection = await opener.open("ext:entries", "1")
    try:
        assert connection.is_connected
        assert (tmp_path / "entries.db").exists()
    finally:
        await connection.disconnect()


@pytest.mark.asyncio
async def test_opener_in_memory(tmp_path: Path) -> None:
    opener = SQLiteConnectionOpener(Settings(database_dir=tmp_path, in_memory=True))

    connection = await opener.open("ext:entries", "1")
    try:
        assert connection.version == "1"
        assert not (tmp_path / "entries.db").exists()
    finally:
        await connection.disconnect()


@pytest.mark.asyncio
async def test_unbindable_integer_is_host_error(
    sqlite_connection: SQLiteConnection,
) -> None:
    with pytest.raises(HostExecutionError) as exc_info:
        async with await sqlite_connection.begin_transaction() as transaction:
            await transaction.execute("CREATE TABLE big (a INTEGER)")
            await transaction.execute("INSERT INTO big (a) VALUES (?)", [2**64])

    assert exc_info.value.code == "OverflowError"
    assert "big" not in await _tables(sqlite_connection)
