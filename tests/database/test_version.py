"""Tests for version tracking."""

import logging

import pytest

from dbkit.database.schema import ColumnDefinition, TableDefinition
from dbkit.database.synchronizer import SchemaSynchronizer
from dbkit.database.version import VersionManager
from dbkit.exceptions import HostExecutionError
from tests.utils.fakes import FakeConnection


@pytest.fixture
def versions(
    fake_connection: FakeConnection, synchronizer: SchemaSynchronizer
) -> VersionManager:
    return VersionManager(fake_connection, synchronizer)


def test_initial_version_comes_from_host(versions: VersionManager) -> None:
    assert versions.get_version() == "1"


@pytest.mark.asyncio
async def test_change_version(
    versions: VersionManager, fake_connection: FakeConnection
) -> None:
    assert await versions.change_version("2") == "2"

    assert versions.get_version() == "2"
    assert fake_connection.stored_version == "2"


@pytest.mark.asyncio
async def test_change_version_failure_keeps_cache(
    versions: VersionManager, fake_connection: FakeConnection
) -> None:
    # Another handle moved the stored version underneath us
    fake_connection.stored_version = "5"

    with pytest.raises(HostExecutionError) as exc_info:
        await versions.change_version("2")

    assert exc_info.value.code == 2
    assert versions.get_version() == "1"


@pytest.mark.asyncio
async def test_change_version_with_schema(
    versions: VersionManager, fake_connection: FakeConnection
) -> None:
    plan = [TableDefinition("t", (ColumnDefinition("a", "TEXT"),))]

    await versions.change_version_with_schema("2", plan)

    assert versions.get_version() == "2"
    assert fake_connection.committed == [
        [("CREATE TABLE IF NOT EXISTS t (a TEXT);", ())]
    ]


@pytest.mark.asyncio
async def test_change_version_with_schema_ignores_rows(
    versions: VersionManager,
    fake_connection: FakeConnection,
    caplog: pytest.LogCaptureFixture,
) -> None:
    plan = [TableDefinition("t", (ColumnDefinition("a", "TEXT"),), ({"a": "x"},))]

    with caplog.at_level(logging.WARNING):
        await versions.change_version_with_schema("2", plan)

    assert all("INSERT" not in sql for sql, _ in fake_connection.executed)
    assert "Row data is ignored" in caplog.text


@pytest.mark.asyncio
async def test_change_version_with_schema_failure_rolls_back(
    versions: VersionManager, fake_connection: FakeConnection
) -> None:
    fake_connection.fail_on.append("CREATE TABLE")
    plan = [TableDefinition("t", (ColumnDefinition("a", "TEXT"),))]

    with pytest.raises(HostExecutionError):
        await versions.change_version_with_schema("2", plan)

    assert versions.get_version() == "1"
    assert fake_connection.stored_version == "1"
    assert fake_connection.committed == []
