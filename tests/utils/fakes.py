"""In-memory host doubles for dbkit tests."""

from collections.abc import Sequence
from typing import Any

from dbkit.database.interfaces import (
    ConnectionOpener,
    HostConnection,
    HostCursor,
    HostTransaction,
    UpgradeBody,
)
from dbkit.exceptions import HostExecutionError
from dbkit.types import SqlValue


class FakeCursor:
    """DB-API shaped cursor holding canned rows."""

    def __init__(
        self,
        columns: Sequence[str] = (),
        rows: Sequence[tuple[Any, ...]] = (),
        lastrowid: int | None = None,
        rowcount: int = -1,
    ) -> None:
        self.description = (
            [(name, None, None, None, None, None, None) for name in columns]
            if columns
            else None
        )
        self.lastrowid = lastrowid
        self.rowcount = rowcount
        self._rows = list(rows)

    def fetchall(self) -> list[Any]:
        return list(self._rows)


class FakeTransaction(HostTransaction):
    """Records statements; fails on any SQL containing a configured fragment."""

    def __init__(self, host: "FakeConnection") -> None:
        self.host = host
        self.statements: list[tuple[str, tuple[SqlValue, ...]]] = []

    async def execute(
        self, sql: str, parameters: Sequence[SqlValue] = ()
    ) -> HostCursor:
        self.statements.append((sql, tuple(parameters)))
        self.host.executed.append((sql, tuple(parameters)))
        for fragment in self.host.fail_on:
            if fragment in sql:
                raise HostExecutionError(
                    f"could not execute {sql}", code="SQLITE_ERROR"
                )
        return self.host.results.get(sql, FakeCursor(lastrowid=self.host.lastrowid))

    async def commit(self) -> None:
        self.host.committed.append(list(self.statements))

    async def rollback(self) -> None:
        self.host.rolled_back.append(list(self.statements))


class FakeConnection(HostConnection):
    """Host connection keeping everything in lists for assertions."""

    def __init__(self, name: str = "ext:test", version: str = "1") -> None:
        super().__init__(name, version)
        self.connected = False
        self.stored_version = version
        self.executed: list[tuple[str, tuple[SqlValue, ...]]] = []
        self.committed: list[list[tuple[str, tuple[SqlValue, ...]]]] = []
        self.rolled_back: list[list[tuple[str, tuple[SqlValue, ...]]]] = []
        self.fail_on: list[str] = []
        self.results: dict[str, FakeCursor] = {}
        self.lastrowid: int | None = None
        self.transactions_begun = 0

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    @property
    def is_connected(self) -> bool:
        return self.connected

    @property
    def version(self) -> str:
        return self.stored_version

    async def begin_transaction(self) -> HostTransaction:
        self.transactions_begun += 1
        return FakeTransaction(self)

    async def change_version(
        self,
        from_version: str,
        to_version: str,
        upgrade: UpgradeBody | None = None,
    ) -> None:
        async with await self.begin_transaction() as transaction:
            if self.stored_version != from_version:
                raise HostExecutionError("Version mismatch", code=2)
            if upgrade is not None:
                await upgrade(transaction)
        self.stored_version = to_version


class FakeOpener(ConnectionOpener):
    """Hands out one prepared fake connection."""

    def __init__(self, connection: FakeConnection | None = None) -> None:
        self.connection = connection or FakeConnection()
        self.opened: list[tuple[str, str, int | None]] = []

    async def open(
        self, name: str, version: str, estimated_size: int | None = None
    ) -> HostConnection:
        self.opened.append((name, version, estimated_size))
        await self.connection.connect()
        return self.connection


class FailingOpener(ConnectionOpener):
    """Opener whose host refuses to open anything."""

    async def open(
        self, name: str, version: str, estimated_size: int | None = None
    ) -> HostConnection:
        raise HostExecutionError(f"cannot open {name}", code="SQLITE_CANTOPEN")
