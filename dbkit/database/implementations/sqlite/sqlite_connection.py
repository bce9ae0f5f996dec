"""SQLite host connection implementation."""

import asyncio
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from dbkit.config import IN_MEMORY, Settings, settings
from dbkit.database.interfaces import (
    ConnectionOpener,
    HostConnection,
    HostCursor,
    HostTransaction,
    UpgradeBody,
)
from dbkit.exceptions import ConnectionUnavailableError, HostExecutionError
from dbkit.log import get_logger
from dbkit.types import SqlValue

logger = get_logger(__name__)

VERSION_TABLE = "__dbkit_version"
# Web SQL's VERSION_ERR, reported when the stored version is not the expected one
VERSION_MISMATCH = 2


def _host_error(message: str, error: Exception) -> HostExecutionError:
    code = getattr(error, "sqlite_errorname", None) or type(error).__name__
    return HostExecutionError(f"{message}: {error}", code=code)


class SQLiteConnection(HostConnection):
    """SQLite host connection.

    Transactions are issued explicitly (``BEGIN``/``COMMIT``) on an
    autocommit ``sqlite3`` connection so DDL is covered too. One transaction
    runs at a time per connection.
    """

    def __init__(
        self,
        name: str,
        version: str,
        estimated_size: int | None = None,
        location: str | None = None,
    ) -> None:
        """Initialize SQLite connection.

        Args:
            name: Database name
            version: Version to create the database with
            estimated_size: Estimated size in bytes (advisory only)
            location: Explicit file path or ``:memory:``; derived from the
                name and settings when omitted
        """
        super().__init__(name, version, estimated_size)
        self.location = location or settings.database_location(name)
        self._connection: sqlite3.Connection | None = None
        self._version = ""
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Open or create the SQLite database."""
        try:
            if self.location != IN_MEMORY:
                Path(self.location).parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(
                self.location,
                check_same_thread=False,
                timeout=60.0,
                isolation_level=None,
            )
            self._configure_connection()
            self._version = self._load_version()
            logger.info(
                f"Connected to SQLite: {self.location} (version {self._version!r})"
            )
        except sqlite3.Error as e:
            logger.error(f"Failed to connect to SQLite database: {e}")
            self._connection = None
            raise _host_error(f"Failed to open database {self.name}", e) from e

        if self.estimated_size is not None:
            logger.debug(
                f"Estimated size for {self.name}: {self.estimated_size} bytes"
            )

    async def disconnect(self) -> None:
        """Close SQLite database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.info(f"Disconnected from SQLite: {self.location}")

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def version(self) -> str:
        return self._version

    async def begin_transaction(self) -> HostTransaction:
        """Begin a transaction, waiting for any running one to finish.

        Returns:
            SQLite transaction
        """
        connection = self._require_connection()
        await self._lock.acquire()
        try:
            connection.execute("BEGIN")
        except sqlite3.Error as e:
            self._lock.release()
            raise _host_error("Failed to begin transaction", e) from e
        return SQLiteTransaction(connection, self._lock)

    async def change_version(
        self,
        from_version: str,
        to_version: str,
        upgrade: UpgradeBody | None = None,
    ) -> None:
        """Atomically run ``upgrade`` and store ``to_version``."""
        async with await self.begin_transaction() as transaction:
            cursor = await transaction.execute(f"SELECT version FROM {VERSION_TABLE}")
            rows = cursor.fetchall()
            stored = rows[0][0] if rows else ""
            if stored != from_version:
                raise HostExecutionError(
                    f"Version mismatch: expected {from_version!r}, found {stored!r}",
                    code=VERSION_MISMATCH,
                )

            if upgrade is not None:
                await upgrade(transaction)

            await transaction.execute(
                f"UPDATE {VERSION_TABLE} SET version = ?", (to_version,)
            )

        self._version = to_version
        logger.info(
            f"Database {self.name} version changed: "
            f"{from_version!r} -> {to_version!r}"
        )

    def _require_connection(self) -> sqlite3.Connection:
        if not self._connection:
            raise ConnectionUnavailableError("Database not connected")
        return self._connection

    def _configure_connection(self) -> None:
        """Configure SQLite connection settings."""
        connection = self._require_connection()
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("PRAGMA busy_timeout = 60000")

    def _load_version(self) -> str:
        """Read the stored version, recording the requested one on creation."""
        connection = self._require_connection()
        connection.execute(
            f"CREATE TABLE IF NOT EXISTS {VERSION_TABLE} (version TEXT NOT NULL)"
        )
        row = connection.execute(f"SELECT version FROM {VERSION_TABLE}").fetchone()
        if row is not None:
            if self.requested_version and row[0] != self.requested_version:
                logger.info(
                    f"Database {self.name} is at version {row[0]!r}, "
                    f"not the requested {self.requested_version!r}"
                )
            return str(row[0])

        connection.execute(
            f"INSERT INTO {VERSION_TABLE} (version) VALUES (?)",
            (self.requested_version,),
        )
        return self.requested_version


class SQLiteTransaction(HostTransaction):
    """SQLite transaction on an explicitly begun connection."""

    def __init__(self, connection: sqlite3.Connection, lock: asyncio.Lock) -> None:
        """Initialize SQLite transaction.

        Args:
            connection: SQLite connection with an open ``BEGIN``
            lock: Connection lock held until commit or rollback
        """
        self._connection = connection
        self._lock = lock
        self._finished = False

    async def execute(
        self, sql: str, parameters: Sequence[SqlValue] = ()
    ) -> HostCursor:
        """Execute one statement inside the transaction.

        Values sqlite3 cannot bind, such as integers beyond 64 bits, are
        reported as host errors like any rejected statement.
        """
        try:
            return self._connection.execute(sql, tuple(parameters))
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Query execution failed: {e}")
            raise _host_error("Query execution failed", e) from e

    async def commit(self) -> None:
        """Commit the transaction."""
        try:
            self._connection.execute("COMMIT")
        except sqlite3.Error as e:
            await self.rollback()
            raise _host_error("Commit failed", e) from e
        self._finish()

    async def rollback(self) -> None:
        """Rollback the transaction."""
        try:
            if self._connection.in_transaction:
                self._connection.execute("ROLLBACK")
        except sqlite3.Error as e:
            raise _host_error("Rollback failed", e) from e
        finally:
            self._finish()

    def _finish(self) -> None:
        if not self._finished:
            self._finished = True
            self._lock.release()


class SQLiteConnectionOpener(ConnectionOpener):
    """Opens SQLite host connections using dbkit settings."""

    def __init__(self, config: Settings | None = None) -> None:
        self.config = config or settings

    async def open(
        self, name: str, version: str, estimated_size: int | None = None
    ) -> HostConnection:
        connection = SQLiteConnection(
            name,
            version,
            estimated_size,
            location=self.config.database_location(name),
        )
        await connection.connect()
        return connection
