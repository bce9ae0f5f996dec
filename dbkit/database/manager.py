"""Database facade: named, versioned database with callback-style results."""

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Any, TypeVar

from dbkit.config import EXTERNAL_PREFIX, settings
from dbkit.database.document import coerce_plan, coerce_tables
from dbkit.database.implementations.sqlite import (
    SQLiteConnectionOpener,
    SQLiteQueryBuilder,
    SQLiteSchemaBuilder,
)
from dbkit.database.interfaces import (
    ConnectionOpener,
    DocumentLoader,
    HostConnection,
    QueryBuilder,
    SchemaBuilder,
)
from dbkit.database.schema import ColumnDefinition, PreparedStatement
from dbkit.database.synchronizer import SchemaSynchronizer
from dbkit.database.transaction import TransactionRunner
from dbkit.database.version import VersionManager
from dbkit.exceptions import (
    ConnectionUnavailableError,
    DatabaseError,
    InvalidArgumentError,
    UnsupportedOperationError,
)
from dbkit.loaders import HttpDocumentLoader
from dbkit.log import get_logger
from dbkit.types import ResultRow, RowData, SqlValue

logger = get_logger(__name__)

T = TypeVar("T")

SuccessCallback = Callable[[Any], Any]
ErrorCallback = Callable[[DatabaseError], Any]


def default_error_handler(error: DatabaseError) -> None:
    """Report an error to the log; used when a call supplies no ``on_error``."""
    logger.error(f"Database error ({error.code}): {error.message}")


@dataclass(frozen=True)
class CallbackOptions:
    """Per-call callbacks.

    Either callback may be a plain function or a coroutine function.
    ``on_success`` defaults to doing nothing and ``on_error`` to
    :func:`default_error_handler`.
    """

    on_success: SuccessCallback | None = None
    on_error: ErrorCallback | None = None


async def _invoke(callback: Callable[[Any], Any] | None, value: Any) -> None:
    if callback is None:
        return
    outcome = callback(value)
    if inspect.isawaitable(outcome):
        await outcome


class Database:
    """Shortcuts to common SQLite operations on one named, versioned database.

    Every asynchronous operation takes an optional :class:`CallbackOptions`.
    On success ``on_success`` receives the result, which is also returned.
    On a :class:`DatabaseError` ``on_error`` receives the error and ``None``
    is returned.

    Usage::

        async with Database("ext:my_database", version="1") as db:
            await db.set_schema(schema)
            rows = await db.query(db.build_select("entries"))
    """

    def __init__(
        self,
        name: str,
        version: str | None = None,
        estimated_size: int | None = None,
        debug: bool | None = None,
        opener: ConnectionOpener | None = None,
        loader: DocumentLoader | None = None,
        query_builder: QueryBuilder | None = None,
        schema_builder: SchemaBuilder | None = None,
    ) -> None:
        """Initialize the database handle; call :meth:`open` before use.

        Args:
            name: Database name; prefix with ``ext:`` to allow sizes over 1 MB
            version: Version to open/create (defaults to settings)
            estimated_size: Estimated size in bytes (defaults to settings)
            debug: Log every statement that runs (defaults to settings)
            opener: Host connection opener (defaults to SQLite)
            loader: Loader for the ``*_from_url`` operations (defaults to HTTP)
            query_builder: Builder for data statements
            schema_builder: Builder for DDL statements
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("Database requires a name")

        self.name = name
        self.version = version if version is not None else settings.default_version
        self.estimated_size = (
            estimated_size if estimated_size is not None else settings.estimated_size
        )
        self.debug = debug if debug is not None else settings.debug
        self.opener = opener or SQLiteConnectionOpener()
        self.loader = loader or HttpDocumentLoader()
        self.query_builder = query_builder or SQLiteQueryBuilder()
        self.schema_builder = schema_builder or SQLiteSchemaBuilder()

        self._connection: HostConnection | None = None
        self._synchronizer: SchemaSynchronizer | None = None
        self._versions: VersionManager | None = None
        self._last_insert_id: int | None = None
        self._closed = False

        if not name.startswith(EXTERNAL_PREFIX):
            logger.warning(
                "Database: you are working with an internal database, which will "
                "limit its size to 1 MB. Prepend `ext:` to your database name to "
                "remove this restriction."
            )

    # === Lifecycle ===

    async def open(self) -> "Database":
        """Open or create the database through the host.

        Raises:
            ConnectionUnavailableError: If the handle was already closed
            HostExecutionError: If the host cannot open the database
        """
        if self._closed:
            raise ConnectionUnavailableError(
                f"Database {self.name} has been closed and cannot be reopened"
            )

        try:
            connection = await self.opener.open(
                self.name, self.version, self.estimated_size
            )
        except DatabaseError:
            logger.error(f"Database: failed to open database named {self.name}")
            raise

        runner = TransactionRunner(connection, debug=self.debug)
        self._connection = connection
        self._synchronizer = SchemaSynchronizer(
            runner, self.query_builder, self.schema_builder
        )
        self._versions = VersionManager(connection, self._synchronizer)
        return self

    async def close(self) -> None:
        """Close the connection; the handle cannot be used afterwards."""
        self._closed = True
        if self._connection is not None:
            await self._connection.disconnect()

    @property
    def is_open(self) -> bool:
        return (
            not self._closed
            and self._connection is not None
            and self._connection.is_connected
        )

    async def __aenter__(self) -> "Database":
        return await self.open()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # === Standard database methods ===

    def get_version(self) -> str:
        """Return the cached database version."""
        return self._require_versions().get_version()

    def last_insert_id(self) -> int | None:
        """Row id assigned by the last INSERT run through :meth:`query`."""
        self._ensure_open()
        return self._last_insert_id

    async def destroy(self, options: CallbackOptions | None = None) -> None:
        """Delete the whole database.

        The host has no way to do this, so the call always reports
        :class:`UnsupportedOperationError` through ``on_error``.
        """

        async def operation() -> None:
            raise UnsupportedOperationError(
                "Database: there is currently no way to destroy a database"
            )

        await self._dispatch(operation, options)

    async def query(
        self,
        statement: str | PreparedStatement,
        options: CallbackOptions | None = None,
    ) -> list[ResultRow] | None:
        """Execute one SQL string or prepared statement in its own transaction.

        Returns:
            Result rows as dicts
        """

        async def operation() -> list[ResultRow]:
            result = await self._require_runner().run_single(statement)
            if result.insert_id is not None:
                self._last_insert_id = result.insert_id
            return result.rows

        return await self._dispatch(operation, options)

    async def queries(
        self,
        statements: Sequence[str | PreparedStatement],
        options: CallbackOptions | None = None,
    ) -> list[ResultRow] | None:
        """Execute statements as a single transaction.

        The callbacks report on the transaction as a whole; the rows are those
        of the last statement.
        """

        async def operation() -> list[ResultRow]:
            result = await self._require_runner().run_batch(statements)
            return result.rows

        return await self._dispatch(operation, options)

    # === JSON methods ===

    async def set_schema(
        self, schema: Any, options: CallbackOptions | None = None
    ) -> list[ResultRow] | None:
        """Create tables (if missing) and insert any inline data.

        Args:
            schema: Schema plan or schema document (see ``dbkit.database.document``)
            options: Callbacks
        """

        async def operation() -> list[ResultRow]:
            plan = coerce_plan(schema, InvalidArgumentError)
            return (await self._require_synchronizer().synchronize(plan)).rows

        return await self._dispatch(operation, options)

    async def set_schema_from_url(
        self, url: str, options: CallbackOptions | None = None
    ) -> list[ResultRow] | None:
        """Load a schema document with the configured loader and apply it."""

        async def operation() -> list[ResultRow]:
            synchronizer = self._require_synchronizer()
            return (await synchronizer.synchronize_from_source(self.loader, url)).rows

        return await self._dispatch(operation, options)

    async def insert_data(
        self, data: Any, options: CallbackOptions | None = None
    ) -> list[ResultRow] | None:
        """Insert rows given as ``{"table": ..., "data": [...]}`` entries."""

        async def operation() -> list[ResultRow]:
            tables = coerce_tables(data, InvalidArgumentError)
            return (await self._require_synchronizer().insert_data(tables)).rows

        return await self._dispatch(operation, options)

    async def insert_data_from_url(
        self, url: str, options: CallbackOptions | None = None
    ) -> list[ResultRow] | None:
        """Load a data document with the configured loader and insert it."""

        async def operation() -> list[ResultRow]:
            synchronizer = self._require_synchronizer()
            return (await synchronizer.insert_data_from_source(self.loader, url)).rows

        return await self._dispatch(operation, options)

    # === Versioning ===

    async def change_version(
        self, new_version: str, options: CallbackOptions | None = None
    ) -> str | None:
        """Change the database version; the cache moves only on success."""

        async def operation() -> str:
            return await self._require_versions().change_version(new_version)

        return await self._dispatch(operation, options)

    async def change_version_with_schema(
        self,
        new_version: str,
        schema: Any,
        options: CallbackOptions | None = None,
    ) -> str | None:
        """Change the version and apply the schema's structure atomically.

        Inline data is not inserted; call :meth:`insert_data` afterwards.
        """

        async def operation() -> str:
            plan = coerce_plan(schema, InvalidArgumentError)
            versions = self._require_versions()
            return await versions.change_version_with_schema(new_version, plan)

        return await self._dispatch(operation, options)

    async def change_version_with_schema_from_url(
        self,
        new_version: str,
        url: str,
        options: CallbackOptions | None = None,
    ) -> str | None:
        """Like :meth:`change_version_with_schema` with a loaded document."""

        async def operation() -> str:
            versions = self._require_versions()
            return await versions.change_version_with_schema_from_source(
                new_version, self.loader, url
            )

        return await self._dispatch(operation, options)

    # === SQL methods ===

    def build_insert(self, table: str, row: RowData) -> PreparedStatement:
        return self.query_builder.build_insert(table, row)

    def build_select(
        self,
        table: str,
        columns: Sequence[str] | None = None,
        where: Mapping[str, SqlValue] | None = None,
        order_by: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PreparedStatement:
        return self.query_builder.build_select(
            table, columns, where, order_by, limit, offset
        )

    def build_update(
        self, table: str, row: RowData, where: Mapping[str, SqlValue]
    ) -> PreparedStatement:
        return self.query_builder.build_update(table, row, where)

    def build_delete(
        self, table: str, where: Mapping[str, SqlValue]
    ) -> PreparedStatement:
        return self.query_builder.build_delete(table, where)

    def build_create_table(
        self,
        table: str,
        columns: Sequence[ColumnDefinition],
        if_not_exists: bool = True,
    ) -> str:
        return self.schema_builder.build_create_table(table, columns, if_not_exists)

    def build_drop_table(self, table: str) -> str:
        return self.schema_builder.build_drop_table(table)

    # === Private methods ===

    async def _dispatch(
        self,
        operation: Callable[[], Awaitable[T]],
        options: CallbackOptions | None,
    ) -> T | None:
        options = options or CallbackOptions()
        try:
            self._ensure_open()
            result = await operation()
        except DatabaseError as e:
            await _invoke(options.on_error or default_error_handler, e)
            return None

        await _invoke(options.on_success, result)
        return result

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise ConnectionUnavailableError(
                "Database: connection has been closed or lost; cannot execute SQL"
            )

    def _require_runner(self) -> TransactionRunner:
        return self._require_synchronizer().runner

    def _require_synchronizer(self) -> SchemaSynchronizer:
        self._ensure_open()
        assert self._synchronizer is not None
        return self._synchronizer

    def _require_versions(self) -> VersionManager:
        self._ensure_open()
        assert self._versions is not None
        return self._versions
