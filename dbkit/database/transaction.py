"""Batch execution over a host transaction."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from dbkit.database.interfaces import HostConnection, HostCursor, HostTransaction
from dbkit.database.schema import PreparedStatement
from dbkit.database.utils import count_placeholders, sql_keywords
from dbkit.exceptions import ConnectionUnavailableError, InvalidArgumentError
from dbkit.log import get_logger
from dbkit.types import ResultRow

logger = get_logger(__name__)

Statement = str | PreparedStatement

_INSERT_KEYWORDS = ("INSERT", "REPLACE")


@dataclass
class QueryResult:
    """Rows produced by a statement, plus the inserted row id if any."""

    rows: list[ResultRow] = field(default_factory=list)
    insert_id: int | None = None


def convert_result_set(cursor: HostCursor) -> list[ResultRow]:
    """Eagerly convert a host cursor into a list of column -> value dicts."""
    if not cursor.description:
        return []

    names = [column[0] for column in cursor.description]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]


def prepare(statement: Statement) -> PreparedStatement:
    """Normalize a statement and check its placeholders against its parameters.

    Raises:
        InvalidArgumentError: If the placeholder count differs from the
            number of parameters
    """
    prepared = PreparedStatement.of(statement)
    placeholders = count_placeholders(prepared.sql)
    if placeholders != len(prepared.parameters):
        raise InvalidArgumentError(
            f"Statement has {placeholders} placeholders but "
            f"{len(prepared.parameters)} parameters: {prepared.sql}"
        )
    return prepared


class TransactionRunner:
    """Runs statement batches against a host connection.

    A batch succeeds or fails as a whole; only the last statement's rows are
    reported.
    """

    def __init__(self, connection: HostConnection, debug: bool = False) -> None:
        """Initialize transaction runner.

        Args:
            connection: Host connection
            debug: Log every statement with its parameters
        """
        self.connection = connection
        self.debug = debug

    async def run_batch(self, statements: Sequence[Statement]) -> QueryResult:
        """Execute statements in order inside one host transaction.

        Args:
            statements: SQL strings or prepared statements

        Returns:
            Rows of the last statement

        Raises:
            InvalidArgumentError: If a statement is malformed (nothing runs)
            HostExecutionError: If the host rejects the transaction
        """
        prepared = [prepare(statement) for statement in statements]
        if not prepared:
            return QueryResult()

        self._ensure_connected()
        async with await self.connection.begin_transaction() as transaction:
            return await self.execute_all(transaction, prepared)

    async def run_single(self, statement: Statement) -> QueryResult:
        """Execute one statement in its own transaction.

        Args:
            statement: SQL string or prepared statement

        Returns:
            Rows and, for inserts (including `WITH ... INSERT`), the
            host-assigned row id; none when the insert added no row
        """
        prepared = prepare(statement)

        self._ensure_connected()
        async with await self.connection.begin_transaction() as transaction:
            cursor = await self._execute(transaction, prepared)
            result = QueryResult(rows=convert_result_set(cursor))
            if _is_insert(prepared) and cursor.rowcount != 0:
                result.insert_id = cursor.lastrowid or None
        return result

    async def execute_all(
        self, transaction: HostTransaction, statements: Sequence[PreparedStatement]
    ) -> QueryResult:
        """Execute prepared statements inside an already open transaction."""
        cursor: HostCursor | None = None
        for statement in statements:
            cursor = await self._execute(transaction, statement)

        if cursor is None:
            return QueryResult()
        return QueryResult(rows=convert_result_set(cursor))

    async def _execute(
        self, transaction: HostTransaction, statement: PreparedStatement
    ) -> HostCursor:
        if self.debug:
            logger.info(f"{statement.sql} ==> {list(statement.parameters)}")
        return await transaction.execute(statement.sql, statement.parameters)

    def _ensure_connected(self) -> None:
        if not self.connection.is_connected:
            raise ConnectionUnavailableError(
                "Database connection has been closed or lost; cannot execute SQL"
            )


def _is_insert(statement: PreparedStatement) -> bool:
    keywords = sql_keywords(statement.sql)
    if not keywords:
        return False
    if keywords[0] == "WITH":
        return any(word in _INSERT_KEYWORDS for word in keywords)
    return keywords[0] in _INSERT_KEYWORDS
