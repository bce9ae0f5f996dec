"""Two-phase schema synchronization."""

from collections.abc import Iterable
from typing import Any

from dbkit.database.document import parse_data_document, parse_schema_document
from dbkit.database.implementations.sqlite import (
    SQLiteQueryBuilder,
    SQLiteSchemaBuilder,
)
from dbkit.database.interfaces import DocumentLoader, QueryBuilder, SchemaBuilder
from dbkit.database.schema import (
    PreparedStatement,
    RawStatement,
    SchemaPlan,
    TableDefinition,
)
from dbkit.database.transaction import QueryResult, TransactionRunner
from dbkit.exceptions import DocumentLoadError
from dbkit.log import get_logger

logger = get_logger(__name__)


async def load_document(loader: DocumentLoader, locator: str) -> Any:
    """Load a document, reporting any loader failure as DocumentLoadError."""
    try:
        return await loader.load(locator)
    except DocumentLoadError:
        raise
    except Exception as e:
        raise DocumentLoadError(f"Failed to load document {locator}: {e}") from e


class SchemaSynchronizer:
    """Applies a schema plan as a structure batch followed by a data batch.

    The data batch is only built and run once the structure batch has
    committed.
    """

    def __init__(
        self,
        runner: TransactionRunner,
        query_builder: QueryBuilder | None = None,
        schema_builder: SchemaBuilder | None = None,
    ) -> None:
        self.runner = runner
        self.query_builder = query_builder or SQLiteQueryBuilder()
        self.schema_builder = schema_builder or SQLiteSchemaBuilder()

    def structure_statements(self, plan: SchemaPlan) -> list[PreparedStatement]:
        """Raw statements and CREATE TABLEs, in plan order."""
        statements: list[PreparedStatement] = []
        for item in plan:
            if isinstance(item, RawStatement):
                statements.append(PreparedStatement(item.sql))
            elif item.columns is not None:
                statements.append(
                    PreparedStatement(
                        self.schema_builder.build_create_table(item.name, item.columns)
                    )
                )
        return statements

    def data_statements(
        self, tables: Iterable[TableDefinition]
    ) -> list[PreparedStatement]:
        """One INSERT per row, in table order then row order."""
        statements: list[PreparedStatement] = []
        for table in tables:
            for row in table.rows or ():
                statements.append(self.query_builder.build_insert(table.name, row))
        return statements

    async def synchronize(self, plan: SchemaPlan) -> QueryResult:
        """Apply the structure phase, then the data phase if the plan has rows.

        Args:
            plan: Ordered schema plan

        Returns:
            Result of the last batch that ran

        Raises:
            HostExecutionError: If either batch fails; a structure failure
                means the data phase never starts
        """
        result = await self.runner.run_batch(self.structure_statements(plan))
        logger.debug("Structure phase applied")

        tables = [
            item
            for item in plan
            if isinstance(item, TableDefinition) and item.rows is not None
        ]
        if not tables:
            return result

        return await self.insert_data(tables)

    async def insert_data(self, tables: Iterable[TableDefinition]) -> QueryResult:
        """Insert every row of ``tables`` in one batch."""
        statements = self.data_statements(tables)
        result = await self.runner.run_batch(statements)
        logger.debug(f"Data phase applied: {len(statements)} rows")
        return result

    async def synchronize_from_source(
        self, loader: DocumentLoader, locator: str
    ) -> QueryResult:
        """Load a schema document and synchronize it.

        Raises:
            DocumentLoadError: If loading or validation fails; no transaction
                is started
        """
        payload = await load_document(loader, locator)
        return await self.synchronize(parse_schema_document(payload))

    async def insert_data_from_source(
        self, loader: DocumentLoader, locator: str
    ) -> QueryResult:
        """Load a data document and insert its rows."""
        payload = await load_document(loader, locator)
        return await self.insert_data(parse_data_document(payload))
