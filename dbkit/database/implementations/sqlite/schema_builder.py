"""SQLite-specific schema builder implementation."""

from collections.abc import Sequence

from dbkit.database.interfaces.schema_builder import SchemaBuilder
from dbkit.database.schema import ColumnDefinition
from dbkit.database.utils import check_identifier
from dbkit.exceptions import InvalidArgumentError


class SQLiteSchemaBuilder(SchemaBuilder):
    """SQLite-specific schema builder."""

    def build_create_table(
        self,
        table: str,
        columns: Sequence[ColumnDefinition],
        if_not_exists: bool = True,
    ) -> str:
        """Generate CREATE TABLE SQL for SQLite.

        Args:
            table: Name of the table
            columns: Column definitions, in order
            if_not_exists: Whether to add IF NOT EXISTS

        Returns:
            CREATE TABLE SQL statement
        """
        check_identifier(table, "table")
        if not columns:
            raise InvalidArgumentError(f"Cannot create table {table} without columns")

        columns_sql = ", ".join(self._column_sql(col) for col in columns)
        exists_clause = "IF NOT EXISTS " if if_not_exists else ""
        return f"CREATE TABLE {exists_clause}{table} ({columns_sql})"

    def build_drop_table(self, table: str) -> str:
        """Generate DROP TABLE SQL for SQLite.

        Args:
            table: Name of the table to drop

        Returns:
            DROP TABLE SQL statement
        """
        return f"DROP TABLE IF EXISTS {check_identifier(table, 'table')}"

    def build_create_index(
        self, table: str, index_name: str, columns: Sequence[str]
    ) -> str:
        """Generate CREATE INDEX SQL for SQLite.

        Args:
            table: Name of the table
            index_name: Name of the index
            columns: Column names to index

        Returns:
            CREATE INDEX SQL statement
        """
        check_identifier(table, "table")
        check_identifier(index_name, "index")
        if not columns:
            raise InvalidArgumentError(
                f"Cannot create index {index_name} without columns"
            )

        columns_sql = ", ".join(check_identifier(col, "column") for col in columns)
        return f"CREATE INDEX IF NOT EXISTS {index_name} ON {table} ({columns_sql})"

    def build_drop_index(self, index_name: str) -> str:
        """Generate DROP INDEX SQL for SQLite.

        Args:
            index_name: Name of the index to drop

        Returns:
            DROP INDEX SQL statement
        """
        return f"DROP INDEX IF EXISTS {check_identifier(index_name, 'index')}"

    def build_add_column(self, table: str, column: ColumnDefinition) -> str:
        """Generate ALTER TABLE ADD COLUMN SQL for SQLite.

        Args:
            table: Name of the table
            column: Column definition to add

        Returns:
            ALTER TABLE SQL statement
        """
        check_identifier(table, "table")
        return f"ALTER TABLE {table} ADD COLUMN {self._column_sql(column)}"

    def _column_sql(self, column: ColumnDefinition) -> str:
        check_identifier(column.name, "column")
        if not column.type or not column.type.strip():
            raise InvalidArgumentError(f"Column {column.name} has no type")

        return " ".join([column.name, column.type.strip(), *column.constraints])
