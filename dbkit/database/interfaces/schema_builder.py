"""Abstract schema builder interface for different SQL backends."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from dbkit.database.schema import ColumnDefinition


class SchemaBuilder(ABC):
    """Abstract builder for DDL statements.

    DDL cannot bind identifiers as parameters, so every method returns plain
    SQL text.
    """

    @abstractmethod
    def build_create_table(
        self,
        table: str,
        columns: Sequence[ColumnDefinition],
        if_not_exists: bool = True,
    ) -> str:
        """Generate CREATE TABLE SQL.

        Args:
            table: Name of the table
            columns: Column definitions, in order
            if_not_exists: Whether to add IF NOT EXISTS

        Returns:
            CREATE TABLE SQL statement
        """
        pass

    @abstractmethod
    def build_drop_table(self, table: str) -> str:
        """Generate DROP TABLE SQL.

        Args:
            table: Name of the table to drop

        Returns:
            DROP TABLE SQL statement
        """
        pass

    @abstractmethod
    def build_create_index(
        self, table: str, index_name: str, columns: Sequence[str]
    ) -> str:
        """Generate CREATE INDEX SQL.

        Args:
            table: Name of the table
            index_name: Name of the index
            columns: Column names to index

        Returns:
            CREATE INDEX SQL statement
        """
        pass

    @abstractmethod
    def build_drop_index(self, index_name: str) -> str:
        """Generate DROP INDEX SQL.

        Args:
            index_name: Name of the index to drop

        Returns:
            DROP INDEX SQL statement
        """
        pass

    @abstractmethod
    def build_add_column(self, table: str, column: ColumnDefinition) -> str:
        """Generate ALTER TABLE ADD COLUMN SQL.

        Args:
            table: Name of the table
            column: Column definition to add

        Returns:
            ALTER TABLE SQL statement
        """
        pass
