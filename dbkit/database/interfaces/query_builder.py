"""Abstract query builder interface for different SQL backends."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from dbkit.database.schema import PreparedStatement
from dbkit.types import RowData, SqlValue


class QueryBuilder(ABC):
    """Abstract builder for parameterized data statements."""

    @abstractmethod
    def build_select(
        self,
        table: str,
        columns: Sequence[str] | None = None,
        where: Mapping[str, SqlValue] | None = None,
        order_by: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PreparedStatement:
        """Build SELECT statement.

        Args:
            table: Table name
            columns: Columns to select (None or empty for all)
            where: WHERE conditions, column -> value
            order_by: ORDER BY terms
            limit: LIMIT value
            offset: OFFSET value

        Returns:
            Prepared statement
        """
        pass

    @abstractmethod
    def build_insert(self, table: str, row: RowData) -> PreparedStatement:
        """Build INSERT statement.

        Args:
            table: Table name
            row: Column -> value mapping to insert

        Returns:
            Prepared statement
        """
        pass

    @abstractmethod
    def build_update(
        self,
        table: str,
        row: RowData,
        where: Mapping[str, SqlValue],
    ) -> PreparedStatement:
        """Build UPDATE statement.

        Args:
            table: Table name
            row: Column -> value mapping to set
            where: WHERE conditions, column -> value

        Returns:
            Prepared statement
        """
        pass

    @abstractmethod
    def build_delete(
        self, table: str, where: Mapping[str, SqlValue]
    ) -> PreparedStatement:
        """Build DELETE statement.

        Args:
            table: Table name
            where: WHERE conditions, column -> value

        Returns:
            Prepared statement
        """
        pass

    @abstractmethod
    def build_count(
        self, table: str, where: Mapping[str, SqlValue] | None = None
    ) -> PreparedStatement:
        """Build COUNT statement.

        Args:
            table: Table name
            where: WHERE conditions, column -> value

        Returns:
            Prepared statement
        """
        pass
