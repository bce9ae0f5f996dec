"""SQLite-specific query builder implementation."""

from collections.abc import Mapping, Sequence

from dbkit.database.interfaces.query_builder import QueryBuilder
from dbkit.database.schema import PreparedStatement
from dbkit.database.utils import (
    build_limit_clause,
    build_order_by_clause,
    build_where_clause,
    check_identifier,
)
from dbkit.exceptions import InvalidArgumentError
from dbkit.types import RowData, SqlValue


class SQLiteQueryBuilder(QueryBuilder):
    """SQLite-specific query builder using positional ``?`` placeholders."""

    def build_select(
        self,
        table: str,
        columns: Sequence[str] | None = None,
        where: Mapping[str, SqlValue] | None = None,
        order_by: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PreparedStatement:
        """Build SELECT statement for SQLite.

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
        check_identifier(table, "table")
        if columns:
            cols = ", ".join(check_identifier(col, "column") for col in columns)
        else:
            cols = "*"
        query = f"SELECT {cols} FROM {table}"

        where_clause, params = build_where_clause(where)
        if where_clause:
            query += f" {where_clause}"

        order_clause = build_order_by_clause(order_by)
        if order_clause:
            query += f" {order_clause}"

        limit_clause = build_limit_clause(limit, offset)
        if limit_clause:
            query += f" {limit_clause}"

        return PreparedStatement(query, tuple(params))

    def build_insert(self, table: str, row: RowData) -> PreparedStatement:
        """Build INSERT statement for SQLite.

        Args:
            table: Table name
            row: Column -> value mapping; key order is column order

        Returns:
            Prepared statement
        """
        check_identifier(table, "table")
        if not row:
            raise InvalidArgumentError("Cannot insert empty data")

        columns = [check_identifier(col, "column") for col in row.keys()]
        placeholders = ", ".join("?" for _ in columns)

        query = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        return PreparedStatement(query, tuple(row.values()))

    def build_update(
        self,
        table: str,
        row: RowData,
        where: Mapping[str, SqlValue],
    ) -> PreparedStatement:
        """Build UPDATE statement for SQLite.

        SET parameters precede WHERE parameters.

        Args:
            table: Table name
            row: Column -> value mapping to set
            where: WHERE conditions, column -> value

        Returns:
            Prepared statement
        """
        check_identifier(table, "table")
        if not row:
            raise InvalidArgumentError("Cannot update with empty data")
        if not where:
            raise InvalidArgumentError("Cannot update without WHERE conditions")

        set_clause = ", ".join(
            f"{check_identifier(col, 'column')} = ?" for col in row.keys()
        )
        where_clause, where_params = build_where_clause(where)

        query = f"UPDATE {table} SET {set_clause} {where_clause}"
        return PreparedStatement(query, (*row.values(), *where_params))

    def build_delete(
        self, table: str, where: Mapping[str, SqlValue]
    ) -> PreparedStatement:
        """Build DELETE statement for SQLite.

        Args:
            table: Table name
            where: WHERE conditions, column -> value

        Returns:
            Prepared statement
        """
        check_identifier(table, "table")
        if not where:
            raise InvalidArgumentError("Cannot delete without WHERE conditions")

        where_clause, params = build_where_clause(where)
        return PreparedStatement(f"DELETE FROM {table} {where_clause}", tuple(params))

    def build_count(
        self, table: str, where: Mapping[str, SqlValue] | None = None
    ) -> PreparedStatement:
        """Build COUNT statement for SQLite.

        Args:
            table: Table name
            where: WHERE conditions, column -> value

        Returns:
            Prepared statement
        """
        check_identifier(table, "table")
        query = f"SELECT COUNT(*) FROM {table}"

        where_clause, params = build_where_clause(where)
        if where_clause:
            query += f" {where_clause}"

        return PreparedStatement(query, tuple(params))
