"""Core database functionality."""

from .document import (
    ColumnSpec,
    TableSpec,
    parse_data_document,
    parse_schema_document,
)
from .implementations import (
    SQLiteConnection,
    SQLiteConnectionOpener,
    SQLiteQueryBuilder,
    SQLiteSchemaBuilder,
)
from .manager import CallbackOptions, Database, default_error_handler
from .schema import (
    ColumnDefinition,
    PreparedStatement,
    RawStatement,
    SchemaItem,
    SchemaPlan,
    TableDefinition,
)
from .synchronizer import SchemaSynchronizer
from .transaction import QueryResult, TransactionRunner
from .version import VersionManager

__all__ = [
    "CallbackOptions",
    "ColumnDefinition",
    "ColumnSpec",
    "Database",
    "PreparedStatement",
    "QueryResult",
    "RawStatement",
    "SQLiteConnection",
    "SQLiteConnectionOpener",
    "SQLiteQueryBuilder",
    "SQLiteSchemaBuilder",
    "SchemaItem",
    "SchemaPlan",
    "SchemaSynchronizer",
    "TableDefinition",
    "TableSpec",
    "TransactionRunner",
    "VersionManager",
    "default_error_handler",
    "parse_data_document",
    "parse_schema_document",
]
