"""SQLite database implementation package."""

from .query_builder import SQLiteQueryBuilder
from .schema_builder import SQLiteSchemaBuilder
from .sqlite_connection import (
    VERSION_TABLE,
    SQLiteConnection,
    SQLiteConnectionOpener,
    SQLiteTransaction,
)

__all__ = [
    "SQLiteConnection",
    "SQLiteConnectionOpener",
    "SQLiteQueryBuilder",
    "SQLiteSchemaBuilder",
    "SQLiteTransaction",
    "VERSION_TABLE",
]
