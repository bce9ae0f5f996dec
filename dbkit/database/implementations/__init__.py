"""Database implementations package."""

from .sqlite import (
    SQLiteConnection,
    SQLiteConnectionOpener,
    SQLiteQueryBuilder,
    SQLiteSchemaBuilder,
    SQLiteTransaction,
)

__all__ = [
    "SQLiteConnection",
    "SQLiteConnectionOpener",
    "SQLiteQueryBuilder",
    "SQLiteSchemaBuilder",
    "SQLiteTransaction",
]
