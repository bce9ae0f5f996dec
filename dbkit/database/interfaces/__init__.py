"""Database interfaces module."""

from .connection import (
    ConnectionOpener,
    HostConnection,
    HostCursor,
    HostTransaction,
    UpgradeBody,
)
from .loader import DocumentLoader
from .query_builder import QueryBuilder
from .schema_builder import SchemaBuilder

__all__ = [
    "ConnectionOpener",
    "HostConnection",
    "HostCursor",
    "HostTransaction",
    "UpgradeBody",
    "DocumentLoader",
    "QueryBuilder",
    "SchemaBuilder",
]
