"""dbkit: schema-driven convenience layer over an embedded SQL database."""

from .config import Settings, settings
from .database import (
    CallbackOptions,
    ColumnDefinition,
    Database,
    PreparedStatement,
    RawStatement,
    TableDefinition,
)
from .exceptions import (
    ConnectionUnavailableError,
    DatabaseError,
    DocumentLoadError,
    HostExecutionError,
    InvalidArgumentError,
    UnsupportedOperationError,
)
from .loaders import FileDocumentLoader, HttpDocumentLoader
from .log import (
    configure_logging,
    get_logger,
    setup_logging,
    setup_production_logging,
    setup_test_logging,
)
from .types import Environment

__all__ = [
    "CallbackOptions",
    "ColumnDefinition",
    "ConnectionUnavailableError",
    "Database",
    "DatabaseError",
    "DocumentLoadError",
    "Environment",
    "FileDocumentLoader",
    "HostExecutionError",
    "HttpDocumentLoader",
    "InvalidArgumentError",
    "PreparedStatement",
    "RawStatement",
    "Settings",
    "TableDefinition",
    "UnsupportedOperationError",
    "configure_logging",
    "get_logger",
    "setup_logging",
    "setup_production_logging",
    "setup_test_logging",
    "settings",
]
