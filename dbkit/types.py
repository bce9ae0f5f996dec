"""Common type definitions for dbkit."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeAlias

SqlValue: TypeAlias = str | int | float | bytes | None
RowData: TypeAlias = Mapping[str, SqlValue]
ResultRow: TypeAlias = dict[str, Any]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
