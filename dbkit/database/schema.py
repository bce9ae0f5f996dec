"""Declarative schema and statement value types."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from dbkit.types import RowData, SqlValue


@dataclass(frozen=True)
class ColumnDefinition:
    """Database column definition.

    ``constraints`` are emitted verbatim and in order after the type, e.g.
    ``("PRIMARY KEY", "NOT NULL")``.
    """

    name: str
    type: str
    constraints: tuple[str, ...] = ()


@dataclass(frozen=True)
class TableDefinition:
    """Database table definition with optional inline rows.

    An entry carrying neither ``columns`` nor ``rows`` contributes nothing.
    """

    name: str
    columns: tuple[ColumnDefinition, ...] | None = None
    rows: tuple[RowData, ...] | None = None

    @property
    def has_columns(self) -> bool:
        return self.columns is not None

    @property
    def has_rows(self) -> bool:
        return self.rows is not None


@dataclass(frozen=True)
class RawStatement:
    """Arbitrary SQL passed through a schema plan unchanged."""

    sql: str


SchemaItem: TypeAlias = RawStatement | TableDefinition
SchemaPlan: TypeAlias = Sequence[SchemaItem]


@dataclass(frozen=True)
class PreparedStatement:
    """SQL text with its positional parameters.

    The SQL is normalized to end with exactly one ``;``.
    """

    sql: str
    parameters: tuple[SqlValue, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        sql = self.sql.strip().rstrip(";").rstrip()
        object.__setattr__(self, "sql", f"{sql};")
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @classmethod
    def of(cls, statement: "str | PreparedStatement") -> "PreparedStatement":
        """Wrap a bare SQL string; prepared statements pass through."""
        if isinstance(statement, PreparedStatement):
            return statement
        return cls(statement)
