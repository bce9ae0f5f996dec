"""JSON schema/data document models.

A schema document is a list whose items are either a raw SQL string or a
table object::

    [
        "ALTER TABLE entries ADD COLUMN body TEXT",
        {
            "table": "entries",
            "columns": [
                {"column": "entry_id", "type": "INTEGER",
                 "constraints": ["PRIMARY KEY"]},
                {"column": "title", "type": "TEXT"}
            ],
            "data": [
                {"entry_id": 1, "title": "My first entry"}
            ]
        }
    ]

A single table object may be given instead of a list, and ``data`` may be a
single object instead of a list.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from dbkit.database.schema import (
    ColumnDefinition,
    RawStatement,
    SchemaItem,
    TableDefinition,
)
from dbkit.exceptions import DatabaseError, DocumentLoadError

# Scalar row values only; nested objects and arrays are rejected.
CellValue = StrictStr | StrictBool | StrictInt | StrictFloat | None


class ColumnSpec(BaseModel):
    """Column entry of a table object."""

    column: str = Field(..., min_length=1, description="Column name")
    type: str = Field(..., min_length=1, description="SQL type")
    constraints: list[str] = Field(
        default_factory=list, description="Constraints, emitted in order"
    )

    def to_definition(self) -> ColumnDefinition:
        return ColumnDefinition(self.column, self.type, tuple(self.constraints))


class TableSpec(BaseModel):
    """Table object of a schema or data document."""

    table: str = Field(..., min_length=1, description="Table name")
    columns: list[ColumnSpec] | None = None
    data: list[dict[str, CellValue]] | None = None

    @field_validator("data", mode="before")
    @classmethod
    def wrap_single_row(cls, v: Any) -> Any:
        """Accept a single row object in place of a list."""
        if isinstance(v, dict):
            return [v]
        return v

    @field_validator("data")
    @classmethod
    def reject_empty_rows(cls, v: list[dict[str, CellValue]] | None) -> Any:
        if v is not None and any(not row for row in v):
            raise ValueError("Row objects must have at least one column")
        return v

    def to_definition(self, include_columns: bool = True) -> TableDefinition:
        columns = None
        if include_columns and self.columns is not None:
            columns = tuple(col.to_definition() for col in self.columns)
        rows = tuple(self.data) if self.data is not None else None
        return TableDefinition(self.table, columns, rows)


_SCHEMA_ADAPTER: TypeAdapter[list[StrictStr | TableSpec]] = TypeAdapter(
    list[StrictStr | TableSpec]
)
_DATA_ADAPTER: TypeAdapter[list[TableSpec]] = TypeAdapter(list[TableSpec])


def _as_list(payload: Any) -> Any:
    if isinstance(payload, (dict, str)):
        return [payload]
    return payload


def parse_schema_document(
    payload: Any, error_cls: type[DatabaseError] = DocumentLoadError
) -> list[SchemaItem]:
    """Validate a schema document into an ordered schema plan.

    Args:
        payload: Parsed JSON value
        error_cls: Exception raised when the payload does not validate

    Returns:
        Schema plan in document order
    """
    try:
        entries = _SCHEMA_ADAPTER.validate_python(_as_list(payload))
    except ValidationError as e:
        raise error_cls(f"Invalid schema document: {e}") from e

    return [
        RawStatement(entry) if isinstance(entry, str) else entry.to_definition()
        for entry in entries
    ]


def parse_data_document(
    payload: Any, error_cls: type[DatabaseError] = DocumentLoadError
) -> list[TableDefinition]:
    """Validate a data document; any ``columns`` entries are ignored.

    Args:
        payload: Parsed JSON value
        error_cls: Exception raised when the payload does not validate

    Returns:
        Table definitions carrying rows only
    """
    try:
        entries = _DATA_ADAPTER.validate_python(_as_list(payload))
    except ValidationError as e:
        raise error_cls(f"Invalid data document: {e}") from e

    return [entry.to_definition(include_columns=False) for entry in entries]


def coerce_plan(
    schema: Any, error_cls: type[DatabaseError] = DocumentLoadError
) -> list[SchemaItem]:
    """Accept a schema plan, a schema document, or a mix of both.

    Already-typed ``RawStatement``/``TableDefinition`` items are kept as they
    are; everything else is validated as a document entry.
    """
    if isinstance(schema, (RawStatement, TableDefinition, str, dict)):
        schema = [schema]
    if not isinstance(schema, Sequence):
        raise error_cls(f"Schema must be a list, got {type(schema).__name__}")

    plan: list[SchemaItem] = []
    for item in schema:
        if isinstance(item, (RawStatement, TableDefinition)):
            plan.append(item)
        else:
            plan.extend(parse_schema_document([item], error_cls))
    return plan


def coerce_tables(
    data: Any, error_cls: type[DatabaseError] = DocumentLoadError
) -> list[TableDefinition]:
    """Data-document counterpart of :func:`coerce_plan`."""
    if isinstance(data, (TableDefinition, dict)):
        data = [data]
    if not isinstance(data, Sequence) or isinstance(data, str):
        raise error_cls(f"Data must be a list, got {type(data).__name__}")

    tables: list[TableDefinition] = []
    for item in data:
        if isinstance(item, TableDefinition):
            tables.append(TableDefinition(item.name, None, item.rows))
        else:
            tables.extend(parse_data_document([item], error_cls))
    return tables
