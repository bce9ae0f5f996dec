"""Clause helpers shared by the SQL builders."""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from dbkit.exceptions import InvalidArgumentError
from dbkit.types import SqlValue

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def check_identifier(name: str, kind: str = "identifier") -> str:
    """Reject anything that is not a plain (optionally dotted) SQL identifier.

    Args:
        name: Table, column or index name
        kind: Label used in the error message

    Returns:
        The name unchanged

    Raises:
        InvalidArgumentError: If the name is empty or not an identifier
    """
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise InvalidArgumentError(f"Invalid {kind}: {name!r}")
    return name


def build_where_clause(
    conditions: Mapping[str, Any] | None,
) -> tuple[str, list[SqlValue]]:
    """Build a WHERE clause from a column -> value mapping.

    Args:
        conditions: Field-value pairs, joined with AND in iteration order

    Returns:
        Tuple of (where_clause, positional parameters)

    Example:
        >>> build_where_clause({"name": "John", "age": 30})
        ("WHERE name = ? AND age = ?", ["John", 30])
    """
    if not conditions:
        return "", []

    clauses: list[str] = []
    params: list[SqlValue] = []

    for column, value in conditions.items():
        clauses.append(f"{check_identifier(column, 'column')} = ?")
        params.append(value)

    return f"WHERE {' AND '.join(clauses)}", params


def build_order_by_clause(order_by: Sequence[str] | None) -> str:
    """Build an ORDER BY clause.

    Example:
        >>> build_order_by_clause(["name", "age DESC"])
        "ORDER BY name, age DESC"
    """
    if not order_by:
        return ""

    terms: list[str] = []
    for term in order_by:
        parts = term.split()
        if len(parts) not in (1, 2) or (
            len(parts) == 2 and parts[1].upper() not in ("ASC", "DESC")
        ):
            raise InvalidArgumentError(f"Invalid ORDER BY term: {term!r}")
        check_identifier(parts[0], "column")
        terms.append(" ".join(parts))

    return f"ORDER BY {', '.join(terms)}"


def build_limit_clause(limit: int | None, offset: int | None = None) -> str:
    """Build a LIMIT clause with optional OFFSET.

    Example:
        >>> build_limit_clause(10, 20)
        "LIMIT 10 OFFSET 20"
    """
    if limit is None:
        if offset is not None:
            raise InvalidArgumentError("OFFSET requires LIMIT")
        return ""

    for label, value in (("LIMIT", limit), ("OFFSET", offset)):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(f"{label} must be a non-negative integer")

    clause = f"LIMIT {limit}"
    if offset is not None:
        clause += f" OFFSET {offset}"

    return clause


def strip_literals_and_comments(sql: str) -> str:
    """Blank out quoted literals and ``--``/``/* */`` comments.

    The result keeps only the SQL text the parser treats as tokens, so
    placeholders and keywords can be found without false matches.
    """
    out: list[str] = []
    i = 0
    n = len(sql)
    while i < n:
        char = sql[i]
        if char in ("'", '"'):
            end = sql.find(char, i + 1)
            i = n if end == -1 else end + 1
            out.append(" ")
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            i = n if end == -1 else end
            out.append(" ")
        elif sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            i = n if end == -1 else end + 2
            out.append(" ")
        else:
            out.append(char)
            i += 1
    return "".join(out)


def count_placeholders(sql: str) -> int:
    """Count ``?`` placeholders outside of quoted literals and comments."""
    return strip_literals_and_comments(sql).count("?")


def sql_keywords(sql: str) -> list[str]:
    """Upper-cased bare words of a statement, in order."""
    return re.findall(r"[A-Z_]+", strip_literals_and_comments(sql).upper())
