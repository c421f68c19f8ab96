"""Database utilities for common clause building and row conversion."""

import sqlite3
from collections.abc import Iterable, Mapping
from typing import Any

from fixturedb.types import Row


def build_where_clause(conditions: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """Build WHERE clause from conditions dictionary.

    Field names are interpolated as-is and must already be validated.

    Args:
        conditions: Dictionary of field-value pairs for WHERE conditions

    Returns:
        Tuple of (where_clause, parameters_dict)

    Example:
        >>> build_where_clause({"app_id": 7, "author": "Ann"})
        ("WHERE app_id = :param_app_id AND author = :param_author",
         {"param_app_id": 7, "param_author": "Ann"})
    """
    if not conditions:
        return "", {}

    clauses: list[str] = []
    params: dict[str, Any] = {}

    for field, value in conditions.items():
        param_name = f"param_{field}"
        if value is None:
            clauses.append(f"{field} IS NULL")
        else:
            clauses.append(f"{field} = :{param_name}")
            params[param_name] = value

    where_clause = " AND ".join(clauses)
    return f"WHERE {where_clause}", params


def check_limit(limit: int) -> int:
    """Validate a LIMIT value before it is bound as a parameter."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f"LIMIT must be a non-negative integer, got {limit!r}")
    return limit


def row_to_dict(row: sqlite3.Row) -> Row:
    """Convert a sqlite3.Row into a plain dict keyed by column alias."""
    return dict(row)


def rows_to_dicts(rows: Iterable[sqlite3.Row]) -> list[Row]:
    return [row_to_dict(row) for row in rows]
