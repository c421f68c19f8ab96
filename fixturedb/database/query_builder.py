"""Single-shape SQL builders over registered tables.

Each method returns ``(sql, params)`` and never touches a database. Values are
always bound; table and column names are checked against the schema registry
before they are written into the SQL text.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from fixturedb.types import QueryType

from .registry import SchemaRegistry, default_registry
from .utils import build_where_clause


class QueryBuilder:
    """SQLite query builder bound to a schema registry."""

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self.registry = registry or default_registry()

    def count(self, table: str) -> QueryType:
        """Build ``SELECT COUNT(*) AS c`` for a table."""
        table = self.registry.require_table(table)
        return f"SELECT COUNT(*) AS c FROM {table}", {}

    def count_distinct(self, table: str, column: str) -> QueryType:
        """Build a count of distinct values in one column."""
        column = self.registry.require_column(table, column)
        return f"SELECT COUNT(DISTINCT {column}) AS c FROM {table}", {}

    def row_by_id(self, table: str, row_id: int) -> QueryType:
        """Build a lookup of one row by its ``id`` column."""
        self.registry.require_column(table, "id")
        return f"SELECT * FROM {table} WHERE id = :id", {"id": row_id}

    def column_values(self, table: str, column: str) -> QueryType:
        """Build a select of a single column of every row."""
        column = self.registry.require_column(table, column)
        return f"SELECT {column} FROM {table}", {}

    def select_where(self, table: str, where: Mapping[str, Any]) -> QueryType:
        """Build ``SELECT *`` filtered by column equality.

        Args:
            table: Table name
            where: Column-value pairs joined with AND; None matches NULL

        Returns:
            Tuple of (query, parameters)
        """
        table = self.registry.require_table(table)
        for column in where:
            self.registry.require_column(table, column)

        query = f"SELECT * FROM {table}"
        where_clause, params = build_where_clause(where)
        if where_clause:
            query += f" {where_clause}"
        return query, params

    def insert(self, table: str, columns: Sequence[str] | None = None) -> QueryType:
        """Build a named-placeholder INSERT for a table.

        The parameters are left empty; callers bind one mapping per row,
        usually through ``executemany``.

        Args:
            table: Table name
            columns: Columns to insert (defaults to every declared column)

        Returns:
            Tuple of (query, empty parameters)
        """
        definition = self.registry.table(table)
        columns = list(columns) if columns is not None else definition.column_names
        if not columns:
            raise ValueError("Cannot insert empty data")
        for column in columns:
            self.registry.require_column(table, column)

        placeholders = [f":{col}" for col in columns]
        query = (
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join(placeholders)})"
        )
        return query, {}

    def table_info(self, table: str) -> QueryType:
        """Build column introspection: name, type, notnull, dflt_value, pk."""
        return table_info(table)

    def index_list(self, table: str) -> QueryType:
        """Build index introspection: name, unique, origin, partial."""
        return index_list(table)


def table_info(table: str) -> QueryType:
    """Column introspection for any table, registered or not."""
    return (
        'SELECT cid, name, type, "notnull", dflt_value, pk '
        "FROM pragma_table_info(:table) ORDER BY cid",
        {"table": table},
    )


def index_list(table: str) -> QueryType:
    """Index introspection for any table, registered or not."""
    return (
        'SELECT seq, name, "unique", origin, partial '
        "FROM pragma_index_list(:table) ORDER BY seq",
        {"table": table},
    )


def index_info(index: str) -> QueryType:
    """Columns of an index in key order."""
    return (
        "SELECT seqno, cid, name FROM pragma_index_info(:index) ORDER BY seqno",
        {"index": index},
    )
