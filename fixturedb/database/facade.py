"""Database access facade over one SQLite stage file."""

import re
import sqlite3
from collections.abc import Callable, Iterable, Mapping
from contextlib import closing
from pathlib import Path
from typing import Any, NamedTuple, TypeVar

from fixturedb.exceptions import (
    CardinalityError,
    EngineError,
    NotFoundError,
    SchemaError,
)
from fixturedb.log import get_logger
from fixturedb.types import DatabaseParamType, Row

from .connection import SQLiteConnection
from .query_builder import QueryBuilder, index_info, index_list, table_info
from .registry import SchemaRegistry, default_registry
from .schema import IndexDefinition, TableDefinition
from .schema_builder import SQLiteSchemaBuilder
from .utils import row_to_dict, rows_to_dicts

T = TypeVar("T")

logger = get_logger(__name__)

CREATE_TABLE_PATTERN = re.compile(r"^\s*CREATE\s+TABLE\b", re.IGNORECASE)
CREATE_INDEX_PATTERN = re.compile(r"^\s*CREATE\s+(UNIQUE\s+)?INDEX\b", re.IGNORECASE)

USER_TABLES_SQL = (
    "SELECT name, sql FROM sqlite_master "
    "WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
)
INDEX_TABLE_SQL = (
    "SELECT tbl_name FROM sqlite_master WHERE type = 'index' AND name = :name"
)

# (name, declared type, not null, primary key member)
ColumnLayout = tuple[str, str, bool, bool]


class IndexShape(NamedTuple):
    table: str
    unique: bool
    columns: list[str | None]


def _classify(error: sqlite3.Error, sql: str) -> Exception:
    """Map a sqlite3 failure onto the fixturedb error taxonomy."""
    message = str(error)
    if isinstance(error, sqlite3.OperationalError) and "already exists" in message:
        return SchemaError(message)
    return EngineError(f"{message} (while running: {' '.join(sql.split())})")


class Database:
    """Thin async facade: every call opens, uses and releases its own connection."""

    def __init__(
        self,
        db_path: str | Path,
        registry: SchemaRegistry | None = None,
        busy_timeout: float = 60.0,
    ) -> None:
        """Initialize the facade.

        Args:
            db_path: Path to SQLite database file
            registry: Schema registry used to validate identifiers
            busy_timeout: Seconds to wait on a locked database
        """
        self.db_path = Path(db_path)
        self.registry = registry or default_registry()
        self.query_builder = QueryBuilder(self.registry)
        self.schema_builder = SQLiteSchemaBuilder()
        self._connection = SQLiteConnection(self.db_path, busy_timeout=busy_timeout)

    def __repr__(self) -> str:
        return f"Database({str(self.db_path)!r})"

    async def _run(
        self, sql: str, operation: Callable[[sqlite3.Connection], T]
    ) -> T:
        try:
            return await self._connection.run(operation)
        except sqlite3.Error as e:
            raise self._failure(e, sql) from e

    def _failure(self, error: sqlite3.Error, sql: str) -> Exception:
        failure = _classify(error, sql)
        logger.error(f"Query failed on {self.db_path.name}: {failure}")
        return failure

    async def execute(self, sql: str, params: DatabaseParamType = None) -> int:
        """Execute a DDL or DML statement and commit it.

        Args:
            sql: SQL statement
            params: Query parameters

        Returns:
            Number of rows changed (-1 for DDL)
        """

        def operation(connection: sqlite3.Connection) -> int:
            with connection:
                cursor = connection.execute(sql, params or ())
            return cursor.rowcount

        return await self._run(sql, operation)

    async def select_multiple_rows(
        self, sql: str, params: DatabaseParamType = None
    ) -> list[Row]:
        """Fetch every row of a query, in the order the engine returns them.

        Args:
            sql: SELECT query
            params: Query parameters

        Returns:
            List of rows as dictionaries (possibly empty)
        """

        def operation(connection: sqlite3.Connection) -> list[Row]:
            cursor = connection.execute(sql, params or ())
            return rows_to_dicts(cursor.fetchall())

        return await self._run(sql, operation)

    async def select_single_row(
        self, sql: str, params: DatabaseParamType = None
    ) -> Row:
        """Fetch the only row of a query.

        Args:
            sql: SELECT query
            params: Query parameters

        Returns:
            Row as a dictionary

        Raises:
            CardinalityError: If the query yields zero or more than one row
        """

        def operation(connection: sqlite3.Connection) -> list[sqlite3.Row]:
            cursor = connection.execute(sql, params or ())
            return cursor.fetchmany(2)

        rows = await self._run(sql, operation)
        if len(rows) != 1:
            error = CardinalityError(len(rows), sql)
            logger.error(str(error))
            raise error
        return row_to_dict(rows[0])

    async def table_exists(self, name: str) -> bool:
        """Check whether a table exists. Absence is a plain False.

        A missing database file holds no tables and is not created.
        """
        if not self.db_path.is_file():
            return False
        row = await self.select_multiple_rows(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name",
            {"name": name},
        )
        return bool(row)

    async def table_info(self, table: str) -> list[Row]:
        return await self.select_multiple_rows(*table_info(table))

    async def index_list(self, table: str) -> list[Row]:
        return await self.select_multiple_rows(*index_list(table))

    async def create_table(self, table: TableDefinition | str) -> None:
        """Create a table if it does not exist yet.

        Args:
            table: Table definition, the name of a registered table, or raw
                CREATE TABLE text

        Raises:
            SchemaError: If a table with that name exists with another layout
        """
        if isinstance(table, str) and CREATE_TABLE_PATTERN.match(table):
            try:
                name, columns = _scratch_table(table)
            except sqlite3.Error as e:
                raise self._failure(e, table) from e
            wanted = _column_layout(columns)
            statement = table
        else:
            if isinstance(table, str):
                table = self.registry.table(table)
            name = table.name
            wanted = _definition_layout(table)
            statement = self.schema_builder.create_table_sql(table)

        existing = await self.table_info(name)
        if existing:
            differences = _layout_differences(wanted, _column_layout(existing))
            if differences:
                error = SchemaError(
                    f"Table '{name}' already exists with a different layout: "
                    + "; ".join(differences)
                )
                logger.error(str(error))
                raise error
            logger.debug(f"Table '{name}' already exists")
            return

        await self.execute(statement)
        logger.info(f"Created table '{name}' in {self.db_path.name}")

    async def create_index(self, index: IndexDefinition | str) -> None:
        """Create an index if it does not exist yet.

        Raw text is first run against a scratch copy of the table schemas so
        that its table, columns and uniqueness can be compared with an index
        of the same name.

        Args:
            index: Index definition, or raw CREATE [UNIQUE] INDEX text

        Raises:
            SchemaError: If the text is not an index statement, or an index with
                the same name exists with another table, columns or uniqueness
        """
        if isinstance(index, str):
            if not CREATE_INDEX_PATTERN.match(index):
                raise SchemaError(f"Not a CREATE INDEX statement: {index.strip()}")
            tables = await self.select_multiple_rows(USER_TABLES_SQL)
            try:
                name, wanted = _scratch_index([row["sql"] for row in tables], index)
            except sqlite3.Error as e:
                raise self._failure(e, index) from e
            statement = index
        else:
            name = index.name
            wanted = IndexShape(index.table, index.unique, list(index.columns))
            statement = self.schema_builder.create_index_sql(index)

        def operation(connection: sqlite3.Connection) -> IndexShape | None:
            return _read_index(connection, name)

        existing = await self._run(INDEX_TABLE_SQL, operation)
        if existing is not None:
            _check_index(name, wanted, existing)
            logger.debug(f"Index '{name}' already exists")
            return

        await self.execute(statement)
        logger.info(f"Created index '{name}' in {self.db_path.name}")

    async def create_dataset(self, dataset: str) -> None:
        """Create every table and index of a registered dataset."""
        for table in self.registry.tables(dataset):
            await self.create_table(table)
        for index in self.registry.indexes(dataset):
            await self.create_index(index)

    async def drop_table(self, name: str) -> None:
        await self.execute(self.schema_builder.drop_table_sql(name))
        logger.info(f"Dropped table '{name}' from {self.db_path.name}")

    async def insert_rows(
        self, table: str, rows: Iterable[Mapping[str, Any]]
    ) -> int:
        """Insert rows into a registered table in a single transaction.

        Every row must provide a value for each declared column; nullable
        columns may be given as None.

        Args:
            table: Table name
            rows: Mappings of column name to value

        Returns:
            Number of inserted rows
        """
        definition = self.registry.table(table)
        sql, _ = self.query_builder.insert(table)
        materialized = [_bind_row(definition, row) for row in rows]
        if not materialized:
            return 0

        def operation(connection: sqlite3.Connection) -> int:
            with connection:
                connection.executemany(sql, materialized)
            return len(materialized)

        count = await self._run(sql, operation)
        logger.debug(f"Inserted {count} rows into '{table}'")
        return count


def _bind_row(table: TableDefinition, row: Mapping[str, Any]) -> dict[str, Any]:
    unknown = [key for key in row if table.column(key) is None]
    if unknown:
        raise NotFoundError(f"Unknown columns {unknown} for table '{table.name}'")
    return {col: row.get(col) for col in table.column_names}


def _definition_layout(table: TableDefinition) -> list[ColumnLayout]:
    return [
        (col.name, col.type.value, not col.nullable, col.primary_key)
        for col in table.columns
    ]


def _column_layout(rows: list[Row]) -> list[ColumnLayout]:
    """Reduce ``table_info`` rows to (name, type, not null, primary key)."""
    return [
        (row["name"], str(row["type"]).upper(), bool(row["notnull"]), row["pk"] > 0)
        for row in rows
    ]


def _layout_differences(
    expected: list[ColumnLayout], actual: list[ColumnLayout]
) -> list[str]:
    if expected == actual:
        return []

    differences: list[str] = []
    if len(expected) != len(actual):
        differences.append(f"expected {len(expected)} columns, found {len(actual)}")
    for want, have in zip(expected, actual):
        if want != have:
            differences.append(f"column {want[0]} declared as {want}, found {have}")
    return differences


def _read_index(connection: sqlite3.Connection, name: str) -> IndexShape | None:
    row = connection.execute(INDEX_TABLE_SQL, {"name": name}).fetchone()
    if row is None:
        return None
    table = row["tbl_name"]
    unique = any(
        listed["name"] == name and listed["unique"]
        for listed in connection.execute(*index_list(table))
    )
    columns = [info["name"] for info in connection.execute(*index_info(name))]
    return IndexShape(table, unique, columns)


def _check_index(name: str, wanted: IndexShape, existing: IndexShape) -> None:
    if existing.table != wanted.table:
        error = SchemaError(
            f"Index '{name}' already exists on table '{existing.table}', "
            f"not '{wanted.table}'"
        )
    elif existing != wanted:
        error = SchemaError(
            f"Index '{name}' already exists as "
            f"{'UNIQUE ' if existing.unique else ''}"
            f"({', '.join(str(col) for col in existing.columns)})"
        )
    else:
        return
    logger.error(str(error))
    raise error


def _scratch_connection() -> sqlite3.Connection:
    connection = sqlite3.connect(":memory:")
    connection.row_factory = sqlite3.Row
    return connection


def _scratch_table(ddl: str) -> tuple[str, list[Row]]:
    """Run CREATE TABLE text on an empty in-memory database and read it back."""
    with closing(_scratch_connection()) as scratch:
        scratch.execute(ddl)
        created = scratch.execute(USER_TABLES_SQL).fetchone()
        if created is None:
            raise SchemaError(f"Statement created no table: {ddl.strip()}")
        name = created["name"]
        return name, rows_to_dicts(scratch.execute(*table_info(name)))


def _scratch_index(tables_sql: list[str], ddl: str) -> tuple[str, IndexShape]:
    """Run CREATE INDEX text against copies of the given tables."""
    with closing(_scratch_connection()) as scratch:
        for sql in tables_sql:
            scratch.execute(sql)
        scratch.execute(ddl)
        created = scratch.execute(
            "SELECT name FROM sqlite_master WHERE type = 'index' AND sql IS NOT NULL"
        ).fetchone()
        if created is None:
            raise SchemaError(f"Statement created no index: {ddl.strip()}")
        shape = _read_index(scratch, created["name"])
        assert shape is not None
        return created["name"], shape
