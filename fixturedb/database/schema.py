"""Table, column and index definitions."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from fixturedb.exceptions import SchemaError
from fixturedb.types import ColumnType

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str, kind: str) -> str:
    """Reject names that would need quoting inside SQL text."""
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise SchemaError(f"Invalid {kind} name: {name!r}")
    return name


@dataclass(frozen=True)
class ColumnDefinition:
    """Database column definition."""

    name: str
    type: ColumnType
    nullable: bool = True
    primary_key: bool = False

    def __post_init__(self) -> None:
        check_identifier(self.name, "column")
        try:
            object.__setattr__(self, "type", ColumnType(self.type))
        except ValueError:
            raise SchemaError(
                f"Column '{self.name}' has unsupported type {self.type!r}"
            ) from None
        if self.primary_key and self.nullable:
            raise SchemaError(f"Primary key column '{self.name}' must be NOT NULL")


@dataclass(frozen=True)
class TableDefinition:
    """Database table definition. Column order is the declaration order."""

    name: str
    columns: Sequence[ColumnDefinition]

    def __post_init__(self) -> None:
        check_identifier(self.name, "table")
        object.__setattr__(self, "columns", tuple(self.columns))
        names = [col.name for col in self.columns]
        if not names:
            raise SchemaError(f"Table '{self.name}' has no columns")
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise SchemaError(
                f"Table '{self.name}' declares duplicate columns: {duplicates}"
            )

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @property
    def primary_key_columns(self) -> list[str]:
        return [col.name for col in self.columns if col.primary_key]

    def column(self, name: str) -> ColumnDefinition | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass(frozen=True)
class IndexDefinition:
    """Database index definition."""

    name: str
    table: str
    columns: Sequence[str]
    unique: bool = False

    def __post_init__(self) -> None:
        check_identifier(self.name, "index")
        check_identifier(self.table, "table")
        for column in self.columns:
            check_identifier(column, "column")
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.columns:
            raise SchemaError(f"Index '{self.name}' has no columns")


@dataclass(frozen=True)
class Dataset:
    """A named group of tables and indexes realized into one database."""

    name: str
    tables: Sequence[TableDefinition]
    indexes: Sequence[IndexDefinition] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tables", tuple(self.tables))
        object.__setattr__(self, "indexes", tuple(self.indexes))

        tables: dict[str, TableDefinition] = {}
        for table in self.tables:
            if table.name in tables:
                raise SchemaError(
                    f"Dataset '{self.name}' declares table '{table.name}' twice"
                )
            tables[table.name] = table

        index_names: set[str] = set()
        for index in self.indexes:
            if index.name in index_names:
                raise SchemaError(
                    f"Dataset '{self.name}' declares index '{index.name}' twice"
                )
            index_names.add(index.name)

            owner = tables.get(index.table)
            if owner is None:
                raise SchemaError(
                    f"Index '{index.name}' refers to unknown table '{index.table}'"
                )
            unknown = [col for col in index.columns if owner.column(col) is None]
            if unknown:
                raise SchemaError(
                    f"Index '{index.name}' refers to unknown columns {unknown} "
                    f"of table '{index.table}'"
                )
