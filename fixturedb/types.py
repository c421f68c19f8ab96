"""Common type definitions for fixturedb."""

from enum import Enum
from typing import Any, TypeAlias

DatabaseParamType: TypeAlias = dict[str, Any] | list[Any] | tuple[Any, ...] | None
Row: TypeAlias = dict[str, Any]
QueryType: TypeAlias = tuple[str, DatabaseParamType]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ColumnType(str, Enum):
    """Declared SQLite column types used by the datasets."""

    INTEGER = "INTEGER"
    REAL = "REAL"
    TEXT = "TEXT"
