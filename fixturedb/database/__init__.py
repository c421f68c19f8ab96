"""SQLite schema, query building, access facade and stage provisioning."""

from .facade import Database
from .provisioner import FixtureProvisioner
from .query_builder import QueryBuilder, index_info, index_list, table_info
from .registry import SchemaRegistry, default_registry
from .schema import ColumnDefinition, Dataset, IndexDefinition, TableDefinition
from .schema_builder import SQLiteSchemaBuilder

__all__ = [
    "ColumnDefinition",
    "Database",
    "Dataset",
    "FixtureProvisioner",
    "IndexDefinition",
    "QueryBuilder",
    "SQLiteSchemaBuilder",
    "SchemaRegistry",
    "TableDefinition",
    "default_registry",
    "index_info",
    "index_list",
    "table_info",
]
