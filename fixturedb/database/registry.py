"""Schema registry: static lookup of the known datasets, tables and columns.

Table and column names cannot be bound as SQL parameters, so every identifier
that is interpolated into SQL text must first pass through
``require_table`` / ``require_column``.
"""

from collections.abc import Iterable
from functools import lru_cache

from fixturedb.exceptions import NotFoundError, SchemaError
from fixturedb.log import get_logger

from .datasets import ALL_DATASETS
from .schema import Dataset, IndexDefinition, TableDefinition

logger = get_logger(__name__)


class SchemaRegistry:
    """Lookup of table and index definitions by dataset and name."""

    def __init__(self, datasets: Iterable[Dataset]) -> None:
        self._datasets: dict[str, Dataset] = {}
        self._tables: dict[str, TableDefinition] = {}

        for dataset in datasets:
            if dataset.name in self._datasets:
                raise SchemaError(f"Dataset '{dataset.name}' registered twice")
            self._datasets[dataset.name] = dataset

            for table in dataset.tables:
                if table.name in self._tables:
                    raise SchemaError(
                        f"Table '{table.name}' is defined in more than one dataset"
                    )
                self._tables[table.name] = table

    @property
    def dataset_names(self) -> list[str]:
        return list(self._datasets)

    def dataset(self, name: str) -> Dataset:
        try:
            return self._datasets[name]
        except KeyError:
            raise NotFoundError(f"Unknown dataset: '{name}'") from None

    def tables(self, dataset: str) -> list[TableDefinition]:
        return list(self.dataset(dataset).tables)

    def table_names(self, dataset: str) -> list[str]:
        return [table.name for table in self.dataset(dataset).tables]

    def indexes(self, dataset: str) -> list[IndexDefinition]:
        return list(self.dataset(dataset).indexes)

    def table(self, name: str) -> TableDefinition:
        try:
            return self._tables[name]
        except KeyError:
            raise NotFoundError(f"Unknown table: '{name}'") from None

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def require_table(self, name: str) -> str:
        """Return ``name`` if it is a registered table, else raise NotFoundError."""
        return self.table(name).name

    def require_column(self, table: str, column: str) -> str:
        """Return ``column`` if ``table`` declares it, else raise NotFoundError."""
        definition = self.table(table)
        if definition.column(column) is None:
            raise NotFoundError(f"Unknown column '{column}' in table '{table}'")
        return column


@lru_cache(maxsize=1)
def default_registry() -> SchemaRegistry:
    """Registry holding the shopify and movies datasets."""
    registry = SchemaRegistry(ALL_DATASETS)
    logger.debug(f"Schema registry loaded: {registry.dataset_names}")
    return registry
