"""Custom exceptions for fixturedb."""

from typing import Any


class FixtureDBError(Exception):
    """Base exception for fixturedb errors."""

    pass


class NotFoundError(FixtureDBError, LookupError):
    """Raised when a dataset, table or column is not in the schema registry."""

    pass


class SchemaError(FixtureDBError):
    """Raised when a definition is invalid or conflicts with the database."""

    pass


class CardinalityError(FixtureDBError):
    """Raised when a single-row select yields zero or several rows."""

    def __init__(self, row_count: int, query: str) -> None:
        self.row_count = row_count
        self.query = query
        expected = "none" if row_count == 0 else "more than one"
        super().__init__(f"Expected exactly one row, got {expected}: {query.strip()}")


class ProvisioningError(FixtureDBError):
    """Raised when a stage snapshot cannot be provisioned."""

    pass


class EngineError(FixtureDBError):
    """Raised for any SQLite failure not otherwise classified."""

    pass


class HarnessTimeoutError(FixtureDBError, TimeoutError):
    """Raised when a harness check exceeds its wall-clock deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Query did not finish within {timeout:g} seconds")


class RowMismatchError(AssertionError):
    """Raised when query output differs from the expected rows."""

    def __init__(self, differences: list[str], actual: Any = None) -> None:
        self.differences = differences
        self.actual = actual
        super().__init__("Rows differ:\n  " + "\n  ".join(differences))
