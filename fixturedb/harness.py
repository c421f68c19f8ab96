"""Assertion harness: run a query under a deadline and compare its rows."""

import asyncio
import dataclasses
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from fixturedb.config import Settings
from fixturedb.database.facade import Database
from fixturedb.exceptions import HarnessTimeoutError, RowMismatchError
from fixturedb.log import get_logger
from fixturedb.types import DatabaseParamType, Row

T = TypeVar("T")

# A mapping, pydantic model or dataclass instance
ExpectedRow = Any

logger = get_logger(__name__)


def minutes(value: float) -> float:
    """Convert minutes to the seconds used by harness timeouts."""
    return value * 60


def as_mapping(expected: ExpectedRow) -> Mapping[str, Any]:
    """Normalize an expected row to a mapping.

    Accepts mappings, pydantic models and dataclass instances.
    """
    if isinstance(expected, Mapping):
        return expected
    if isinstance(expected, BaseModel):
        return expected.model_dump()
    if dataclasses.is_dataclass(expected) and not isinstance(expected, type):
        return dataclasses.asdict(expected)
    raise TypeError(f"Unsupported expected row type: {type(expected).__name__}")


def _is_single_row(expected: Any) -> bool:
    return (
        isinstance(expected, (Mapping, BaseModel))
        or (dataclasses.is_dataclass(expected) and not isinstance(expected, type))
        or not isinstance(expected, Iterable)
    )


def compare_row(
    actual: Mapping[str, Any], expected: ExpectedRow, where: str = "row"
) -> list[str]:
    """List the differences between one actual row and its expectation."""
    expected_map = as_mapping(expected)
    differences: list[str] = []

    missing = [key for key in expected_map if key not in actual]
    extra = [key for key in actual if key not in expected_map]
    if missing:
        differences.append(f"{where}: missing columns {missing}")
    if extra:
        differences.append(f"{where}: unexpected columns {extra}")

    for key, want in expected_map.items():
        if key in actual and actual[key] != want:
            got = actual[key]
            differences.append(f"{where}.{key}: expected {want!r}, got {got!r}")
    return differences


def compare_rows(
    actual: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    expected: ExpectedRow | Sequence[ExpectedRow],
) -> list[str]:
    """Deep structural comparison of query output with literal expectations.

    A single mapping is compared with a single expected row; a sequence is
    compared position by position and must have the same length.

    Returns:
        Human-readable differences, empty when the rows match
    """
    single = _is_single_row(expected)
    if isinstance(actual, Mapping):
        if not single:
            return [f"expected {len(list(expected))} rows, got a single row"]
        return compare_row(actual, expected)
    if single:
        return [f"expected a single row, got {len(actual)} rows"]

    expected_rows = list(expected)
    differences: list[str] = []
    if len(actual) != len(expected_rows):
        differences.append(
            f"expected {len(expected_rows)} rows, got {len(actual)}"
        )

    for position, (row, want) in enumerate(zip(actual, expected_rows)):
        differences.extend(compare_row(row, want, where=f"row[{position}]"))
    return differences


def assert_rows_equal(
    actual: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    expected: ExpectedRow | Sequence[ExpectedRow],
) -> None:
    """Raise RowMismatchError unless ``actual`` matches ``expected`` exactly."""
    differences = compare_rows(actual, expected)
    if differences:
        raise RowMismatchError(differences, actual)


def project(
    rows: Sequence[Row], columns: Sequence[str] | Callable[[Row], Row]
) -> list[Row]:
    """Reshape rows before comparison.

    Args:
        rows: Query output
        columns: Column names to keep, or a function mapping each row

    Returns:
        New list of rows
    """
    if callable(columns):
        return [columns(row) for row in rows]
    return [{column: row[column] for column in columns} for row in rows]


class AssertionHarness:
    """Runs facade calls under a wall-clock limit and checks their rows."""

    def __init__(self, database: Database, timeout: float = 60.0) -> None:
        """Initialize harness.

        Args:
            database: Database facade for the stage under test
            timeout: Seconds each check may take
        """
        self.database = database
        self.timeout = timeout

    @classmethod
    def from_settings(
        cls, database: Database, settings: Settings
    ) -> "AssertionHarness":
        return cls(database, timeout=settings.query_timeout)

    async def run(self, call: Awaitable[T], timeout: float | None = None) -> T:
        """Await a facade call, cancelling it once the deadline passes.

        Raises:
            HarnessTimeoutError: If the call exceeds the deadline
        """
        limit = self.timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(call, timeout=limit)
        except asyncio.TimeoutError:
            logger.error(f"Check on {self.database.db_path.name} exceeded {limit}s")
            raise HarnessTimeoutError(limit) from None

    async def expect_single_row(
        self,
        sql: str,
        params: DatabaseParamType,
        expected: ExpectedRow,
        timeout: float | None = None,
    ) -> Row:
        """Run a single-row query and compare it with ``expected``.

        Returns:
            The actual row
        """
        row = await self.run(self.database.select_single_row(sql, params), timeout)
        assert_rows_equal(row, expected)
        return row

    async def expect_rows(
        self,
        sql: str,
        params: DatabaseParamType,
        expected: Sequence[ExpectedRow],
        columns: Sequence[str] | Callable[[Row], Row] | None = None,
        timeout: float | None = None,
    ) -> list[Row]:
        """Run a multi-row query and compare it with ``expected``.

        Args:
            sql: SELECT query
            params: Query parameters
            expected: Expected rows in order
            columns: Optional projection applied before comparing
            timeout: Override of the harness timeout

        Returns:
            The actual rows (before projection)
        """
        rows = await self.run(self.database.select_multiple_rows(sql, params), timeout)
        assert_rows_equal(project(rows, columns) if columns else rows, expected)
        return rows
