"""Relational fixture toolkit: schema registry, query builders and result checks."""

from .config import Settings, load_settings, setup_logging_from_settings
from .exceptions import (
    CardinalityError,
    EngineError,
    FixtureDBError,
    HarnessTimeoutError,
    NotFoundError,
    ProvisioningError,
    RowMismatchError,
    SchemaError,
)
from .log import (
    get_logger,
    setup_logging,
    setup_production_logging,
    setup_test_logging,
)
from .types import ColumnType, Environment

__version__ = "0.1.0"

__all__ = [
    "CardinalityError",
    "ColumnType",
    "EngineError",
    "Environment",
    "FixtureDBError",
    "HarnessTimeoutError",
    "NotFoundError",
    "ProvisioningError",
    "RowMismatchError",
    "SchemaError",
    "Settings",
    "get_logger",
    "load_settings",
    "setup_logging",
    "setup_logging_from_settings",
    "setup_production_logging",
    "setup_test_logging",
]
